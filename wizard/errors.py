"""Exception types raised while declaring or running a wizard."""

from __future__ import annotations


class WizardError(Exception):
    """Base exception for wizard related issues."""


class DeclarationError(WizardError):
    """Raised when a form is declared with duplicate or malformed fields."""


class EvaluationFailure(WizardError):
    """Raised when a ``show_when`` predicate or a binder fails during a run."""

    def __init__(self, path: str, phase: str, message: str | None = None) -> None:
        self.path = path
        self.phase = phase
        super().__init__(message or f"{phase} for field '{path}' failed")


class PrompterFailure(WizardError):
    """Raised when an interactive prompter fails instead of resolving."""

    def __init__(self, path: str | None = None, message: str | None = None) -> None:
        self.path = path
        if message is None:
            message = f"Prompter for field '{path}' failed" if path else "Prompter failed"
        super().__init__(message)


class PrompterStateError(WizardError):
    """Raised when a prompter is used outside of its lifecycle."""
