"""Shared type aliases for the wizard package."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:  # pragma: no cover - typing-only import path
    from wizard.prompters.base import Prompter
    from wizard.state import StateView


Binder = Callable[["StateView"], "Prompter[Any] | None"]
Predicate = Callable[["StateView"], bool]
DefaultFactory = Callable[["StateView"], Any]


__all__ = [
    "Binder",
    "DefaultFactory",
    "Predicate",
]
