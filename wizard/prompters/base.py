"""Lifecycle contract shared by every interactive prompter."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Any, Generic, TypeVar

from wizard.errors import PrompterStateError
from wizard.state import UNSET

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Cancelled:
    """Marker returned by :meth:`Prompter.prompt` when the user backs out."""

    _instance: _Cancelled | None = None

    def __new__(cls) -> _Cancelled:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CANCELLED"

    def __bool__(self) -> bool:
        return False


CANCELLED: Any = _Cancelled()


class PrompterState(StrEnum):
    """Life-cycle status for a prompter."""

    CREATED = "CREATED"
    ACTIVE = "ACTIVE"
    RESOLVED = "RESOLVED"
    CANCELLED = "CANCELLED"
    DISPOSED = "DISPOSED"


class Prompter(ABC, Generic[T]):
    """One interactive question that produces exactly one terminal result.

    Subclasses implement :meth:`_prompt` and :meth:`_dispose`; this base class
    owns the state machine so that every variant enforces the same rules:
    ``prompt()`` may only be awaited once and ``dispose()`` may be called any
    number of times.
    """

    def __init__(self) -> None:
        self._state = PrompterState.CREATED
        self._disposed = False
        self._last_response: Any = UNSET
        self._steps: tuple[int, int] | None = None

    @property
    def state(self) -> PrompterState:
        return self._state

    @property
    def last_response(self) -> Any:
        """Answer given the previous time this question was shown, if any."""

        return self._last_response

    def set_last_response(self, value: Any) -> None:
        self._last_response = value

    @property
    def steps(self) -> tuple[int, int] | None:
        """``(current, total)`` step estimate, when the engine provided one."""

        return self._steps

    def set_steps(self, current: int, total: int) -> None:
        if current < 1 or total < current:
            raise ValueError("step estimate must satisfy 1 <= current <= total")
        self._steps = (current, total)

    async def prompt(self) -> T | Any:
        """Show the question and wait for a value or :data:`CANCELLED`."""

        if self._disposed:
            raise PrompterStateError("Cannot prompt a disposed prompter")
        if self._state is not PrompterState.CREATED:
            raise PrompterStateError(f"Prompter already used (state: {self._state})")
        self._state = PrompterState.ACTIVE
        try:
            result = await self._prompt()
        except BaseException:
            self.dispose()
            raise
        if result is CANCELLED:
            self._state = PrompterState.CANCELLED
        else:
            self._state = PrompterState.RESOLVED
        logger.debug("%s finished as %s", type(self).__name__, self._state)
        return result

    def dispose(self) -> None:
        """Release host resources held by this prompter."""

        if self._disposed:
            return
        self._disposed = True
        try:
            self._dispose()
        finally:
            if self._state in (PrompterState.CREATED, PrompterState.ACTIVE):
                self._state = PrompterState.DISPOSED

    @abstractmethod
    async def _prompt(self) -> T | Any:
        """Interact with the host and return a value or :data:`CANCELLED`."""

    def _dispose(self) -> None:
        return None


__all__ = ["CANCELLED", "Prompter", "PrompterState"]
