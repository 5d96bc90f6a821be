"""Step engine that walks a form's fields and drives their prompters."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Mapping
from uuid import uuid4

from utils.logging_context import log_context
from wizard.errors import EvaluationFailure, PrompterFailure, PrompterStateError, WizardError
from wizard.form import Form, FormField
from wizard.prompters.base import CANCELLED, Prompter
from wizard.state import UNSET, StateView, WizardState

logger = logging.getLogger(__name__)


class StepOutcome(StrEnum):
    """What happened when the engine visited a field."""

    HIDDEN = "HIDDEN"
    NOT_APPLICABLE = "NOT_APPLICABLE"
    ANSWERED = "ANSWERED"
    BACK = "BACK"
    CANCELLED = "CANCELLED"


@dataclass(frozen=True)
class HistoryEntry:
    """A field that was shown and answered, with the value it replaced."""

    index: int
    path: str
    prior: Any
    prior_by_user: bool
    answer: Any


@dataclass(frozen=True)
class StepEvent:
    """One visit of the engine to a field."""

    path: str
    outcome: StepOutcome


@dataclass
class EngineResult:
    """Container for a finished run."""

    state: WizardState
    cancelled: bool
    trace: tuple[StepEvent, ...]

    def outcomes_for(self, path: str) -> list[StepOutcome]:
        return [event.outcome for event in self.trace if event.path == path]


class StepEngine:
    """Visit fields in order, rewinding through the history stack on cancel.

    Predicates and binders are evaluated against a fresh snapshot on every
    visit. Only answered fields are pushed on the history stack, so skipped
    fields are passed over in both directions. An engine runs exactly once.
    """

    def __init__(
        self,
        form: Form[Any],
        *,
        initial: Mapping[str, Any] | None = None,
        estimate_steps: bool = True,
        logger_: logging.Logger | None = None,
    ) -> None:
        self._fields: tuple[FormField, ...] = form.fields
        self._state = WizardState(initial)
        self._estimate_steps = estimate_steps
        self._logger = logger_ or logger
        self._history: list[HistoryEntry] = []
        self._last_responses: dict[str, Any] = {}
        self._trace: list[StepEvent] = []
        self._active: Prompter[Any] | None = None
        self._started = False
        self.run_id = uuid4().hex[:12]

    @property
    def state(self) -> WizardState:
        return self._state

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._history)

    @property
    def active_prompter(self) -> Prompter[Any] | None:
        return self._active

    async def run(self) -> EngineResult:
        if self._started:
            raise WizardError("StepEngine instances can only run once")
        self._started = True

        with log_context(wizard_run=self.run_id):
            self._logger.info("Starting wizard run with %s field(s)", len(self._fields))
            try:
                cancelled = await self._drive()
                if not cancelled:
                    self._apply_defaults()
            except asyncio.CancelledError:
                self._logger.info("Wizard run aborted")
                raise
            except Exception:
                self._logger.exception("Wizard run failed")
                raise
            finally:
                self._dispose_active()

            if cancelled:
                self._logger.info("Wizard run cancelled by user")
            else:
                self._logger.info("Completed wizard run (%s answered)", len(self._history))
        return EngineResult(state=self._state, cancelled=cancelled, trace=tuple(self._trace))

    async def _drive(self) -> bool:
        """Return ``True`` when the user cancelled the first visible step."""

        index = 0
        while index < len(self._fields):
            field = self._fields[index]
            with log_context(wizard_step=field.path):
                prompter = self._prepare(index, field)
                if prompter is None:
                    index += 1
                    continue
                result = await self._ask(field, prompter)

                if result is CANCELLED:
                    if not self._history:
                        self._record(field.path, StepOutcome.CANCELLED)
                        return True
                    self._record(field.path, StepOutcome.BACK)
                    index = self._rewind()
                    continue

                self._answer(index, field, result)
                index += 1
        return False

    def _prepare(self, index: int, field: FormField) -> Prompter[Any] | None:
        view = self._state.snapshot()
        if not self._is_shown(field, view):
            self._logger.debug("Skipping hidden field")
            self._record(field.path, StepOutcome.HIDDEN)
            return None

        try:
            prompter = field.bind(view)
        except Exception as exc:
            raise EvaluationFailure(field.path, "binder") from exc
        if prompter is None:
            self._logger.debug("Binder returned no prompter; skipping")
            self._record(field.path, StepOutcome.NOT_APPLICABLE)
            return None
        self._active = prompter

        last = self._last_responses.get(field.path, self._state.get(field.path))
        if last is not UNSET:
            prompter.set_last_response(last)
        if self._estimate_steps:
            prompter.set_steps(*self._estimate(index, view))
        return prompter

    def _is_shown(self, field: FormField, view: StateView) -> bool:
        try:
            return field.is_shown(view)
        except Exception as exc:
            raise EvaluationFailure(field.path, "show_when") from exc

    def _estimate(self, index: int, view: StateView) -> tuple[int, int]:
        current = len(self._history) + 1
        remaining = sum(1 for later in self._fields[index + 1 :] if self._counts_towards_estimate(later, view))
        return current, current + remaining

    def _counts_towards_estimate(self, field: FormField, view: StateView) -> bool:
        """Predicate of a field not yet reached; failures only mean "not counted"."""

        try:
            return field.is_shown(view)
        except Exception as exc:
            self._logger.debug("Not counting %s in step estimate: %r", field.path, exc)
            return False

    async def _ask(self, field: FormField, prompter: Prompter[Any]) -> Any:
        self._logger.debug("Prompting")
        try:
            return await prompter.prompt()
        except PrompterFailure as exc:
            if exc.path is None:
                exc.path = field.path
            raise
        except PrompterStateError:
            raise
        except Exception as exc:
            raise PrompterFailure(field.path) from exc
        finally:
            self._dispose_active()

    def _answer(self, index: int, field: FormField, value: Any) -> None:
        path = field.path
        prior = self._state.get(path)
        prior_by_user = path in self._state.user_paths
        self._state.set(path, value)
        self._history.append(
            HistoryEntry(index=index, path=path, prior=prior, prior_by_user=prior_by_user, answer=value)
        )
        self._record(path, StepOutcome.ANSWERED)

    def _rewind(self) -> int:
        entry = self._history.pop()
        self._state.restore(entry.path, entry.prior, by_user=entry.prior_by_user)
        self._last_responses[entry.path] = entry.answer
        self._logger.debug("Going back to %s", entry.path)
        return entry.index

    def _apply_defaults(self) -> None:
        for field in self._fields:
            if not field.has_default or self._state.is_set(field.path):
                continue
            try:
                value = field.resolve_default(self._state.snapshot())
            except Exception as exc:
                raise EvaluationFailure(field.path, "default") from exc
            self._state.set(field.path, value, by_user=False)

    def _record(self, path: str, outcome: StepOutcome) -> None:
        self._trace.append(StepEvent(path=path, outcome=outcome))

    def _dispose_active(self) -> None:
        prompter, self._active = self._active, None
        if prompter is not None:
            prompter.dispose()


__all__ = ["EngineResult", "HistoryEntry", "StepEngine", "StepEvent", "StepOutcome"]
