"""Public entry point wrapping a form and a step engine."""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel

import config
from wizard.engine import EngineResult, StepEngine
from wizard.errors import WizardError
from wizard.form import Form

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class _WizardCancelled:
    """Marker returned by :meth:`Wizard.run` when the user abandons the wizard."""

    _instance: _WizardCancelled | None = None

    def __new__(cls) -> _WizardCancelled:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "WIZARD_CANCELLED"

    def __bool__(self) -> bool:
        return False


WIZARD_CANCELLED: Any = _WizardCancelled()


class Wizard(Generic[M]):
    """Collect a piece of state by running the prompters declared on ``form``.

    ``await wizard.run()`` returns the assembled state as a ``dict`` (or as an
    instance of the form's pydantic model when the form is typed), or
    :data:`WIZARD_CANCELLED` when the user backs out of the first step.
    """

    def __init__(
        self,
        form: Form[M] | None = None,
        *,
        init_state: Mapping[str, Any] | None = None,
        estimate_steps: bool | None = None,
    ) -> None:
        self._form: Form[M] = form if form is not None else Form()
        self._init_state = deepcopy(dict(init_state)) if init_state else {}
        self._estimate_steps = config.ESTIMATE_STEPS if estimate_steps is None else estimate_steps
        self._engine: StepEngine | None = None
        self._running = False
        self.last_result: EngineResult | None = None

    @property
    def form(self) -> Form[M]:
        return self._form

    @property
    def init_state(self) -> dict[str, Any]:
        return deepcopy(self._init_state)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def engine(self) -> StepEngine | None:
        """Engine of the current (or most recent) run."""

        return self._engine

    async def run(self) -> dict[str, Any] | M | Any:
        if self._running:
            raise WizardError("Wizard is already running")
        self._running = True
        self._form.freeze()
        self._engine = StepEngine(
            self._form,
            initial=self._init_state,
            estimate_steps=self._estimate_steps,
        )
        try:
            result = await self._engine.run()
        finally:
            self._running = False
        self.last_result = result

        if result.cancelled:
            return WIZARD_CANCELLED
        data = result.state.to_dict()
        model = self._form.model
        if model is not None:
            return model.model_validate(data)
        return data


__all__ = ["WIZARD_CANCELLED", "Wizard"]
