"""Inspect a wizard's form against hand-applied state, without prompting."""

from __future__ import annotations

from typing import Any, Mapping

from wizard.form import Form, FormField
from wizard.state import StateView, WizardState
from wizard.wizard import Wizard


class FieldInspector:
    """Assertions about one field under the tester's current state."""

    def __init__(self, tester: WizardTester, field: FormField) -> None:
        self._tester = tester
        self._field = field

    @property
    def path(self) -> str:
        return self._field.path

    def apply_input(self, value: Any) -> None:
        """Pretend the user answered this field with ``value``."""

        self._tester._state.set(self._field.path, value)

    def assert_show(self) -> None:
        if not self._tester._would_show(self._field):
            raise AssertionError(f"Expected field '{self.path}' to be shown")

    def assert_does_not_show(self) -> None:
        if self._tester._would_show(self._field):
            raise AssertionError(f"Expected field '{self.path}' not to be shown")

    def assert_show_first(self) -> None:
        """Assert this is the first unanswered field that would be shown."""

        first = self._tester.next_shown()
        if first != self.path:
            raise AssertionError(f"Expected field '{self.path}' to be shown first, got {first!r}")


class WizardTester:
    """Evaluate ``show_when`` predicates and binders the way a run would.

    Inputs applied through :meth:`FieldInspector.apply_input` are written to a
    private state; every assertion evaluates the form against a fresh snapshot
    of it, so assertions can be interleaved with inputs to walk a scenario.
    """

    def __init__(self, target: Wizard[Any] | Form[Any], *, init_state: Mapping[str, Any] | None = None) -> None:
        if isinstance(target, Wizard):
            self._form = target.form
            initial = target.init_state if init_state is None else init_state
        else:
            self._form = target
            initial = init_state
        self._initial = dict(initial) if initial else {}
        self._state = WizardState(self._initial)

    @property
    def state(self) -> StateView:
        return self._state.snapshot()

    def field(self, path: str) -> FieldInspector:
        field = self._form.get(path)
        if field is None:
            raise KeyError(f"Form has no field '{path}'")
        return FieldInspector(self, field)

    def reset(self) -> None:
        self._state = WizardState(self._initial)

    def next_shown(self) -> str | None:
        """Path of the first field without a value that would be shown."""

        for field in self._form.fields:
            if self._state.is_set(field.path):
                continue
            if self._would_show(field):
                return field.path
        return None

    def _would_show(self, field: FormField) -> bool:
        view = self._state.snapshot()
        if not field.is_shown(view):
            return False
        prompter = field.bind(view)
        if prompter is None:
            return False
        prompter.dispose()
        return True


__all__ = ["FieldInspector", "WizardTester"]
