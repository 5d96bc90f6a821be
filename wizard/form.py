"""Declaration surface for wizard forms.

A :class:`Form` is an ordered registry of :class:`FormField` objects. The
order of declaration is the order in which the step engine visits fields.
Forms never evaluate anything; they only check that the declaration itself is
well formed.

Example::

    form = Form()
    form.field("foo").bind_prompter(lambda state: host.create_input_box())
    form.field("bar").bind_prompter(
        lambda state: host.create_quick_pick([1, 2]),
        show_when=lambda state: len(state.get("foo", "")) > 5,
        depends_on=("foo",),
    )
"""

from __future__ import annotations

import logging
import types
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field as dataclass_field, replace
from typing import Any, Generic, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel

from wizard.errors import DeclarationError
from wizard.prompters.base import Prompter
from wizard.state import UNSET, StateView, join_path, split_path
from wizard.types import Binder, Predicate

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

ScopedPredicate = tuple[str, Predicate]


@dataclass(frozen=True)
class FormField:
    """How one path of the wizard state is obtained.

    ``scope`` is set for fields imported from a nested form: the binder,
    predicate and default factory then receive the state below that prefix.
    ``gates`` holds the ``show_when`` predicates of the forms a field was
    imported through, each paired with the scope it evaluates against.
    """

    path: str
    binder: Binder
    show_when: Predicate | None = None
    dependencies: frozenset[str] = frozenset()
    default: Any = UNSET
    scope: str = ""
    gates: tuple[ScopedPredicate, ...] = dataclass_field(default_factory=tuple)

    def is_shown(self, view: StateView) -> bool:
        """Evaluate every gate and the field's own ``show_when`` against ``view``."""

        for scope, gate in self.gates:
            if not gate(view.scoped(scope)):
                return False
        if self.show_when is None:
            return True
        return bool(self.show_when(view.scoped(self.scope)))

    def bind(self, view: StateView) -> Prompter[Any] | None:
        prompter = self.binder(view.scoped(self.scope))
        if prompter is not None and not isinstance(prompter, Prompter):
            raise TypeError(
                f"Binder for '{self.path}' returned {type(prompter).__name__}, expected a Prompter or None"
            )
        return prompter

    @property
    def has_default(self) -> bool:
        return self.default is not UNSET

    def resolve_default(self, view: StateView) -> Any:
        """Return the default value; callables receive the (scoped) final state."""

        if callable(self.default):
            return self.default(view.scoped(self.scope))
        return self.default


def _paths_overlap(first: str, second: str) -> bool:
    return first == second or first.startswith(second + ".") or second.startswith(first + ".")


def _model_for_annotation(annotation: Any) -> type[BaseModel] | None | bool:
    """Return the nested model for ``annotation``.

    ``True`` means the annotation accepts arbitrary nested keys (a mapping or
    ``Any``); ``None`` means it is a leaf value.
    """

    if annotation is Any:
        return True
    origin = get_origin(annotation)
    if origin is None and isinstance(annotation, type):
        if issubclass(annotation, BaseModel):
            return annotation
        if issubclass(annotation, Mapping):
            return True
        return None
    if origin in (Union, types.UnionType):
        resolved: type[BaseModel] | None | bool = None
        for arg in get_args(annotation):
            if arg is type(None):
                continue
            candidate = _model_for_annotation(arg)
            if candidate is not None:
                resolved = candidate
        return resolved
    if isinstance(origin, type) and issubclass(origin, Mapping):
        return True
    return None


def model_has_path(model: type[BaseModel], path: str) -> bool:
    """Return ``True`` when dotted ``path`` addresses a field of ``model``."""

    current: type[BaseModel] | bool | None = model
    for part in split_path(path):
        if current is True:
            return True
        if not isinstance(current, type):
            return False
        info = current.model_fields.get(part)
        if info is None:
            return False
        current = _model_for_annotation(info.annotation)
    return True


class FieldHandle:
    """Declaration handle returned by :meth:`Form.field`."""

    def __init__(self, form: Form[Any], path: str) -> None:
        self._form = form
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    @property
    def bound(self) -> bool:
        return self._path in self._form

    def bind_prompter(
        self,
        binder: Binder,
        *,
        show_when: Predicate | None = None,
        depends_on: Iterable[str] = (),
        default: Any = UNSET,
    ) -> None:
        """Register how the prompter for this path is built.

        ``binder`` receives a read-only snapshot of the state and returns a
        prompter, or ``None`` when the field does not apply. ``show_when``
        (default: always) decides whether the field is visited at all.
        ``depends_on`` lists the paths the binder and predicate read.
        """

        if not callable(binder):
            raise DeclarationError(f"Binder for '{self._path}' must be callable")
        if show_when is not None and not callable(show_when):
            raise DeclarationError(f"show_when for '{self._path}' must be callable")
        if isinstance(depends_on, str):
            depends_on = (depends_on,)
        dependencies = frozenset(self._form._check_path(dep) for dep in depends_on)
        self._form._add(
            FormField(
                path=self._path,
                binder=binder,
                show_when=show_when,
                dependencies=dependencies,
                default=default,
            )
        )

    def set_default(self, default: Any) -> None:
        """Provide the value used when this field is skipped for the whole run."""

        self._form._replace_default(self._path, default)


class Form(Generic[M]):
    """Ordered registry of form fields, optionally typed by a pydantic model."""

    def __init__(self, model: type[M] | None = None) -> None:
        if model is not None and not (isinstance(model, type) and issubclass(model, BaseModel)):
            raise DeclarationError("Form model must be a pydantic BaseModel subclass")
        self._model = model
        self._fields: dict[str, FormField] = {}
        self._frozen = False

    def __repr__(self) -> str:
        return f"Form(paths={list(self._fields)!r})"

    def __contains__(self, path: object) -> bool:
        return path in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __iter__(self) -> Iterator[FormField]:
        return iter(tuple(self._fields.values()))

    @property
    def model(self) -> type[M] | None:
        return self._model

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def fields(self) -> tuple[FormField, ...]:
        """Fields in declaration order."""

        return tuple(self._fields.values())

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(self._fields)

    def field(self, path: str) -> FieldHandle:
        return FieldHandle(self, self._check_path(path))

    def get(self, path: str) -> FormField | None:
        return self._fields.get(path)

    def freeze(self) -> None:
        """Reject further declarations; called when a wizard starts running."""

        self._frozen = True

    def dependencies_of(self, path: str) -> frozenset[str]:
        field = self._fields.get(path)
        if field is None:
            raise KeyError(path)
        return field.dependencies

    def dependents_of(self, path: str) -> tuple[str, ...]:
        """Paths of the fields that declared a dependency on ``path``."""

        return tuple(
            field.path
            for field in self._fields.values()
            if any(_paths_overlap(dep, path) for dep in field.dependencies)
        )

    def apply_form(
        self,
        prefix: str,
        other: Form[Any],
        *,
        show_when: Predicate | None = None,
    ) -> None:
        """Import every field of ``other`` below ``prefix``.

        The imported binders and predicates see the state below ``prefix``;
        ``show_when`` sees the whole state and gates all imported fields.
        """

        prefix = self._check_path(prefix)
        if other is self:
            raise DeclarationError("A form cannot be applied to itself")
        if show_when is not None and not callable(show_when):
            raise DeclarationError(f"show_when for '{prefix}' must be callable")
        outer_gates: tuple[ScopedPredicate, ...] = ((("", show_when),) if show_when is not None else ())
        for nested in other.fields:
            path = join_path(prefix, nested.path)
            self._add(
                replace(
                    nested,
                    path=path,
                    scope=join_path(prefix, nested.scope) if nested.scope else prefix,
                    dependencies=frozenset(join_path(prefix, dep) for dep in nested.dependencies),
                    gates=outer_gates
                    + tuple((join_path(prefix, scope) if scope else prefix, gate) for scope, gate in nested.gates),
                )
            )

    def _check_path(self, path: str) -> str:
        try:
            split_path(path)
        except ValueError as exc:
            raise DeclarationError(str(exc)) from exc
        return path

    def _ensure_open(self) -> None:
        if self._frozen:
            raise DeclarationError("Form is frozen; declare fields before running the wizard")

    def _add(self, field: FormField) -> None:
        self._ensure_open()
        path = field.path
        if path in self._fields:
            raise DeclarationError(f"Field '{path}' is already bound")
        for existing in self._fields.values():
            if _paths_overlap(existing.path, path):
                raise DeclarationError(f"Field '{path}' overlaps with existing field '{existing.path}'")
            for dep in existing.dependencies:
                if _paths_overlap(dep, path):
                    raise DeclarationError(
                        f"Field '{existing.path}' depends on '{path}', which must be declared before it"
                    )
        if self._model is not None and not model_has_path(self._model, path):
            raise DeclarationError(f"'{path}' is not a field of {self._model.__name__}")
        self._fields[path] = field
        logger.debug("Bound field %s", path)

    def _replace_default(self, path: str, default: Any) -> None:
        self._ensure_open()
        field = self._fields.get(path)
        if field is None:
            raise DeclarationError(f"Field '{path}' must be bound before setting a default")
        self._fields[path] = replace(field, default=default)


__all__ = ["FieldHandle", "Form", "FormField", "model_has_path"]
