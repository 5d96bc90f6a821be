"""Path-addressable state collected by a wizard run.

Values live in a nested ``dict`` and are addressed with dot-separated paths
such as ``"company.name"``. A path that was never written is *unset*, which is
reported through the :data:`UNSET` sentinel so that it can never be confused
with an explicit ``None``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from copy import deepcopy
from typing import Any


class _Unset:
    """Marker type for paths that hold no value."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> _Unset:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Unset:
        return self

    def __reduce__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def split_path(path: str) -> tuple[str, ...]:
    """Return the segments of ``path`` or raise ``ValueError`` when malformed."""

    if not isinstance(path, str) or not path:
        raise ValueError("path must be a non-empty string")
    parts = tuple(path.split("."))
    for part in parts:
        if not part or part != part.strip():
            raise ValueError(f"malformed path segment in '{path}'")
    return parts


def join_path(prefix: str, path: str) -> str:
    """Return ``path`` nested under ``prefix``."""

    return f"{prefix}.{path}" if prefix else path


def get_in(data: Mapping[str, Any] | None, path: str, default: Any = UNSET) -> Any:
    """Return the nested value for ``path`` from ``data`` when available."""

    cursor: Any = data
    for part in path.split("."):
        if isinstance(cursor, Mapping) and part in cursor:
            cursor = cursor[part]
        else:
            return default
    return cursor


def set_in(data: dict[str, Any], path: str, value: Any) -> None:
    """Assign ``value`` in ``data`` following a dot-separated ``path``."""

    cursor = data
    parts = path.split(".")
    for part in parts[:-1]:
        next_cursor = cursor.get(part)
        if not isinstance(next_cursor, dict):
            next_cursor = {}
            cursor[part] = next_cursor
        cursor = next_cursor
    cursor[parts[-1]] = value


def pop_in(data: dict[str, Any], path: str) -> Any:
    """Remove ``path`` from ``data`` and prune parents left empty."""

    parts = path.split(".")
    trail: list[tuple[dict[str, Any], str]] = []
    cursor: Any = data
    for part in parts[:-1]:
        if not isinstance(cursor, dict) or not isinstance(cursor.get(part), dict):
            return UNSET
        trail.append((cursor, part))
        cursor = cursor[part]
    if not isinstance(cursor, dict) or parts[-1] not in cursor:
        return UNSET
    removed = cursor.pop(parts[-1])
    for parent, key in reversed(trail):
        if parent[key]:
            break
        del parent[key]
    return removed


class StateView(Mapping[str, Any]):
    """Read-only snapshot handed to predicates and binders."""

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: Mapping[str, Any] = data if data is not None else {}

    def __getitem__(self, key: str) -> Any:
        value = get_in(self._data, key)
        if value is UNSET:
            raise KeyError(key)
        return self._wrap(value)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"StateView({self._data!r})"

    def get(self, path: str, default: Any = None) -> Any:  # type: ignore[override]
        """Return the value at dotted ``path`` or ``default`` when unset."""

        value = get_in(self._data, path)
        if value is UNSET:
            return default
        return self._wrap(value)

    def is_set(self, path: str) -> bool:
        return get_in(self._data, path) is not UNSET

    def scoped(self, prefix: str) -> StateView:
        """Return the view below ``prefix`` (empty when nothing is stored there)."""

        if not prefix:
            return self
        nested = get_in(self._data, prefix)
        return StateView(nested if isinstance(nested, Mapping) else {})

    def to_dict(self) -> dict[str, Any]:
        return deepcopy(dict(self._data))

    @staticmethod
    def _wrap(value: Any) -> Any:
        if isinstance(value, Mapping) and not isinstance(value, StateView):
            return StateView(value)
        return value


class WizardState:
    """Mutable store owned by a single step engine for one run."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = deepcopy(dict(initial)) if initial else {}
        self._user_paths: set[str] = set()

    def __repr__(self) -> str:
        return f"WizardState({self._data!r})"

    def get(self, path: str, default: Any = UNSET) -> Any:
        """Return the current value at ``path`` or ``default`` when unset."""

        return get_in(self._data, path, default)

    def is_set(self, path: str) -> bool:
        return get_in(self._data, path) is not UNSET

    def set(self, path: str, value: Any, *, by_user: bool = True) -> None:
        """Write ``value`` at ``path`` and record whether the user provided it."""

        if value is UNSET:
            self.unset(path)
            return
        set_in(self._data, path, value)
        if by_user:
            self._user_paths.add(path)
        else:
            self._user_paths.discard(path)

    def unset(self, path: str) -> None:
        pop_in(self._data, path)
        self._user_paths.discard(path)

    def restore(self, path: str, prior: Any, *, by_user: bool = False) -> None:
        """Put back a value recorded before ``path`` was last written."""

        if prior is UNSET:
            self.unset(path)
        else:
            self.set(path, deepcopy(prior), by_user=by_user)

    @property
    def user_paths(self) -> frozenset[str]:
        """Paths whose current value was provided by user action."""

        return frozenset(self._user_paths)

    def snapshot(self) -> StateView:
        return StateView(deepcopy(self._data))

    def to_dict(self) -> dict[str, Any]:
        return deepcopy(self._data)


__all__ = [
    "StateView",
    "UNSET",
    "WizardState",
    "get_in",
    "join_path",
    "pop_in",
    "set_in",
    "split_path",
]
