"""Value objects exchanged between prompters and host views."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Generic, Iterable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class DataItem(Generic[T]):
    """A selectable choice carrying the value it resolves to."""

    label: str
    data: T
    description: str | None = None
    detail: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.label, str) or not self.label:
            raise ValueError("DataItem.label must be a non-empty string")


def items_from_values(values: Iterable[T]) -> list[DataItem[T]]:
    """Build items labelled with ``str(value)`` for each value."""

    return [DataItem(label=str(value), data=value) for value in values]


@dataclass(frozen=True)
class PromptConfig:
    """Presentation options common to every prompt."""

    title: str | None = None
    placeholder: str | None = None
    steps: tuple[int, int] | None = None

    def with_steps(self, steps: tuple[int, int] | None) -> PromptConfig:
        return replace(self, steps=steps)

    @property
    def display_title(self) -> str:
        """Title with the ``(current/total)`` suffix when steps are known."""

        title = self.title or ""
        if self.steps is None:
            return title
        current, total = self.steps
        suffix = f"({current}/{total})"
        return f"{title} {suffix}" if title else suffix


@dataclass(frozen=True)
class PickerConfig(PromptConfig):
    """Options for choice prompts."""

    no_items_label: str = "No items found"


@dataclass(frozen=True)
class InputConfig(PromptConfig):
    """Options for free-text prompts."""

    prompt: str | None = None
    value: str = ""
    password: bool = False


__all__ = [
    "DataItem",
    "InputConfig",
    "PickerConfig",
    "PromptConfig",
    "items_from_values",
]
