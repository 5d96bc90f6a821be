"""Boundary between the prompters and the host that renders them.

The engine never draws anything. A host supplies views for choice lists and
text boxes; :class:`ViewPrompterFactory` turns those views into prompters so
that form authors only ever talk to a :class:`PrompterFactory`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Protocol, Sequence, TypeVar, runtime_checkable

from wizard.prompters.base import Prompter
from wizard.prompters.input_box import InputBoxPrompter, TextValidator
from wizard.prompters.items import DataItem, InputConfig, PickerConfig
from wizard.prompters.quick_pick import ItemSource, QuickPickPrompter

T = TypeVar("T")


@runtime_checkable
class PickerView(Protocol):
    """Host widget that lets the user choose one item from a list."""

    def show(self, config: PickerConfig) -> None: ...

    def set_items(self, items: Sequence[DataItem[Any]]) -> None: ...

    def set_busy(self, busy: bool) -> None: ...

    def set_active(self, item: DataItem[Any] | None) -> None: ...

    async def choose(self) -> DataItem[Any] | None:
        """Wait for the user to accept an item; ``None`` when dismissed."""
        ...

    def close(self) -> None: ...


@runtime_checkable
class InputView(Protocol):
    """Host widget that collects one line of text."""

    def show(self, config: InputConfig) -> None: ...

    def set_validation_message(self, message: str | None) -> None: ...

    async def submit(self) -> str | None:
        """Wait for the user to submit text; ``None`` when dismissed."""
        ...

    def close(self) -> None: ...


class PrompterFactory(Protocol):
    """Capability provider consumed by form binders."""

    def create_quick_pick(
        self,
        items: ItemSource,
        config: PickerConfig | None = None,
    ) -> Prompter[T]: ...

    def create_input_box(
        self,
        config: InputConfig | None = None,
        *,
        validate: TextValidator | None = None,
        transform: Callable[[str], Any] | None = None,
    ) -> Prompter[Any]: ...


class ViewPrompterFactory(ABC):
    """Build prompters on top of the views a concrete host provides."""

    @abstractmethod
    def new_picker_view(self) -> PickerView:
        """Return a fresh, unshown picker view."""

    @abstractmethod
    def new_input_view(self) -> InputView:
        """Return a fresh, unshown input view."""

    def create_quick_pick(
        self,
        items: ItemSource,
        config: PickerConfig | None = None,
    ) -> QuickPickPrompter[T]:
        return QuickPickPrompter(self.new_picker_view(), items, config)

    def create_input_box(
        self,
        config: InputConfig | None = None,
        *,
        validate: TextValidator | None = None,
        transform: Callable[[str], Any] | None = None,
    ) -> InputBoxPrompter[Any]:
        return InputBoxPrompter(
            self.new_input_view(),
            config,
            validate=validate,
            transform=transform,
        )


__all__ = ["InputView", "PickerView", "PrompterFactory", "ViewPrompterFactory"]
