"""Choice prompter backed by a fixed list or a lazily loaded collection."""

from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing
from typing import TYPE_CHECKING, Any, Iterable, Sequence, TypeVar, Union

from utils.async_collection import AsyncCollection
from wizard.errors import PrompterFailure
from wizard.prompters.base import CANCELLED, Prompter
from wizard.prompters.items import DataItem, PickerConfig
from wizard.state import UNSET

if TYPE_CHECKING:  # pragma: no cover - typing-only import path
    from wizard.prompters.host import PickerView

logger = logging.getLogger(__name__)

T = TypeVar("T")

ItemSource = Union[Sequence[Any], AsyncCollection[Any]]


def _as_item(entry: Any) -> DataItem[Any]:
    if isinstance(entry, DataItem):
        return entry
    return DataItem(label=str(entry), data=entry)


class QuickPickPrompter(Prompter[T]):
    """Let the user pick one item; resolves to the item's ``data``.

    ``items`` may be a sequence, an :class:`AsyncCollection` of items, or an
    :class:`AsyncCollection` of pages of items. Only ``list`` entries count as
    pages, so tuples stay single items. Collections are loaded
    in the background while the view is already shown, so the user can pick
    from the first page before the last one arrives.
    """

    def __init__(
        self,
        view: PickerView,
        items: ItemSource,
        config: PickerConfig | None = None,
    ) -> None:
        super().__init__()
        self._view = view
        self._source = items
        self._config = config or PickerConfig()
        self._items: list[DataItem[Any]] = []
        self._active: DataItem[Any] | None = None
        self._loader: asyncio.Task[None] | None = None

    @property
    def view(self) -> PickerView:
        return self._view

    @property
    def config(self) -> PickerConfig:
        return self._config

    @property
    def items(self) -> tuple[DataItem[Any], ...]:
        """Items revealed to the view so far."""

        return tuple(self._items)

    @property
    def loading(self) -> bool:
        return self._loader is not None and not self._loader.done()

    async def _prompt(self) -> T | Any:
        self._view.show(self._config.with_steps(self.steps))
        if isinstance(self._source, AsyncCollection):
            self._view.set_busy(True)
            self._loader = asyncio.create_task(self._load(self._source))
        else:
            self._reveal(_as_item(entry) for entry in self._source)

        chooser = asyncio.ensure_future(self._view.choose())
        try:
            if self._loader is not None:
                await asyncio.wait({self._loader, chooser}, return_when=asyncio.FIRST_COMPLETED)
                error = self._loader_error()
                if error is not None:
                    raise PrompterFailure(message=f"Loading items failed: {error}") from error
            choice = await chooser
        finally:
            if not chooser.done():
                chooser.cancel()
            if self._loader is not None and not self._loader.done():
                self._loader.cancel()

        if choice is None:
            return CANCELLED
        return choice.data

    def _loader_error(self) -> BaseException | None:
        loader = self._loader
        if loader is None or not loader.done() or loader.cancelled():
            return None
        return loader.exception()

    async def _load(self, source: AsyncCollection[Any]) -> None:
        async with aclosing(source.__aiter__()) as iterator:
            async for entry in iterator:
                if isinstance(entry, list):
                    self._reveal(_as_item(item) for item in entry)
                else:
                    self._reveal([_as_item(entry)])
        logger.debug("Loaded %s item(s) for '%s'", len(self._items), self._config.title)
        self._view.set_busy(False)

    def _reveal(self, batch: Iterable[DataItem[Any]]) -> None:
        new_items = list(batch)
        self._items.extend(new_items)
        self._view.set_items(tuple(self._items))
        if self._active is None and self.last_response is not UNSET:
            for item in new_items:
                if item.data == self.last_response:
                    self._active = item
                    self._view.set_active(item)
                    break

    def _dispose(self) -> None:
        if self._loader is not None and not self._loader.done():
            self._loader.cancel()
        self._view.close()


__all__ = ["ItemSource", "QuickPickPrompter"]
