"""Lazy, single-pass async sequences for feeding choice prompters.

An :class:`AsyncCollection` wraps a factory producing an async iterator. The
operators (``map``, ``filter``, ``flatten``, ``limit``) build new collections
without pulling anything; items are only requested when somebody iterates the
outermost collection or calls :meth:`AsyncCollection.promise`.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable, Hashable, Iterable, Mapping
from contextlib import aclosing
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")
K = TypeVar("K", bound=Hashable)

Requester = Callable[[Any], Awaitable[Any]]


class CollectionConsumedError(RuntimeError):
    """Raised when a single-pass collection is iterated a second time."""


@dataclass(frozen=True)
class Page(Generic[T]):
    """One response from a paginated requester."""

    items: list[T] = field(default_factory=list)
    next: Any | None = None


def _coerce_page(response: Any) -> Page[Any]:
    if isinstance(response, Page):
        return response
    if isinstance(response, Mapping) and "items" in response:
        items = response["items"]
        if items is None:
            items = []
        return Page(items=list(items), next=response.get("next"))
    raise TypeError(
        f"Requester must return a Page or a mapping with 'items', got {type(response).__name__}"
    )


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class AsyncCollection(Generic[T]):
    """Composable async sequence that may be consumed once."""

    def __init__(self, factory: Callable[[], AsyncIterator[T]]) -> None:
        self._factory = factory
        self._consumed = False

    def __aiter__(self) -> AsyncIterator[T]:
        if self._consumed:
            raise CollectionConsumedError("AsyncCollection instances can only be consumed once")
        self._consumed = True
        return self._factory()

    @property
    def consumed(self) -> bool:
        return self._consumed

    def map(self, fn: Callable[[T], U | Awaitable[U]]) -> AsyncCollection[U]:
        """Apply ``fn`` to every item as it is pulled."""

        source = self

        async def _mapped() -> AsyncIterator[U]:
            async with aclosing(source.__aiter__()) as iterator:
                async for item in iterator:
                    yield await _resolve(fn(item))

        return AsyncCollection(_mapped)

    def filter(self, predicate: Callable[[T], bool | Awaitable[bool]]) -> AsyncCollection[T]:
        """Keep the items for which ``predicate`` is truthy."""

        source = self

        async def _filtered() -> AsyncIterator[T]:
            async with aclosing(source.__aiter__()) as iterator:
                async for item in iterator:
                    if await _resolve(predicate(item)):
                        yield item

        return AsyncCollection(_filtered)

    def flatten(self) -> AsyncCollection[Any]:
        """Turn a sequence of pages into the sequence of their items."""

        source = self

        async def _flattened() -> AsyncIterator[Any]:
            async with aclosing(source.__aiter__()) as iterator:
                async for page in iterator:
                    if isinstance(page, AsyncIterable):
                        async for item in page:
                            yield item
                    elif isinstance(page, Iterable) and not isinstance(page, (str, bytes)):
                        for item in page:
                            yield item
                    else:
                        raise TypeError(f"Cannot flatten non-iterable page {page!r}")

        return AsyncCollection(_flattened)

    def limit(self, count: int) -> AsyncCollection[T]:
        """Stop pulling after ``count`` items."""

        if count < 0:
            raise ValueError("limit must be >= 0")
        source = self

        async def _limited() -> AsyncIterator[T]:
            if count == 0:
                return
            taken = 0
            async with aclosing(source.__aiter__()) as iterator:
                async for item in iterator:
                    yield item
                    taken += 1
                    if taken >= count:
                        break

        return AsyncCollection(_limited)

    async def promise(self) -> list[T]:
        """Pull every item and return them as an ordered list."""

        async with aclosing(self.__aiter__()) as iterator:
            return [item async for item in iterator]

    async def first(self) -> T | None:
        """Return the first item, pulling nothing beyond it."""

        async with aclosing(self.__aiter__()) as iterator:
            async for item in iterator:
                return item
        return None

    async def to_dict(self, key: Callable[[T], K]) -> dict[K, T]:
        """Drain into a mapping keyed by ``key(item)``; later items win."""

        result: dict[K, T] = {}
        async with aclosing(self.__aiter__()) as iterator:
            async for item in iterator:
                result[key(item)] = item
        return result


def to_collection(source: Iterable[T] | AsyncIterable[T] | AsyncCollection[T]) -> AsyncCollection[T]:
    """Wrap an iterable or async iterable as an :class:`AsyncCollection`."""

    if isinstance(source, AsyncCollection):
        return source
    if isinstance(source, AsyncIterable):

        async def _from_async() -> AsyncIterator[T]:
            async for item in source:
                yield item

        return AsyncCollection(_from_async)
    if isinstance(source, Iterable):

        async def _from_sync() -> AsyncIterator[T]:
            for item in source:
                yield item

        return AsyncCollection(_from_sync)
    raise TypeError(f"Cannot build a collection from {type(source).__name__}")


def paginate(requester: Requester, initial: Any | None = None) -> AsyncCollection[list[T]]:
    """Return the pages produced by ``requester`` following continuation tokens.

    ``requester`` is awaited with the current token (``initial`` first) and
    must answer with a :class:`Page` or a mapping with ``items`` and an
    optional ``next`` token. Iteration ends once ``next`` is ``None``.
    Failures propagate to whoever is pulling; nothing is retried.
    """

    async def _pages() -> AsyncIterator[list[T]]:
        token = initial
        page_number = 0
        while True:
            page = _coerce_page(await requester(token))
            page_number += 1
            logger.debug("Fetched page %s with %s item(s)", page_number, len(page.items))
            yield list(page.items)
            if page.next is None:
                break
            token = page.next

    return AsyncCollection(_pages)


__all__ = [
    "AsyncCollection",
    "CollectionConsumedError",
    "Page",
    "Requester",
    "paginate",
    "to_collection",
]
