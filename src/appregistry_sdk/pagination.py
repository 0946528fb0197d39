"""Lazy, batched iteration over cursor-paginated app listings.

Example:
    ```python
    async for apps in project.iterate_android_apps():
        for app in apps:
            print(app.app_id)
    ```
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from .validator import ListAppsResponse, parse_response

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[str | None], Awaitable[Any]]


@dataclass(frozen=True)
class IterationStep(Generic[T]):
    """Result of one pull: a batch of entities and whether the stream has ended."""

    value: list[T] = field(default_factory=list)
    done: bool = False


class AppPageIterator(Generic[T]):
    """Walks one listing from the first page to the last.

    The iterator starts fetching and stays fetching while responses carry a
    ``nextPageToken``. The response without one is returned as the final batch,
    after which the iterator is exhausted: every further pull returns an empty,
    done step without touching the network.

    The page token is mutated in place, so one iterator must not be pulled
    concurrently. Separate iterators are independent.
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        build: Callable[[str], T],
        caller: str,
    ) -> None:
        """Initialize the iterator.

        Args:
            fetch_page: Coroutine function taking the page token (None for the
                first page) and returning the raw listing payload.
            build: Builds an entity from an app ID. Must not do any I/O.
            caller: Operation label used in validation errors.
        """
        self._fetch_page = fetch_page
        self._build = build
        self._caller = caller
        self._next_page_token: str | None = None
        self._fetching = True
        self._pages_fetched = 0

    @property
    def exhausted(self) -> bool:
        return not self._fetching

    def __aiter__(self) -> AppPageIterator[T]:
        return self

    async def __anext__(self) -> list[T]:
        step = await self.next_batch()
        if step.done:
            raise StopAsyncIteration
        return step.value

    async def next_batch(self) -> IterationStep[T]:
        """Fetch the next page and turn it into a batch of entities.

        Raises:
            InvalidServerResponseError: If the page is malformed. The iterator
                state is left untouched in that case.
        """
        if not self._fetching:
            return IterationStep([], done=True)

        data = await self._fetch_page(self._next_page_token)
        response = parse_response(ListAppsResponse, data, self._caller)
        batch = [self._build(entry.app_id) for entry in response.apps or []]

        self._pages_fetched += 1
        self._next_page_token = response.next_page_token or None
        if not self._next_page_token:
            self._fetching = False
        logger.debug(
            "%s page %d: %d apps, %s",
            self._caller,
            self._pages_fetched,
            len(batch),
            "more pages follow" if self._fetching else "last page",
        )
        return IterationStep(batch, done=False)


class AppIterable(Generic[T]):
    """Restartable view over a paginated listing.

    Each ``async for`` (or :meth:`__aiter__` call) starts a fresh walk from the
    first page.
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        build: Callable[[str], T],
        caller: str,
    ) -> None:
        self._fetch_page = fetch_page
        self._build = build
        self._caller = caller

    def __aiter__(self) -> AppPageIterator[T]:
        return AppPageIterator(self._fetch_page, self._build, self._caller)

    async def collect(self) -> list[T]:
        """Drain a fresh walk into one flat list."""
        items: list[T] = []
        async for batch in self:
            items.extend(batch)
        return items
