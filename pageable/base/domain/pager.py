# (c) Nelen & Schuurmans

import logging
from collections.abc import AsyncIterator
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Iterator
from typing import Generic
from typing import TypeVar

from .exceptions import PagingError
from .pagination import Page
from .types import ContinuationToken

__all__ = [
    "FetchPage",
    "PageIterator",
    "Pager",
    "SyncFetchPage",
    "SyncPageIterator",
    "SyncPager",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

FetchPage = Callable[[ContinuationToken | None], Awaitable[Page]]
SyncFetchPage = Callable[[ContinuationToken | None], Page]


class PagerState:
    """Where a pager is: which page comes next and what is left of the current one.

    The pager starts 'initial' (nothing fetched yet), moves on to 'more' as
    long as pages carry a continuation, and ends 'done' after the last page or
    after a failed fetch.
    """

    def __init__(self, continuation: ContinuationToken | None = None):
        self.continuation = continuation
        self.started = False
        self.done = False
        self.page_count = 0
        self.pending: Iterator = iter(())
        self.pending_count = 0

    def next_item(self):
        """Returns the next item of the current page (StopIteration if there is none)"""
        item = next(self.pending)
        self.pending_count -= 1
        return item

    def begin_fetch(self) -> ContinuationToken | None:
        self.started = True
        return self.continuation

    def discard_pending(self) -> None:
        self.pending = iter(())
        self.pending_count = 0

    def fetch_failed(self) -> None:
        self.done = True
        self.continuation = None
        self.discard_pending()

    def fetch_succeeded(self, page: Page) -> None:
        self.page_count += 1
        self.pending = iter(page.items)
        self.pending_count = len(page.items)
        self.continuation = page.continuation
        if page.continuation is None:
            self.done = True
        logger.debug(
            f"fetched page {self.page_count} with {len(page.items)} items "
            f"({'last page' if self.done else 'more pages'})"
        )

    def check_resumable(self) -> None:
        if self.started:
            raise PagingError("cannot set a continuation token after paging started")

    def check_page_aligned(self) -> None:
        if self.pending_count:
            raise PagingError(
                f"cannot page while {self.pending_count} items of the current "
                "page are not consumed"
            )


class Pager(Generic[T]):
    """Lazily iterates all items of a collection that the server returns in pages.

    Args:
        fetch_page: Coroutine function that fetches one page. It is called
            with ``None`` for the first page and with the continuation of the
            previous page after that.

    Pages are fetched one at a time, only when the consumer asks for an item
    beyond the current page. An exception raised by ``fetch_page`` is raised
    to the consumer and ends the pager. A pager is forward-only: iterating it
    again continues where it stopped.
    """

    def __init__(self, fetch_page: FetchPage):
        self._fetch_page = fetch_page
        self._state = PagerState()

    @property
    def continuation_token(self) -> ContinuationToken | None:
        """The token of the next fetch (None before the first and after the last)"""
        return self._state.continuation

    def with_continuation_token(self, token: ContinuationToken) -> "Pager[T]":
        """Start at the page referenced by a token obtained from an earlier pager."""
        self._state.check_resumable()
        self._state.continuation = token
        return self

    async def _next_page(self) -> Page[T]:
        if self._state.done:
            raise StopAsyncIteration
        continuation = self._state.begin_fetch()
        try:
            page = await self._fetch_page(continuation)
        except BaseException:
            # includes cancellation
            self._state.fetch_failed()
            raise
        self._state.fetch_succeeded(page)
        return page

    def __aiter__(self) -> "Pager[T]":
        return self

    async def __anext__(self) -> T:
        while True:
            try:
                return self._state.next_item()
            except StopIteration:
                await self._next_page()

    def by_page(self) -> "PageIterator[T]":
        self._state.check_page_aligned()
        return PageIterator(self)

    async def collect(self) -> list[T]:
        return [item async for item in self]


class PageIterator(Generic[T]):
    """Iterates the remaining pages of a Pager (instead of its items)."""

    def __init__(self, pager: Pager[T]):
        self._pager = pager

    @property
    def continuation_token(self) -> ContinuationToken | None:
        return self._pager.continuation_token

    def __aiter__(self) -> AsyncIterator[Page[T]]:
        return self

    async def __anext__(self) -> Page[T]:
        self._pager._state.check_page_aligned()
        page = await self._pager._next_page()
        # the items are handed out with the page
        self._pager._state.discard_pending()
        return page


# This is a copy-paste of Pager, with all the async / await removed


class SyncPager(Generic[T]):
    """Lazily iterates all items of a collection that the server returns in pages.

    See Pager; ``fetch_page`` is a plain (blocking) function here.
    """

    def __init__(self, fetch_page: SyncFetchPage):
        self._fetch_page = fetch_page
        self._state = PagerState()

    @property
    def continuation_token(self) -> ContinuationToken | None:
        return self._state.continuation

    def with_continuation_token(self, token: ContinuationToken) -> "SyncPager[T]":
        self._state.check_resumable()
        self._state.continuation = token
        return self

    def _next_page(self) -> Page[T]:
        if self._state.done:
            raise StopIteration
        continuation = self._state.begin_fetch()
        try:
            page = self._fetch_page(continuation)
        except BaseException:
            self._state.fetch_failed()
            raise
        self._state.fetch_succeeded(page)
        return page

    def __iter__(self) -> "SyncPager[T]":
        return self

    def __next__(self) -> T:
        while True:
            try:
                return self._state.next_item()
            except StopIteration:
                self._next_page()

    def by_page(self) -> "SyncPageIterator[T]":
        self._state.check_page_aligned()
        return SyncPageIterator(self)

    def collect(self) -> list[T]:
        return list(self)


class SyncPageIterator(Generic[T]):
    def __init__(self, pager: SyncPager[T]):
        self._pager = pager

    @property
    def continuation_token(self) -> ContinuationToken | None:
        return self._pager.continuation_token

    def __iter__(self) -> Iterator[Page[T]]:
        return self

    def __next__(self) -> Page[T]:
        self._pager._state.check_page_aligned()
        page = self._pager._next_page()
        self._pager._state.discard_pending()
        return page
