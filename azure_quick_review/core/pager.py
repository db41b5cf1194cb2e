"""Uniform paginated listing over upstream clients"""

import asyncio
import threading
from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, List, Optional, Sequence

from .errors import ScanCancelledError


class Pager(ABC):
    """A paginated upstream listing"""

    @abstractmethod
    def more(self) -> bool:
        """Return True while another page can be fetched"""
        pass

    @abstractmethod
    async def next_page(self, cancel: Optional[threading.Event] = None) -> List[Any]:
        """Fetch the next page of results"""
        pass


class ListPager(Pager):
    """Pager over pages that are already in memory"""

    def __init__(self, pages: Sequence[Sequence[Any]]):
        self._pages = [list(page) for page in pages]
        self._index = 0

    def more(self) -> bool:
        return self._index < len(self._pages)

    async def next_page(self, cancel: Optional[threading.Event] = None) -> List[Any]:
        if cancel is not None and cancel.is_set():
            raise ScanCancelledError("scan cancelled")
        page = self._pages[self._index]
        self._index += 1
        return page


class ItemPagedPager(Pager):
    """Adapts an azure-core ItemPaged; pages are fetched on the default executor"""

    def __init__(self, item_paged: Iterable[Any]):
        self._item_paged = item_paged
        self._pages: Optional[Iterator[Iterable[Any]]] = None
        self._exhausted = False

    def _fetch(self) -> Optional[List[Any]]:
        if self._pages is None:
            by_page = getattr(self._item_paged, "by_page", None)
            self._pages = by_page() if by_page else iter([self._item_paged])
        try:
            return list(next(self._pages))
        except StopIteration:
            return None

    def more(self) -> bool:
        return not self._exhausted

    async def next_page(self, cancel: Optional[threading.Event] = None) -> List[Any]:
        if cancel is not None and cancel.is_set():
            raise ScanCancelledError("scan cancelled")
        loop = asyncio.get_running_loop()
        page = await loop.run_in_executor(None, self._fetch)
        if page is None:
            self._exhausted = True
            return []
        return page


async def collect(pager: Pager, cancel: Optional[threading.Event] = None) -> List[Any]:
    """Drain a pager, preserving upstream order

    Cancellation is checked at every page boundary.
    """
    results: List[Any] = []
    while pager.more():
        if cancel is not None and cancel.is_set():
            raise ScanCancelledError("scan cancelled")
        results.extend(await pager.next_page(cancel))
    return results
