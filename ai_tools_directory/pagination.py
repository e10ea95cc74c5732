"""Load-more pagination over a tool listing.

A controller owns one listing: the tools accumulated so far, the cursor for
the next page and whether one exists. Only one request is in flight at a
time; calls made while loading are ignored. Switching the filter key starts
a new generation, and responses belonging to an older generation are
dropped when they arrive.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable
from typing import Callable
from typing import List
from typing import Optional

from .config import PAGE_SIZE
from .errors import CatalogError
from .models import Tool
from .models import ToolPage

logger = logging.getLogger(__name__)

# (filter_key, first, after) -> page
PageFetcher = Callable[[Optional[str], int, Optional[str]], Awaitable[ToolPage]]


@dataclass(frozen=True)
class PageRequest:
    filter_key: Optional[str]
    first: int
    after: Optional[str]
    append: bool


class PaginationController:
    def __init__(self, fetch_page: PageFetcher, page_size: int = PAGE_SIZE) -> None:
        self._fetch_page = fetch_page
        self.page_size = page_size
        self.tools: List[Tool] = []
        self.cursor: Optional[str] = None
        self.has_next_page = False
        self.loading = False
        self.loaded = False
        self.error: Optional[CatalogError] = None
        self.filter_key: Optional[str] = None
        self.last_request: Optional[PageRequest] = None
        self._failed_request: Optional[PageRequest] = None
        self._generation = 0

    @property
    def is_empty(self) -> bool:
        """Loaded successfully and nothing matched."""
        return self.loaded and self.error is None and not self.tools

    async def load_initial(self, filter_key: Optional[str] = None) -> None:
        """Reset the listing and fetch the first page for ``filter_key``."""
        self._generation += 1
        self.filter_key = filter_key
        self.tools = []
        self.cursor = None
        self.has_next_page = False
        self.loaded = False
        self.error = None
        await self._run(PageRequest(filter_key, self.page_size, None, append=False))

    async def load_more(self) -> None:
        """Fetch the next page and append it. No-op while loading or at the end."""
        if self.loading or not self.has_next_page:
            return
        await self._run(PageRequest(self.filter_key, self.page_size, self.cursor, append=True))

    async def retry(self) -> None:
        """Re-issue the request that last failed, unchanged."""
        if self._failed_request is None or self.loading:
            return
        await self._run(self._failed_request)

    async def _run(self, request: PageRequest) -> None:
        generation = self._generation
        self.loading = True
        self.last_request = request
        try:
            page = await self._fetch_page(request.filter_key, request.first, request.after)
        except CatalogError as exc:
            if generation != self._generation:
                logger.info(f"Dropping failed response for stale filter {request.filter_key!r}")
                return
            logger.error(f"Failed to load tools for {request.filter_key!r}: {exc}")
            self.error = exc
            self._failed_request = request
            return
        finally:
            # A newer generation owns the flag once it has started
            if generation == self._generation:
                self.loading = False

        if generation != self._generation or request.filter_key != self.filter_key:
            logger.info(f"Dropping stale page for filter {request.filter_key!r}")
            return

        if request.append:
            self.tools = self.tools + page.tools
        else:
            self.tools = page.tools
        self.cursor = page.page_info.end_cursor
        self.has_next_page = page.page_info.has_next_page
        self.error = None
        self._failed_request = None
        self.loaded = True
