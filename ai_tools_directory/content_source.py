"""Read tools and categories from the CMS GraphQL endpoint.

Every request goes out on a fresh client with caching disabled, so each page
view reflects the CMS's current state. Nothing here retries: a failed request
raises and the caller decides what to show.
"""

import logging
from typing import Any
from typing import Dict
from typing import List
from typing import Optional

import httpx
from pydantic import ValidationError

from . import queries
from .config import CMS_GRAPHQL_URL
from .config import CMS_TIMEOUT
from .errors import NetworkFailure
from .errors import ParseFailure
from .models import Category
from .models import Tool
from .models import ToolPage
from .models import ToolStats

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store",
    "Pragma": "no-cache",
    "User-Agent": "ai-tools-directory/1.0",
}


class ContentSource:
    """Thin GraphQL client for the CMS."""

    def __init__(
        self,
        endpoint: str = CMS_GRAPHQL_URL,
        *,
        timeout: float = CMS_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self._transport = transport

    async def _query(self, query: str, variables: Optional[Dict[str, Any]], operation: str) -> Dict[str, Any]:
        """Run a query and return its ``data`` object."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    self.endpoint,
                    json={"query": query, "variables": variables or {}},
                    headers=NO_CACHE_HEADERS,
                )
            except httpx.RequestError as exc:
                logger.error(f"CMS request failed for {operation}: {exc}")
                raise NetworkFailure(f"Request to content source failed: {exc}") from exc

        if response.status_code != 200:
            logger.error(f"CMS returned {response.status_code} for {operation}")
            raise NetworkFailure(f"Content source returned HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as exc:
            logger.error(f"CMS returned a non-JSON body for {operation}")
            raise ParseFailure("Content source returned a non-JSON body") from exc

        if not isinstance(payload, dict):
            raise ParseFailure("Content source returned an unexpected body")

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(
                str(error.get("message", error)) if isinstance(error, dict) else str(error) for error in errors if error
            )
            logger.error(f"CMS query {operation} returned errors: {messages}")
            raise NetworkFailure(f"Content source rejected the query: {messages}")

        data = payload.get("data")
        if not isinstance(data, dict):
            logger.error(f"CMS response for {operation} has no data object")
            raise ParseFailure("Content source response has no data")
        return data

    @staticmethod
    def _parse(model, value: Any, operation: str):
        try:
            return model.model_validate(value)
        except ValidationError as exc:
            logger.error(f"Unexpected {operation} payload: {exc}")
            raise ParseFailure(f"Unexpected {operation} payload") from exc

    async def list_tools(self, first: int, after: Optional[str] = None) -> ToolPage:
        data = await self._query(queries.LIST_TOOLS, {"first": first, "after": after}, "list_tools")
        page = self._parse(ToolPage, data.get("aiTools"), "list_tools")
        logger.info(f"Fetched {len(page.edges)} tools (after={after})")
        return page

    async def list_category_tools(self, category: str, first: int, after: Optional[str] = None) -> ToolPage:
        variables = {"first": first, "after": after, "category": category}
        data = await self._query(queries.LIST_CATEGORY_TOOLS, variables, "list_category_tools")
        page = self._parse(ToolPage, data.get("aiTools"), "list_category_tools")
        logger.info(f"Fetched {len(page.edges)} tools in category {category} (after={after})")
        return page

    async def get_tool(self, slug: str) -> Optional[Tool]:
        data = await self._query(queries.GET_TOOL, {"slug": slug}, "get_tool")
        node = data.get("aiTool")
        if node is None:
            return None
        return self._parse(Tool, node, "get_tool")

    async def get_category(self, slug: str) -> Optional[Category]:
        data = await self._query(queries.GET_CATEGORY, {"slug": slug}, "get_category")
        node = data.get("aiToolCategory")
        if node is None:
            return None
        return self._parse(Category, node, "get_category")

    async def list_categories(self, first: int = 100) -> List[Category]:
        data = await self._query(queries.LIST_CATEGORIES, {"first": first}, "list_categories")
        try:
            nodes = data["aiToolCategories"]["nodes"]
        except (KeyError, TypeError) as exc:
            raise ParseFailure("Unexpected list_categories payload") from exc
        return [self._parse(Category, node, "list_categories") for node in nodes or []]

    async def tool_stats(self) -> ToolStats:
        data = await self._query(queries.TOOL_STATS, None, "tool_stats")
        try:
            tool_count = len(data["aiTools"]["nodes"])
            category_count = len(data["aiToolCategories"]["nodes"])
        except (KeyError, TypeError) as exc:
            raise ParseFailure("Unexpected tool_stats payload") from exc
        return ToolStats(tool_count=tool_count, category_count=category_count)

    async def search_tools(self, term: str, first: int = 10) -> List[Tool]:
        data = await self._query(queries.SEARCH_TOOLS, {"search": term, "first": first}, "search_tools")
        try:
            nodes = data["aiTools"]["nodes"]
        except (KeyError, TypeError) as exc:
            raise ParseFailure("Unexpected search_tools payload") from exc
        return [self._parse(Tool, node, "search_tools") for node in nodes or []]
