"""Catalogue operations behind the JSON API and the pages."""

import logging
import re
from typing import List
from typing import Optional

from .config import RELATED_TOOLS_LIMIT
from .config import RELATED_TOOLS_POOL
from .config import SEARCH_MAX_LENGTH
from .config import SEARCH_MIN_LENGTH
from .config import SEARCH_RESULTS
from .content_source import ContentSource
from .errors import NotFound
from .filtering import filter_edges
from .filtering import filter_tools
from .models import Category
from .models import Tool
from .models import ToolPage
from .models import ToolStats

logger = logging.getLogger(__name__)


def sanitize_search_term(term: Optional[str]) -> str:
    """Keep letters, digits, spaces and hyphens; collapse whitespace."""
    if not term:
        return ""
    cleaned = re.sub(r"[^\w\s-]", " ", term)
    cleaned = re.sub(r"[_\s]+", " ", cleaned).strip()
    return cleaned[:SEARCH_MAX_LENGTH].strip()


class Catalog:
    def __init__(self, source: ContentSource) -> None:
        self.source = source

    async def tools(self, first: int, after: Optional[str] = None, category: Optional[str] = None) -> ToolPage:
        """Fetch one page of tools, narrowed to a category when one is given.

        The filter applies to the fetched page only; ``pageInfo`` still
        describes the unfiltered page so paging continues from the same cursor.
        """
        page = await self.source.list_tools(first, after)
        if category:
            edges = filter_edges(page.edges, category)
            logger.info(f"Category: {category}, filtered tools count: {len(edges)}")
            page = ToolPage(page_info=page.page_info, edges=edges)
        return page

    async def category_tools(self, category: str, first: int, after: Optional[str] = None) -> ToolPage:
        return await self.source.list_category_tools(category, first, after)

    async def category(self, slug: str) -> Category:
        category = await self.source.get_category(slug)
        if category is None:
            raise NotFound(f"Category not found: {slug}")
        return category

    async def categories(self) -> List[Category]:
        return await self.source.list_categories()

    async def tool(self, slug: str) -> Tool:
        tool = await self.source.get_tool(slug)
        if tool is None:
            raise NotFound(f"Tool not found: {slug}")
        return tool

    async def related_tools(self, tool: Tool, limit: int = RELATED_TOOLS_LIMIT) -> List[Tool]:
        """Other tools from the tool's primary category, never the tool itself."""
        category = tool.primary_category
        if category is None:
            return []
        page = await self.source.list_tools(RELATED_TOOLS_POOL)
        candidates = filter_tools(page.tools, category.slug)
        return [candidate for candidate in candidates if candidate.slug != tool.slug][:limit]

    async def stats(self) -> ToolStats:
        return await self.source.tool_stats()

    async def search(self, term: Optional[str]) -> List[Tool]:
        cleaned = sanitize_search_term(term)
        if len(cleaned) < SEARCH_MIN_LENGTH:
            return []
        results = await self.source.search_tools(cleaned, SEARCH_RESULTS)
        logger.info(f"Search '{cleaned}' returned {len(results)} tools")
        return results
