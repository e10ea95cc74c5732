"""Client for the directory's own JSON API."""

import logging
from typing import Dict
from typing import Optional

import httpx
from pydantic import ValidationError

from .config import API_BASE_URL
from .config import CMS_TIMEOUT
from .content_source import NO_CACHE_HEADERS
from .errors import NetworkFailure
from .errors import NotFound
from .errors import ParseFailure
from .models import ToolPage
from .models import ToolStats

logger = logging.getLogger(__name__)


class DirectoryApiClient:
    def __init__(
        self,
        base_url: str = API_BASE_URL,
        *,
        timeout: float = CMS_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _get(self, path: str, params: Optional[Dict[str, object]] = None):
        params = {key: value for key, value in (params or {}).items() if value is not None}
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.get(path, params=params, headers=NO_CACHE_HEADERS)
            except httpx.RequestError as exc:
                logger.error(f"Request to {path} failed: {exc}")
                raise NetworkFailure(f"Request to {path} failed: {exc}") from exc

        if response.status_code == 404:
            raise NotFound(f"{path} not found")
        if response.status_code != 200:
            logger.error(f"{path} returned {response.status_code}: {response.text[:200]}")
            raise NetworkFailure(f"Failed to fetch {path}: HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as exc:
            raise ParseFailure(f"{path} returned a non-JSON body") from exc

    async def fetch_tools(self, category: Optional[str], first: int, after: Optional[str] = None) -> ToolPage:
        """Page fetcher for ``PaginationController``."""
        payload = await self._get("/api/tools", {"first": first, "after": after, "category": category})
        try:
            return ToolPage.model_validate(payload)
        except ValidationError as exc:
            raise ParseFailure("Unexpected /api/tools payload") from exc

    async def fetch_stats(self) -> ToolStats:
        payload = await self._get("/api/tool-stats")
        try:
            return ToolStats.model_validate(payload)
        except ValidationError as exc:
            raise ParseFailure("Unexpected /api/tool-stats payload") from exc
