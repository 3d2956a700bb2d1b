"""
Marketplace Client - Catalog access over the marketplace REST API.

Features:
- Async HTTP client (httpx)
- Server-side listing filters via query-string parameters
- Pagination through limit/offset
- Automatic retries with exponential backoff on transport errors and 5xx
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from gradermarket.config.errors import CatalogError, ErrorCode, GraderMarketError
from gradermarket.domains.catalog import Equipment, Part, StockCountry

logger = logging.getLogger(__name__)

__all__ = ["MarketplaceClient", "ListingQuery"]


class ListingQuery(BaseModel):
    """Server-side filters accepted by ``GET /api/graders`` and ``GET /api/parts``."""

    brand: str | None = None
    category: str | None = None  # parts only
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    is_sold: bool | None = None
    is_featured: bool | None = None  # graders only
    stock_country: StockCountry | None = None
    min_stock: int | None = None  # parts only
    search: str | None = None
    limit: int = 20
    offset: int = 0

    def to_params(self) -> dict[str, str]:
        """Render as the backend's camelCase query string."""
        names = {
            "min_price": "minPrice",
            "max_price": "maxPrice",
            "is_sold": "isSold",
            "is_featured": "isFeatured",
            "stock_country": "stockCountry",
            "min_stock": "minStock",
        }
        params: dict[str, str] = {}
        for field, value in self.model_dump(exclude_none=True).items():
            if isinstance(value, bool):
                value = "true" if value else "false"
            elif isinstance(value, StockCountry):
                value = value.value
            params[names.get(field, field)] = str(value)
        return params


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    return isinstance(exc, httpx.HTTPStatusError) and exc.response.status_code >= 500


class MarketplaceClient:
    """
    Marketplace catalog API client.

    Example:
        >>> client = MarketplaceClient("http://localhost:3000/api")
        >>> parts = await client.list_parts(ListingQuery(brand="Cat"))
        >>> catalog = await client.fetch_catalog()
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3000/api",
        timeout: float = 30.0,
        page_size: int = 100,
        retry_attempts: int = 3,
        retry_backoff: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize marketplace client.

        Args:
            base_url: API root (including the ``/api`` prefix)
            timeout: Request timeout in seconds
            page_size: Rows per page when fetching the whole catalog
            retry_attempts: Attempts per request before giving up
            retry_backoff: Exponential backoff multiplier in seconds
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.page_size = page_size
        self.retry_attempts = retry_attempts
        self.retry_backoff = retry_backoff
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET with retries; raises CatalogError once attempts are exhausted."""
        client = await self._get_client()

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception(_is_retryable),
                stop=stop_after_attempt(self.retry_attempts),
                wait=wait_exponential(multiplier=self.retry_backoff, max=30),
                reraise=True,
            ):
                with attempt:
                    response = await client.get(path, params=params)
                    response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise
            raise CatalogError(
                f"Catalog request failed: GET {path}",
                {"status": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise CatalogError(f"Catalog unreachable: GET {path}", {"error": str(e)}) from e

        return response.json()

    async def list_equipment(self, query: ListingQuery | None = None) -> list[Equipment]:
        """List graders (``GET /graders``)."""
        rows = await self._get_json("/graders", (query or ListingQuery()).to_params())
        return [self._parse(Equipment, row) for row in rows]

    async def list_parts(self, query: ListingQuery | None = None) -> list[Part]:
        """List parts (``GET /parts``)."""
        rows = await self._get_json("/parts", (query or ListingQuery()).to_params())
        return [self._parse(Part, row) for row in rows]

    async def get_equipment(self, item_id: str) -> Equipment | None:
        """Fetch one grader, or None if it does not exist."""
        row = await self._get_optional(f"/graders/{item_id}")
        return self._parse(Equipment, row) if row is not None else None

    async def get_part(self, item_id: str) -> Part | None:
        """Fetch one part, or None if it does not exist."""
        row = await self._get_optional(f"/parts/{item_id}")
        return self._parse(Part, row) if row is not None else None

    async def fetch_catalog(self) -> list[Equipment | Part]:
        """
        Fetch the full catalog, paging through both endpoints.

        Returns:
            All graders followed by all parts
        """
        graders, parts = await asyncio.gather(
            self._fetch_all(self.list_equipment),
            self._fetch_all(self.list_parts),
        )

        logger.info("Fetched catalog: %d graders, %d parts", len(graders), len(parts))
        return [*graders, *parts]

    async def _fetch_all(self, fetch_page: Any) -> list[Any]:
        items: list[Any] = []
        offset = 0
        while True:
            page = await fetch_page(ListingQuery(limit=self.page_size, offset=offset))
            items.extend(page)
            if len(page) < self.page_size:
                return items
            offset += self.page_size

    async def _get_optional(self, path: str) -> dict[str, Any] | None:
        try:
            return await self._get_json(path)
        except httpx.HTTPStatusError:
            # only 404 escapes _get_json
            return None

    @staticmethod
    def _parse(model: type[Equipment] | type[Part], row: dict[str, Any]) -> Any:
        try:
            return model.model_validate(row)
        except ValidationError as e:
            raise GraderMarketError(
                ErrorCode.CATALOG_INVALID_RESPONSE,
                f"Malformed {model.__name__} row from catalog API",
                {"id": row.get("id") if isinstance(row, dict) else None, "errors": e.error_count()},
            ) from e

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
