"""
Search Routes - Live search over the catalog snapshot.
"""

from __future__ import annotations

import html
from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from gradermarket.adapters.sqlite import CatalogRepository
from gradermarket.config import Settings, get_settings
from gradermarket.config.errors import SearchError
from gradermarket.domains.catalog import Part, StockCountry
from gradermarket.domains.search import (
    CatalogSearchEngine,
    SearchMode,
    SearchQuery,
    SearchResult,
    StockFilter,
    highlight,
)
from gradermarket.interfaces.api.deps import get_catalog_repository, get_search_engine

router = APIRouter()


class SearchResultItem(BaseModel):
    """Single search hit, shaped for the live-search popover."""

    rank: int
    kind: str
    id: str
    title: str
    title_highlighted: str
    brand: str | None
    price: Decimal
    part_number: str | None = None
    model: str | None = None
    stock_quantity: int | None = None
    stock_country: StockCountry | None = None
    detail_path: str


class SearchResponse(BaseModel):
    """Search response."""

    query: str
    mode: SearchMode
    results: list[SearchResultItem]
    total: int


def _to_item(result: SearchResult, text: str, mark: bool) -> SearchResultItem:
    item = result.item
    is_part = isinstance(item, Part)
    return SearchResultItem(
        rank=result.rank,
        kind=result.kind,
        id=item.id,
        title=item.title,
        title_highlighted=(
            highlight(item.title, text, escape=html.escape) if mark else html.escape(item.title)
        ),
        brand=item.brand,
        price=item.price,
        part_number=item.part_number if is_part else None,
        model=None if is_part else item.model,
        stock_quantity=item.stock_quantity if is_part else None,
        stock_country=item.stock_country,
        detail_path=result.detail_path,
    )


@router.get("", response_model=SearchResponse)
async def search(
    q: str = Query("", description="Search text"),
    mode: SearchMode = Query(SearchMode.ALL, description="Search strategy"),
    stock: StockFilter = Query(StockFilter.ALL, description="Stock facet (parts only)"),
    brand: list[str] = Query(default=[], description="Brand facet, repeatable"),
    country: list[StockCountry] = Query(default=[], description="Country facet, repeatable"),
    mark: bool = Query(True, alias="highlight", description="Wrap matches in <mark>"),
    repo: CatalogRepository = Depends(get_catalog_repository),
    engine: CatalogSearchEngine = Depends(get_search_engine),
    settings: Settings = Depends(get_settings),
):
    """
    Live search across graders and parts.

    - **q**: Search text (blank returns no results)
    - **mode**: all | partNumber | model | description
    - **stock**: all | low | out
    - **brand** / **country**: repeatable facets
    """
    if len(q) > settings.search_max_query_length:
        raise SearchError(
            "Search text too long",
            {"max_length": settings.search_max_query_length, "length": len(q)},
        )

    query = SearchQuery(
        text=q,
        mode=mode,
        stock_filter=stock,
        brand_filter=frozenset(brand),
        country_filter=frozenset(country),
    )

    catalog = await repo.list_items()
    results = engine.search(catalog, query)

    return SearchResponse(
        query=q,
        mode=mode,
        results=[_to_item(r, q, mark) for r in results],
        total=len(results),
    )
