"""
Catalog Routes - Browse the catalog snapshot and open listing details.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, Query

from gradermarket.adapters.sqlite import CatalogRepository
from gradermarket.config import Settings, get_settings
from gradermarket.config.errors import ErrorCode, GraderMarketError, SearchError
from gradermarket.domains.catalog import ItemKind, StockCountry, detail_path
from gradermarket.domains.search import (
    CatalogFilter,
    CatalogSearchEngine,
    SaleStatus,
    SearchMode,
    apply_catalog_filter,
)
from gradermarket.interfaces.api.deps import get_catalog_repository, get_search_engine

router = APIRouter()


def _serialize(item: Any) -> dict[str, Any]:
    return {**item.model_dump(mode="json"), "detail_path": detail_path(item)}


@router.get("")
async def list_catalog(
    kind: ItemKind | None = None,
    q: str = Query("", description="Text filter (blank means no filter)"),
    mode: SearchMode = Query(SearchMode.ALL, description="Text filter strategy"),
    brand: list[str] = Query(default=[]),
    min_price: Decimal = Query(Decimal(0), ge=0),
    max_price: Decimal = Query(Decimal(50_000_000), ge=0),
    category: list[str] = Query(default=[]),
    country: list[StockCountry] = Query(default=[]),
    status: list[SaleStatus] = Query(default=[]),
    repo: CatalogRepository = Depends(get_catalog_repository),
    engine: CatalogSearchEngine = Depends(get_search_engine),
    settings: Settings = Depends(get_settings),
) -> dict[str, Any]:
    """
    List snapshot listings with catalog page filters.

    - **kind**: Equipment | Part
    - **q** / **mode**: uncapped text filter; model matching ignores separators
    - **brand** / **category** / **country** / **status**: repeatable facets
    - **min_price** / **max_price**: inclusive price range
    """
    if len(q) > settings.search_max_query_length:
        raise SearchError(
            "Search text too long",
            {"max_length": settings.search_max_query_length, "length": len(q)},
        )

    catalog_filter = CatalogFilter(
        brands=frozenset(brand),
        min_price=min_price,
        max_price=max_price,
        categories=frozenset(category),
        stock_countries=frozenset(country),
        sale_status=frozenset(status),
    )
    items = apply_catalog_filter(await repo.list_items(kind), catalog_filter)
    items = engine.filter_catalog(items, q, mode)

    return {"items": [_serialize(item) for item in items], "total": len(items)}


@router.get("/facets")
async def catalog_facets(
    repo: CatalogRepository = Depends(get_catalog_repository),
) -> dict[str, list[str]]:
    """Brand and country options present in the snapshot."""
    return await repo.facet_values()


@router.get("/{kind}/{item_id}")
async def get_listing(
    kind: ItemKind,
    item_id: str,
    repo: CatalogRepository = Depends(get_catalog_repository),
) -> dict[str, Any]:
    """Get one listing by kind and id."""
    item = await repo.get_item(kind, item_id)
    if item is None:
        raise GraderMarketError(
            ErrorCode.NOT_FOUND,
            f"{kind.value} {item_id} not found",
            {"kind": kind.value, "id": item_id},
        )
    return _serialize(item)
