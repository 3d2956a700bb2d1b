"""
Facet Filter - Narrow the candidate pool before text matching.

Stock facets only ever exclude Parts; Equipment has no stock quantity and
always passes them.
"""

from __future__ import annotations

from collections.abc import Iterable

from gradermarket.domains.catalog import Equipment, Part

from .models import LOW_STOCK_THRESHOLD, CatalogFilter, SaleStatus, SearchQuery, StockFilter

__all__ = ["apply_facets", "apply_catalog_filter"]


def _passes_stock(item: Equipment | Part, stock_filter: StockFilter) -> bool:
    if not isinstance(item, Part) or stock_filter == StockFilter.ALL:
        return True
    if stock_filter == StockFilter.LOW:
        return item.stock_quantity <= LOW_STOCK_THRESHOLD
    return item.stock_quantity == 0


def apply_facets(
    candidates: Iterable[Equipment | Part],
    query: SearchQuery,
) -> list[Equipment | Part]:
    """
    Apply the live-search facets (stock level, brand, country).

    Args:
        candidates: Full candidate pool
        query: Query carrying the selected facets

    Returns:
        Candidates passing every facet, input order preserved
    """
    filtered = []
    for item in candidates:
        if not _passes_stock(item, query.stock_filter):
            continue
        if query.brand_filter and item.brand not in query.brand_filter:
            continue
        if query.country_filter and item.stock_country not in query.country_filter:
            continue
        filtered.append(item)
    return filtered


def apply_catalog_filter(
    items: Iterable[Equipment | Part],
    catalog_filter: CatalogFilter,
) -> list[Equipment | Part]:
    """
    Apply the catalog page filters.

    Empty sets mean no restriction. The price range is inclusive.
    """
    filtered = []
    for item in items:
        if catalog_filter.brands and item.brand not in catalog_filter.brands:
            continue
        if not catalog_filter.min_price <= item.price <= catalog_filter.max_price:
            continue
        if catalog_filter.categories:
            category = item.category if isinstance(item, Part) else None
            if category not in catalog_filter.categories:
                continue
        if catalog_filter.stock_countries and item.stock_country not in catalog_filter.stock_countries:
            continue
        if catalog_filter.sale_status:
            status = SaleStatus.SOLD if item.is_sold else SaleStatus.FOR_SALE
            if status not in catalog_filter.sale_status:
                continue
        filtered.append(item)
    return filtered
