"""
Search Models - Data types for search domain.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from gradermarket.domains.catalog import CatalogItem, StockCountry
from gradermarket.domains.catalog import detail_path as _detail_path

MAX_RESULTS = 8
LOW_STOCK_THRESHOLD = 5


class SearchMode(str, Enum):
    """Active search strategy."""

    ALL = "all"
    PART_NUMBER = "partNumber"
    MODEL = "model"
    DESCRIPTION = "description"


class StockFilter(str, Enum):
    """Stock-level facet (Parts only)."""

    ALL = "all"
    LOW = "low"  # stock_quantity <= 5
    OUT = "out"  # stock_quantity == 0


class SaleStatus(str, Enum):
    """Sale-status facet of the catalog page."""

    FOR_SALE = "for_sale"
    SOLD = "sold"


class SearchQuery(BaseModel):
    """Live-search request, rebuilt on every keystroke."""

    text: str = ""
    mode: SearchMode = SearchMode.ALL
    stock_filter: StockFilter = StockFilter.ALL
    brand_filter: frozenset[str] = frozenset()
    country_filter: frozenset[StockCountry] = frozenset()

    model_config = {"frozen": True}


class CatalogFilter(BaseModel):
    """Catalog page filters (brand, price range, category, country, sale status)."""

    brands: frozenset[str] = frozenset()
    min_price: Decimal = Field(default=Decimal(0), ge=0)
    max_price: Decimal = Field(default=Decimal(50_000_000), ge=0)
    categories: frozenset[str] = frozenset()
    stock_countries: frozenset[StockCountry] = frozenset()
    sale_status: frozenset[SaleStatus] = frozenset()

    model_config = {"frozen": True}


class SearchResult(BaseModel):
    """Single ranked search hit."""

    item: CatalogItem
    rank: int = Field(..., ge=1)

    @property
    def kind(self) -> str:
        return self.item.kind

    @property
    def detail_path(self) -> str:
        return _detail_path(self.item)
