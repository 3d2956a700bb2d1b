"""
Catalog Domain - Marketplace listings.

This domain handles:
- Equipment (road grader) and Part listing models
- Decoding backend rows and frontend objects into one tagged union
- Contracts for catalog sources and snapshot stores
"""

from .contracts import CatalogSource, CatalogStore
from .models import (
    CatalogItem,
    Equipment,
    ItemKind,
    Listing,
    Part,
    StockCountry,
    catalog_item_adapter,
    detail_path,
    item_key,
)

__all__ = [
    "CatalogSource",
    "CatalogStore",
    "CatalogItem",
    "Equipment",
    "Part",
    "Listing",
    "ItemKind",
    "StockCountry",
    "catalog_item_adapter",
    "detail_path",
    "item_key",
]
