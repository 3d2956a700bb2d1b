"""
Adapters - External service integrations.

All external API calls are wrapped here to isolate domains from third-party changes.
"""

from .marketplace import ListingQuery, MarketplaceClient
from .sqlite import CatalogRepository

__all__ = [
    "MarketplaceClient",
    "ListingQuery",
    "CatalogRepository",
]
