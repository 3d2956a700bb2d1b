"""
Marketplace Adapter - Catalog REST API client.

This is the ONLY place that calls the marketplace backend.
"""

from .client import ListingQuery, MarketplaceClient

__all__ = ["MarketplaceClient", "ListingQuery"]
