"""
SQLite Adapter - Local catalog snapshot.
"""

from .repository import CatalogRepository

__all__ = ["CatalogRepository"]
