"""
API Routes.
"""

from . import catalog, health, search

__all__ = ["health", "search", "catalog"]
