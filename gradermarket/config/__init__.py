"""
Configuration - Application settings and error taxonomy.
"""

from .errors import (
    CatalogError,
    ErrorCode,
    GraderMarketError,
    SearchError,
    StorageError,
)
from .settings import Settings, get_settings

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    # Errors
    "ErrorCode",
    "GraderMarketError",
    "SearchError",
    "CatalogError",
    "StorageError",
]
