"""
API Dependencies - Dependency injection for FastAPI routes.

Provides singleton instances of the snapshot repository and search engine.
"""

from __future__ import annotations

from functools import lru_cache

from gradermarket.adapters.sqlite import CatalogRepository
from gradermarket.config import get_settings
from gradermarket.domains.search import CatalogSearchEngine


@lru_cache
def get_catalog_repository() -> CatalogRepository:
    """Get catalog snapshot repository singleton."""
    settings = get_settings()
    return CatalogRepository(settings.db_path)


@lru_cache
def get_search_engine() -> CatalogSearchEngine:
    """Get search engine singleton configured from settings."""
    settings = get_settings()
    return CatalogSearchEngine.from_settings(
        threshold=settings.search_fuzzy_threshold,
        weights=settings.search_field_weights,
        limit=settings.search_result_limit,
    )


async def init_services() -> None:
    """
    Initialize services on startup.

    This should be called from the FastAPI lifespan handler.
    """
    repo = get_catalog_repository()
    await repo.initialize()


async def cleanup_services() -> None:
    """Cleanup services on shutdown."""
    repo = get_catalog_repository()
    await repo.close()
