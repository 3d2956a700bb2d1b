"""
Catalog Contracts - Interfaces for loading and storing listings.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import Equipment, ItemKind, Part


@runtime_checkable
class CatalogSource(Protocol):
    """Contract for remote catalog providers."""

    async def fetch_catalog(self) -> list[Equipment | Part]:
        """Fetch every listing, Equipment first then Parts."""
        ...


@runtime_checkable
class CatalogStore(Protocol):
    """Contract for local catalog snapshots."""

    async def list_items(self, kind: ItemKind | None = None) -> list[Equipment | Part]:
        """Return stored listings in insertion order."""
        ...

    async def get_item(self, kind: ItemKind, item_id: str) -> Equipment | Part | None:
        """Return a single listing or None."""
        ...

    async def replace_all(self, items: list[Equipment | Part]) -> int:
        """Replace the snapshot with ``items``."""
        ...
