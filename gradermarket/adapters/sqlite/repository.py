"""
SQLite Repository - Local catalog snapshot storage.

Features:
- Async operations via aiosqlite
- Listings stored as JSON payloads keyed by (kind, id)
- Insertion order preserved for listing
- Indexed brand/country columns for catalog browsing
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

import aiosqlite
from pydantic import ValidationError

from gradermarket.config.errors import ErrorCode, StorageError
from gradermarket.domains.catalog import (
    Equipment,
    ItemKind,
    Part,
    catalog_item_adapter,
)

logger = logging.getLogger(__name__)

__all__ = ["CatalogRepository"]

_UPSERT_SQL = """
    INSERT INTO listings (kind, item_id, brand, stock_country, payload)
    VALUES (?, ?, ?, ?, ?)
    ON CONFLICT (kind, item_id) DO UPDATE SET
        brand = excluded.brand,
        stock_country = excluded.stock_country,
        payload = excluded.payload,
        updated_at = CURRENT_TIMESTAMP
"""


class CatalogRepository:
    """
    SQLite repository for the catalog snapshot.

    Example:
        >>> repo = CatalogRepository("data/catalog.db")
        >>> await repo.initialize()
        >>> await repo.replace_all(await client.fetch_catalog())
        >>> items = await repo.list_items()
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize repository.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection: aiosqlite.Connection | None = None

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create database connection."""
        if self._connection is None:
            self._connection = await aiosqlite.connect(str(self.db_path))
            self._connection.row_factory = aiosqlite.Row
        return self._connection

    async def initialize(self) -> None:
        """Initialize database schema."""
        conn = await self._get_connection()

        await conn.executescript("""
            -- Listings table (one row per (kind, id))
            CREATE TABLE IF NOT EXISTS listings (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                kind TEXT NOT NULL,
                item_id TEXT NOT NULL,
                brand TEXT,
                stock_country TEXT,
                payload TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                UNIQUE (kind, item_id)
            );

            -- Indexes
            CREATE INDEX IF NOT EXISTS idx_listings_brand ON listings(brand);
            CREATE INDEX IF NOT EXISTS idx_listings_country ON listings(stock_country);
        """)

        await conn.commit()
        logger.info("Database initialized: %s", self.db_path)

    @staticmethod
    def _row_values(item: Equipment | Part) -> tuple[str, str, str | None, str | None, str]:
        return (
            item.kind,
            item.id,
            item.brand,
            item.stock_country.value if item.stock_country else None,
            item.model_dump_json(),
        )

    async def upsert(self, item: Equipment | Part) -> None:
        """Insert or update one listing, keeping its original position."""
        conn = await self._get_connection()

        try:
            await conn.execute(_UPSERT_SQL, self._row_values(item))
            await conn.commit()
        except aiosqlite.Error as e:
            raise StorageError(
                f"Failed to store {item.kind} {item.id}",
                {"error": str(e)},
                code=ErrorCode.STORAGE_WRITE_FAILED,
            ) from e

    async def replace_all(self, items: Iterable[Equipment | Part]) -> int:
        """
        Replace the whole snapshot.

        Returns:
            Number of listings stored
        """
        conn = await self._get_connection()
        rows = [self._row_values(item) for item in items]

        try:
            await conn.execute("DELETE FROM listings")
            # Duplicate (kind, id) pairs collapse to the last payload
            await conn.executemany(_UPSERT_SQL, rows)
            await conn.commit()
        except aiosqlite.Error as e:
            await conn.rollback()
            raise StorageError(
                "Failed to replace catalog snapshot",
                {"error": str(e)},
                code=ErrorCode.STORAGE_WRITE_FAILED,
            ) from e

        count = await self.count()
        logger.info("Catalog snapshot replaced: %d listings", count)
        return count

    async def list_items(self, kind: ItemKind | None = None) -> list[Equipment | Part]:
        """List stored listings in insertion order, optionally by kind."""
        conn = await self._get_connection()

        if kind is not None:
            cursor = await conn.execute(
                "SELECT payload FROM listings WHERE kind = ? ORDER BY seq",
                (ItemKind(kind).value,),
            )
        else:
            cursor = await conn.execute("SELECT payload FROM listings ORDER BY seq")
        rows = await cursor.fetchall()

        return [self._decode(row["payload"]) for row in rows]

    async def get_item(self, kind: ItemKind, item_id: str) -> Equipment | Part | None:
        """Get a listing by kind and id."""
        conn = await self._get_connection()

        cursor = await conn.execute(
            "SELECT payload FROM listings WHERE kind = ? AND item_id = ?",
            (ItemKind(kind).value, item_id),
        )
        row = await cursor.fetchone()

        if row:
            return self._decode(row["payload"])
        return None

    async def count(self) -> int:
        """Get number of stored listings."""
        conn = await self._get_connection()

        cursor = await conn.execute("SELECT COUNT(*) FROM listings")
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def facet_values(self) -> dict[str, list[str]]:
        """
        Distinct brands and stock countries present in the snapshot.

        Returns:
            ``{"brands": [...], "countries": [...]}``, each sorted
        """
        conn = await self._get_connection()

        facets: dict[str, list[str]] = {}
        for name, column in (("brands", "brand"), ("countries", "stock_country")):
            cursor = await conn.execute(
                f"SELECT DISTINCT {column} FROM listings "
                f"WHERE {column} IS NOT NULL AND {column} != '' ORDER BY {column}"
            )
            facets[name] = [row[0] for row in await cursor.fetchall()]
        return facets

    @staticmethod
    def _decode(payload: str) -> Equipment | Part:
        try:
            return catalog_item_adapter.validate_json(payload)
        except ValidationError as e:
            raise StorageError("Corrupt listing payload in snapshot", {"error": str(e)}) from e

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
