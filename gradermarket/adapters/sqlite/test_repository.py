"""Tests for the catalog snapshot repository."""

from pathlib import Path

import pytest

from gradermarket.domains.catalog import Equipment, ItemKind, Part, StockCountry

from .repository import CatalogRepository


@pytest.fixture
async def repo(tmp_path: Path):
    """Create a test repository with temporary database."""
    db_path = tmp_path / "test.db"
    repo = CatalogRepository(db_path)
    await repo.initialize()
    yield repo
    await repo.close()


@pytest.fixture
def listings() -> list:
    return [
        Equipment(id="1", title="Caterpillar 140M", brand="Cat", model="140M"),
        Part(
            id="1",
            title="Cutting Edge",
            brand="Cat",
            part_number="1R-0742",
            compatible_models=["140M"],
            stock_country=StockCountry.KENYA,
            stock_quantity=4,
        ),
        Part(id="2", title="Oil Filter", brand="Komatsu", part_number="600-211-1340"),
    ]


async def test_initialize_creates_tables(repo: CatalogRepository):
    """Test that initialize creates the listings table."""
    conn = await repo._get_connection()
    cursor = await conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table'"
    )
    tables = {row[0] for row in await cursor.fetchall()}

    assert "listings" in tables


async def test_replace_all_and_list(repo: CatalogRepository, listings: list):
    """Test snapshot round trip keeps order and types."""
    count = await repo.replace_all(listings)
    assert count == 3

    items = await repo.list_items()
    assert items == listings
    assert isinstance(items[0], Equipment)
    assert isinstance(items[1], Part)


async def test_replace_all_discards_previous(repo: CatalogRepository, listings: list):
    """Test replacing the snapshot drops old listings."""
    await repo.replace_all(listings)
    await repo.replace_all(listings[:1])

    assert await repo.count() == 1


async def test_list_items_by_kind(repo: CatalogRepository, listings: list):
    """Test filtering by kind."""
    await repo.replace_all(listings)

    parts = await repo.list_items(ItemKind.PART)
    assert [p.id for p in parts] == ["1", "2"]
    assert all(isinstance(p, Part) for p in parts)


async def test_get_item_uses_kind_and_id(repo: CatalogRepository, listings: list):
    """Test the same id under different kinds are distinct listings."""
    await repo.replace_all(listings)

    grader = await repo.get_item(ItemKind.EQUIPMENT, "1")
    part = await repo.get_item(ItemKind.PART, "1")
    assert isinstance(grader, Equipment)
    assert isinstance(part, Part)
    assert part.stock_country == StockCountry.KENYA

    assert await repo.get_item(ItemKind.PART, "404") is None


async def test_upsert_updates_in_place(repo: CatalogRepository, listings: list):
    """Test upsert replaces the payload without moving the listing."""
    await repo.replace_all(listings)

    updated = listings[1].model_copy(update={"stock_quantity": 0})
    await repo.upsert(updated)

    items = await repo.list_items()
    assert len(items) == 3
    assert items[1].stock_quantity == 0


async def test_count_empty(repo: CatalogRepository):
    """Test empty snapshot count."""
    assert await repo.count() == 0
    assert await repo.list_items() == []


async def test_replace_all_duplicate_refreshes_columns(repo: CatalogRepository, listings: list):
    """Test a repeated (kind, id) keeps the last row's indexed columns too."""
    relisted = Part(
        id="2",
        title="Oil Filter",
        brand="Volvo",
        part_number="600-211-1340",
        stock_country=StockCountry.US,
    )
    assert await repo.replace_all([*listings, relisted]) == 3

    item = await repo.get_item(ItemKind.PART, "2")
    assert item.brand == "Volvo"

    facets = await repo.facet_values()
    assert facets == {"brands": ["Cat", "Volvo"], "countries": ["Kenya", "US"]}


async def test_facet_values_empty(repo: CatalogRepository):
    """Test facet options of an empty snapshot."""
    assert await repo.facet_values() == {"brands": [], "countries": []}
