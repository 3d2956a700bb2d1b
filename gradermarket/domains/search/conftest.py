"""
Shared fixtures for search domain tests.
"""

from __future__ import annotations

import pytest

from gradermarket.domains.catalog import Equipment, Part, StockCountry


@pytest.fixture
def cutting_edge() -> Part:
    return Part(
        id="p1",
        title="Cutting Edge",
        brand="Cat",
        part_number="1R-0742",
        category="Blades",
        compatible_models=["140M", "160M"],
        description="Hardened steel cutting edge for motor graders",
        stock_quantity=15,
        stock_country=StockCountry.EU,
    )


@pytest.fixture
def hydraulic_filter() -> Part:
    return Part(
        id="p2",
        title="Hydraulic Filter",
        brand="Komatsu",
        part_number="20Y-70-11100",
        category="Filters",
        compatible_models=["GD655"],
        description="Return line filter element",
        stock_quantity=0,
        stock_country=StockCountry.KENYA,
    )


@pytest.fixture
def oil_filter() -> Part:
    return Part(
        id="p3",
        title="Oil Filter",
        brand="Cat",
        part_number="1R-07420-X",
        category="Filters",
        description="Engine oil filter",
        stock_quantity=0,
        stock_country=StockCountry.US,
    )


@pytest.fixture
def blade_bolt() -> Part:
    return Part(
        id="p4",
        title="Blade Bolt",
        brand="Volvo",
        part_number="9S-4180",
        stock_quantity=3,
        stock_country=StockCountry.EU,
    )


@pytest.fixture
def cat_grader() -> Equipment:
    return Equipment(
        id="g1",
        title="Caterpillar 140M Motor Grader",
        brand="Cat",
        model="140M",
        description="Well maintained grader with ripper",
        stock_country=StockCountry.EU,
    )


@pytest.fixture
def komatsu_grader() -> Equipment:
    return Equipment(
        id="g2",
        title="Komatsu GD655 Grader",
        brand="Komatsu",
        model="GD655-5",
        stock_country=StockCountry.KENYA,
    )


@pytest.fixture
def catalog(
    cutting_edge: Part,
    hydraulic_filter: Part,
    oil_filter: Part,
    blade_bolt: Part,
    cat_grader: Equipment,
    komatsu_grader: Equipment,
) -> list[Equipment | Part]:
    """Graders first, then parts, like the marketplace API returns them."""
    return [cat_grader, komatsu_grader, cutting_edge, hydraulic_filter, oil_filter, blade_bolt]
