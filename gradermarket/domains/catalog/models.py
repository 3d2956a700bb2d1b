"""
Catalog Models - Marketplace listings (road graders and spare parts).

Listings arrive in two shapes: snake_case rows from the marketplace backend
(with JSON-encoded list columns) and camelCase objects from the web frontend.
Both validate into the same immutable models.
"""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel


class ItemKind(str, Enum):
    """Listing discriminant."""

    EQUIPMENT = "Equipment"
    PART = "Part"


class StockCountry(str, Enum):
    """Where a listing is physically stocked."""

    EU = "EU"
    KENYA = "Kenya"
    US = "US"


def _decode_json_list(value: Any) -> Any:
    """Decode list columns the backend stores as JSON text."""
    if value is None:
        return []
    if isinstance(value, str):
        if value.lstrip().startswith("["):
            return json.loads(value)
        return [value] if value else []
    return value


class Listing(BaseModel):
    """Fields shared by every searchable listing."""

    id: str
    title: str
    brand: str | None = None
    description: str | None = None
    price: Decimal = Field(default=Decimal(0), ge=0)
    images: list[str] = Field(default_factory=list)
    stock_country: StockCountry | None = None
    is_sold: bool = False
    is_new: bool = False
    created_at: datetime | None = None

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # MySQL auto-increment ids come through as integers
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("images", mode="before")
    @classmethod
    def _decode_images(cls, value: Any) -> Any:
        return _decode_json_list(value)


class Equipment(Listing):
    """A road grader (or other machine) listing."""

    kind: Literal["Equipment"] = "Equipment"
    model: str | None = None
    year: int | None = None
    operating_hours: int | None = None
    location: str | None = None


class Part(Listing):
    """A spare-part listing."""

    kind: Literal["Part"] = "Part"
    part_number: str
    category: str | None = None
    compatible_models: list[str] = Field(default_factory=list)
    stock_quantity: int = Field(default=0, ge=0)

    @field_validator("compatible_models", mode="before")
    @classmethod
    def _decode_models(cls, value: Any) -> Any:
        return _decode_json_list(value)


CatalogItem = Annotated[Union[Equipment, Part], Field(discriminator="kind")]

catalog_item_adapter: TypeAdapter[Equipment | Part] = TypeAdapter(CatalogItem)


def item_key(item: Equipment | Part) -> tuple[str, str]:
    """Identity of a listing: ``(kind, id)``."""
    return (item.kind, item.id)


def detail_path(item: Equipment | Part) -> str:
    """Frontend route of the listing's detail page."""
    if item.kind == ItemKind.EQUIPMENT:
        return f"/grader/{item.id}"
    return f"/part/{item.id}"
