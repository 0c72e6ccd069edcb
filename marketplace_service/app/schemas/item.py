import json
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from .common import CamelModel, EntitySummary

MISSING_ITEM_FIELDS_MESSAGE = (
    "Missing required fields: name, category, and at least one price entry"
)


def parse_prices_field(value: Any) -> Any:
    """Decode ``prices`` sent as a JSON string inside a multipart form."""

    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        raise ValueError("Invalid prices format")


class PriceEntry(CamelModel):
    city: str = Field(..., min_length=1, max_length=100)
    price: float = Field(..., gt=0)

    @field_validator("city")
    @classmethod
    def strip_city(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("City is required")
        return value


class ItemCreate(CamelModel):
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    category: Optional[int] = None
    vendor: Optional[int] = None
    prices: Optional[List[PriceEntry]] = None
    is_active: bool = True


class ItemUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[int] = None
    vendor: Optional[int] = None
    prices: Optional[List[PriceEntry]] = None
    is_active: Optional[bool] = None


class ItemResponse(CamelModel):
    id: int
    name: str
    description: Optional[str] = None
    prices: List[PriceEntry]
    category: EntitySummary
    vendor: Optional[EntitySummary] = None
    owner_name: str
    image: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ItemFilters(BaseModel):
    """Whitelisted list filters for items."""

    category_id: Optional[int] = None
    vendor_id: Optional[int] = None
    is_active: Optional[bool] = None
    search: Optional[str] = None
    city: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    sort_by: str = "createdAt"
    order: str = "desc"
