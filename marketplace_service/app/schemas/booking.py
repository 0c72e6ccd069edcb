from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .common import CamelModel

BookingStatusLiteral = Literal["pending", "confirmed", "cancelled", "completed"]


class BookingAddress(CamelModel):
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    zip_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    is_primary: bool = False


class BookingItemSchema(CamelModel):
    item_id: int
    item_name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0)
    date: str = Field(..., min_length=1, max_length=10)
    time_slot: str = Field(..., min_length=1, max_length=50)
    vendor_id: Optional[int] = None


class BookingCreate(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    items: List[BookingItemSchema] = Field(..., min_length=1)
    total_amount: float = Field(..., ge=0)
    status: BookingStatusLiteral = "pending"
    payment_intent_id: Optional[str] = Field(None, max_length=255)
    address: BookingAddress


class BookingUpdate(CamelModel):
    user_id: Optional[str] = Field(None, min_length=1, max_length=64)
    items: Optional[List[BookingItemSchema]] = Field(None, min_length=1)
    total_amount: Optional[float] = Field(None, ge=0)
    status: Optional[BookingStatusLiteral] = None
    payment_intent_id: Optional[str] = Field(None, max_length=255)
    address: Optional[BookingAddress] = None


class BookingResponse(CamelModel):
    id: int
    user_id: str
    items: List[BookingItemSchema]
    total_amount: float
    status: str
    payment_intent_id: Optional[str] = None
    address: BookingAddress
    created_at: datetime
    updated_at: datetime


class BookingFilters(BaseModel):
    """Whitelisted list filters for bookings."""

    user_id: Optional[str] = None
    status: Optional[BookingStatusLiteral] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    search: Optional[str] = None
    sort_field: str = "createdAt"
    sort_order: str = "desc"
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)


class StatusCount(CamelModel):
    status: str
    count: int


class RevenueSummary(CamelModel):
    total_revenue: float = 0.0
    average_booking_value: float = 0.0
    max_booking_value: float = 0.0


class DailyBookings(CamelModel):
    date: str
    count: int = 0
    revenue: float = 0.0


class DateRange(CamelModel):
    from_: date = Field(..., alias="from")
    to: date


class BookingStatsResponse(CamelModel):
    date_range: DateRange
    total_bookings: int
    bookings_by_status: List[StatusCount]
    revenue: RevenueSummary
    bookings_by_day: List[DailyBookings]
