from enum import Enum
from typing import Any

from sqlalchemy import JSON, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import MarketplaceBaseModel


class BookingStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class Booking(MarketplaceBaseModel):
    __tablename__ = "bookings"

    user_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True
    )  # Customer id owned by the customer app
    total_amount: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=BookingStatus.PENDING.value, nullable=False, index=True
    )
    payment_intent_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    address: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    items: Mapped[list["BookingItem"]] = relationship(
        "BookingItem",
        back_populates="booking",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="BookingItem.id",
    )


class BookingItem(MarketplaceBaseModel):
    __tablename__ = "booking_items"

    booking_id: Mapped[int] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    item_id: Mapped[int] = mapped_column(Integer, nullable=False)  # No FK
    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    time_slot: Mapped[str] = mapped_column(String(50), nullable=False)
    vendor_id: Mapped[int | None] = mapped_column(Integer, nullable=True)  # No FK

    booking: Mapped["Booking"] = relationship("Booking", back_populates="items")
