from enum import Enum
from typing import Any

from sqlalchemy import JSON, TEXT, Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import MarketplaceBaseModel


class PaymentMode(Enum):
    UPI = "upi"
    BANK = "bank"


class Vendor(MarketplaceBaseModel):
    __tablename__ = "vendors"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    address: Mapped[str | None] = mapped_column(TEXT, nullable=True)
    company_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)

    payment_mode: Mapped[str] = mapped_column(
        String(10), default=PaymentMode.UPI.value, nullable=False
    )
    upi_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bank_details: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    is_discarded: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
