from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from .common import CamelModel

PHONE_PATTERN = r"^\d{10}$"


class BankDetails(CamelModel):
    account_number: str = Field(..., min_length=1, max_length=34)
    ifsc_code: str = Field(..., min_length=1, max_length=11)
    account_holder_name: str = Field(..., min_length=1, max_length=255)


def check_payment_details(
    payment_mode: str, upi_id: Optional[str], bank_details: Optional[BankDetails]
) -> None:
    """Payment mode decides which payout details are mandatory."""

    if payment_mode == "upi" and not upi_id:
        raise ValueError("UPI ID is required when payment mode is upi")
    if payment_mode == "bank" and bank_details is None:
        raise ValueError("Bank details are required when payment mode is bank")


class VendorCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = None
    company_name: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    payment_mode: Literal["upi", "bank"] = "upi"
    upi_id: Optional[str] = Field(None, max_length=100)
    bank_details: Optional[BankDetails] = None
    is_active: bool = True

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()

    @model_validator(mode="after")
    def validate_payment_details(self) -> "VendorCreate":
        check_payment_details(self.payment_mode, self.upi_id, self.bank_details)
        return self


class VendorUpdate(CamelModel):
    """Profile fields an admin may change; a ``password`` key is ignored."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    address: Optional[str] = None
    company_name: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    payment_mode: Optional[Literal["upi", "bank"]] = None
    upi_id: Optional[str] = Field(None, max_length=100)
    bank_details: Optional[BankDetails] = None
    is_active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


class VendorStatusUpdate(CamelModel):
    is_active: Optional[bool] = None


class VendorDiscardUpdate(CamelModel):
    is_discarded: Optional[bool] = None


class VendorResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    company_name: Optional[str] = None
    city: Optional[str] = None
    payment_mode: str
    upi_id: Optional[str] = None
    bank_details: Optional[BankDetails] = None
    is_active: bool
    is_discarded: bool
    created_at: datetime
    updated_at: datetime


class VendorFilters(BaseModel):
    """Whitelisted list filters for vendors."""

    city: Optional[str] = None
    is_active: Optional[bool] = None
    is_discarded: Optional[bool] = None
    company_name: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = "createdAt"
    order: str = "desc"
