"""Vendor service for business logic"""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.password_security import PasswordSecurity
from ..models.vendor import Vendor
from ..repository.vendor_repository import VendorRepository
from ..schemas.vendor import (
    BankDetails,
    VendorCreate,
    VendorFilters,
    VendorResponse,
    VendorUpdate,
    check_payment_details,
)
from ..utils.logging import setup_marketplace_logging

logger = setup_marketplace_logging("vendor_service")

NON_NULLABLE_FIELDS = ("name", "email", "payment_mode", "is_active")


class VendorService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = VendorRepository(session)

    async def _ensure_email_free(
        self, email: str, exclude_id: Optional[int] = None
    ) -> None:
        existing = await self.repository.get_vendor_by_email(email)
        if existing and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Vendor with this email already exists",
            )

    async def list_vendors(
        self, filters: VendorFilters, correlation_id: Optional[str] = None
    ) -> List[VendorResponse]:
        vendors = await self.repository.list_vendors(filters)
        logger.info(
            "Vendors listed",
            extra={
                "count": len(vendors),
                "filters": filters.model_dump(exclude_none=True),
                "correlation_id": correlation_id,
            },
        )
        return [VendorResponse.model_validate(v) for v in vendors]

    async def get_vendor(self, vendor_id: int) -> Optional[VendorResponse]:
        vendor = await self.repository.get_vendor_by_id(vendor_id)
        if not vendor:
            return None
        return VendorResponse.model_validate(vendor)

    async def create_vendor(
        self,
        vendor_data: VendorCreate,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> VendorResponse:
        await self._ensure_email_free(vendor_data.email)

        values = vendor_data.model_dump(exclude={"password", "bank_details"})
        values["password_hash"] = PasswordSecurity.hash_password(vendor_data.password)
        values["bank_details"] = (
            vendor_data.bank_details.model_dump() if vendor_data.bank_details else None
        )
        vendor = await self.repository.create_vendor(values)

        logger.info(
            "Vendor created successfully",
            extra={
                "vendor_id": vendor.id,
                "payment_mode": vendor.payment_mode,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return VendorResponse.model_validate(vendor)

    async def update_vendor(
        self,
        vendor_id: int,
        vendor_data: VendorUpdate,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Optional[VendorResponse]:
        """Partially update a vendor profile; the password is never touched"""
        vendor = await self.repository.get_vendor_by_id(vendor_id)
        if not vendor:
            return None

        values: Dict[str, Any] = vendor_data.model_dump(
            exclude_unset=True, exclude={"bank_details"}
        )
        values.pop("password", None)
        for required in NON_NULLABLE_FIELDS:
            if required in values and values[required] is None:
                raise ValueError(f"{required} cannot be null")
        if "bank_details" in vendor_data.model_fields_set:
            values["bank_details"] = (
                vendor_data.bank_details.model_dump()
                if vendor_data.bank_details
                else None
            )
        if values.get("email"):
            await self._ensure_email_free(values["email"], exclude_id=vendor.id)

        self._check_merged_payment(vendor, values)
        vendor = await self.repository.update_vendor(vendor, values)

        logger.info(
            "Vendor updated successfully",
            extra={
                "vendor_id": vendor_id,
                "updated_fields": sorted(values),
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return VendorResponse.model_validate(vendor)

    @staticmethod
    def _check_merged_payment(vendor: Vendor, values: Dict[str, Any]) -> None:
        payment_mode = values.get("payment_mode", vendor.payment_mode)
        upi_id = values.get("upi_id", vendor.upi_id)
        raw_bank = values.get("bank_details", vendor.bank_details)
        bank_details = BankDetails.model_validate(raw_bank) if raw_bank else None
        check_payment_details(payment_mode, upi_id, bank_details)

    async def set_status(
        self,
        vendor_id: int,
        is_active: Optional[bool],
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Optional[VendorResponse]:
        """Activate or deactivate a vendor"""
        if is_active is None:
            raise ValueError("isActive status is required")

        vendor = await self.repository.get_vendor_by_id(vendor_id)
        if not vendor:
            return None

        vendor = await self.repository.update_vendor(vendor, {"is_active": is_active})
        logger.info(
            "Vendor status changed",
            extra={
                "vendor_id": vendor_id,
                "is_active": is_active,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return VendorResponse.model_validate(vendor)

    async def set_discarded(
        self,
        vendor_id: int,
        is_discarded: Optional[bool],
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Optional[VendorResponse]:
        """Mark a vendor application as discarded or restore it"""
        if is_discarded is None:
            raise ValueError("isDiscarded status is required")

        vendor = await self.repository.get_vendor_by_id(vendor_id)
        if not vendor:
            return None

        vendor = await self.repository.update_vendor(
            vendor, {"is_discarded": is_discarded}
        )
        logger.info(
            "Vendor discard flag changed",
            extra={
                "vendor_id": vendor_id,
                "is_discarded": is_discarded,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return VendorResponse.model_validate(vendor)

    async def delete_vendor(
        self,
        vendor_id: int,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> bool:
        vendor = await self.repository.get_vendor_by_id(vendor_id)
        if not vendor:
            return False

        await self.repository.delete_vendor(vendor)
        logger.info(
            "Vendor deleted",
            extra={
                "vendor_id": vendor_id,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return True
