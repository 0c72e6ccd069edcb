from datetime import datetime
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace_service.app.models.vendor import Vendor
from marketplace_service.app.schemas.vendor import VendorCreate, VendorUpdate
from marketplace_service.app.services.vendor_service import VendorService


class TestVendorService:
    """Unit tests for VendorService with a mocked repository."""

    @pytest.fixture
    def sample_vendor(self):
        now = datetime(2024, 1, 1, 12, 0)
        return Vendor(
            id=3,
            name="Sparkle Cleaners",
            email="sparkle@example.com",
            password_hash="original-hash",
            phone="9876543210",
            city="Pune",
            payment_mode="upi",
            upi_id="sparkle@upi",
            bank_details=None,
            is_active=True,
            is_discarded=False,
            created_at=now,
            updated_at=now,
        )

    @pytest.fixture
    def vendor_service(self, sample_vendor):
        service = VendorService(Mock(spec=AsyncSession))
        service.repository.get_vendor_by_id = AsyncMock(return_value=sample_vendor)
        service.repository.get_vendor_by_email = AsyncMock(return_value=None)

        async def apply(vendor, values):
            for key, value in values.items():
                setattr(vendor, key, value)
            return vendor

        service.repository.update_vendor = AsyncMock(side_effect=apply)
        return service

    @pytest.mark.asyncio
    async def test_update_ignores_password(self, vendor_service, sample_vendor):
        """Test that a password in the update body never reaches the record."""
        data = VendorUpdate.model_validate(
            {"name": "Sparkle Pro", "password": "hacked123"}
        )

        result = await vendor_service.update_vendor(3, data)

        values = vendor_service.repository.update_vendor.call_args.args[1]
        assert "password" not in values
        assert "password_hash" not in values
        assert sample_vendor.password_hash == "original-hash"
        assert result.name == "Sparkle Pro"

    @pytest.mark.asyncio
    async def test_update_to_bank_requires_bank_details(self, vendor_service):
        data = VendorUpdate.model_validate({"paymentMode": "bank"})

        with pytest.raises(ValueError, match="Bank details are required"):
            await vendor_service.update_vendor(3, data)

    @pytest.mark.asyncio
    async def test_update_email_conflict(self, vendor_service):
        other = Mock(id=9)
        vendor_service.repository.get_vendor_by_email = AsyncMock(return_value=other)

        with pytest.raises(HTTPException) as exc_info:
            await vendor_service.update_vendor(
                3, VendorUpdate.model_validate({"email": "taken@example.com"})
            )

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_set_status_requires_value(self, vendor_service):
        with pytest.raises(ValueError, match="isActive status is required"):
            await vendor_service.set_status(3, None)
        vendor_service.repository.update_vendor.assert_not_called()

    @pytest.mark.asyncio
    async def test_set_status_deactivates(self, vendor_service):
        result = await vendor_service.set_status(3, False)
        assert result.is_active is False

    @pytest.mark.asyncio
    async def test_set_discarded_requires_value(self, vendor_service):
        with pytest.raises(ValueError, match="isDiscarded status is required"):
            await vendor_service.set_discarded(3, None)

    @pytest.mark.asyncio
    async def test_create_hashes_password(self, vendor_service, sample_vendor):
        vendor_service.repository.create_vendor = AsyncMock(return_value=sample_vendor)
        data = VendorCreate.model_validate(
            {
                "name": "Sparkle Cleaners",
                "email": "Sparkle@Example.com",
                "password": "secret123",
                "upiId": "sparkle@upi",
            }
        )

        await vendor_service.create_vendor(data)

        values = vendor_service.repository.create_vendor.call_args.args[0]
        assert "password" not in values
        assert values["password_hash"] != "secret123"
        assert values["email"] == "sparkle@example.com"


class TestVendorSchemas:
    def test_upi_mode_requires_upi_id(self):
        with pytest.raises(ValueError, match="UPI ID is required"):
            VendorCreate.model_validate(
                {"name": "V", "email": "v@example.com", "password": "secret123"}
            )

    def test_phone_must_be_ten_digits(self):
        with pytest.raises(ValueError):
            VendorCreate.model_validate(
                {
                    "name": "V",
                    "email": "v@example.com",
                    "password": "secret123",
                    "upiId": "v@upi",
                    "phone": "12345",
                }
            )
