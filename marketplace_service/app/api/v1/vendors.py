"""Vendor API endpoints"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from marketplace_service.app.api.dependencies import (
    CorrelationIdDep,
    CurrentUserIdDep,
    VendorServiceDep,
)
from marketplace_service.app.schemas.common import ApiResponse, ListResponse
from marketplace_service.app.schemas.vendor import (
    VendorCreate,
    VendorDiscardUpdate,
    VendorFilters,
    VendorResponse,
    VendorStatusUpdate,
    VendorUpdate,
)
from marketplace_service.app.services.vendor_service import VendorService

router = APIRouter(prefix="/vendor")

VENDOR_NOT_FOUND = "Vendor not found"


@router.get("")
async def list_vendors(
    city: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    is_discarded: Optional[bool] = Query(None, alias="isDiscarded"),
    company_name: Optional[str] = Query(None, alias="companyName"),
    search: Optional[str] = Query(
        None, description="Matches name, email, company name or city"
    ),
    sort_by: str = Query("createdAt", alias="sortBy"),
    order: str = Query("desc"),
    correlation_id: Optional[str] = CorrelationIdDep,
    service: VendorService = VendorServiceDep,
) -> ListResponse[VendorResponse]:
    filters = VendorFilters(
        city=city,
        is_active=is_active,
        is_discarded=is_discarded,
        company_name=company_name,
        search=search,
        sort_by=sort_by,
        order=order,
    )
    vendors = await service.list_vendors(filters, correlation_id)
    return ListResponse(count=len(vendors), data=vendors)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_vendor(
    vendor_data: VendorCreate,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: VendorService = VendorServiceDep,
) -> ApiResponse[VendorResponse]:
    vendor = await service.create_vendor(
        vendor_data, user_id=user_id, correlation_id=correlation_id
    )
    return ApiResponse(data=vendor, message="Vendor created successfully")


@router.get("/{vendor_id}")
async def get_vendor(
    vendor_id: int,
    service: VendorService = VendorServiceDep,
) -> ApiResponse[VendorResponse]:
    vendor = await service.get_vendor(vendor_id)
    if not vendor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=VENDOR_NOT_FOUND)
    return ApiResponse(data=vendor)


@router.put("/{vendor_id}")
async def update_vendor(
    vendor_id: int,
    vendor_data: VendorUpdate,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: VendorService = VendorServiceDep,
) -> ApiResponse[VendorResponse]:
    """Update a vendor profile; any password in the body is ignored"""
    try:
        vendor = await service.update_vendor(
            vendor_id, vendor_data, user_id=user_id, correlation_id=correlation_id
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not vendor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=VENDOR_NOT_FOUND)
    return ApiResponse(data=vendor, message="Vendor updated successfully")


@router.patch("/{vendor_id}/status")
async def toggle_vendor_status(
    vendor_id: int,
    status_data: Optional[VendorStatusUpdate] = None,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: VendorService = VendorServiceDep,
) -> ApiResponse[VendorResponse]:
    """Activate or deactivate a vendor; ``isActive`` is required"""
    try:
        vendor = await service.set_status(
            vendor_id,
            status_data.is_active if status_data else None,
            user_id=user_id,
            correlation_id=correlation_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not vendor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=VENDOR_NOT_FOUND)
    state = "activated" if vendor.is_active else "deactivated"
    return ApiResponse(data=vendor, message=f"Vendor {state} successfully")


@router.patch("/{vendor_id}/discard")
async def discard_vendor(
    vendor_id: int,
    discard_data: Optional[VendorDiscardUpdate] = None,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: VendorService = VendorServiceDep,
) -> ApiResponse[VendorResponse]:
    """Set or clear the discarded flag; ``isDiscarded`` is required"""
    try:
        vendor = await service.set_discarded(
            vendor_id,
            discard_data.is_discarded if discard_data else None,
            user_id=user_id,
            correlation_id=correlation_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not vendor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=VENDOR_NOT_FOUND)
    return ApiResponse(data=vendor, message="Vendor discard status updated")


@router.delete("/{vendor_id}")
async def delete_vendor(
    vendor_id: int,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: VendorService = VendorServiceDep,
) -> ApiResponse[None]:
    deleted = await service.delete_vendor(
        vendor_id, user_id=user_id, correlation_id=correlation_id
    )
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=VENDOR_NOT_FOUND)
    return ApiResponse(message="Vendor deleted successfully")
