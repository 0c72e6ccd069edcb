"""Booking administration endpoints"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from marketplace_service.app.api.dependencies import (
    BookingServiceDep,
    CorrelationIdDep,
    CurrentUserIdDep,
)
from marketplace_service.app.models.booking import BookingStatus
from marketplace_service.app.schemas.booking import (
    BookingCreate,
    BookingFilters,
    BookingResponse,
    BookingStatsResponse,
    BookingUpdate,
)
from marketplace_service.app.schemas.common import ApiResponse, PaginatedResponse
from marketplace_service.app.services.booking_service import BookingService

router = APIRouter(prefix="/booking/admin/bookings")

BOOKING_NOT_FOUND = "Booking not found"


async def _paginated(
    service: BookingService, filters: BookingFilters, correlation_id: Optional[str]
) -> PaginatedResponse[BookingResponse]:
    bookings, pagination = await service.list_bookings(filters, correlation_id)
    return PaginatedResponse(count=len(bookings), data=bookings, pagination=pagination)


@router.get("")
async def list_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_field: str = Query("createdAt", alias="sortField"),
    sort_order: str = Query("desc", alias="sortOrder"),
    booking_status: Optional[str] = Query(None, alias="status"),
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    min_amount: Optional[float] = Query(None, alias="minAmount", ge=0),
    max_amount: Optional[float] = Query(None, alias="maxAmount", ge=0),
    search: Optional[str] = Query(
        None, description="Matches address city/street or item names"
    ),
    correlation_id: Optional[str] = CorrelationIdDep,
    service: BookingService = BookingServiceDep,
) -> PaginatedResponse[BookingResponse]:
    filters = BookingFilters(
        status=booking_status,
        date_from=date_from,
        date_to=date_to,
        min_amount=min_amount,
        max_amount=max_amount,
        search=search,
        sort_field=sort_field,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return await _paginated(service, filters, correlation_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: BookingService = BookingServiceDep,
) -> ApiResponse[BookingResponse]:
    booking = await service.create_booking(
        booking_data, user_id=user_id, correlation_id=correlation_id
    )
    return ApiResponse(data=booking, message="Booking created successfully")


@router.get("/stats")
async def get_booking_stats(
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    correlation_id: Optional[str] = CorrelationIdDep,
    service: BookingService = BookingServiceDep,
) -> ApiResponse[BookingStatsResponse]:
    """Booking statistics; defaults to the last 30 days"""
    try:
        stats = await service.get_stats(date_from, date_to, correlation_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ApiResponse(data=stats)


@router.get("/user/{customer_id}")
async def list_bookings_by_user(
    customer_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    correlation_id: Optional[str] = CorrelationIdDep,
    service: BookingService = BookingServiceDep,
) -> PaginatedResponse[BookingResponse]:
    filters = BookingFilters(user_id=customer_id, page=page, limit=limit)
    return await _paginated(service, filters, correlation_id)


@router.get("/status/{booking_status}")
async def list_bookings_by_status(
    booking_status: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    correlation_id: Optional[str] = CorrelationIdDep,
    service: BookingService = BookingServiceDep,
) -> PaginatedResponse[BookingResponse]:
    if booking_status not in {s.value for s in BookingStatus}:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid booking status: {booking_status}",
        )
    filters = BookingFilters(status=booking_status, page=page, limit=limit)
    return await _paginated(service, filters, correlation_id)


@router.get("/{booking_id}")
async def get_booking(
    booking_id: int,
    service: BookingService = BookingServiceDep,
) -> ApiResponse[BookingResponse]:
    booking = await service.get_booking(booking_id)
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOOKING_NOT_FOUND)
    return ApiResponse(data=booking)


@router.put("/{booking_id}")
async def update_booking(
    booking_id: int,
    booking_data: BookingUpdate,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: BookingService = BookingServiceDep,
) -> ApiResponse[BookingResponse]:
    try:
        booking = await service.update_booking(
            booking_id, booking_data, user_id=user_id, correlation_id=correlation_id
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOOKING_NOT_FOUND)
    return ApiResponse(data=booking, message="Booking updated successfully")


@router.delete("/{booking_id}")
async def delete_booking(
    booking_id: int,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: BookingService = BookingServiceDep,
) -> ApiResponse[None]:
    deleted = await service.delete_booking(
        booking_id, user_id=user_id, correlation_id=correlation_id
    )
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=BOOKING_NOT_FOUND)
    return ApiResponse(message="Booking deleted successfully")
