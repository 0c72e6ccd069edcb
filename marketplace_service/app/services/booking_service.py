"""Booking service: CRUD and revenue statistics"""

import math
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.base import utc_now
from ..models.booking import Booking, BookingStatus
from ..repository.booking_repository import BookingRepository
from ..schemas.booking import (
    BookingCreate,
    BookingFilters,
    BookingResponse,
    BookingStatsResponse,
    BookingUpdate,
    DailyBookings,
    DateRange,
    RevenueSummary,
    StatusCount,
)
from ..schemas.common import Pagination
from ..utils.logging import setup_marketplace_logging

logger = setup_marketplace_logging("booking_service")

DEFAULT_STATS_WINDOW_DAYS = 30
MAX_STATS_WINDOW_DAYS = 366
REVENUE_STATUSES = (BookingStatus.CONFIRMED.value,)


def stats_window(
    date_from: Optional[date], date_to: Optional[date], today: Optional[date] = None
) -> Tuple[date, date]:
    """Resolve the statistics date range; both ends are inclusive days"""
    end = date_to or today or utc_now().date()
    if date_from is None:
        span = min(DEFAULT_STATS_WINDOW_DAYS, (end - date.min).days)
        start = end - timedelta(days=span)
    else:
        start = date_from
    if start > end:
        raise ValueError("dateFrom must not be after dateTo")
    if (end - start).days >= MAX_STATS_WINDOW_DAYS:
        raise ValueError(
            f"Date range cannot exceed {MAX_STATS_WINDOW_DAYS} days"
        )
    return start, end


class BookingService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = BookingRepository(session)

    @staticmethod
    def _to_response(booking: Booking) -> BookingResponse:
        return BookingResponse.model_validate(booking)

    async def list_bookings(
        self, filters: BookingFilters, correlation_id: Optional[str] = None
    ) -> Tuple[list[BookingResponse], Pagination]:
        bookings, total = await self.repository.list_bookings(filters)
        pagination = Pagination(
            total=total,
            page=filters.page,
            limit=filters.limit,
            pages=math.ceil(total / filters.limit) if total else 0,
        )
        logger.info(
            "Bookings listed",
            extra={
                "count": len(bookings),
                "total": total,
                "filters": filters.model_dump(exclude_none=True, mode="json"),
                "correlation_id": correlation_id,
            },
        )
        return [self._to_response(b) for b in bookings], pagination

    async def get_booking(self, booking_id: int) -> Optional[BookingResponse]:
        booking = await self.repository.get_booking_by_id(booking_id)
        if not booking:
            return None
        return self._to_response(booking)

    async def create_booking(
        self,
        booking_data: BookingCreate,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> BookingResponse:
        """Create a booking; totalAmount is stored as sent"""
        values = booking_data.model_dump(exclude={"items"})
        items = [item.model_dump() for item in booking_data.items]
        booking = await self.repository.create_booking(values, items)

        logger.info(
            "Booking created successfully",
            extra={
                "booking_id": booking.id,
                "customer_id": booking.user_id,
                "item_count": len(items),
                "total_amount": booking.total_amount,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return self._to_response(booking)

    async def update_booking(
        self,
        booking_id: int,
        booking_data: BookingUpdate,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Optional[BookingResponse]:
        booking = await self.repository.get_booking_by_id(booking_id)
        if not booking:
            return None

        values: Dict[str, Any] = booking_data.model_dump(
            exclude_unset=True, exclude={"items"}
        )
        for required in ("user_id", "total_amount", "status", "address"):
            if required in values and values[required] is None:
                raise ValueError(f"{required} cannot be null")

        items = None
        if "items" in booking_data.model_fields_set:
            if not booking_data.items:
                raise ValueError("A booking needs at least one item")
            items = [item.model_dump() for item in booking_data.items]

        previous_status = booking.status
        booking = await self.repository.update_booking(booking, values, items)

        logger.info(
            "Booking updated successfully",
            extra={
                "booking_id": booking_id,
                "updated_fields": sorted(values) + (["items"] if items else []),
                "previous_status": previous_status,
                "status": booking.status,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return self._to_response(booking)

    async def delete_booking(
        self,
        booking_id: int,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> bool:
        booking = await self.repository.get_booking_by_id(booking_id)
        if not booking:
            return False

        await self.repository.delete_booking(booking)
        logger.info(
            "Booking deleted",
            extra={
                "booking_id": booking_id,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return True

    async def get_stats(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        correlation_id: Optional[str] = None,
    ) -> BookingStatsResponse:
        """Aggregate bookings created within the range.

        Revenue figures cover confirmed bookings; the daily series counts
        every booking and covers every day of the range, oldest first.
        """
        start_day, end_day = stats_window(date_from, date_to)
        start = datetime.combine(start_day, time.min)
        end = datetime.combine(end_day, time.max)

        by_status = await self.repository.count_by_status(start, end)
        total_revenue, average_value, max_value = (
            await self.repository.revenue_summary(start, end, REVENUE_STATUSES)
        )

        daily: Dict[date, list[float]] = defaultdict(lambda: [0, 0.0])
        for created_at, amount in await self.repository.amounts_in_range(start, end):
            bucket = daily[created_at.date()]
            bucket[0] += 1
            bucket[1] += amount

        bookings_by_day = []
        for offset in range((end_day - start_day).days + 1):
            day = start_day + timedelta(days=offset)
            count, revenue = daily.get(day, (0, 0.0))
            bookings_by_day.append(
                DailyBookings(
                    date=day.isoformat(), count=int(count), revenue=round(revenue, 2)
                )
            )

        stats = BookingStatsResponse(
            date_range=DateRange(from_=start_day, to=end_day),
            total_bookings=sum(by_status.values()),
            bookings_by_status=[
                StatusCount(status=s.value, count=by_status.get(s.value, 0))
                for s in BookingStatus
            ],
            revenue=RevenueSummary(
                total_revenue=round(total_revenue, 2),
                average_booking_value=round(average_value, 2),
                max_booking_value=round(max_value, 2),
            ),
            bookings_by_day=bookings_by_day,
        )

        logger.info(
            "Booking statistics computed",
            extra={
                "date_from": start_day.isoformat(),
                "date_to": end_day.isoformat(),
                "total_bookings": stats.total_bookings,
                "correlation_id": correlation_id,
            },
        )
        return stats
