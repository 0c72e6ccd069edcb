from datetime import datetime, time
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.booking import Booking, BookingItem
from ..schemas.booking import BookingFilters
from .sorting import resolve_order_by

BOOKING_SORT_COLUMNS = {
    "createdAt": Booking.created_at,
    "updatedAt": Booking.updated_at,
    "totalAmount": Booking.total_amount,
    "status": Booking.status,
}


class BookingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_booking(
        self, values: Dict[str, Any], items: List[Dict[str, Any]]
    ) -> Booking:
        """Create a booking with its item lines"""
        booking = Booking(**values)
        booking.items = [BookingItem(**item) for item in items]
        self.session.add(booking)
        await self.session.commit()
        return await self.get_booking_by_id(booking.id, refresh=True)  # type: ignore

    async def get_booking_by_id(
        self, booking_id: int, refresh: bool = False
    ) -> Optional[Booking]:
        """Get booking by ID with items"""
        query = (
            select(Booking)
            .options(selectinload(Booking.items))
            .where(Booking.id == booking_id)
        )
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalars().first()

    def _apply_filters(self, query: Select[Any], filters: BookingFilters) -> Select[Any]:
        if filters.user_id:
            query = query.where(Booking.user_id == filters.user_id)
        if filters.status:
            query = query.where(Booking.status == filters.status)
        if filters.date_from:
            query = query.where(
                Booking.created_at >= datetime.combine(filters.date_from, time.min)
            )
        if filters.date_to:
            query = query.where(
                Booking.created_at <= datetime.combine(filters.date_to, time.max)
            )
        if filters.min_amount is not None:
            query = query.where(Booking.total_amount >= filters.min_amount)
        if filters.max_amount is not None:
            query = query.where(Booking.total_amount <= filters.max_amount)
        if filters.search:
            term = filters.search
            query = query.where(
                or_(
                    Booking.address["city"].as_string().icontains(term, autoescape=True),
                    Booking.address["street"]
                    .as_string()
                    .icontains(term, autoescape=True),
                    Booking.items.any(
                        BookingItem.item_name.icontains(term, autoescape=True)
                    ),
                )
            )
        return query

    async def list_bookings(
        self, filters: BookingFilters
    ) -> Tuple[List[Booking], int]:
        """Get one page of bookings and the total matching count"""
        count_query = self._apply_filters(select(func.count(Booking.id)), filters)
        total_count = (await self.session.execute(count_query)).scalar() or 0

        query = self._apply_filters(
            select(Booking).options(selectinload(Booking.items)), filters
        )
        query = (
            query.order_by(
                resolve_order_by(
                    BOOKING_SORT_COLUMNS, filters.sort_field, filters.sort_order
                ),
                Booking.id.desc(),
            )
            .offset((filters.page - 1) * filters.limit)
            .limit(filters.limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total_count

    async def update_booking(
        self,
        booking: Booking,
        values: Dict[str, Any],
        items: Optional[List[Dict[str, Any]]] = None,
    ) -> Booking:
        """Apply field changes and optionally replace the item lines"""
        for field, value in values.items():
            setattr(booking, field, value)
        if items is not None:
            booking.items = [BookingItem(**item) for item in items]
        await self.session.commit()
        return await self.get_booking_by_id(booking.id, refresh=True)  # type: ignore

    async def delete_booking(self, booking: Booking) -> None:
        await self.session.delete(booking)
        await self.session.commit()

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------
    async def count_by_status(
        self, start: datetime, end: datetime
    ) -> Dict[str, int]:
        """Booking counts per status for bookings created in [start, end]"""
        query = (
            select(Booking.status, func.count(Booking.id))
            .where(Booking.created_at >= start, Booking.created_at <= end)
            .group_by(Booking.status)
        )
        result = await self.session.execute(query)
        return {status: count for status, count in result.all()}

    async def revenue_summary(
        self, start: datetime, end: datetime, statuses: Sequence[str]
    ) -> Tuple[float, float, float]:
        """Sum, average and max of total_amount for the given statuses"""
        query = select(
            func.coalesce(func.sum(Booking.total_amount), 0),
            func.coalesce(func.avg(Booking.total_amount), 0),
            func.coalesce(func.max(Booking.total_amount), 0),
        ).where(
            Booking.created_at >= start,
            Booking.created_at <= end,
            Booking.status.in_(list(statuses)),
        )
        total, average, maximum = (await self.session.execute(query)).one()
        return float(total), float(average), float(maximum)

    async def amounts_in_range(
        self, start: datetime, end: datetime
    ) -> List[Tuple[datetime, float]]:
        """(created_at, total_amount) pairs for bookings created in [start, end]"""
        query = (
            select(Booking.created_at, Booking.total_amount)
            .where(Booking.created_at >= start, Booking.created_at <= end)
            .order_by(Booking.created_at)
        )
        result = await self.session.execute(query)
        return [(created_at, float(amount)) for created_at, amount in result.all()]
