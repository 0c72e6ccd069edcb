from datetime import date, datetime, time
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace_service.app.schemas.booking import BookingUpdate
from marketplace_service.app.services.booking_service import (
    BookingService,
    stats_window,
)


class TestStatsWindow:
    def test_defaults_to_last_thirty_days(self):
        assert stats_window(None, None, today=date(2024, 3, 31)) == (
            date(2024, 3, 1),
            date(2024, 3, 31),
        )

    def test_start_defaults_relative_to_end(self):
        assert stats_window(None, date(2024, 2, 10))[0] == date(2024, 1, 11)

    def test_single_day_range(self):
        day = date(2024, 5, 5)
        assert stats_window(day, day) == (day, day)

    def test_reversed_range_rejected(self):
        with pytest.raises(ValueError, match="dateFrom"):
            stats_window(date(2024, 5, 6), date(2024, 5, 5))

    def test_full_leap_year_allowed(self):
        assert stats_window(date(2024, 1, 1), date(2024, 12, 31)) == (
            date(2024, 1, 1),
            date(2024, 12, 31),
        )

    def test_range_longer_than_a_year_rejected(self):
        with pytest.raises(ValueError, match="cannot exceed 366 days"):
            stats_window(date(1, 1, 1), date(2024, 1, 1))

    def test_default_start_clamped_at_first_date(self):
        assert stats_window(None, date(1, 1, 5)) == (date.min, date(1, 1, 5))


class TestBookingStats:
    """Unit tests for BookingService.get_stats with a mocked repository."""

    @pytest.fixture
    def booking_service(self):
        service = BookingService(Mock(spec=AsyncSession))
        service.repository.count_by_status = AsyncMock(
            return_value={"pending": 2, "confirmed": 1}
        )
        service.repository.revenue_summary = AsyncMock(
            return_value=(100.0, 100.0, 100.0)
        )
        service.repository.amounts_in_range = AsyncMock(
            return_value=[
                (datetime(2024, 1, 2, 10, 0), 100.0),
                (datetime(2024, 1, 2, 18, 30), 20.0),
                (datetime(2024, 1, 3, 9, 15), 30.0),
            ]
        )
        return service

    @pytest.mark.asyncio
    async def test_stats_aggregates(self, booking_service):
        stats = await booking_service.get_stats(date(2024, 1, 1), date(2024, 1, 3))

        assert stats.total_bookings == 3
        assert stats.revenue.total_revenue == 100.0
        assert [(s.status, s.count) for s in stats.bookings_by_status] == [
            ("pending", 2),
            ("confirmed", 1),
            ("cancelled", 0),
            ("completed", 0),
        ]

    @pytest.mark.asyncio
    async def test_daily_series_is_zero_filled_and_ascending(self, booking_service):
        stats = await booking_service.get_stats(date(2024, 1, 1), date(2024, 1, 3))

        assert [(d.date, d.count, d.revenue) for d in stats.bookings_by_day] == [
            ("2024-01-01", 0, 0.0),
            ("2024-01-02", 2, 120.0),
            ("2024-01-03", 1, 30.0),
        ]

    @pytest.mark.asyncio
    async def test_range_end_covers_whole_day(self, booking_service):
        await booking_service.get_stats(date(2024, 1, 1), date(2024, 1, 3))

        start, end, statuses = booking_service.repository.revenue_summary.call_args.args
        assert start == datetime(2024, 1, 1, 0, 0)
        assert end == datetime.combine(date(2024, 1, 3), time.max)
        assert tuple(statuses) == ("confirmed",)

    @pytest.mark.asyncio
    async def test_empty_range_returns_zeroed_defaults(self, booking_service):
        booking_service.repository.count_by_status = AsyncMock(return_value={})
        booking_service.repository.revenue_summary = AsyncMock(
            return_value=(0.0, 0.0, 0.0)
        )
        booking_service.repository.amounts_in_range = AsyncMock(return_value=[])

        stats = await booking_service.get_stats(date(2024, 1, 1), date(2024, 1, 7))

        assert stats.total_bookings == 0
        assert stats.revenue.total_revenue == 0
        assert len(stats.bookings_by_day) == 7
        assert all(d.count == 0 for d in stats.bookings_by_day)

    @pytest.mark.asyncio
    async def test_last_calendar_day_does_not_overflow(self, booking_service):
        booking_service.repository.amounts_in_range = AsyncMock(return_value=[])

        stats = await booking_service.get_stats(date.max, date.max)

        assert [d.date for d in stats.bookings_by_day] == ["9999-12-31"]
        _, end, _ = booking_service.repository.revenue_summary.call_args.args
        assert end == datetime.combine(date.max, time.max)


class TestBookingUpdate:
    @pytest.fixture
    def booking_service(self):
        service = BookingService(Mock(spec=AsyncSession))
        service.repository.get_booking_by_id = AsyncMock(return_value=Mock())
        service.repository.update_booking = AsyncMock()
        return service

    @pytest.mark.asyncio
    async def test_null_status_rejected(self, booking_service):
        with pytest.raises(ValueError, match="status cannot be null"):
            await booking_service.update_booking(
                1, BookingUpdate.model_validate({"status": None})
            )
        booking_service.repository.update_booking.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_booking_returns_none(self, booking_service):
        booking_service.repository.get_booking_by_id = AsyncMock(return_value=None)

        result = await booking_service.update_booking(
            99, BookingUpdate.model_validate({"status": "confirmed"})
        )

        assert result is None
