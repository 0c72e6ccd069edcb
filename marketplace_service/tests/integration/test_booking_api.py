"""
Integration tests for booking administration and statistics.
"""

from datetime import date, timedelta

import pytest

BOOKINGS_URL = "/api/booking/admin/bookings"

ADDRESS = {
    "street": "12 MG Road",
    "city": "Pune",
    "state": "Maharashtra",
    "zipCode": "411001",
    "country": "India",
}


def booking_payload(user_id="cust-1", amount=100.0, status="pending", item="Sofa Cleaning"):
    return {
        "userId": user_id,
        "items": [
            {
                "itemId": 1,
                "itemName": item,
                "price": amount,
                "date": "2024-06-01",
                "timeSlot": "10:00-12:00",
            }
        ],
        "totalAmount": amount,
        "status": status,
        "address": ADDRESS,
    }


def create_booking(client, **kwargs):
    response = client.post(BOOKINGS_URL, json=booking_payload(**kwargs))
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestBookingCrud:
    def test_create_and_fetch(self, superadmin_client):
        booking = create_booking(superadmin_client)

        fetched = superadmin_client.get(f"{BOOKINGS_URL}/{booking['id']}")

        assert fetched.status_code == 200
        body = fetched.json()["data"]
        assert body["status"] == "pending"
        assert body["items"][0]["timeSlot"] == "10:00-12:00"
        assert body["address"]["zipCode"] == "411001"

    def test_booking_needs_items(self, superadmin_client):
        payload = booking_payload()
        payload["items"] = []

        assert superadmin_client.post(BOOKINGS_URL, json=payload).status_code == 400

    def test_invalid_status_rejected(self, superadmin_client):
        payload = booking_payload(status="shipped")

        assert superadmin_client.post(BOOKINGS_URL, json=payload).status_code == 400

    def test_update_status(self, superadmin_client):
        booking = create_booking(superadmin_client)

        response = superadmin_client.put(
            f"{BOOKINGS_URL}/{booking['id']}", json={"status": "confirmed"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "confirmed"
        assert response.json()["data"]["totalAmount"] == 100.0

    def test_update_rejects_null_status(self, superadmin_client):
        booking = create_booking(superadmin_client)

        response = superadmin_client.put(
            f"{BOOKINGS_URL}/{booking['id']}", json={"status": None}
        )

        assert response.status_code == 400

    def test_delete(self, superadmin_client):
        booking = create_booking(superadmin_client)

        assert superadmin_client.delete(f"{BOOKINGS_URL}/{booking['id']}").status_code == 200
        assert superadmin_client.get(f"{BOOKINGS_URL}/{booking['id']}").status_code == 404


class TestBookingLists:
    @pytest.fixture
    def bookings(self, superadmin_client):
        create_booking(superadmin_client, user_id="cust-1", amount=100, status="confirmed")
        create_booking(superadmin_client, user_id="cust-1", amount=50, status="pending")
        create_booking(
            superadmin_client,
            user_id="cust-2",
            amount=300,
            status="cancelled",
            item="AC Repair",
        )

    def test_pagination(self, superadmin_client, bookings):
        response = superadmin_client.get(BOOKINGS_URL, params={"limit": 2, "page": 2})

        body = response.json()
        assert body["count"] == 1
        assert body["pagination"] == {"total": 3, "page": 2, "limit": 2, "pages": 2}

    def test_by_user(self, superadmin_client, bookings):
        response = superadmin_client.get(f"{BOOKINGS_URL}/user/cust-1")

        assert response.json()["pagination"]["total"] == 2

    def test_by_status(self, superadmin_client, bookings):
        response = superadmin_client.get(f"{BOOKINGS_URL}/status/cancelled")

        assert [b["userId"] for b in response.json()["data"]] == ["cust-2"]

    def test_by_unknown_status(self, superadmin_client):
        response = superadmin_client.get(f"{BOOKINGS_URL}/status/shipped")

        assert response.status_code == 400

    def test_search_and_amount_filters(self, superadmin_client, bookings):
        search = superadmin_client.get(BOOKINGS_URL, params={"search": "ac rep"})
        assert search.json()["pagination"]["total"] == 1

        amount = superadmin_client.get(
            BOOKINGS_URL, params={"minAmount": 60, "maxAmount": 200}
        )
        assert [b["totalAmount"] for b in amount.json()["data"]] == [100.0]

    def test_sort_by_amount(self, superadmin_client, bookings):
        response = superadmin_client.get(
            BOOKINGS_URL, params={"sortField": "totalAmount", "sortOrder": "asc"}
        )

        assert [b["totalAmount"] for b in response.json()["data"]] == [50.0, 100.0, 300.0]


class TestBookingStats:
    def test_empty_range_is_zero_filled(self, superadmin_client):
        response = superadmin_client.get(
            f"{BOOKINGS_URL}/stats",
            params={"dateFrom": "2024-01-01", "dateTo": "2024-01-07"},
        )

        assert response.status_code == 200
        stats = response.json()["data"]
        assert stats["totalBookings"] == 0
        assert stats["revenue"]["totalRevenue"] == 0
        assert stats["dateRange"] == {"from": "2024-01-01", "to": "2024-01-07"}
        assert [d["date"] for d in stats["bookingsByDay"]] == [
            f"2024-01-0{day}" for day in range(1, 8)
        ]
        assert all(d["count"] == 0 for d in stats["bookingsByDay"])
        assert {s["status"]: s["count"] for s in stats["bookingsByStatus"]} == {
            "pending": 0,
            "confirmed": 0,
            "cancelled": 0,
            "completed": 0,
        }

    def test_default_window_is_thirty_days(self, superadmin_client):
        stats = superadmin_client.get(f"{BOOKINGS_URL}/stats").json()["data"]

        start = date.fromisoformat(stats["dateRange"]["from"])
        end = date.fromisoformat(stats["dateRange"]["to"])
        assert end - start == timedelta(days=30)
        assert len(stats["bookingsByDay"]) == 31

    def test_revenue_counts_confirmed_bookings(self, superadmin_client):
        create_booking(superadmin_client, amount=100, status="confirmed")
        create_booking(superadmin_client, amount=300, status="confirmed")
        create_booking(superadmin_client, amount=50, status="pending")

        stats = superadmin_client.get(f"{BOOKINGS_URL}/stats").json()["data"]

        assert stats["totalBookings"] == 3
        assert stats["revenue"] == {
            "totalRevenue": 400.0,
            "averageBookingValue": 200.0,
            "maxBookingValue": 300.0,
        }
        today = stats["bookingsByDay"][-1]
        assert today["date"] == stats["dateRange"]["to"]
        assert today["count"] == 3
        assert today["revenue"] == 450.0

    def test_reversed_range_rejected(self, superadmin_client):
        response = superadmin_client.get(
            f"{BOOKINGS_URL}/stats",
            params={"dateFrom": "2024-02-01", "dateTo": "2024-01-01"},
        )

        assert response.status_code == 400

    def test_range_longer_than_a_year_rejected(self, superadmin_client):
        response = superadmin_client.get(
            f"{BOOKINGS_URL}/stats",
            params={"dateFrom": "0001-01-01", "dateTo": "2024-01-01"},
        )

        assert response.status_code == 400
        assert "366 days" in response.json()["message"]

    def test_last_calendar_day(self, superadmin_client):
        response = superadmin_client.get(
            f"{BOOKINGS_URL}/stats",
            params={"dateFrom": "9999-12-31", "dateTo": "9999-12-31"},
        )

        assert response.status_code == 200
        days = response.json()["data"]["bookingsByDay"]
        assert days == [{"date": "9999-12-31", "count": 0, "revenue": 0.0}]
