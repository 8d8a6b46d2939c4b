"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.trips.models import Schedule, Trip
from apps.users.access import access_checker
from apps.users.models import User


class BookingAPITests(APITestCase):
    """Covers booking creation, capacity conflicts and cancellation."""

    def setUp(self) -> None:
        self.traveller = User.objects.create_user(email="guest@example.com", password="GuestPass123")
        self.other = User.objects.create_user(email="other@example.com", password="OtherPass123")
        self.vendor = User.objects.create_user(email="vendor@example.com", password="VendorPass123")
        access_checker.set_capabilities(self.vendor.pk, ["user", "vendor"])
        self.admin = User.objects.create_superuser(email="admin@example.com", password="AdminPass123")
        self.trip = Trip.objects.create(
            vendor=self.vendor,
            title="Valley of Flowers Trek",
            location="Chamoli, Uttarakhand",
            price_per_person=Decimal("6200.00"),
            max_seats=4,
            duration_days=6,
            duration_nights=5,
        )
        start = timezone.localdate() + timedelta(days=14)
        self.schedule = Schedule.objects.create(
            trip=self.trip,
            start_date=start,
            end_date=start + timedelta(days=5),
            capacity=5,
        )
        self.client.force_authenticate(self.traveller)
        self.list_url = reverse("booking-list")

    def _payload(self, party_size: int = 2, payment_method: str = "cash") -> dict:
        return {
            "trip": self.trip.pk,
            "schedule": self.schedule.pk,
            "party_size": party_size,
            "payment_method": payment_method,
        }

    def _available(self) -> int:
        self.schedule.refresh_from_db()
        return self.schedule.available_seats

    def test_traveller_can_book_seats(self) -> None:
        response = self.client.post(self.list_url, self._payload(3), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["status"], "confirmed")
        self.assertEqual(response.data["payment_status"], "pending")
        self.assertEqual(Decimal(response.data["total_amount"]), Decimal("18600.00"))
        self.assertEqual(response.data["trip_title"], self.trip.title)
        self.assertEqual(self._available(), 2)
        booking = Booking.objects.get()
        self.assertEqual(booking.user, self.traveller)

    def test_third_party_is_rejected_when_capacity_runs_out(self) -> None:
        for _ in range(2):
            ok = self.client.post(self.list_url, self._payload(2), format="json")
            self.assertEqual(ok.status_code, status.HTTP_201_CREATED, ok.data)

        response = self.client.post(self.list_url, self._payload(2), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT, response.data)
        self.assertEqual(response.data["code"], "booking_rejected")
        self.assertEqual(response.data["reason"], "no_capacity")
        self.assertEqual(Booking.objects.count(), 2)
        self.assertEqual(self._available(), 1)

    def test_party_larger_than_trip_limit_is_bad_request(self) -> None:
        response = self.client.post(self.list_url, self._payload(5), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["reason"], "invalid_party_size")
        self.assertEqual(self._available(), 5)

    def test_unknown_payment_method_is_bad_request(self) -> None:
        response = self.client.post(self.list_url, self._payload(1, "cheque"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, response.data)
        self.assertEqual(response.data["reason"], "invalid_payment_method")

    def test_missing_schedule_is_not_found(self) -> None:
        payload = self._payload(1)
        payload["schedule"] = self.schedule.pk + 100

        response = self.client.post(self.list_url, payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND, response.data)

    def test_anonymous_cannot_book(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.post(self.list_url, self._payload(1), format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_cancel_restores_seats_and_is_idempotent(self) -> None:
        created = self.client.post(self.list_url, self._payload(3), format="json")
        cancel_url = reverse("booking-cancel", args=[created.data["id"]])

        first = self.client.post(cancel_url, {"reason": "Plans changed"}, format="json")
        second = self.client.post(cancel_url, {}, format="json")

        self.assertEqual(first.status_code, status.HTTP_200_OK, first.data)
        self.assertEqual(first.data["status"], "cancelled")
        self.assertEqual(first.data["cancellation_reason"], "Plans changed")
        self.assertEqual(second.status_code, status.HTTP_200_OK, second.data)
        self.assertEqual(self._available(), 5)

    def test_list_shows_only_own_bookings(self) -> None:
        self.client.post(self.list_url, self._payload(1), format="json")
        self.client.force_authenticate(self.other)
        self.client.post(self.list_url, self._payload(1), format="json")

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["traveller_email"] for item in response.data], ["other@example.com"])

    def test_vendor_sees_bookings_of_their_trips(self) -> None:
        self.client.post(self.list_url, self._payload(2), format="json")
        self.client.force_authenticate(self.vendor)

        response = self.client.get(self.list_url, {"trip": self.trip.pk})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_other_traveller_cannot_cancel(self) -> None:
        created = self.client.post(self.list_url, self._payload(2), format="json")
        self.client.force_authenticate(self.other)

        response = self.client.post(reverse("booking-cancel", args=[created.data["id"]]), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self._available(), 3)

    def test_vendor_records_failed_payment(self) -> None:
        created = self.client.post(self.list_url, self._payload(2, "online"), format="json")
        self.client.force_authenticate(self.vendor)

        response = self.client.post(
            reverse("booking-payment", args=[created.data["id"]]), {"succeeded": False}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["payment_status"], "failed")
        self.assertEqual(response.data["status"], "cancelled")
        self.assertEqual(self._available(), 5)

    def test_traveller_cannot_confirm_own_payment(self) -> None:
        created = self.client.post(self.list_url, self._payload(2), format="json")

        response = self.client.post(
            reverse("booking-payment", args=[created.data["id"]]), {"succeeded": True}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["code"], "forbidden")

    def test_admin_status_moderation(self) -> None:
        created = self.client.post(self.list_url, self._payload(2), format="json")
        status_url = reverse("booking-set-status", args=[created.data["id"]])

        denied = self.client.post(status_url, {"status": "cancelled"}, format="json")
        self.assertEqual(denied.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        cancelled = self.client.post(status_url, {"status": "cancelled", "reason": "Landslide"}, format="json")
        revived = self.client.post(status_url, {"status": "confirmed"}, format="json")

        self.assertEqual(cancelled.status_code, status.HTTP_200_OK, cancelled.data)
        self.assertEqual(cancelled.data["status"], "cancelled")
        self.assertEqual(revived.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(revived.data["code"], "invalid_transition")
        self.assertEqual(self._available(), 5)
