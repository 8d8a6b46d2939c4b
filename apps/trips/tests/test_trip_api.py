"""API tests for the trip catalogue."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.trips.models import Category, Schedule, Trip
from apps.users.access import access_checker
from apps.users.models import User


class TripAPITests(APITestCase):
    def setUp(self) -> None:
        self.vendor = User.objects.create_user(email="vendor@example.com", password="pass12345")
        access_checker.set_capabilities(self.vendor.pk, ["user", "vendor"])
        self.other_vendor = User.objects.create_user(email="rival@example.com", password="pass12345")
        access_checker.set_capabilities(self.other_vendor.pk, ["user", "vendor"])
        self.traveller = User.objects.create_user(email="guest@example.com", password="pass12345")
        self.admin = User.objects.create_superuser(email="admin@example.com", password="pass12345")
        self.category = Category.objects.create(name="Trekking", slug="trekking")
        self.trip = Trip.objects.create(
            vendor=self.vendor,
            category=self.category,
            title="Kedarkantha Winter Trek",
            location="Uttarakhand",
            price_per_person=Decimal("7999.00"),
            max_seats=4,
        )
        self.start = timezone.localdate() + timedelta(days=20)

    def _payload(self, **overrides):
        payload = {
            "title": "Spiti Valley Road Trip",
            "location": "Spiti, Himachal Pradesh",
            "price_per_person": "12500.00",
            "max_seats": 6,
            "duration_days": 7,
            "duration_nights": 6,
            "category": self.category.pk,
            "images": ["https://cdn.example.com/spiti.jpg"],
        }
        payload.update(overrides)
        return payload

    def test_public_list_hides_inactive_trips(self) -> None:
        Trip.objects.create(
            vendor=self.vendor,
            title="Retired Trip",
            location="Goa",
            price_per_person=Decimal("100.00"),
            is_active=False,
        )
        response = self.client.get(reverse("trip-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        titles = [trip["title"] for trip in response.data]
        self.assertEqual(titles, ["Kedarkantha Winter Trek"])

    def test_filter_by_location_and_category(self) -> None:
        response = self.client.get(reverse("trip-list"), {"location": "uttara", "category": "trekking"})
        self.assertEqual(len(response.data), 1)
        response = self.client.get(reverse("trip-list"), {"location": "kerala"})
        self.assertEqual(len(response.data), 0)

    def test_detail_lists_upcoming_schedules(self) -> None:
        Schedule.objects.create(trip=self.trip, start_date=self.start, end_date=self.start, capacity=10)
        Schedule.objects.create(
            trip=self.trip,
            start_date=self.start,
            end_date=self.start,
            capacity=10,
            is_active=False,
        )
        response = self.client.get(reverse("trip-detail", args=[self.trip.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["upcoming_schedules"]), 1)
        self.assertEqual(response.data["upcoming_schedules"][0]["available_seats"], 10)

    def test_vendor_creates_trip_they_own(self) -> None:
        self.client.force_authenticate(self.vendor)
        response = self.client.post(reverse("trip-list"), self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        trip = Trip.objects.get(title="Spiti Valley Road Trip")
        self.assertEqual(trip.vendor, self.vendor)

    def test_traveller_cannot_create_trip(self) -> None:
        self.client.force_authenticate(self.traveller)
        response = self.client.post(reverse("trip-list"), self._payload(), format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_more_nights_than_days_is_rejected(self) -> None:
        self.client.force_authenticate(self.vendor)
        response = self.client.post(
            reverse("trip-list"),
            self._payload(duration_days=2, duration_nights=3),
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_vendor_cannot_edit_another_vendors_trip(self) -> None:
        self.client.force_authenticate(self.other_vendor)
        response = self.client.patch(
            reverse("trip-detail", args=[self.trip.pk]),
            {"title": "Hijacked"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_deactivates_any_trip(self) -> None:
        self.client.force_authenticate(self.admin)
        response = self.client.patch(
            reverse("trip-detail", args=[self.trip.pk]),
            {"is_active": False},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.trip.refresh_from_db()
        self.assertFalse(self.trip.is_active)

    def test_only_admin_deletes_trips(self) -> None:
        self.client.force_authenticate(self.vendor)
        response = self.client.delete(reverse("trip-detail", args=[self.trip.pk]))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.delete(reverse("trip-detail", args=[self.trip.pk]))
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Trip.objects.filter(pk=self.trip.pk).exists())

    def test_vendor_sees_own_inactive_trips_in_mine(self) -> None:
        Trip.objects.filter(pk=self.trip.pk).update(is_active=False)
        self.client.force_authenticate(self.vendor)
        response = self.client.get(reverse("trip-mine"))
        self.assertEqual([trip["id"] for trip in response.data], [self.trip.pk])


class TripScheduleAPITests(APITestCase):
    def setUp(self) -> None:
        self.vendor = User.objects.create_user(email="vendor@example.com", password="pass12345")
        access_checker.set_capabilities(self.vendor.pk, ["user", "vendor"])
        self.traveller = User.objects.create_user(email="guest@example.com", password="pass12345")
        self.trip = Trip.objects.create(
            vendor=self.vendor,
            title="Valley of Flowers",
            location="Chamoli",
            price_per_person=Decimal("9000.00"),
        )
        self.start = timezone.localdate() + timedelta(days=40)
        self.list_url = reverse("trip-schedule-list", args=[self.trip.pk])

    def test_owner_creates_schedule_with_full_availability(self) -> None:
        self.client.force_authenticate(self.vendor)
        response = self.client.post(
            self.list_url,
            {
                "start_date": self.start.isoformat(),
                "end_date": (self.start + timedelta(days=5)).isoformat(),
                "capacity": 12,
                "available_seats": 1,
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["available_seats"], 12)

    def test_schedule_end_before_start_is_rejected(self) -> None:
        self.client.force_authenticate(self.vendor)
        response = self.client.post(
            self.list_url,
            {
                "start_date": self.start.isoformat(),
                "end_date": (self.start - timedelta(days=1)).isoformat(),
                "capacity": 12,
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_traveller_cannot_create_schedule(self) -> None:
        self.client.force_authenticate(self.traveller)
        response = self.client.post(
            self.list_url,
            {"start_date": self.start.isoformat(), "end_date": self.start.isoformat(), "capacity": 3},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_retire_hides_schedule_from_public_and_availability(self) -> None:
        schedule = Schedule.objects.create(trip=self.trip, start_date=self.start, end_date=self.start, capacity=8)
        self.client.force_authenticate(self.vendor)
        response = self.client.post(reverse("trip-schedule-retire", args=[self.trip.pk, schedule.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data["is_active"])

        self.client.force_authenticate(None)
        response = self.client.get(self.list_url)
        self.assertEqual(response.data, [])

    def test_public_availability(self) -> None:
        schedule = Schedule.objects.create(trip=self.trip, start_date=self.start, end_date=self.start, capacity=8)
        response = self.client.get(reverse("trip-schedule-availability", args=[self.trip.pk, schedule.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["available"], 8)
        self.assertEqual(response.data["booked"], 0)
