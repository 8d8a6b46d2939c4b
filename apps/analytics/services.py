"""Aggregations behind the admin and vendor dashboards.

Revenue counts every booking that still holds its seats, i.e. all
bookings that are not cancelled, whatever their payment status.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from django.db.models import Count, Sum  # type: ignore
from django.db.models.functions import TruncMonth  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.trips.models import Schedule, Trip
from apps.users.capabilities import Capability
from apps.users.models import RoleAssignment

TOP_LOCATIONS = 5


def _revenue(bookings) -> Decimal:
    return bookings.aggregate(total=Sum("total_amount"))["total"] or Decimal("0.00")


def monthly_revenue(bookings) -> list[dict]:
    rows = (
        bookings.annotate(month=TruncMonth("created_at"))
        .values("month")
        .annotate(revenue=Sum("total_amount"), bookings=Count("id"))
        .order_by("month")
    )
    return [
        {"month": row["month"].strftime("%Y-%m"), "revenue": row["revenue"], "bookings": row["bookings"]}
        for row in rows
    ]


def top_locations(bookings, limit: int = TOP_LOCATIONS) -> list[dict]:
    rows = (
        bookings.values("trip__location")
        .annotate(bookings=Count("id"), travellers=Sum("party_size"))
        .order_by("-bookings", "trip__location")[:limit]
    )
    return [
        {"location": row["trip__location"], "bookings": row["bookings"], "travellers": row["travellers"]}
        for row in rows
    ]


def admin_overview() -> dict:
    bookings = Booking.objects.all()
    held = bookings.exclude(status=Booking.Status.CANCELLED)
    return {
        "users": get_user_model().objects.count(),
        "vendors": RoleAssignment.objects.filter(capability=Capability.VENDOR).count(),
        "trips": Trip.objects.count(),
        "active_trips": Trip.objects.filter(is_active=True).count(),
        "bookings": bookings.count(),
        "cancelled_bookings": bookings.filter(status=Booking.Status.CANCELLED).count(),
        "revenue": _revenue(held),
        "currency": settings.TRIPNEST_CURRENCY,
        "monthly_revenue": monthly_revenue(held),
        "top_locations": top_locations(held),
    }


def vendor_overview(vendor_id) -> dict:
    trips = Trip.objects.filter(vendor_id=vendor_id)
    bookings = Booking.objects.filter(trip__vendor_id=vendor_id)
    held = bookings.exclude(status=Booking.Status.CANCELLED)
    upcoming = Schedule.objects.filter(
        trip__vendor_id=vendor_id,
        is_active=True,
        start_date__gte=timezone.localdate(),
    )
    return {
        "trips": trips.count(),
        "active_trips": trips.filter(is_active=True).count(),
        "upcoming_schedules": upcoming.count(),
        "seats_available": upcoming.aggregate(total=Sum("available_seats"))["total"] or 0,
        "bookings": held.count(),
        "travellers": held.aggregate(total=Sum("party_size"))["total"] or 0,
        "pending_payments": held.filter(payment_status=Booking.PaymentStatus.PENDING).count(),
        "revenue": _revenue(held),
        "currency": settings.TRIPNEST_CURRENCY,
        "monthly_revenue": monthly_revenue(held),
    }
