"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "booking_code",
        "trip",
        "schedule",
        "user",
        "party_size",
        "status",
        "payment_status",
        "payment_method",
        "total_amount",
        "created_at",
    )
    list_filter = ("status", "payment_status", "payment_method")
    search_fields = ("booking_code", "trip__title", "user__email")
    # Status changes go through the reservation coordinator so seats stay in step.
    readonly_fields = (
        "booking_code",
        "user",
        "trip",
        "schedule",
        "party_size",
        "total_amount",
        "currency",
        "payment_method",
        "payment_status",
        "status",
        "cancelled_at",
        "cancelled_by",
        "cancellation_reason",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
