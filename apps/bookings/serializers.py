"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.lifecycle import BookingStatus
from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Booking request from a traveller.

    Business rules (capacity, party size limits, payment methods) are
    checked by the reservation coordinator, not here.
    """

    trip = serializers.IntegerField(min_value=1)
    schedule = serializers.IntegerField(min_value=1)
    party_size = serializers.IntegerField()
    payment_method = serializers.CharField(max_length=20)


class BookingSerializer(serializers.ModelSerializer):
    trip_title = serializers.ReadOnlyField(source="trip.title")
    location = serializers.ReadOnlyField(source="trip.location")
    start_date = serializers.ReadOnlyField(source="schedule.start_date")
    end_date = serializers.ReadOnlyField(source="schedule.end_date")
    traveller_email = serializers.ReadOnlyField(source="user.email")

    class Meta:
        model = Booking
        fields = [
            "id",
            "booking_code",
            "user",
            "traveller_email",
            "trip",
            "trip_title",
            "location",
            "schedule",
            "start_date",
            "end_date",
            "party_size",
            "total_amount",
            "currency",
            "payment_method",
            "payment_status",
            "status",
            "cancelled_at",
            "cancellation_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CancelBookingSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class RecordPaymentSerializer(serializers.Serializer):
    succeeded = serializers.BooleanField()


class SetBookingStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=BookingStatus.choices)
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
