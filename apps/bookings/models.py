"""Booking ledger models for TripNest."""

from __future__ import annotations

import secrets
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import Aggregate
from shared.domain.value_objects import Money

from .domain.lifecycle import BookingStatus, PaymentMethod, PaymentStatus


class Booking(Aggregate, models.Model):
    """
    Seats on one trip schedule booked by one traveller.

    Status columns are only changed through
    ``apps.bookings.application.coordinator`` so that seat inventory and
    booking state stay consistent.
    """

    Status = BookingStatus
    PaymentStatus = PaymentStatus
    PaymentMethod = PaymentMethod

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="bookings",
    )
    trip = models.ForeignKey(
        "trips.Trip",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    schedule = models.ForeignKey(
        "trips.Schedule",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    booking_code = models.CharField(max_length=12, unique=True, editable=False)
    party_size = models.PositiveSmallIntegerField(_("Travellers"))
    total_amount = models.DecimalField(
        _("Total amount"),
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
    )
    currency = models.CharField(max_length=3, default="INR")
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.PENDING,
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    cancellation_reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(party_size__gte=1),
                name="booking_party_size_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name="booking_total_not_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["schedule", "status"], name="booking_schedule_status_idx"),
            models.Index(fields=["user", "-created_at"], name="booking_user_created_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.booking_code} for trip {self.trip_id}"

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding and not self.booking_code:
            self.booking_code = self.generate_booking_code()
        super().save(*args, **kwargs)

    @staticmethod
    def generate_booking_code() -> str:
        return secrets.token_hex(4).upper()

    @property
    def total(self) -> Money:
        return Money(self.total_amount, self.currency)
