"""Trip catalogue models: categories, trips and their dated schedules."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import DateRange, Money


class Category(models.Model):
    name = models.CharField(_("Name"), max_length=100, unique=True)
    slug = models.SlugField(_("Slug"), max_length=100, unique=True)
    icon = models.CharField(_("Icon"), max_length=50, blank=True)

    class Meta:
        verbose_name = _("Category")
        verbose_name_plural = _("Categories")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Trip(models.Model):
    """A guided trip listed by a vendor."""

    vendor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="trips",
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="trips",
    )
    title = models.CharField(_("Title"), max_length=255)
    description = models.TextField(_("Description"), blank=True)
    location = models.CharField(_("Location"), max_length=255, db_index=True)
    meeting_point = models.CharField(_("Meeting point"), max_length=255, blank=True)
    price_per_person = models.DecimalField(
        _("Price per person"),
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    max_seats = models.PositiveSmallIntegerField(
        _("Max seats per booking"),
        default=10,
        validators=[MinValueValidator(1)],
    )
    duration_days = models.PositiveSmallIntegerField(_("Days"), default=1)
    duration_nights = models.PositiveSmallIntegerField(_("Nights"), default=0)
    itinerary = models.TextField(_("Itinerary"), blank=True)
    inclusions = models.TextField(_("Inclusions"), blank=True)
    exclusions = models.TextField(_("Exclusions"), blank=True)
    images = models.JSONField(_("Image URLs"), default=list, blank=True)
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Trip")
        verbose_name_plural = _("Trips")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_seats__gte=1),
                name="trip_max_seats_positive",
            ),
        ]
        indexes = [
            models.Index(fields=["is_active", "location"], name="trip_active_location_idx"),
        ]

    def __str__(self) -> str:
        return self.title

    def price_for(self, party_size: int) -> Money:
        return Money(self.price_per_person, settings.TRIPNEST_CURRENCY) * party_size


class Schedule(models.Model):
    """
    One dated departure of a trip with a fixed seat capacity.

    ``available_seats`` starts equal to ``capacity`` and afterwards is only
    changed by ``apps.trips.inventory``.
    """

    trip = models.ForeignKey(Trip, on_delete=models.CASCADE, related_name="schedules")
    start_date = models.DateField(_("Start date"))
    end_date = models.DateField(_("End date"))
    capacity = models.PositiveIntegerField(_("Capacity"), validators=[MinValueValidator(1)])
    available_seats = models.PositiveIntegerField(_("Available seats"))
    is_active = models.BooleanField(_("Active"), default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Schedule")
        verbose_name_plural = _("Schedules")
        ordering = ["start_date"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="schedule_valid_date_range",
            ),
            models.CheckConstraint(
                condition=models.Q(capacity__gte=1),
                name="schedule_capacity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(available_seats__gte=0)
                & models.Q(available_seats__lte=models.F("capacity")),
                name="schedule_available_within_capacity",
            ),
        ]
        indexes = [
            models.Index(fields=["trip", "is_active", "start_date"], name="schedule_trip_active_start_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.trip.title}: {self.start_date} - {self.end_date}"

    def save(self, *args, **kwargs):  # type: ignore
        if self._state.adding and self.available_seats is None:
            self.available_seats = self.capacity
        super().save(*args, **kwargs)

    @property
    def dates(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)

    @property
    def booked_seats(self) -> int:
        return self.capacity - self.available_seats

    def has_departed(self, today=None) -> bool:
        return self.dates.has_started(today or timezone.localdate())
