"""Shared pytest fixtures: marketplace users, trips and schedules."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.trips.models import Schedule, Trip
from apps.users.access import access_checker
from apps.users.models import User


@pytest.fixture
def traveller(db):
    return User.objects.create_user(email="traveller@example.com", password="pass12345", full_name="Asha Rao")


@pytest.fixture
def other_traveller(db):
    return User.objects.create_user(email="friend@example.com", password="pass12345", full_name="Ravi Kumar")


@pytest.fixture
def vendor(db):
    user = User.objects.create_user(email="vendor@example.com", password="pass12345", full_name="Hill Treks")
    access_checker.set_capabilities(user.pk, ["user", "vendor"])
    return user


@pytest.fixture
def platform_admin(db):
    return User.objects.create_superuser(email="admin@example.com", password="pass12345")


@pytest.fixture
def trip(vendor):
    return Trip.objects.create(
        vendor=vendor,
        title="Hampta Pass Trek",
        location="Manali, Himachal Pradesh",
        price_per_person=Decimal("4500.00"),
        max_seats=6,
        duration_days=5,
        duration_nights=4,
    )


@pytest.fixture
def make_schedule(trip):
    def _make(capacity: int = 5, days_ahead: int = 30, **extra) -> Schedule:
        start = timezone.localdate() + timedelta(days=days_ahead)
        return Schedule.objects.create(
            trip=extra.pop("trip", trip),
            start_date=start,
            end_date=start + timedelta(days=4),
            capacity=capacity,
            **extra,
        )

    return _make


@pytest.fixture
def schedule(make_schedule):
    return make_schedule(capacity=5)
