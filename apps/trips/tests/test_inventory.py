from __future__ import annotations

from unittest import mock

import pytest
from django.db import OperationalError

from apps.trips import inventory
from apps.trips.models import Schedule
from shared.domain.exceptions import InsufficientSeats, NotFound, TransientStorageFault


@pytest.mark.django_db
def test_new_schedule_starts_with_all_seats_available(schedule):
    snapshot = inventory.get_availability(schedule.pk)
    assert snapshot.capacity == 5
    assert snapshot.available == 5
    assert snapshot.booked == 0


@pytest.mark.django_db
def test_reserve_takes_seats(schedule):
    inventory.reserve(schedule.pk, 2)
    inventory.reserve(schedule.pk, 3)

    schedule.refresh_from_db()
    assert schedule.available_seats == 0


@pytest.mark.django_db
def test_reserve_is_all_or_nothing(schedule):
    inventory.reserve(schedule.pk, 4)

    with pytest.raises(InsufficientSeats) as excinfo:
        inventory.reserve(schedule.pk, 2)

    assert excinfo.value.requested == 2
    assert excinfo.value.available == 1
    schedule.refresh_from_db()
    assert schedule.available_seats == 1


@pytest.mark.django_db
def test_sequential_reservations_never_oversell(make_schedule):
    schedule = make_schedule(capacity=7)
    granted = 0
    for _ in range(10):
        try:
            inventory.reserve(schedule.pk, 1)
            granted += 1
        except InsufficientSeats:
            pass

    schedule.refresh_from_db()
    assert granted == 7
    assert schedule.available_seats == 0


@pytest.mark.django_db
def test_reserve_on_retired_schedule_is_not_found(make_schedule):
    schedule = make_schedule(is_active=False)
    with pytest.raises(NotFound):
        inventory.reserve(schedule.pk, 1)
    with pytest.raises(NotFound):
        inventory.get_availability(schedule.pk)


@pytest.mark.django_db
def test_reserve_on_missing_schedule_is_not_found():
    with pytest.raises(NotFound):
        inventory.reserve(424242, 1)


@pytest.mark.django_db
@pytest.mark.parametrize("count", [0, -1, True])
def test_seat_count_must_be_positive(schedule, count):
    with pytest.raises(ValueError):
        inventory.reserve(schedule.pk, count)
    with pytest.raises(ValueError):
        inventory.release(schedule.pk, count)


@pytest.mark.django_db
def test_release_returns_seats(schedule):
    inventory.reserve(schedule.pk, 3)
    inventory.release(schedule.pk, 3)

    schedule.refresh_from_db()
    assert schedule.available_seats == 5


@pytest.mark.django_db
def test_release_never_exceeds_capacity(schedule):
    inventory.reserve(schedule.pk, 1)
    inventory.release(schedule.pk, 4)

    schedule.refresh_from_db()
    assert schedule.available_seats == schedule.capacity


@pytest.mark.django_db
def test_release_is_allowed_on_retired_schedule(schedule):
    inventory.reserve(schedule.pk, 2)
    Schedule.objects.filter(pk=schedule.pk).update(is_active=False)

    inventory.release(schedule.pk, 2)

    schedule.refresh_from_db()
    assert schedule.available_seats == 5


@pytest.mark.django_db
def test_release_on_missing_schedule_is_not_found():
    with pytest.raises(NotFound):
        inventory.release(424242, 1)


@pytest.mark.django_db
def test_connectivity_errors_surface_as_transient_faults(schedule):
    with mock.patch.object(Schedule.objects, "filter", side_effect=OperationalError("connection lost")):
        with pytest.raises(TransientStorageFault):
            inventory.reserve(schedule.pk, 1)
        with pytest.raises(TransientStorageFault):
            inventory.release(schedule.pk, 1)
