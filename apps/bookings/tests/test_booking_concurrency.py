"""Concurrent reservations against one schedule never oversell it."""

from __future__ import annotations

import threading

import pytest
from django.db import connections
from django.db.models import Sum

from apps.bookings.application.coordinator import reservation_coordinator
from apps.bookings.models import Booking
from apps.trips import inventory
from shared.domain.exceptions import BookingRejected, InsufficientSeats


@pytest.mark.django_db(transaction=True)
def test_parallel_requests_never_exceed_capacity(traveller, make_schedule):
    schedule = make_schedule(capacity=10)
    outcomes: list[str] = []
    lock = threading.Lock()
    barrier = threading.Barrier(8)

    def attempt():
        barrier.wait()
        try:
            reservation_coordinator.create_booking(traveller.pk, schedule.trip_id, schedule.pk, 2, "cash")
            result = "booked"
        except BookingRejected as exc:
            result = exc.reason.value
        finally:
            connections.close_all()
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=attempt) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    schedule.refresh_from_db()
    held = Booking.objects.filter(schedule=schedule).aggregate(total=Sum("party_size"))["total"]
    assert outcomes.count("booked") == 5
    assert outcomes.count("no_capacity") == 3
    assert schedule.available_seats == 0
    assert held == 10


@pytest.mark.django_db(transaction=True)
def test_parallel_single_seat_reservations(make_schedule):
    schedule = make_schedule(capacity=8)
    successes: list[int] = []
    rejections: list[int] = []
    lock = threading.Lock()
    barrier = threading.Barrier(12)

    def attempt(n):
        barrier.wait()
        try:
            inventory.reserve(schedule.pk, 1)
            bucket = successes
        except InsufficientSeats:
            bucket = rejections
        finally:
            connections.close_all()
        with lock:
            bucket.append(n)

    threads = [threading.Thread(target=attempt, args=(n,)) for n in range(12)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    schedule.refresh_from_db()
    assert len(successes) == 8
    assert len(rejections) == 4
    assert schedule.available_seats == 0


@pytest.mark.django_db(transaction=True)
def test_three_simultaneous_parties_of_two_on_five_seats(traveller, other_traveller, schedule):
    outcomes: list[str] = []
    lock = threading.Lock()
    barrier = threading.Barrier(3)

    def attempt(user):
        barrier.wait()
        try:
            reservation_coordinator.create_booking(user.pk, schedule.trip_id, schedule.pk, 2, "cash")
            result = "booked"
        except BookingRejected as exc:
            result = exc.reason.value
        finally:
            connections.close_all()
        with lock:
            outcomes.append(result)

    users = [traveller, other_traveller, traveller]
    threads = [threading.Thread(target=attempt, args=(user,)) for user in users]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    schedule.refresh_from_db()
    assert sorted(outcomes) == ["booked", "booked", "no_capacity"]
    assert schedule.available_seats == 1
    assert Booking.objects.filter(schedule=schedule).count() == 2
