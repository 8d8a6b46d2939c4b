"""
Schedule Inventory Store

The only writer of ``Schedule.available_seats``. Every mutation is a
single conditional UPDATE evaluated by the database, so concurrent
reservations can never drive the count below zero or above capacity
and no application-level lock is needed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.db.models import F  # type: ignore
from django.db.models.functions import Least  # type: ignore

from shared.application.retry import TRANSIENT_DB_ERRORS, as_transient
from shared.domain.exceptions import InsufficientSeats, NotFound

from .models import Schedule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Availability:
    schedule_id: int
    capacity: int
    available: int
    active: bool

    @property
    def booked(self) -> int:
        return self.capacity - self.available


def _validate_count(count: int) -> None:
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ValueError(f"Seat count must be a positive integer, got {count!r}")


def get_availability(schedule_id) -> Availability:
    """Current seat counts of an active schedule."""
    try:
        row = (
            Schedule.objects.filter(pk=schedule_id, is_active=True)
            .values("capacity", "available_seats", "is_active")
            .first()
        )
    except TRANSIENT_DB_ERRORS as exc:
        raise as_transient(exc) from exc
    if row is None:
        raise NotFound("Schedule not found.")
    return Availability(
        schedule_id=schedule_id,
        capacity=row["capacity"],
        available=row["available_seats"],
        active=row["is_active"],
    )


def reserve(schedule_id, count: int) -> None:
    """
    Take ``count`` seats from an active schedule, all or nothing.

    Raises:
        NotFound: schedule is absent or retired
        InsufficientSeats: fewer than ``count`` seats are left
        TransientStorageFault: the database could not be reached
    """
    _validate_count(count)
    try:
        updated = Schedule.objects.filter(
            pk=schedule_id,
            is_active=True,
            available_seats__gte=count,
        ).update(available_seats=F("available_seats") - count)
        if updated:
            logger.debug("Reserved %d seats on schedule %s", count, schedule_id)
            return
        # Nothing matched: read once to tell the caller why.
        row = Schedule.objects.filter(pk=schedule_id).values("is_active", "available_seats").first()
    except TRANSIENT_DB_ERRORS as exc:
        raise as_transient(exc) from exc

    if row is None or not row["is_active"]:
        raise NotFound("Schedule not found.")
    logger.info(
        "Schedule %s cannot hold %d more seats (%d left)",
        schedule_id, count, row["available_seats"],
    )
    raise InsufficientSeats(requested=count, available=row["available_seats"])


def release(schedule_id, count: int) -> None:
    """
    Return ``count`` seats to a schedule, never exceeding its capacity.

    Retired schedules accept releases so that late cancellations still
    give their seats back.
    """
    _validate_count(count)
    try:
        updated = Schedule.objects.filter(pk=schedule_id).update(
            available_seats=Least(F("available_seats") + count, F("capacity"))
        )
    except TRANSIENT_DB_ERRORS as exc:
        raise as_transient(exc) from exc
    if not updated:
        raise NotFound("Schedule not found.")
    logger.debug("Released %d seats on schedule %s", count, schedule_id)
