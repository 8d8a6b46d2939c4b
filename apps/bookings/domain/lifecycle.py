"""
Booking Lifecycle

Status vocabularies of a booking and the transitions allowed between
them. Two independent state machines live on every booking:

    booking:  pending -> confirmed -> cancelled
              pending -> cancelled
    payment:  pending -> confirmed
              pending -> failed

``cancelled``, payment ``confirmed`` and payment ``failed`` are terminal.
"""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.exceptions import InvalidTransition


class BookingStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    CONFIRMED = "confirmed", _("Confirmed")
    CANCELLED = "cancelled", _("Cancelled")


class PaymentStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    CONFIRMED = "confirmed", _("Confirmed")
    FAILED = "failed", _("Failed")


class PaymentMethod(models.TextChoices):
    CASH = "cash", _("Cash at meeting point")
    ONLINE = "online", _("Online")


BOOKING_TRANSITIONS: dict[str, frozenset[str]] = {
    BookingStatus.PENDING.value: frozenset({BookingStatus.CONFIRMED.value, BookingStatus.CANCELLED.value}),
    BookingStatus.CONFIRMED.value: frozenset({BookingStatus.CANCELLED.value}),
    BookingStatus.CANCELLED.value: frozenset(),
}

PAYMENT_TRANSITIONS: dict[str, frozenset[str]] = {
    PaymentStatus.PENDING.value: frozenset({PaymentStatus.CONFIRMED.value, PaymentStatus.FAILED.value}),
    PaymentStatus.CONFIRMED.value: frozenset(),
    PaymentStatus.FAILED.value: frozenset(),
}


def can_transition(transitions: dict[str, frozenset[str]], current: str, target: str) -> bool:
    # Keys are plain values; enum members hash by name.
    return str(target) in transitions.get(str(current), frozenset())


def ensure_transition(transitions: dict[str, frozenset[str]], current: str, target: str) -> None:
    if not can_transition(transitions, current, target):
        raise InvalidTransition(current=str(current), target=str(target))


def sources_for(transitions: dict[str, frozenset[str]], target: str) -> list[str]:
    """States from which ``target`` can be reached in one step."""
    return [state for state, targets in transitions.items() if str(target) in targets]
