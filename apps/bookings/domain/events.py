"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from typing import Any

from shared.domain.base import DomainEvent
from shared.domain.value_objects import Money


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """
    Event: seats were reserved and a booking recorded for them

    Triggers:
    - Booking audit log
    - Vendor dashboard figures
    """
    booking_id: Any
    user_id: Any
    trip_id: Any
    schedule_id: Any
    party_size: int
    total: Money
    payment_method: str


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """Event: a booking moved to cancelled and its seats were released"""
    booking_id: Any
    schedule_id: Any
    party_size: int
    cancelled_by: Any
    reason: str = ''


@dataclass(kw_only=True)
class PaymentRecorded(DomainEvent):
    """Event: the payment outcome of a booking was recorded"""
    booking_id: Any
    payment_status: str
    recorded_by: Any
