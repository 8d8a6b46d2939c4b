"""Subscribers for booking domain events."""

from __future__ import annotations

import structlog

from .domain.events import BookingCancelled, BookingCreated, PaymentRecorded

logger = structlog.get_logger("apps.bookings.audit")


def log_booking_created(event: BookingCreated) -> None:
    logger.info(
        "booking.created",
        event_id=str(event.event_id),
        booking_id=event.booking_id,
        user_id=event.user_id,
        schedule_id=event.schedule_id,
        party_size=event.party_size,
        total=str(event.total),
        payment_method=event.payment_method,
    )


def log_booking_cancelled(event: BookingCancelled) -> None:
    logger.info(
        "booking.cancelled",
        event_id=str(event.event_id),
        booking_id=event.booking_id,
        schedule_id=event.schedule_id,
        released_seats=event.party_size,
        cancelled_by=event.cancelled_by,
        reason=event.reason,
    )


def log_payment_recorded(event: PaymentRecorded) -> None:
    logger.info(
        "booking.payment_recorded",
        event_id=str(event.event_id),
        booking_id=event.booking_id,
        payment_status=event.payment_status,
        recorded_by=event.recorded_by,
    )


def register() -> None:
    from shared.application.message_bus import message_bus

    message_bus.subscribe(BookingCreated, log_booking_created)
    message_bus.subscribe(BookingCancelled, log_booking_cancelled)
    message_bus.subscribe(PaymentRecorded, log_payment_recorded)
