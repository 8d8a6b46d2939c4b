"""
Reservation Coordinator

The use cases of the booking domain. Each one orchestrates the seat
inventory and the booking ledger so that a booking exists if and only
if its seats are held:

- create_booking: reserve seats, then record the booking; release the
  seats again if the booking cannot be recorded
- cancel_booking: flip the booking to cancelled and release its seats in
  one transaction, exactly once
- record_payment: store the payment outcome; a failed payment cancels
  the booking
- set_booking_status: administrator moderation of the booking status

Transient storage faults are retried once per step. Business rejections
are never retried.
"""

from __future__ import annotations

import logging

from django.db import DatabaseError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.trips import inventory
from apps.trips.models import Schedule, Trip
from apps.users.access import access_checker
from apps.users.capabilities import Capability
from shared.application.retry import TRANSIENT_DB_ERRORS, call_with_retry
from shared.application.uow import UnitOfWork
from shared.domain.exceptions import (
    BookingFailed,
    BookingRejected,
    Forbidden,
    InsufficientSeats,
    InvalidTransition,
    NotFound,
    OperationFailed,
    RejectionReason,
    TransientStorageFault,
)

from apps.bookings.domain.events import BookingCancelled, BookingCreated, PaymentRecorded
from apps.bookings.domain.lifecycle import (
    BOOKING_TRANSITIONS,
    PAYMENT_TRANSITIONS,
    BookingStatus,
    PaymentMethod,
    PaymentStatus,
    ensure_transition,
    sources_for,
)
from apps.bookings.models import Booking

logger = logging.getLogger(__name__)


class ReservationCoordinator:

    def __init__(self, inventory_store=inventory, access=access_checker):
        self.inventory = inventory_store
        self.access = access

    # ===== create =====

    def create_booking(self, user_id, trip_id, schedule_id, party_size, payment_method) -> Booking:
        """
        Reserve ``party_size`` seats on a schedule and record the booking.

        Raises:
            NotFound: trip inactive or missing, or schedule not part of it
            BookingRejected: invalid party size or payment method, or no capacity
            BookingFailed: storage failed; no seats remain held for the request
        """
        if payment_method not in PaymentMethod.values:
            raise BookingRejected(RejectionReason.INVALID_PAYMENT_METHOD)

        trip = self._load_bookable_trip(trip_id, schedule_id)
        if isinstance(party_size, bool) or not isinstance(party_size, int) or not 1 <= party_size <= trip.max_seats:
            raise BookingRejected(
                RejectionReason.INVALID_PARTY_SIZE,
                f"A booking must be for 1 to {trip.max_seats} travellers.",
            )
        total = trip.price_for(party_size)

        try:
            call_with_retry(self.inventory.reserve, schedule_id, party_size, label="reserve")
        except InsufficientSeats as exc:
            raise BookingRejected(RejectionReason.NO_CAPACITY) from exc
        except TransientStorageFault as exc:
            raise BookingFailed() from exc

        try:
            booking = call_with_retry(
                self._record_booking,
                user_id, trip, schedule_id, party_size, total, payment_method,
                label="record_booking",
            )
        except (TransientStorageFault, DatabaseError) as exc:
            self._compensate(schedule_id, party_size)
            raise BookingFailed() from exc

        logger.info(
            "Booking %s created: %d seats on schedule %s for user %s (%s)",
            booking.booking_code, party_size, schedule_id, user_id, total,
        )
        return booking

    def _load_bookable_trip(self, trip_id, schedule_id) -> Trip:
        try:
            trip = Trip.objects.filter(pk=trip_id, is_active=True).first()
            belongs = trip is not None and Schedule.objects.filter(pk=schedule_id, trip_id=trip.pk).exists()
        except TRANSIENT_DB_ERRORS as exc:
            raise BookingFailed() from exc
        if trip is None:
            raise NotFound("Trip not found.")
        if not belongs:
            raise NotFound("Schedule not found.")
        return trip

    def _record_booking(self, user_id, trip, schedule_id, party_size, total, payment_method) -> Booking:
        with UnitOfWork() as uow:
            # Cash is collected at the meeting point, online payments are
            # confirmed by record_payment; both start out pending.
            booking = Booking.objects.create(
                user_id=user_id,
                trip=trip,
                schedule_id=schedule_id,
                party_size=party_size,
                total_amount=total.amount,
                currency=total.currency,
                payment_method=payment_method,
                payment_status=PaymentStatus.PENDING,
                status=BookingStatus.CONFIRMED,
            )
            booking.add_event(
                BookingCreated(
                    aggregate_id=booking.pk,
                    booking_id=booking.pk,
                    user_id=user_id,
                    trip_id=trip.pk,
                    schedule_id=schedule_id,
                    party_size=party_size,
                    total=total,
                    payment_method=payment_method,
                )
            )
            uow.collect_events(booking)
        return booking

    def _compensate(self, schedule_id, seats: int) -> None:
        try:
            call_with_retry(self.inventory.release, schedule_id, seats, label="compensating_release")
        except (TransientStorageFault, NotFound):
            logger.critical(
                "Compensating release failed: %d seats on schedule %s are held without a booking",
                seats, schedule_id,
                exc_info=True,
            )
        else:
            logger.warning("Released %d seats on schedule %s after a failed booking write", seats, schedule_id)

    # ===== cancel =====

    def cancel_booking(self, booking_id, principal_id, reason: str = "") -> Booking:
        """
        Cancel a booking and give its seats back.

        Idempotent: cancelling an already cancelled booking returns it
        unchanged and releases nothing.
        """
        booking = self._load(booking_id)
        if booking.user_id != principal_id and not self.access.has_capability(principal_id, Capability.ADMIN):
            raise Forbidden("Only the traveller who booked or an administrator can cancel this booking.")
        try:
            return call_with_retry(self._cancel_once, booking.pk, principal_id, reason, label="cancel_booking")
        except TransientStorageFault as exc:
            raise OperationFailed("The booking could not be cancelled. Please try again.") from exc

    def _cancel_once(self, booking_id, principal_id, reason: str) -> Booking:
        now = timezone.now()
        with UnitOfWork() as uow:
            changed = Booking.objects.filter(
                pk=booking_id,
                status__in=sources_for(BOOKING_TRANSITIONS, BookingStatus.CANCELLED),
            ).update(
                status=BookingStatus.CANCELLED,
                cancelled_at=now,
                cancelled_by_id=principal_id,
                cancellation_reason=(reason or "")[:255],
                updated_at=now,
            )
            booking = Booking.objects.get(pk=booking_id)
            if changed:
                # Same transaction as the status flip: seats go back exactly once.
                self.inventory.release(booking.schedule_id, booking.party_size)
                booking.add_event(
                    BookingCancelled(
                        aggregate_id=booking.pk,
                        booking_id=booking.pk,
                        schedule_id=booking.schedule_id,
                        party_size=booking.party_size,
                        cancelled_by=principal_id,
                        reason=booking.cancellation_reason,
                    )
                )
                uow.collect_events(booking)
        if changed:
            logger.info(
                "Booking %s cancelled by %s, %d seats released on schedule %s",
                booking.booking_code, principal_id, booking.party_size, booking.schedule_id,
            )
        else:
            logger.info("Booking %s was already cancelled", booking.booking_code)
        return booking

    # ===== payment =====

    def record_payment(self, booking_id, principal_id, succeeded: bool) -> Booking:
        """
        Record the outcome of a booking's payment.

        Allowed for administrators and for the vendor running the trip,
        who collects cash payments. A failed payment cancels the booking.
        """
        booking = self._load(booking_id)
        if booking.trip.vendor_id != principal_id and not self.access.has_capability(principal_id, Capability.ADMIN):
            raise Forbidden("Only the trip's vendor or an administrator can record payments.")

        target = PaymentStatus.CONFIRMED if succeeded else PaymentStatus.FAILED
        if booking.status == BookingStatus.CANCELLED:
            raise InvalidTransition("A payment cannot be recorded for a cancelled booking.")
        ensure_transition(PAYMENT_TRANSITIONS, booking.payment_status, target)

        try:
            booking = call_with_retry(
                self._record_payment_once, booking.pk, principal_id, target,
                label="record_payment",
            )
        except TransientStorageFault as exc:
            raise OperationFailed("The payment could not be recorded. Please try again.") from exc
        logger.info("Payment of booking %s recorded as %s by %s", booking.booking_code, target, principal_id)
        return booking

    def _record_payment_once(self, booking_id, principal_id, target: str) -> Booking:
        with UnitOfWork() as uow:
            changed = (
                Booking.objects.filter(
                    pk=booking_id,
                    payment_status__in=sources_for(PAYMENT_TRANSITIONS, target),
                )
                .exclude(status=BookingStatus.CANCELLED)
                .update(payment_status=target, updated_at=timezone.now())
            )
            if not changed:
                current = Booking.objects.get(pk=booking_id)
                raise InvalidTransition(current=current.payment_status, target=target)

            if target == PaymentStatus.FAILED:
                self._cancel_once(booking_id, principal_id, "Payment failed")

            booking = Booking.objects.select_related("trip").get(pk=booking_id)
            booking.add_event(
                PaymentRecorded(
                    aggregate_id=booking.pk,
                    booking_id=booking.pk,
                    payment_status=target,
                    recorded_by=principal_id,
                )
            )
            uow.collect_events(booking)
        return booking

    # ===== moderation =====

    def set_booking_status(self, booking_id, principal_id, status: str, reason: str = "") -> Booking:
        """Administrator status change; cancellations release seats."""
        self.access.require(principal_id, Capability.ADMIN)
        if status == BookingStatus.CANCELLED:
            return self.cancel_booking(booking_id, principal_id, reason)

        booking = self._load(booking_id)
        ensure_transition(BOOKING_TRANSITIONS, booking.status, status)
        try:
            changed = call_with_retry(
                lambda: Booking.objects.filter(pk=booking.pk, status=booking.status).update(
                    status=status, updated_at=timezone.now()
                ),
                label="set_booking_status",
            )
        except TransientStorageFault as exc:
            raise OperationFailed("The booking status could not be changed. Please try again.") from exc
        if not changed:
            booking.refresh_from_db()
            raise InvalidTransition(current=booking.status, target=str(status))
        booking.refresh_from_db()
        logger.info("Booking %s moved to %s by %s", booking.booking_code, status, principal_id)
        return booking

    # ===== helpers =====

    def _load(self, booking_id) -> Booking:
        try:
            booking = Booking.objects.select_related("trip").filter(pk=booking_id).first()
        except TRANSIENT_DB_ERRORS as exc:
            raise OperationFailed() from exc
        if booking is None:
            raise NotFound("Booking not found.")
        return booking


reservation_coordinator = ReservationCoordinator()
