"""
Domain Errors

Every failure the booking core reports to its callers. Business rejections
(InsufficientSeats, Forbidden, InvalidTransition, DuplicatePending,
BookingRejected, InvalidRoleSet) are returned directly and never retried.
TransientStorageFault is retried once locally and then surfaced as
BookingFailed or OperationFailed.
"""

from enum import Enum


class DomainError(Exception):
    """Base class for all domain errors"""

    code = 'domain_error'
    default_message = 'The operation could not be completed.'

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(DomainError):
    """Schedule, trip, booking or application is absent (or inactive)"""

    code = 'not_found'
    default_message = 'The requested resource was not found.'


class InsufficientSeats(DomainError):
    """Schedule capacity is exhausted for the requested seat count"""

    code = 'insufficient_seats'
    default_message = 'Not enough seats are left on this schedule.'

    def __init__(self, message: str | None = None, *, requested: int | None = None, available: int | None = None):
        self.requested = requested
        self.available = available
        super().__init__(message)


class Forbidden(DomainError):
    """Principal lacks the capability required for the operation"""

    code = 'forbidden'
    default_message = 'You do not have permission to perform this action.'

    def __init__(self, message: str | None = None, *, capability: str | None = None):
        self.capability = capability
        if message is None and capability:
            message = f"This action requires the '{capability}' capability."
        super().__init__(message)


class InvalidTransition(DomainError):
    """State machine misuse (booking, payment or vendor application)"""

    code = 'invalid_transition'
    default_message = 'This status change is not allowed.'

    def __init__(self, message: str | None = None, *, current: str | None = None, target: str | None = None):
        self.current = current
        self.target = target
        if message is None and current is not None and target is not None:
            message = f"Cannot move from '{current}' to '{target}'."
        super().__init__(message)


class DuplicatePending(DomainError):
    """Applicant already has a pending vendor application"""

    code = 'duplicate_pending'
    default_message = 'You already have a vendor application awaiting review.'


class InvalidRoleSet(DomainError):
    """Capability set would be empty, lack 'user' or name an unknown capability"""

    code = 'invalid_role_set'
    default_message = "A capability set must contain at least 'user'."


class TransientStorageFault(DomainError):
    """Storage was temporarily unreachable; the operation may be retried"""

    code = 'transient_storage_fault'
    default_message = 'Storage is temporarily unavailable. Please try again.'


class OperationFailed(DomainError):
    """A non-booking operation failed after its retry was exhausted"""

    code = 'operation_failed'
    default_message = 'The operation failed. Please try again shortly.'


class BookingFailed(OperationFailed):
    """Booking could not be created; no seats remain held for it"""

    code = 'booking_failed'
    default_message = 'Your booking could not be completed and no seats were held. Please try again.'


class RejectionReason(str, Enum):
    NO_CAPACITY = 'no_capacity'
    INVALID_PARTY_SIZE = 'invalid_party_size'
    INVALID_PAYMENT_METHOD = 'invalid_payment_method'


class BookingRejected(DomainError):
    """Booking request refused for a business reason; nothing was written"""

    code = 'booking_rejected'

    MESSAGES = {
        RejectionReason.NO_CAPACITY: 'Not enough seats are left on the selected date.',
        RejectionReason.INVALID_PARTY_SIZE: 'The number of travellers is not allowed for this trip.',
        RejectionReason.INVALID_PAYMENT_METHOD: 'Unsupported payment method.',
    }

    def __init__(self, reason: RejectionReason, message: str | None = None):
        self.reason = reason
        super().__init__(message or self.MESSAGES[reason])
