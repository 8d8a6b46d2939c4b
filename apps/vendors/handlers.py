"""Subscribers for vendor application events."""

from __future__ import annotations

import structlog

from .events import VendorApplicationApproved, VendorApplicationRejected

logger = structlog.get_logger("apps.vendors.audit")


def enqueue_capability_grant(event: VendorApplicationApproved) -> None:
    from .tasks import grant_vendor_capability

    grant_vendor_capability.delay(event.application_id)


def log_review(event: VendorApplicationApproved | VendorApplicationRejected) -> None:
    logger.info(
        "vendor_application.reviewed",
        event_id=str(event.event_id),
        application_id=event.application_id,
        applicant_id=event.applicant_id,
        reviewer_id=event.reviewer_id,
        decision="approved" if isinstance(event, VendorApplicationApproved) else "rejected",
    )


def register() -> None:
    from shared.application.message_bus import message_bus

    message_bus.subscribe(VendorApplicationApproved, log_review)
    message_bus.subscribe(VendorApplicationApproved, enqueue_capability_grant)
    message_bus.subscribe(VendorApplicationRejected, log_review)
