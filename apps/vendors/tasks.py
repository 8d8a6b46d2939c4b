"""Celery tasks for vendor onboarding."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.db import DatabaseError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.users.access import access_checker
from apps.users.capabilities import Capability
from shared.domain.exceptions import OperationFailed

from .models import VendorApplication

logger = logging.getLogger(__name__)


@shared_task(
    name="vendors.grant_vendor_capability",
    autoretry_for=(DatabaseError, OperationFailed),
    retry_backoff=True,
    retry_backoff_max=600,
    max_retries=settings.TRIPNEST_VENDOR_GRANT_MAX_RETRIES,
)
def grant_vendor_capability(application_id: int) -> bool:
    """
    Give the applicant of an approved application the vendor capability.

    Safe to run more than once: the grant is idempotent and the grant
    timestamp is only stamped the first time.
    """
    application = VendorApplication.objects.filter(pk=application_id).first()
    if application is None or application.status != VendorApplication.Status.APPROVED:
        logger.warning("Skipping capability grant for application %s: not approved", application_id)
        return False
    if application.capability_granted_at is not None:
        return True

    access_checker.grant(application.applicant_id, Capability.VENDOR, granted_by=application.reviewer_id)
    VendorApplication.objects.filter(pk=application.pk, capability_granted_at__isnull=True).update(
        capability_granted_at=timezone.now()
    )
    logger.info("Vendor capability granted to user %s (application %s)", application.applicant_id, application.pk)
    return True


# ============================================================================
# PERIODIC TASKS (run by Celery Beat)
# ============================================================================

@shared_task(name="vendors.retry_pending_capability_grants")
def retry_pending_capability_grants() -> dict[str, int]:
    """
    Re-enqueue grants of approved applications that never completed.

    Runs every five minutes through Celery Beat.

    Returns:
        dict: {"enqueued": number of grants re-enqueued}
    """
    pending = list(
        VendorApplication.objects.filter(
            status=VendorApplication.Status.APPROVED,
            capability_granted_at__isnull=True,
        ).values_list("pk", flat=True)
    )
    for application_id in pending:
        grant_vendor_capability.delay(application_id)
    if pending:
        logger.warning("Re-enqueued %d pending vendor capability grants", len(pending))
    return {"enqueued": len(pending)}
