"""
Vendor Application Workflow

    pending -> approved -> (vendor capability granted asynchronously)
    pending -> rejected

``approved`` and ``rejected`` are terminal. An applicant has at most one
pending application at any time. Approval publishes
``VendorApplicationApproved`` after commit; the grant of the vendor
capability happens in a Celery task and never rolls the approval back.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from django.contrib.auth import get_user_model  # type: ignore
from django.db import IntegrityError, transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.users.access import access_checker
from apps.users.capabilities import Capability
from shared.application.retry import call_with_retry
from shared.application.uow import UnitOfWork
from shared.domain.exceptions import (
    DuplicatePending,
    InvalidTransition,
    NotFound,
    OperationFailed,
    TransientStorageFault,
)

from .events import VendorApplicationApproved, VendorApplicationRejected
from .models import VendorApplication

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("business_name", "phone", "description", "address", "city", "state", "pincode")
DECISIONS = (VendorApplication.Status.APPROVED.value, VendorApplication.Status.REJECTED.value)


def submit(applicant_id, profile: Mapping[str, Any], document=None) -> VendorApplication:
    """
    File a vendor application for ``applicant_id``.

    Raises:
        DuplicatePending: the applicant already has a pending application
        NotFound: the applicant does not exist
    """
    data = {name: profile[name] for name in PROFILE_FIELDS if name in profile}
    try:
        application = call_with_retry(_submit_once, applicant_id, data, document, label="submit_vendor_application")
    except TransientStorageFault as exc:
        raise OperationFailed("Your application could not be submitted. Please try again.") from exc
    logger.info("Vendor application %s submitted by user %s", application.pk, applicant_id)
    return application


def _submit_once(applicant_id, data: dict, document) -> VendorApplication:
    User = get_user_model()
    with transaction.atomic():
        # Serializes submissions of one applicant.
        applicant = User.objects.select_for_update().filter(pk=applicant_id).first()
        if applicant is None:
            raise NotFound("Applicant not found.")
        if VendorApplication.objects.filter(applicant=applicant, status=VendorApplication.Status.PENDING).exists():
            raise DuplicatePending()
        try:
            with transaction.atomic():
                return VendorApplication.objects.create(applicant=applicant, document=document or "", **data)
        except IntegrityError as exc:
            raise DuplicatePending() from exc


def review(application_id, reviewer_id, decision: str) -> VendorApplication:
    """
    Approve or reject a pending application.

    Raises:
        Forbidden: the reviewer is not an administrator
        InvalidTransition: unknown decision, or the application was already reviewed
        NotFound: no such application
    """
    access_checker.require(reviewer_id, Capability.ADMIN)
    decision = str(decision)
    if decision not in DECISIONS:
        raise InvalidTransition("A review decision must be 'approved' or 'rejected'.")

    try:
        application = call_with_retry(_review_once, application_id, reviewer_id, decision, label="review_vendor_application")
    except TransientStorageFault as exc:
        raise OperationFailed("The review could not be saved. Please try again.") from exc
    logger.info("Vendor application %s %s by %s", application.pk, decision, reviewer_id)
    return application


def _review_once(application_id, reviewer_id, decision: str) -> VendorApplication:
    now = timezone.now()
    with UnitOfWork() as uow:
        changed = VendorApplication.objects.filter(
            pk=application_id,
            status=VendorApplication.Status.PENDING,
        ).update(status=decision, reviewer_id=reviewer_id, reviewed_at=now, updated_at=now)

        application = VendorApplication.objects.filter(pk=application_id).first()
        if application is None:
            raise NotFound("Vendor application not found.")
        if not changed:
            raise InvalidTransition(current=application.status, target=decision)

        event_type = VendorApplicationApproved if decision == VendorApplication.Status.APPROVED else VendorApplicationRejected
        application.add_event(
            event_type(
                aggregate_id=application.pk,
                application_id=application.pk,
                applicant_id=application.applicant_id,
                reviewer_id=reviewer_id,
            )
        )
        uow.collect_events(application)
    return application
