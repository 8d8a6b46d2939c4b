"""Domain events of the vendor application workflow."""

from dataclasses import dataclass
from typing import Any

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class VendorApplicationApproved(DomainEvent):
    """
    Event: an administrator approved a vendor application

    Triggers:
    - Grant of the vendor capability to the applicant (Celery task)
    - Review audit log
    """
    application_id: Any
    applicant_id: Any
    reviewer_id: Any


@dataclass(kw_only=True)
class VendorApplicationRejected(DomainEvent):
    application_id: Any
    applicant_id: Any
    reviewer_id: Any
