"""Vendor application model."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.validators import RegexValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.users.models import PHONE_VALIDATOR
from shared.domain.base import Aggregate

PINCODE_VALIDATOR = RegexValidator(regex=r"^\d{6}$", message=_("A pincode has exactly six digits."))


def vendor_document_path(instance: "VendorApplication", filename: str) -> str:
    return f"vendor-documents/{instance.applicant_id}/{filename}"


class VendorApplication(Aggregate, models.Model):
    """A traveller's request to run trips on the platform.

    ``status`` only ever moves out of ``pending``, through the review
    workflow in ``apps.vendors.workflow``. Approval is followed by an
    asynchronous grant of the vendor capability, recorded in
    ``capability_granted_at``.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        APPROVED = "approved", _("Approved")
        REJECTED = "rejected", _("Rejected")

    applicant = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="vendor_applications",
    )
    business_name = models.CharField(_("Business name"), max_length=200)
    phone = models.CharField(_("Phone"), max_length=20, validators=[PHONE_VALIDATOR])
    description = models.TextField(_("About the business"), blank=True)
    address = models.CharField(_("Address"), max_length=255)
    city = models.CharField(_("City"), max_length=100)
    state = models.CharField(_("State"), max_length=100)
    pincode = models.CharField(_("Pincode"), max_length=6, validators=[PINCODE_VALIDATOR])
    document = models.FileField(_("Supporting document"), upload_to=vendor_document_path, blank=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)
    capability_granted_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Vendor application")
        verbose_name_plural = _("Vendor applications")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["applicant"],
                condition=models.Q(status="pending"),
                name="one_pending_vendor_application",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "capability_granted_at"], name="vendorapp_status_grant_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.business_name} ({self.get_status_display()})"

    @property
    def awaiting_capability(self) -> bool:
        return self.status == self.Status.APPROVED and self.capability_granted_at is None
