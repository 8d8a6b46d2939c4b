"""Admin registration for vendor applications."""

from __future__ import annotations

from django.contrib import admin, messages

from shared.domain.exceptions import DomainError

from . import workflow
from .models import VendorApplication


@admin.register(VendorApplication)
class VendorApplicationAdmin(admin.ModelAdmin):
    list_display = ("business_name", "applicant", "city", "status", "reviewed_at", "capability_granted_at", "created_at")
    list_filter = ("status", "state")
    search_fields = ("business_name", "applicant__email", "city")
    readonly_fields = ("status", "reviewer", "reviewed_at", "capability_granted_at", "created_at", "updated_at")
    actions = ("approve_applications", "reject_applications")

    def _review(self, request, queryset, decision: str) -> None:
        reviewed = 0
        for application in queryset:
            try:
                workflow.review(application.pk, request.user.pk, decision)
            except DomainError as exc:
                self.message_user(request, f"{application}: {exc.message}", level=messages.WARNING)
            else:
                reviewed += 1
        if reviewed:
            self.message_user(request, f"{reviewed} application(s) {decision}.", level=messages.SUCCESS)

    @admin.action(description="Approve selected applications")
    def approve_applications(self, request, queryset):
        self._review(request, queryset, VendorApplication.Status.APPROVED)

    @admin.action(description="Reject selected applications")
    def reject_applications(self, request, queryset):
        self._review(request, queryset, VendorApplication.Status.REJECTED)
