"""Capability-based permission classes backed by the access checker."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore

from apps.users.access import access_checker
from apps.users.capabilities import Capability


class HasCapability(permissions.BasePermission):
    """
    Allow authenticated users holding ``required_capability``.

    Subclasses set the capability; the check goes through the access
    checker so role assignments are the single source of truth.
    """

    required_capability: str | None = None

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if self.required_capability is None:
            return True
        return access_checker.has_capability(user.pk, self.required_capability)


class IsAdminCapability(HasCapability):
    required_capability = Capability.ADMIN.value
    message = "This action requires the 'admin' capability."


class IsVendorCapability(HasCapability):
    required_capability = Capability.VENDOR.value
    message = "This action requires the 'vendor' capability."


class IsVendorOrAdminForWrites(permissions.BasePermission):
    """
    Anyone can read, writes need the vendor or admin capability.
    """

    message = "Only vendors and administrators can manage trips."

    def has_permission(self, request, view) -> bool:  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        if not user or not user.is_authenticated:
            return False
        capabilities = access_checker.capabilities_for(user.pk)
        return Capability.VENDOR in capabilities or Capability.ADMIN in capabilities
