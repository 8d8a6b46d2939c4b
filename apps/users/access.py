"""
Role-Gated Access Checker

Answers whether a principal holds a capability and owns the
authoritative capability set per principal. Every mutating operation in
the project calls ``require`` before its first side effect.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from django.contrib.auth import get_user_model  # type: ignore
from django.db import transaction  # type: ignore

from shared.application.retry import call_with_retry
from shared.domain.exceptions import Forbidden, NotFound, OperationFailed, TransientStorageFault

from .capabilities import Capability, CapabilitySet
from .models import RoleAssignment

logger = logging.getLogger(__name__)


class AccessChecker:

    def capabilities_for(self, principal_id) -> CapabilitySet:
        if principal_id is None:
            return CapabilitySet.default()
        stored = list(
            RoleAssignment.objects.filter(user_id=principal_id).values_list("capability", flat=True)
        )
        if not stored:
            return CapabilitySet.default()
        return CapabilitySet(frozenset(stored))

    def has_capability(self, principal_id, capability: str) -> bool:
        if capability not in Capability.values:
            raise ValueError(f"Unknown capability: {capability!r}")
        if principal_id is None:
            return False
        return capability in self.capabilities_for(principal_id)

    def require(self, principal_id, capability: str) -> None:
        """Raise ``Forbidden`` unless the principal holds ``capability``."""
        if not self.has_capability(principal_id, capability):
            logger.info("Principal %s denied: missing capability %s", principal_id, capability)
            raise Forbidden(capability=str(capability))

    def set_capabilities(self, principal_id, capabilities: Iterable[str], *, granted_by=None) -> CapabilitySet:
        """Replace the principal's whole capability set.

        The new set must be non-empty, contain ``user`` and name only
        known capabilities; otherwise ``InvalidRoleSet`` is raised and
        nothing is written.
        """
        requested = CapabilitySet.parse(capabilities)
        return self._replace(principal_id, lambda current: requested, granted_by=granted_by)

    def grant(self, principal_id, capability: str, *, granted_by=None) -> CapabilitySet:
        """Add one capability, keeping the rest of the set."""
        CapabilitySet.parse({Capability.USER.value, str(capability)})
        return self._replace(
            principal_id,
            lambda current: current.with_capability(capability),
            granted_by=granted_by,
        )

    def _replace(
        self,
        principal_id,
        compute: Callable[[CapabilitySet], CapabilitySet],
        *,
        granted_by=None,
    ) -> CapabilitySet:
        try:
            result = call_with_retry(
                self._replace_once, principal_id, compute, granted_by,
                label="set_capabilities",
            )
        except TransientStorageFault as exc:
            raise OperationFailed("Capabilities could not be updated. Please try again.") from exc
        logger.info("Capabilities of principal %s set to %s", principal_id, result.as_list())
        return result

    def _replace_once(self, principal_id, compute, granted_by) -> CapabilitySet:
        User = get_user_model()
        with transaction.atomic():
            # The user row lock serializes concurrent replacements for one principal.
            locked = User.objects.select_for_update().filter(pk=principal_id).values_list("pk", flat=True)
            if not list(locked):
                raise NotFound("User not found.")

            current = self.capabilities_for(principal_id)
            updated = compute(current)
            if updated == current and RoleAssignment.objects.filter(user_id=principal_id).exists():
                return updated

            granted_by_id = getattr(granted_by, "pk", granted_by)
            RoleAssignment.objects.filter(user_id=principal_id).delete()
            RoleAssignment.objects.bulk_create(
                [
                    RoleAssignment(user_id=principal_id, capability=capability, granted_by_id=granted_by_id)
                    for capability in updated.as_list()
                ]
            )
        return updated


access_checker = AccessChecker()
