"""Capability names and the immutable capability-set value type."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import ValueObject
from shared.domain.exceptions import InvalidRoleSet


class Capability(models.TextChoices):
    USER = "user", _("Traveller")
    VENDOR = "vendor", _("Vendor")
    ADMIN = "admin", _("Administrator")


@dataclass(frozen=True)
class CapabilitySet(ValueObject):
    """Non-exclusive set of capabilities held by a principal.

    A principal without any role assignment holds exactly ``{user}``.
    """

    members: frozenset[str] = field(default_factory=lambda: frozenset({Capability.USER.value}))

    @classmethod
    def default(cls) -> "CapabilitySet":
        return cls(frozenset({Capability.USER.value}))

    @classmethod
    def parse(cls, values: Iterable[str]) -> "CapabilitySet":
        """Validate a requested replacement set."""
        members = frozenset(str(value) for value in values)
        if not members:
            raise InvalidRoleSet("A capability set cannot be empty.")
        unknown = members - set(Capability.values)
        if unknown:
            raise InvalidRoleSet(f"Unknown capabilities: {', '.join(sorted(unknown))}.")
        if Capability.USER.value not in members:
            raise InvalidRoleSet("A capability set must contain 'user'.")
        return cls(members)

    def with_capability(self, capability: str) -> "CapabilitySet":
        return CapabilitySet(self.members | {str(capability)})

    def __contains__(self, capability: object) -> bool:
        return str(capability) in self.members

    def __iter__(self):
        return iter(self.as_list())

    def __len__(self) -> int:
        return len(self.members)

    def as_list(self) -> list[str]:
        order = {value: index for index, value in enumerate(Capability.values)}
        return sorted(self.members, key=lambda value: order.get(value, len(order)))
