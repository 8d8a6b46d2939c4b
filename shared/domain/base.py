"""
Base Domain Classes

Building blocks used across the domain apps:
- ValueObject: Immutable objects compared by value
- Aggregate: Mixin for aggregate roots (Django models included) that record events
- DomainEvent: Events that represent something that happened
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List
from uuid import UUID, uuid4

from django.utils import timezone


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


class Aggregate:
    """
    Mixin for aggregate roots

    Aggregates are the consistency boundaries of the domain. They record
    domain events which a unit of work publishes after the transaction
    commits. Events live in the instance ``__dict__`` so the mixin can sit
    on Django models without clashing with model fields.
    """

    def add_event(self, event: 'DomainEvent'):
        """Record a domain event to be published after commit"""
        self.__dict__.setdefault('_pending_events', []).append(event)

    def clear_events(self):
        """Clear all recorded events (called once they are collected)"""
        self.__dict__['_pending_events'] = []

    @property
    def events(self) -> List['DomainEvent']:
        """Get copy of recorded events"""
        return list(self.__dict__.get('_pending_events', []))


@dataclass(kw_only=True)
class DomainEvent:
    """
    Base class for domain events

    Domain events represent something that happened in the domain.
    Subclasses declare their payload as regular dataclass fields.
    """
    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=timezone.now)
    aggregate_id: Any = None

    def to_dict(self) -> dict:
        """Convert event to dictionary for logging and serialization"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'aggregate_id': str(self.aggregate_id) if self.aggregate_id is not None else None,
        }
