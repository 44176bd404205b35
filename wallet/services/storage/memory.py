"""
In-Memory Audit Storage

Keeps the audit trail in process memory. Used by default and in tests;
the oldest events are dropped once max_events is reached.
"""

from collections import deque
from typing import Optional
from uuid import UUID

from wallet.models.audit import AuditEvent
from wallet.services.storage.interface import AuditStorageInterface, DuplicateError


class InMemoryAuditStorage(AuditStorageInterface):
    """Bounded, append-only audit trail held in a deque."""

    def __init__(self, max_events: Optional[int] = None):
        self._events: deque[AuditEvent] = deque(maxlen=max_events)
        # IDs of the events currently held, kept in step with the deque
        self._event_ids: set[UUID] = set()

    def append_event(self, event: AuditEvent) -> bool:
        if event.event_id in self._event_ids:
            raise DuplicateError(f"Audit event already recorded: {event.event_id}")
        if self._events and len(self._events) == self._events.maxlen:
            self._event_ids.discard(self._events[0].event_id)
        self._events.append(event)
        self._event_ids.add(event.event_id)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            event for event in self._events
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]

    def __len__(self) -> int:
        return len(self._events)
