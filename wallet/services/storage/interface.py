"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the flat-file dump format out of the ledger core
2. Use in-memory storage for testing
3. Swap the dump files for another backend later

The interface is intentionally simple. The ledger owns all state and
invariants; storage only moves ordered snapshots in and out.
"""

from abc import ABC, abstractmethod

from wallet.models.audit import AuditEvent
from wallet.models.ledger import LedgerSnapshot


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger snapshot storage.

    Any storage implementation (flat files, database, etc.)
    must implement these methods.
    """

    @abstractmethod
    def save_snapshot(self, snapshot: LedgerSnapshot) -> None:
        """
        Persist a snapshot of the ledger.

        Args:
            snapshot: Ordered accounts, payments and favorites

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    def load_snapshot(self) -> LedgerSnapshot:
        """
        Load the persisted snapshot.

        Returns:
            The stored records; missing collections come back empty

        Raises:
            StorageError: If a read fails for a reason other than absence
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Stored data not found."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
