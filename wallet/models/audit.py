"""
Audit Models for the Wallet Ledger

Every balance change and every snapshot transfer is recorded as an
audit event. This provides:
1. Traceability of each debit and credit
2. Debugging information when an operation fails
3. A way to reconstruct what happened to an account

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Each ledger mutation and each transfer direction has its own type.
    """
    # Accounts
    ACCOUNT_REGISTERED = "account_registered"
    DEPOSIT_MADE = "deposit_made"

    # Payments
    PAYMENT_CREATED = "payment_created"
    PAYMENT_REJECTED = "payment_rejected"
    PAYMENT_REPEATED = "payment_repeated"

    # Favorites
    FAVORITE_CREATED = "favorite_created"
    FAVORITE_PAID = "favorite_paid"

    # Failures of ledger operations
    OPERATION_FAILED = "operation_failed"

    # Transfers
    SNAPSHOT_EXPORTED = "snapshot_exported"
    SNAPSHOT_IMPORTED = "snapshot_imported"
    ACCOUNTS_EXPORTED = "accounts_exported"
    ACCOUNTS_IMPORTED = "accounts_imported"
    HISTORY_EXPORTED = "history_exported"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'payment', 'favorite')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one import run)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_registered(account_id, phone)
        event = AuditEventBuilder.payment_rejected(payment_id, account_id, amount)
    """

    @staticmethod
    def account_registered(
        account_id: int,
        phone: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_REGISTERED,
            entity_type="account",
            entity_id=str(account_id),
            correlation_id=correlation_id,
            description=f"Account registered: {phone}",
            details={
                "phone": phone,
            },
        )

    @staticmethod
    def deposit_made(
        account_id: int,
        amount: int,
        balance: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DEPOSIT_MADE,
            entity_type="account",
            entity_id=str(account_id),
            correlation_id=correlation_id,
            description=f"Deposit of {amount} to account {account_id}",
            details={
                "amount": amount,
                "balance": balance,
            },
        )

    @staticmethod
    def payment_created(
        payment_id: str,
        account_id: int,
        amount: int,
        category: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_CREATED,
            entity_type="payment",
            entity_id=payment_id,
            correlation_id=correlation_id,
            description=f"Payment of {amount} from account {account_id}",
            details={
                "account_id": account_id,
                "amount": amount,
                "category": category,
            },
        )

    @staticmethod
    def payment_rejected(
        payment_id: str,
        account_id: int,
        amount: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_REJECTED,
            entity_type="payment",
            entity_id=payment_id,
            correlation_id=correlation_id,
            description=f"Payment rejected, {amount} credited back to account {account_id}",
            details={
                "account_id": account_id,
                "amount": amount,
            },
        )

    @staticmethod
    def payment_repeated(
        source_payment_id: str,
        payment_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_REPEATED,
            entity_type="payment",
            entity_id=payment_id,
            correlation_id=correlation_id,
            description=f"Payment repeated from {source_payment_id}",
            details={
                "source_payment_id": source_payment_id,
            },
        )

    @staticmethod
    def favorite_created(
        favorite_id: str,
        payment_id: str,
        name: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FAVORITE_CREATED,
            entity_type="favorite",
            entity_id=favorite_id,
            correlation_id=correlation_id,
            description=f"Favorite '{name}' created from payment {payment_id}",
            details={
                "payment_id": payment_id,
                "name": name,
            },
        )

    @staticmethod
    def favorite_paid(
        favorite_id: str,
        payment_id: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FAVORITE_PAID,
            entity_type="favorite",
            entity_id=favorite_id,
            correlation_id=correlation_id,
            description=f"Payment {payment_id} made from favorite",
            details={
                "payment_id": payment_id,
            },
        )

    @staticmethod
    def operation_failed(
        operation: str,
        error: Exception,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"Operation failed: {operation}",
            error_code=type(error).__name__,
            error_message=str(error),
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def snapshot_exported(
        directory: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_EXPORTED,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description=f"Ledger exported to {directory}",
            details={
                "directory": directory,
                **counts,
            },
        )

    @staticmethod
    def snapshot_imported(
        directory: str,
        counts: dict[str, int],
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_IMPORTED,
            entity_type="snapshot",
            correlation_id=correlation_id,
            description=f"Ledger imported from {directory}",
            details={
                "directory": directory,
                **counts,
            },
        )

    @staticmethod
    def accounts_exported(
        path: str,
        count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_EXPORTED,
            entity_type="account",
            correlation_id=correlation_id,
            description=f"{count} accounts exported to {path}",
            details={
                "path": path,
                "accounts": count,
            },
        )

    @staticmethod
    def accounts_imported(
        path: str,
        count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_IMPORTED,
            entity_type="account",
            correlation_id=correlation_id,
            description=f"{count} accounts imported from {path}",
            details={
                "path": path,
                "accounts": count,
            },
        )

    @staticmethod
    def history_exported(
        directory: str,
        payment_count: int,
        file_count: int,
        account_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.HISTORY_EXPORTED,
            entity_type="account" if account_id is not None else "payment",
            entity_id=str(account_id) if account_id is not None else None,
            correlation_id=correlation_id,
            description=f"{payment_count} payments exported to {file_count} files",
            details={
                "directory": directory,
                "payments": payment_count,
                "files": file_count,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
