"""
Data Models Package

This package contains all Pydantic models used by the wallet ledger.
All data flowing through the system must conform to these schemas.
"""

from wallet.models.ledger import (
    Account,
    Favorite,
    LedgerSnapshot,
    Money,
    Payment,
    PaymentCategory,
    PaymentStatus,
    Phone,
)
from wallet.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Account",
    "Favorite",
    "LedgerSnapshot",
    "Money",
    "Payment",
    "PaymentCategory",
    "PaymentStatus",
    "Phone",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
