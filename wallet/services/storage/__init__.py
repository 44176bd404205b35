"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Ledger snapshots go to flat dump files; the audit trail is kept in memory.
"""

from wallet.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)
from wallet.services.storage.flat_file import (
    AccountsFileStorage,
    FlatFileLedgerStorage,
)
from wallet.services.storage.memory import InMemoryAuditStorage

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "LedgerStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # Implementations
    "AccountsFileStorage",
    "FlatFileLedgerStorage",
    "InMemoryAuditStorage",
]
