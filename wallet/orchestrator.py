"""
Import/Export Orchestrator for the Wallet Ledger

This module ties the ledger to its storage backends and defines the
transfer flows:
1. Export (ledger → snapshot → dump directory)
2. Import (dump directory → snapshot → merge into the live ledger)
3. Single-file account export/import (pipe-delimited)
4. Paged payment history export

DESIGN DECISION: The ledger never touches the filesystem and storage
never touches ledger invariants. The orchestrator is the only place
where the two meet, and every transfer is audited.

Import is a merge, not a replace: records whose ID already exists update
the live object in place, everything else is appended. Identifiers read
from disk are kept for all three collections, so an export followed by
an import is identifier-stable.
"""

from pathlib import Path
from typing import Optional, Sequence, Union
from uuid import UUID

from wallet.audit import AuditLogger, create_correlation_id
from wallet.config import get_settings
from wallet.models.audit import AuditEventBuilder
from wallet.models.ledger import Payment
from wallet.services.ledger import LedgerService
from wallet.services.storage import (
    AccountsFileStorage,
    FlatFileLedgerStorage,
    InMemoryAuditStorage,
)


PathLike = Union[str, Path]


class LedgerTransferFlow:
    """
    Orchestrates moving ledger state in and out of flat files.

    Flow (import):
    1. Load → Read every dump file that exists
    2. Merge accounts → In place or appended, ID counter advanced
    3. Merge payments
    4. Merge favorites
    5. Audit → One event with the record counts

    A failure is audited and re-raised; collections merged before the
    failure stay merged.
    """

    def __init__(
        self,
        ledger: LedgerService,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._ledger = ledger
        self._audit_logger = audit_logger
        self._settings = get_settings().storage

    @property
    def ledger(self) -> LedgerService:
        return self._ledger

    def _storage(self, directory: Optional[PathLike]) -> FlatFileLedgerStorage:
        return FlatFileLedgerStorage(
            directory if directory is not None else self._settings.dump_dir,
            encoding=self._settings.encoding,
        )

    def _log_error(self, error: Exception, operation: str, correlation_id: UUID) -> None:
        if self._audit_logger is not None:
            self._audit_logger.log(AuditEventBuilder.system_error(
                error_type=type(error).__name__,
                error_message=str(error),
                details={"operation": operation},
                correlation_id=correlation_id,
            ))

    def export(
        self,
        directory: Optional[PathLike] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Path:
        """
        Write the whole ledger to a dump directory.

        Only non-empty collections are written. Returns the directory.
        """
        correlation_id = correlation_id or create_correlation_id()
        storage = self._storage(directory)
        snapshot = self._ledger.snapshot()

        try:
            storage.save_snapshot(snapshot)
        except Exception as e:
            self._log_error(e, "export", correlation_id)
            raise

        if self._audit_logger is not None:
            self._audit_logger.log(AuditEventBuilder.snapshot_exported(
                directory=str(storage.directory),
                counts={
                    "accounts": len(snapshot.accounts),
                    "payments": len(snapshot.payments),
                    "favorites": len(snapshot.favorites),
                },
                correlation_id=correlation_id,
            ))
        return storage.directory

    def import_(
        self,
        directory: Optional[PathLike] = None,
        correlation_id: Optional[UUID] = None,
    ) -> dict[str, int]:
        """
        Merge a dump directory into the live ledger.

        Missing dump files count as empty collections.

        Returns:
            Number of records merged per collection
        """
        correlation_id = correlation_id or create_correlation_id()
        storage = self._storage(directory)

        try:
            snapshot = storage.load_snapshot()
        except Exception as e:
            self._log_error(e, "import", correlation_id)
            raise

        for account in snapshot.accounts:
            self._ledger.merge_account(account)
        for payment in snapshot.payments:
            self._ledger.merge_payment(payment)
        for favorite in snapshot.favorites:
            self._ledger.merge_favorite(favorite)

        counts = {
            "accounts": len(snapshot.accounts),
            "payments": len(snapshot.payments),
            "favorites": len(snapshot.favorites),
        }
        if self._audit_logger is not None:
            self._audit_logger.log(AuditEventBuilder.snapshot_imported(
                directory=str(storage.directory),
                counts=counts,
                correlation_id=correlation_id,
            ))
        return counts

    def export_to_file(
        self,
        path: PathLike,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Write every account to a single pipe-delimited file."""
        correlation_id = correlation_id or create_correlation_id()
        storage = AccountsFileStorage(path, encoding=self._settings.encoding)
        accounts = self._ledger.accounts

        try:
            storage.save_accounts(accounts)
        except Exception as e:
            self._log_error(e, "export_to_file", correlation_id)
            raise

        if self._audit_logger is not None:
            self._audit_logger.log(AuditEventBuilder.accounts_exported(
                path=str(storage.path),
                count=len(accounts),
                correlation_id=correlation_id,
            ))

    def import_from_file(
        self,
        path: PathLike,
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """
        Register every account from a pipe-delimited file.

        Accounts are re-registered by phone, so they get fresh IDs; the
        stored balance is deposited when positive. Stops at the first
        ledger error (e.g. a phone that is already registered).

        Returns:
            Number of accounts registered
        """
        correlation_id = correlation_id or create_correlation_id()
        storage = AccountsFileStorage(path, encoding=self._settings.encoding)

        imported = 0
        try:
            for record in storage.load_accounts():
                account = self._ledger.register_account(record.phone)
                if record.balance > 0:
                    self._ledger.deposit(account.id, record.balance)
                imported += 1
        except Exception as e:
            self._log_error(e, "import_from_file", correlation_id)
            raise

        if self._audit_logger is not None:
            self._audit_logger.log(AuditEventBuilder.accounts_imported(
                path=str(storage.path),
                count=imported,
                correlation_id=correlation_id,
            ))
        return imported

    def history_to_files(
        self,
        payments: Sequence[Payment],
        directory: PathLike,
        records_per_file: Optional[int] = None,
        account_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> int:
        """
        Write payments to payments.dump, or to payments1.dump,
        payments2.dump, ... when they do not fit in one file.

        Returns:
            Number of files written
        """
        correlation_id = correlation_id or create_correlation_id()
        if records_per_file is None:
            records_per_file = self._settings.history_records_per_file
        storage = self._storage(directory)

        try:
            files = storage.save_history(payments, records_per_file)
        except Exception as e:
            self._log_error(e, "history_to_files", correlation_id)
            raise

        if self._audit_logger is not None:
            self._audit_logger.log(AuditEventBuilder.history_exported(
                directory=str(storage.directory),
                payment_count=len(payments),
                file_count=files,
                account_id=account_id,
                correlation_id=correlation_id,
            ))
        return files

    def export_account_history(
        self,
        account_id: int,
        directory: PathLike,
        records_per_file: Optional[int] = None,
    ) -> int:
        """Page one account's payment history into a directory."""
        payments = self._ledger.export_account_history(account_id)
        return self.history_to_files(
            payments,
            directory,
            records_per_file=records_per_file,
            account_id=account_id,
        )


def create_ledger_components() -> tuple[LedgerService, LedgerTransferFlow]:
    """
    Wire up a ledger and its transfer flow from settings.

    Returns (ledger, transfer_flow).
    """
    settings = get_settings()

    audit_logger = None
    if settings.audit.enabled:
        audit_logger = AuditLogger(
            storage=InMemoryAuditStorage(max_events=settings.audit.max_events),
        )

    ledger = LedgerService(audit_logger=audit_logger)
    return ledger, LedgerTransferFlow(ledger, audit_logger=audit_logger)
