"""
Flat-File Storage Implementation

DESIGN DECISION: The ledger is dumped as plain UTF-8 text, one record
per line, one file per collection:

    <dir>/accounts.dump
    <dir>/payments.dump
    <dir>/favorites.dump

Files are human-readable and trivially diffable. Each save overwrites a
whole collection (truncate-and-write, never append). Empty collections
are not written, so their previous file, if any, is left untouched.
On read, a record holding bytes that are invalid in the configured
encoding is dropped, like any other unreadable record.

Payment history can additionally be split into page files
(payments1.dump, payments2.dump, ...) and the accounts alone can be
written to a single pipe-delimited file.

TRADEOFFS:
- No transactions: a failure halfway through a save leaves the
  collections written so far in place
- No locking: callers must not share a directory between processes
"""

import re
from pathlib import Path
from typing import Sequence, Union

import structlog

from wallet.errors import MinimumRecordsRequiredError
from wallet.models.ledger import Account, LedgerSnapshot, Payment
from wallet.services.storage import codec
from wallet.services.storage.interface import (
    LedgerStorageInterface,
    NotFoundError,
    StorageError,
)


DUMP_SUFFIX = ".dump"
ACCOUNTS_DUMP = "accounts"
PAYMENTS_DUMP = "payments"
FAVORITES_DUMP = "favorites"

logger = structlog.get_logger(__name__)

# Bytes the codec could not decode, as left by the surrogateescape handler
_UNDECODABLE = re.compile("[\udc80-\udcff]")


def _drop_undecodable(data: str, separator: str, path: Path) -> str:
    """Remove every record that holds bytes invalid in the file encoding."""
    if not _UNDECODABLE.search(data):
        return data
    kept = []
    for chunk in data.split(separator):
        if _UNDECODABLE.search(chunk):
            logger.debug("record_skipped", reason="undecodable", path=str(path))
            continue
        kept.append(chunk)
    return separator.join(kept)


class FlatFileLedgerStorage(LedgerStorageInterface):
    """
    Directory of semicolon-delimited dump files.

    The directory is created on the first save if it does not exist.
    """

    def __init__(self, directory: Union[str, Path], encoding: str = "utf-8"):
        self._directory = Path(directory)
        self._encoding = encoding

    @property
    def directory(self) -> Path:
        return self._directory

    def dump_path(self, name: str) -> Path:
        """Path of the dump file for a collection or history page."""
        return self._directory / f"{name}{DUMP_SUFFIX}"

    def _write(self, name: str, data: str) -> None:
        path = self.dump_path(name)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            path.write_text(data, encoding=self._encoding)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e

    def _read(self, name: str) -> str:
        path = self.dump_path(name)
        try:
            data = path.read_text(encoding=self._encoding, errors="surrogateescape")
        except FileNotFoundError:
            # An absent collection is "no data", not a failure
            logger.debug("dump_missing", path=str(path))
            return ""
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e
        return _drop_undecodable(data, codec.RECORD_SEPARATOR, path)

    def save_snapshot(self, snapshot: LedgerSnapshot) -> None:
        if snapshot.accounts:
            self._write(
                ACCOUNTS_DUMP,
                codec.encode_records(snapshot.accounts, codec.encode_account),
            )
        if snapshot.favorites:
            self._write(
                FAVORITES_DUMP,
                codec.encode_records(snapshot.favorites, codec.encode_favorite),
            )
        if snapshot.payments:
            self._write(
                PAYMENTS_DUMP,
                codec.encode_records(snapshot.payments, codec.encode_payment),
            )

    def load_snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            accounts=codec.decode_records(self._read(ACCOUNTS_DUMP), codec.decode_account),
            payments=codec.decode_records(self._read(PAYMENTS_DUMP), codec.decode_payment),
            favorites=codec.decode_records(self._read(FAVORITES_DUMP), codec.decode_favorite),
        )

    def save_history(self, payments: Sequence[Payment], records_per_file: int) -> int:
        """
        Write payment history, paged when it does not fit one file.

        Args:
            payments: Payments in the order they should be written
            records_per_file: Maximum payments per file (at least 1)

        Returns:
            Number of files written (0 for an empty history)

        Raises:
            MinimumRecordsRequiredError: If records_per_file is below 1
            StorageError: If a write fails
        """
        if records_per_file < 1:
            raise MinimumRecordsRequiredError()
        if not payments:
            return 0

        if len(payments) <= records_per_file:
            self._write(PAYMENTS_DUMP, codec.encode_records(payments, codec.encode_payment))
            return 1

        pages = 0
        for start in range(0, len(payments), records_per_file):
            pages += 1
            page = payments[start:start + records_per_file]
            self._write(f"{PAYMENTS_DUMP}{pages}", codec.encode_records(page, codec.encode_payment))
        return pages


class AccountsFileStorage:
    """
    Single pipe-delimited file holding accounts only.

    Every account is written as "id;phone;balance|".
    """

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8"):
        self._path = Path(path)
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    def save_accounts(self, accounts: Sequence[Account]) -> None:
        try:
            self._path.write_text(codec.encode_account_list(accounts), encoding=self._encoding)
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def load_accounts(self) -> list[Account]:
        try:
            data = self._path.read_text(encoding=self._encoding, errors="surrogateescape")
        except FileNotFoundError as e:
            raise NotFoundError(f"Accounts file not found: {self._path}") from e
        except OSError as e:
            raise StorageError(f"Failed to read {self._path}: {e}") from e
        return codec.decode_account_list(
            _drop_undecodable(data, codec.ACCOUNT_LIST_SEPARATOR, self._path)
        )
