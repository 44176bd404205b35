"""
Tests for the import/export orchestrator.
"""

import pytest

from wallet.audit import AuditLogger
from wallet.errors import MinimumRecordsRequiredError, PhoneAlreadyRegisteredError
from wallet.models.audit import AuditEventType
from wallet.models.ledger import PaymentStatus
from wallet.orchestrator import LedgerTransferFlow, create_ledger_components
from wallet.services.ledger import LedgerService
from wallet.services.storage import InMemoryAuditStorage, NotFoundError


@pytest.fixture
def populated():
    """A ledger with two accounts, a rejected payment and a favorite."""
    ledger = LedgerService()
    first = ledger.register_account("+992000000001")
    second = ledger.register_account("+992000000002")
    ledger.deposit(first.id, 100000)
    ledger.deposit(second.id, 500)
    rejected = ledger.pay(first.id, 50000, "food")
    ledger.reject(rejected.id)
    kept = ledger.pay(second.id, 200, "auto")
    ledger.favorite_payment(kept.id, "car")
    return ledger


def dump(ledger):
    return (
        [a.model_dump() for a in ledger.accounts],
        [p.model_dump() for p in ledger.payments],
        [f.model_dump() for f in ledger.favorites],
    )


class TestExportImport:
    """Round trips through a dump directory."""

    def test_round_trip_into_fresh_ledger(self, tmp_path, populated):
        LedgerTransferFlow(populated).export(tmp_path)

        restored = LedgerService()
        counts = LedgerTransferFlow(restored).import_(tmp_path)

        assert counts == {"accounts": 2, "payments": 2, "favorites": 1}
        assert dump(restored) == dump(populated)

    def test_favorite_ids_survive_round_trip(self, tmp_path, populated):
        LedgerTransferFlow(populated).export(tmp_path)
        restored = LedgerService()
        LedgerTransferFlow(restored).import_(tmp_path)

        favorite_id = populated.favorites[0].id
        assert restored.find_favorite_by_id(favorite_id).name == "car"
        restored.pay_from_favorite(favorite_id)

    def test_import_advances_account_counter(self, tmp_path, populated):
        LedgerTransferFlow(populated).export(tmp_path)
        restored = LedgerService()
        LedgerTransferFlow(restored).import_(tmp_path)

        assert restored.register_account("+992000000003").id == 3

    def test_import_updates_live_objects_in_place(self, tmp_path, populated):
        flow = LedgerTransferFlow(populated)
        flow.export(tmp_path)

        account = populated.find_account_by_id(1)
        payment = populated.payments[1]
        populated.deposit(account.id, 1)
        populated.reject(payment.id)

        flow.import_(tmp_path)

        assert populated.find_account_by_id(1) is account
        assert account.balance == 100000
        assert payment.status == PaymentStatus.INPROGRESS
        assert len(populated.accounts) == 2
        assert len(populated.payments) == 2

    def test_import_appends_unknown_records(self, tmp_path, populated):
        LedgerTransferFlow(populated).export(tmp_path)

        other = LedgerService()
        other.register_account("+15550000000")
        LedgerTransferFlow(other).import_(tmp_path)

        # ID 1 collides and is overwritten, ID 2 is new
        assert [a.phone for a in other.accounts] == ["+992000000001", "+992000000002"]
        assert len(other.payments) == 2

    def test_import_missing_directory(self, tmp_path):
        ledger = LedgerService()
        counts = LedgerTransferFlow(ledger).import_(tmp_path / "absent")
        assert counts == {"accounts": 0, "payments": 0, "favorites": 0}
        assert ledger.accounts == []

    def test_import_survives_undecodable_bytes(self, tmp_path):
        (tmp_path / "accounts.dump").write_text("1;+1;100\n", encoding="utf-8")
        (tmp_path / "payments.dump").write_bytes(
            b"p1;1;5;food;INPROGRESS\n\xff\xfe;1;5;x;FAIL\n"
        )
        ledger = LedgerService()

        counts = LedgerTransferFlow(ledger).import_(tmp_path)

        assert counts == {"accounts": 1, "payments": 1, "favorites": 0}
        assert ledger.find_payment_by_id("p1").amount == 5

    def test_export_empty_ledger_writes_nothing(self, tmp_path):
        target = tmp_path / "dump"
        LedgerTransferFlow(LedgerService()).export(target)
        assert not target.exists()

    def test_dump_file_format(self, tmp_path):
        ledger = LedgerService()
        account = ledger.register_account("+992000000001")
        ledger.deposit(account.id, 100000)
        LedgerTransferFlow(ledger).export(tmp_path)

        assert (tmp_path / "accounts.dump").read_text(encoding="utf-8") == "1;+992000000001;100000\n"


class TestAccountsFile:
    """Single-file pipe-delimited account transfer."""

    def test_export_and_import(self, tmp_path, populated):
        path = tmp_path / "accounts.txt"
        LedgerTransferFlow(populated).export_to_file(path)

        restored = LedgerService()
        imported = LedgerTransferFlow(restored).import_from_file(path)

        assert imported == 2
        assert [(a.id, a.phone, a.balance) for a in restored.accounts] == [
            (1, "+992000000001", 100000),
            (2, "+992000000002", 300),
        ]

    def test_zero_balance_account_imported(self, tmp_path):
        source = LedgerService()
        source.register_account("+1")
        path = tmp_path / "accounts.txt"
        LedgerTransferFlow(source).export_to_file(path)

        restored = LedgerService()
        LedgerTransferFlow(restored).import_from_file(path)
        assert restored.accounts[0].balance == 0

    def test_import_stops_on_registered_phone(self, tmp_path, populated):
        path = tmp_path / "accounts.txt"
        LedgerTransferFlow(populated).export_to_file(path)

        with pytest.raises(PhoneAlreadyRegisteredError):
            LedgerTransferFlow(populated).import_from_file(path)

    def test_import_missing_file(self, tmp_path):
        with pytest.raises(NotFoundError):
            LedgerTransferFlow(LedgerService()).import_from_file(tmp_path / "absent.txt")


class TestHistoryExport:
    """Paged payment history."""

    def test_account_history_paged(self, tmp_path):
        ledger = LedgerService()
        account = ledger.register_account("+1")
        other = ledger.register_account("+2")
        ledger.deposit(account.id, 100)
        ledger.deposit(other.id, 100)
        for _ in range(3):
            ledger.pay(account.id, 1, "misc")
        ledger.pay(other.id, 1, "misc")

        files = LedgerTransferFlow(ledger).export_account_history(account.id, tmp_path, records_per_file=2)

        assert files == 2
        lines = (tmp_path / "payments1.dump").read_text(encoding="utf-8").splitlines()
        lines += (tmp_path / "payments2.dump").read_text(encoding="utf-8").splitlines()
        assert len(lines) == 3
        assert all(line.split(";")[1] == str(account.id) for line in lines)

    def test_default_records_per_file(self, tmp_path, populated):
        files = LedgerTransferFlow(populated).history_to_files(populated.payments, tmp_path)
        assert files == 1
        assert (tmp_path / "payments.dump").exists()

    def test_minimum_records(self, tmp_path, populated):
        with pytest.raises(MinimumRecordsRequiredError):
            LedgerTransferFlow(populated).history_to_files(populated.payments, tmp_path, records_per_file=0)


class TestTransferAudit:
    """Transfers are audited."""

    def test_export_and_import_audited(self, tmp_path, populated):
        storage = InMemoryAuditStorage()
        flow = LedgerTransferFlow(populated, audit_logger=AuditLogger(storage=storage))

        flow.export(tmp_path)
        flow.import_(tmp_path)

        events = list(reversed(storage.get_recent_events()))
        assert [e.event_type for e in events] == [
            AuditEventType.SNAPSHOT_EXPORTED,
            AuditEventType.SNAPSHOT_IMPORTED,
        ]
        assert events[1].details["payments"] == 2

    def test_failure_audited_and_raised(self, tmp_path, populated):
        storage = InMemoryAuditStorage()
        flow = LedgerTransferFlow(populated, audit_logger=AuditLogger(storage=storage))

        with pytest.raises(MinimumRecordsRequiredError):
            flow.history_to_files(populated.payments, tmp_path, records_per_file=0)

        event = storage.get_recent_events(limit=1)[0]
        assert event.event_type == AuditEventType.SYSTEM_ERROR
        assert event.details["operation"] == "history_to_files"

    def test_create_ledger_components(self, tmp_path):
        ledger, flow = create_ledger_components()
        ledger.register_account("+1")
        flow.export(tmp_path)

        assert flow.ledger is ledger
