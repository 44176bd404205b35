"""
Tests for the dump line codec.
"""

import pytest

from wallet.models.ledger import Account, Favorite, Payment, PaymentStatus
from wallet.services.storage import codec


class TestEncoding:
    """Field order and separators."""

    def test_encode_account(self):
        account = Account(id=1, phone="+992000000001", balance=100000)
        assert codec.encode_account(account) == "1;+992000000001;100000"

    def test_encode_payment(self):
        payment = Payment(
            id="p-1",
            account_id=2,
            amount=50000,
            category="food",
            status=PaymentStatus.FAIL,
        )
        assert codec.encode_payment(payment) == "p-1;2;50000;food;FAIL"

    def test_encode_favorite(self):
        favorite = Favorite(id="f-1", account_id=2, name="lunch", amount=300, category="food")
        assert codec.encode_favorite(favorite) == "f-1;2;lunch;300;food"

    def test_encode_records_terminates_every_line(self):
        accounts = [Account(id=1, phone="+1", balance=10), Account(id=2, phone="+2", balance=0)]
        assert codec.encode_records(accounts, codec.encode_account) == "1;+1;10\n2;+2;0\n"

    def test_encode_no_records(self):
        assert codec.encode_records([], codec.encode_account) == ""


class TestDecoding:
    """Parsing and the skip policy."""

    def test_decode_payment(self):
        payment = codec.decode_payment("p-1;2;50000;food;INPROGRESS")
        assert payment == Payment(
            id="p-1",
            account_id=2,
            amount=50000,
            category="food",
            status=PaymentStatus.INPROGRESS,
        )

    def test_decode_favorite(self):
        favorite = codec.decode_favorite("f-1;2;lunch;300;food")
        assert favorite.name == "lunch"
        assert favorite.amount == 300

    def test_decode_records_skips_blank_lines(self):
        accounts = codec.decode_records("1;+1;10\n\n2;+2;20\n", codec.decode_account)
        assert [(a.id, a.phone, a.balance) for a in accounts] == [(1, "+1", 10), (2, "+2", 20)]

    @pytest.mark.parametrize("line", ["", "garbage"])
    def test_single_field_lines_ignored(self, line):
        assert codec.decode_account(line) is None

    def test_short_record_skipped(self):
        assert codec.decode_account("1;+1") is None
        assert codec.decode_payment("p;1;10;food") is None

    @pytest.mark.parametrize("line", [
        "x;+1;10",    # non-numeric id
        "1;+1;abc",   # non-numeric balance
        "1;+1;-5",    # negative balance
    ])
    def test_malformed_account_skipped(self, line):
        assert codec.decode_account(line) is None

    @pytest.mark.parametrize("value", [
        "1_000",          # digit grouping
        "1.0",            # float text
        " 5",             # surrounding whitespace
        "5 ",
        "+5",             # never written by str(int)
        "\u0661\u0662",   # Arabic-Indic digits
        "\uff15",         # fullwidth digit
        "",
    ])
    def test_integer_fields_must_be_plain_base10(self, value):
        assert codec.decode_account(f"{value};+1;10") is None
        assert codec.decode_account(f"1;+1;{value}") is None
        assert codec.decode_payment(f"p;{value};10;food;OK") is None
        assert codec.decode_payment(f"p;1;{value};food;OK") is None
        assert codec.decode_favorite(f"f;{value};lunch;10;food") is None
        assert codec.decode_favorite(f"f;1;lunch;{value};food") is None

    def test_plain_base10_is_exact(self):
        account = codec.decode_account("1000;+1;1000")
        assert (account.id, account.balance) == (1000, 1000)
        assert codec.decode_payment("p;1;-5;food;OK").amount == -5

    def test_non_canonical_amount_does_not_load(self):
        data = "p1;1;1_000;food;OK\np2;1;1000;food;OK\n"
        payments = codec.decode_records(data, codec.decode_payment)
        assert [(p.id, p.amount) for p in payments] == [("p2", 1000)]

    def test_unknown_status_skipped(self):
        assert codec.decode_payment("p;1;10;food;DONE") is None

    def test_malformed_lines_do_not_stop_decoding(self):
        data = "p;1;10;food;DONE\np2;1;20;auto;OK\n"
        payments = codec.decode_records(data, codec.decode_payment)
        assert [p.id for p in payments] == ["p2"]
        assert payments[0].status == PaymentStatus.OK


class TestAccountList:
    """Pipe-delimited single-file account list."""

    def test_encode_account_list(self):
        accounts = [Account(id=1, phone="+1", balance=10), Account(id=2, phone="+2", balance=0)]
        assert codec.encode_account_list(accounts) == "1;+1;10|2;+2;0|"

    def test_decode_account_list(self):
        accounts = codec.decode_account_list("1;+1;10|2;+2;0|")
        assert [a.phone for a in accounts] == ["+1", "+2"]
        assert [a.balance for a in accounts] == [10, 0]
