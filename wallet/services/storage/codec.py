"""
Line Codec for Ledger Dump Files

Each entity is one line of semicolon-separated fields, in declaration
order:

    Account   id;phone;balance
    Payment   id;account_id;amount;category;status
    Favorite  id;account_id;name;amount;category

Records are newline-terminated. The pipe account list used by the
single-file account export terminates every record with "|" instead.

SKIP POLICY: decoding is lenient. A line with fewer than two fields
(e.g. the empty string after the final newline) is ignored. A line that
is too short for its record type, or whose fields do not parse, is
skipped and reported at debug level. Decoding never raises.

Integer fields must be plain ASCII base-10 with an optional leading
"-", exactly as str(int) writes them. "1_000", "1.0", " 5" and
non-ASCII digits are malformed.

Values are written verbatim; a ";" inside a phone, name or category
is not escaped and will split the field on read.
"""

import re
from enum import Enum
from typing import Callable, Iterable, Optional, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from wallet.models.ledger import Account, Favorite, Payment


FIELD_SEPARATOR = ";"
RECORD_SEPARATOR = "\n"
ACCOUNT_LIST_SEPARATOR = "|"

ACCOUNT_FIELDS = ("id", "phone", "balance")
PAYMENT_FIELDS = ("id", "account_id", "amount", "category", "status")
FAVORITE_FIELDS = ("id", "account_id", "name", "amount", "category")

# Fields written with str(int) and read back as plain base-10 only
ACCOUNT_INT_FIELDS = frozenset({"id", "balance"})
PAYMENT_INT_FIELDS = frozenset({"account_id", "amount"})
FAVORITE_INT_FIELDS = frozenset({"account_id", "amount"})

_BASE10 = re.compile(r"-?[0-9]+")

# Shorter lines are blank or separator noise, not records
MIN_RECORD_FIELDS = 2

T = TypeVar("T", bound=BaseModel)

logger = structlog.get_logger(__name__)


def _encode(record: BaseModel, fields: tuple[str, ...]) -> str:
    values = []
    for name in fields:
        value = getattr(record, name)
        values.append(value.value if isinstance(value, Enum) else str(value))
    return FIELD_SEPARATOR.join(values)


def _decode(
    line: str,
    model: type[T],
    fields: tuple[str, ...],
    int_fields: frozenset[str],
) -> Optional[T]:
    parts = line.split(FIELD_SEPARATOR)
    if len(parts) < MIN_RECORD_FIELDS:
        return None
    if len(parts) < len(fields):
        logger.debug(
            "record_skipped",
            record_type=model.__name__,
            reason="short_record",
            field_count=len(parts),
        )
        return None

    values = dict(zip(fields, parts))
    for name in fields:
        if name not in int_fields:
            continue
        if not _BASE10.fullmatch(values[name]):
            logger.debug(
                "record_skipped",
                record_type=model.__name__,
                reason="malformed_field",
                field=name,
            )
            return None
        values[name] = int(values[name])

    try:
        return model(**values)
    except ValidationError as e:
        logger.debug(
            "record_skipped",
            record_type=model.__name__,
            reason="malformed_field",
            error_count=e.error_count(),
        )
        return None


# =============================================================================
# SINGLE RECORDS
# =============================================================================

def encode_account(account: Account) -> str:
    return _encode(account, ACCOUNT_FIELDS)


def decode_account(line: str) -> Optional[Account]:
    return _decode(line, Account, ACCOUNT_FIELDS, ACCOUNT_INT_FIELDS)


def encode_payment(payment: Payment) -> str:
    return _encode(payment, PAYMENT_FIELDS)


def decode_payment(line: str) -> Optional[Payment]:
    return _decode(line, Payment, PAYMENT_FIELDS, PAYMENT_INT_FIELDS)


def encode_favorite(favorite: Favorite) -> str:
    return _encode(favorite, FAVORITE_FIELDS)


def decode_favorite(line: str) -> Optional[Favorite]:
    return _decode(line, Favorite, FAVORITE_FIELDS, FAVORITE_INT_FIELDS)


# =============================================================================
# RECORD STREAMS
# =============================================================================

def encode_records(records: Iterable[T], encoder: Callable[[T], str]) -> str:
    """Encode records one per line, each followed by a newline."""
    return "".join(encoder(record) + RECORD_SEPARATOR for record in records)


def decode_records(data: str, decoder: Callable[[str], Optional[T]]) -> list[T]:
    """Decode newline-separated records, skipping anything unreadable."""
    decoded = (decoder(line) for line in data.split(RECORD_SEPARATOR))
    return [record for record in decoded if record is not None]


def encode_account_list(accounts: Iterable[Account]) -> str:
    """Encode accounts for the single-file export, each followed by "|"."""
    return "".join(encode_account(account) + ACCOUNT_LIST_SEPARATOR for account in accounts)


def decode_account_list(data: str) -> list[Account]:
    decoded = (decode_account(chunk) for chunk in data.split(ACCOUNT_LIST_SEPARATOR))
    return [account for account in decoded if account is not None]
