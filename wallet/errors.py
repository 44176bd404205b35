"""
Ledger Errors

One exception per failure category. Each carries a fixed message, so
callers can match on the type alone. Every check that raises one of
these runs before the ledger is mutated.
"""


class LedgerError(Exception):
    """Base exception for ledger operations."""

    message = "ledger error"

    def __init__(self, message=None):
        super().__init__(message or self.message)


class PhoneAlreadyRegisteredError(LedgerError):
    message = "phone already registered"


class FavoriteAlreadyRegisteredError(LedgerError):
    message = "favorite already registered"


class AmountMustBePositiveError(LedgerError):
    message = "amount must be greater than zero"


class AccountNotFoundError(LedgerError):
    message = "account not found"


class InsufficientBalanceError(LedgerError):
    message = "not enough balance"


class PaymentNotFoundError(LedgerError):
    message = "payment not found"


class PaymentNotInProgressError(LedgerError):
    """Only an INPROGRESS payment can be rejected."""
    message = "payment is not in progress"


class FavoriteNotFoundError(LedgerError):
    message = "favorite not found"


class MinimumRecordsRequiredError(LedgerError):
    message = "write at least 1 record"
