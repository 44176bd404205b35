"""
Ledger Service

Holds the authoritative in-memory state of the wallet and performs every
mutation on it.

GUARANTEES:
- A payment debits exactly one account by exactly its amount
- A rejected payment credits that amount back exactly once
- Balances never go negative
- Every validation runs before any mutation, so a failed operation
  leaves no trace in the ledger

Each collection is an insertion-ordered dict keyed by ID: O(1) lookup and
in-place replacement, deterministic export order.

The service is not thread-safe. Callers must serialize access.
"""

from typing import Optional
from uuid import uuid4

from pydantic import BaseModel

from wallet.audit.logger import AuditLogger
from wallet.errors import (
    AccountNotFoundError,
    AmountMustBePositiveError,
    FavoriteAlreadyRegisteredError,
    FavoriteNotFoundError,
    InsufficientBalanceError,
    LedgerError,
    PaymentNotFoundError,
    PaymentNotInProgressError,
    PhoneAlreadyRegisteredError,
)
from wallet.models.audit import AuditEvent, AuditEventBuilder
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


def _new_id() -> str:
    return str(uuid4())


def _update_in_place(existing: BaseModel, incoming: BaseModel) -> None:
    for name in type(existing).model_fields:
        setattr(existing, name, getattr(incoming, name))


class LedgerService:
    """
    In-memory ledger of accounts, payments and favorites.

    Lookups return the live stored objects, not copies. Mutating a
    returned object mutates the ledger.
    """

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._next_account_id = 0
        self._accounts: dict[int, Account] = {}
        self._payments: dict[str, Payment] = {}
        self._favorites: dict[str, Favorite] = {}
        self._audit_logger = audit_logger

    # =========================================================================
    # COLLECTIONS
    # =========================================================================

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts.values())

    @property
    def payments(self) -> list[Payment]:
        return list(self._payments.values())

    @property
    def favorites(self) -> list[Favorite]:
        return list(self._favorites.values())

    @property
    def last_account_id(self) -> int:
        """Highest account ID handed out or imported so far (0 when none)."""
        return self._next_account_id

    def snapshot(self) -> LedgerSnapshot:
        """Ordered view of all three collections, sharing the live objects."""
        return LedgerSnapshot(
            accounts=self.accounts,
            payments=self.payments,
            favorites=self.favorites,
        )

    # =========================================================================
    # AUDIT HELPERS
    # =========================================================================

    def _audit(self, event: AuditEvent) -> None:
        if self._audit_logger is not None:
            self._audit_logger.log(event)

    def _failed(
        self,
        operation: str,
        error: LedgerError,
        entity_type: Optional[str] = None,
        entity_id=None,
    ) -> LedgerError:
        """Audit a failed operation and hand back the error to raise."""
        self._audit(AuditEventBuilder.operation_failed(
            operation=operation,
            error=error,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
        ))
        return error

    # =========================================================================
    # ACCOUNTS
    # =========================================================================

    def register_account(self, phone: Phone) -> Account:
        """
        Register a new account with a zero balance.

        Raises:
            PhoneAlreadyRegisteredError: If any account already uses the phone
        """
        if any(account.phone == phone for account in self._accounts.values()):
            raise self._failed("register_account", PhoneAlreadyRegisteredError())

        self._next_account_id += 1
        account = Account(id=self._next_account_id, phone=phone, balance=0)
        self._accounts[account.id] = account

        self._audit(AuditEventBuilder.account_registered(account.id, phone))
        return account

    def deposit(self, account_id: int, amount: Money) -> None:
        """
        Add money to an account. There is no upper bound.

        Raises:
            AmountMustBePositiveError: If amount <= 0
            AccountNotFoundError: If the account does not exist
        """
        if amount <= 0:
            raise self._failed("deposit", AmountMustBePositiveError(), "account", account_id)

        account = self._accounts.get(account_id)
        if account is None:
            raise self._failed("deposit", AccountNotFoundError(), "account", account_id)

        account.balance += amount
        self._audit(AuditEventBuilder.deposit_made(account.id, amount, account.balance))

    def find_account_by_id(self, account_id: int) -> Account:
        account = self._accounts.get(account_id)
        if account is None:
            raise AccountNotFoundError()
        return account

    # =========================================================================
    # PAYMENTS
    # =========================================================================

    def pay(self, account_id: int, amount: Money, category: PaymentCategory) -> Payment:
        """
        Debit an account and record an INPROGRESS payment.

        Raises:
            AmountMustBePositiveError: If amount <= 0
            AccountNotFoundError: If the account does not exist
            InsufficientBalanceError: If the balance is below amount
        """
        if amount <= 0:
            raise self._failed("pay", AmountMustBePositiveError(), "account", account_id)

        account = self._accounts.get(account_id)
        if account is None:
            raise self._failed("pay", AccountNotFoundError(), "account", account_id)
        if account.balance < amount:
            raise self._failed("pay", InsufficientBalanceError(), "account", account_id)

        account.balance -= amount
        payment = Payment(
            id=_new_id(),
            account_id=account_id,
            amount=amount,
            category=category,
            status=PaymentStatus.INPROGRESS,
        )
        self._payments[payment.id] = payment

        self._audit(AuditEventBuilder.payment_created(payment.id, account_id, amount, category))
        return payment

    def reject(self, payment_id: str) -> None:
        """
        Fail a payment and credit its amount back to the account.

        Only an INPROGRESS payment can be rejected, so the amount is
        credited back at most once.

        Raises:
            PaymentNotFoundError: If the payment does not exist
            AccountNotFoundError: If the payment's account does not exist
            PaymentNotInProgressError: If the payment is not INPROGRESS
        """
        payment = self._payments.get(payment_id)
        if payment is None:
            raise self._failed("reject", PaymentNotFoundError(), "payment", payment_id)

        account = self._accounts.get(payment.account_id)
        if account is None:
            raise self._failed("reject", AccountNotFoundError(), "payment", payment_id)
        if payment.status != PaymentStatus.INPROGRESS:
            raise self._failed("reject", PaymentNotInProgressError(), "payment", payment_id)

        payment.status = PaymentStatus.FAIL
        account.balance += payment.amount

        self._audit(AuditEventBuilder.payment_rejected(payment.id, account.id, payment.amount))

    def repeat(self, payment_id: str) -> Payment:
        """
        Make a new, independent payment with the same account, amount
        and category as an existing one.

        Raises:
            PaymentNotFoundError: If the payment does not exist
            Any error raised by pay()
        """
        source = self._payments.get(payment_id)
        if source is None:
            raise self._failed("repeat", PaymentNotFoundError(), "payment", payment_id)

        payment = self.pay(source.account_id, source.amount, source.category)
        self._audit(AuditEventBuilder.payment_repeated(source.id, payment.id))
        return payment

    def find_payment_by_id(self, payment_id: str) -> Payment:
        payment = self._payments.get(payment_id)
        if payment is None:
            raise PaymentNotFoundError()
        return payment

    def export_account_history(self, account_id: int) -> list[Payment]:
        """
        Copies of every payment of an account, oldest first.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        account = self.find_account_by_id(account_id)
        return [
            payment.model_copy()
            for payment in self._payments.values()
            if payment.account_id == account.id
        ]

    # =========================================================================
    # FAVORITES
    # =========================================================================

    def favorite_payment(self, payment_id: str, name: str) -> Favorite:
        """
        Save a payment's account, amount and category as a named favorite.

        Raises:
            FavoriteAlreadyRegisteredError: If the name is taken (exact match)
            PaymentNotFoundError: If the payment does not exist
        """
        if any(favorite.name == name for favorite in self._favorites.values()):
            raise self._failed("favorite_payment", FavoriteAlreadyRegisteredError(), "payment", payment_id)

        payment = self._payments.get(payment_id)
        if payment is None:
            raise self._failed("favorite_payment", PaymentNotFoundError(), "payment", payment_id)

        favorite = Favorite(
            id=_new_id(),
            account_id=payment.account_id,
            name=name,
            amount=payment.amount,
            category=payment.category,
        )
        self._favorites[favorite.id] = favorite

        self._audit(AuditEventBuilder.favorite_created(favorite.id, payment.id, name))
        return favorite

    def pay_from_favorite(self, favorite_id: str) -> Payment:
        """
        Pay using the amount, category and account stored in a favorite.

        Raises:
            FavoriteNotFoundError: If the favorite does not exist
            Any error raised by pay()
        """
        favorite = self._favorites.get(favorite_id)
        if favorite is None:
            raise self._failed("pay_from_favorite", FavoriteNotFoundError(), "favorite", favorite_id)

        payment = self.pay(favorite.account_id, favorite.amount, favorite.category)
        self._audit(AuditEventBuilder.favorite_paid(favorite.id, payment.id))
        return payment

    def find_favorite_by_id(self, favorite_id: str) -> Favorite:
        favorite = self._favorites.get(favorite_id)
        if favorite is None:
            raise FavoriteNotFoundError()
        return favorite

    # =========================================================================
    # MERGE (used by import)
    # =========================================================================
    # An incoming record whose ID is already stored overwrites the stored
    # object's fields in place; anything else is appended as given.
    # Uniqueness of phones and favorite names is not rechecked here.

    def merge_account(self, account: Account) -> Account:
        """Merge an account and advance the ID counter past it."""
        self._next_account_id = max(self._next_account_id, account.id)

        existing = self._accounts.get(account.id)
        if existing is not None:
            _update_in_place(existing, account)
            return existing
        self._accounts[account.id] = account
        return account

    def merge_payment(self, payment: Payment) -> Payment:
        existing = self._payments.get(payment.id)
        if existing is not None:
            _update_in_place(existing, payment)
            return existing
        self._payments[payment.id] = payment
        return payment

    def merge_favorite(self, favorite: Favorite) -> Favorite:
        existing = self._favorites.get(favorite.id)
        if existing is not None:
            _update_in_place(existing, favorite)
            return existing
        self._favorites[favorite.id] = favorite
        return favorite
