"""
Core Ledger Models for the Wallet

These models describe everything the ledger stores:
1. Accounts and their balances
2. Payments made against those balances
3. Favorites (reusable payment templates)

DESIGN DECISION: Money is always an integer count of minor units
(e.g. cents). There is no fractional representation anywhere in the
ledger, so every balance change is exact integer arithmetic.

Models are mutable on purpose. Lookups hand out the live stored object,
and import merges update fields in place, so every alias observes the
change. Assignment is validated so a mutation can never leave a record
in a shape the model would reject on construction.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# Minor currency units (e.g. cents)
Money = int

# Free-form payment classification, no enumerated domain
PaymentCategory = str

# Account holder identifier, unique across accounts
Phone = str


class PaymentStatus(str, Enum):
    """
    Payment lifecycle status.

    A payment is created INPROGRESS and may move exactly once to FAIL
    (via reject). OK is reserved for settlement and never assigned here.
    """
    OK = "OK"
    FAIL = "FAIL"
    INPROGRESS = "INPROGRESS"


# =============================================================================
# ENTITIES
# =============================================================================

class Account(BaseModel):
    """A user account holding a non-negative balance."""
    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(
        ...,
        ge=1,
        description="Sequential account ID assigned by the ledger"
    )
    phone: Phone = Field(
        ...,
        description="Account holder phone, unique across accounts"
    )
    balance: Money = Field(
        default=0,
        ge=0,
        description="Balance in minor units"
    )


class Payment(BaseModel):
    """
    A payment debited from an account.

    account_id is a non-owning reference. It is checked when the payment
    is created and never revalidated afterwards.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Globally unique payment ID"
    )
    account_id: int = Field(
        ...,
        description="ID of the debited account"
    )
    amount: Money = Field(
        ...,
        description="Debited amount in minor units"
    )
    category: PaymentCategory = Field(
        ...,
        description="Payment category"
    )
    status: PaymentStatus = Field(
        default=PaymentStatus.INPROGRESS,
        description="Lifecycle status"
    )


class Favorite(BaseModel):
    """
    A named payment template.

    This is a detached copy of a payment's economic parameters, not a
    reference to the payment: rejecting or changing the source payment
    never touches the favorite.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Globally unique favorite ID"
    )
    account_id: int = Field(
        ...,
        description="ID of the account to pay from"
    )
    name: str = Field(
        ...,
        description="Favorite name, unique across favorites"
    )
    amount: Money = Field(
        ...,
        description="Amount to pay in minor units"
    )
    category: PaymentCategory = Field(
        ...,
        description="Payment category"
    )


class LedgerSnapshot(BaseModel):
    """
    Ordered copy of the three ledger collections.

    This is the unit storage backends read and write.
    """
    accounts: list[Account] = Field(default_factory=list)
    payments: list[Payment] = Field(default_factory=list)
    favorites: list[Favorite] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when no collection holds any record."""
        return not (self.accounts or self.payments or self.favorites)
