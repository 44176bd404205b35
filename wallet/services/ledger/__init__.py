"""Ledger service package."""

from wallet.services.ledger.service import LedgerService

__all__ = ["LedgerService"]
