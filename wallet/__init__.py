"""
Wallet - Source Package

An in-process ledger of accounts, payments and favorite payment
templates, persisted to a directory of flat text files.

DESIGN PRINCIPLES:
1. Money is integer minor units, arithmetic is exact
2. Validate first, mutate after: failed operations change nothing
3. Import merges into live state, it never replaces it
4. Every balance change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Wallet Team"
