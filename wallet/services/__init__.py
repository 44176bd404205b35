"""
Services package.

Import from the subpackages directly: wallet.services.ledger for the
ledger itself, wallet.services.storage for persistence backends.
"""
