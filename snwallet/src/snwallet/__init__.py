"""
snwallet - Wallet ledger for storenet nodes

Tracks which coin outputs the wallet controls, reconciling confirmed
consensus changes with the unconfirmed transaction pool.
"""

__version__ = "0.1.0"
