"""
Wallet ledger: key registry, diff application and update coordination.
"""

from snwallet.wallet.diffs import InvariantViolationError, StrictnessPolicy, apply_diff
from snwallet.wallet.ledger import Subscriber, WalletLedger
from snwallet.wallet.models import KeyEntry, KnownOutput
from snwallet.wallet.registry import KeyRegistry

__all__ = [
    "InvariantViolationError",
    "KeyEntry",
    "KeyRegistry",
    "KnownOutput",
    "StrictnessPolicy",
    "Subscriber",
    "WalletLedger",
    "apply_diff",
]
