"""
sncore - Core library for storenet components

Provides the chain types shared between the consensus set, the
transaction pool and the wallet.
"""

__version__ = "0.1.0"

from sncore.constants import HASH_HEX_LENGTH, HASH_SIZE
from sncore.models import (
    BlockID,
    CoinOutput,
    ConsensusChange,
    Currency,
    DiffDirection,
    OutputDiff,
    OutputID,
    TransactionID,
    UnlockHash,
    derive_output_id,
    random_hash,
)

__all__ = [
    "BlockID",
    "CoinOutput",
    "ConsensusChange",
    "Currency",
    "DiffDirection",
    "HASH_HEX_LENGTH",
    "HASH_SIZE",
    "OutputDiff",
    "OutputID",
    "TransactionID",
    "UnlockHash",
    "derive_output_id",
    "random_hash",
]
