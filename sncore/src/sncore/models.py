"""
Chain data models using Pydantic for validation and serialization.

These are the shapes the consensus set and the transaction pool hand to
their subscribers. Hashes travel as lowercase hex strings so that models
serialize to JSON without a custom encoder.
"""

from __future__ import annotations

import hashlib
import secrets
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field

from sncore.constants import HASH_HEX_LENGTH, HASH_SIZE


def _validate_hash_hex(v: str) -> str:
    v = v.lower()
    if len(v) != HASH_HEX_LENGTH:
        raise ValueError(f"Hash must be {HASH_HEX_LENGTH} hex characters, got {len(v)}")
    try:
        bytes.fromhex(v)
    except ValueError:
        raise ValueError("Hash must be hex encoded") from None
    return v


HashHex = Annotated[str, AfterValidator(_validate_hash_hex)]

# An unlock hash identifies a spend condition; the wallet calls it an address
UnlockHash = HashHex
OutputID = HashHex
BlockID = HashHex
TransactionID = HashHex

Currency = Annotated[int, Field(ge=0)]


def random_hash() -> str:
    """Generate a random hash, hex encoded."""
    return secrets.token_hex(HASH_SIZE)


def derive_output_id(txid: str, index: int) -> str:
    """
    Derive the id of the output at position `index` of transaction `txid`.

    Args:
        txid: Hex-encoded id of the creating transaction
        index: Position of the output within that transaction

    Returns:
        Hex-encoded output id
    """
    if index < 0:
        raise ValueError(f"Output index must be non-negative, got {index}")
    h = hashlib.blake2b(digest_size=HASH_SIZE)
    h.update(bytes.fromhex(_validate_hash_hex(txid)))
    h.update(index.to_bytes(8, "little"))
    return h.hexdigest()


class DiffDirection(str, Enum):
    APPLY = "apply"
    REVERT = "revert"

    def opposite(self) -> DiffDirection:
        if self is DiffDirection.APPLY:
            return DiffDirection.REVERT
        return DiffDirection.APPLY


class CoinOutput(BaseModel):
    value: Currency
    unlock_hash: UnlockHash

    model_config = {"frozen": True}


class OutputDiff(BaseModel):
    """
    One output entering or leaving the output set.

    An APPLY diff means the output was created; a REVERT diff means it was
    spent (or its creation was undone).
    """

    direction: DiffDirection
    id: OutputID
    output: CoinOutput

    model_config = {"frozen": True}

    @property
    def address(self) -> str:
        return self.output.unlock_hash


class ConsensusChange(BaseModel):
    """Changes to the confirmed set produced by a single consensus update."""

    reverted_blocks: list[BlockID] = Field(default_factory=list)
    applied_blocks: list[BlockID] = Field(default_factory=list)
    output_diffs: list[OutputDiff] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def reverted_block_count(self) -> int:
        return len(self.reverted_blocks)

    @property
    def applied_block_count(self) -> int:
        return len(self.applied_blocks)
