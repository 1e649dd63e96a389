"""
Wallet data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sncore.models import CoinOutput


@dataclass
class KnownOutput:
    """An output the wallet has seen for one of its addresses"""

    id: str
    output: CoinOutput
    spendable: bool = True
    # Set once at creation; maturity is judged from the wallet age drift since then
    age: int = 0

    @property
    def value(self) -> int:
        return self.output.value

    @property
    def address(self) -> str:
        return self.output.unlock_hash


@dataclass
class KeyEntry:
    """
    Every output ever observed for one wallet-controlled address.

    Outputs are never removed; spending one only clears its spendable flag so
    that a later re-observation can reactivate it.
    """

    address: str
    outputs: dict[str, KnownOutput] = field(default_factory=dict)

    def lookup(self, output_id: str) -> KnownOutput | None:
        return self.outputs.get(output_id)

    def insert(self, known_output: KnownOutput) -> KnownOutput:
        """Insert an output, returning the existing record if the id is already known."""
        existing = self.outputs.get(known_output.id)
        if existing is not None:
            return existing
        self.outputs[known_output.id] = known_output
        return known_output

    def spendable_outputs(self) -> list[KnownOutput]:
        return [o for o in self.outputs.values() if o.spendable]
