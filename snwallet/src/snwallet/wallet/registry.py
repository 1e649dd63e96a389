"""
Key registry for tracking wallet-controlled addresses and their outputs.

Only manages storage; deciding what to store is the diff applier's job.
"""

from __future__ import annotations

from collections.abc import Iterator

from loguru import logger

from snwallet.wallet.models import KeyEntry, KnownOutput


class KeyRegistry:
    def __init__(self) -> None:
        self._keys: dict[str, KeyEntry] = {}

    def add_key(self, address: str) -> KeyEntry:
        entry = self._keys.get(address)
        if entry is not None:
            return entry

        entry = KeyEntry(address=address)
        self._keys[address] = entry
        logger.info(f"Registered wallet address {address[:16]}...")
        return entry

    def lookup(self, address: str) -> KeyEntry | None:
        return self._keys.get(address)

    def addresses(self) -> list[str]:
        return list(self._keys)

    def entries(self) -> list[KeyEntry]:
        return list(self._keys.values())

    def iter_outputs(self) -> Iterator[KnownOutput]:
        """Iterate over every known output across all addresses."""
        for entry in self._keys.values():
            yield from entry.outputs.values()

    def __contains__(self, address: object) -> bool:
        return address in self._keys

    def __len__(self) -> int:
        return len(self._keys)
