"""
Wallet ledger: reconciles confirmed consensus changes with the unconfirmed
transaction pool.

The wallet's view of its outputs is always "confirmed state plus the current
pool overlay". The overlay is replaced wholesale on every update: the
previous pool diffs are reverted first, the confirmed diffs are applied,
and only then is the new pool set laid on top.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger
from pydantic import TypeAdapter
from sncore.models import ConsensusChange, DiffDirection, OutputDiff, UnlockHash

from snwallet.wallet.diffs import (
    InvariantViolationError,
    Journal,
    StrictnessPolicy,
    apply_diff,
    rollback,
)
from snwallet.wallet.models import KnownOutput
from snwallet.wallet.persist import (
    KeySnapshot,
    KnownOutputSnapshot,
    LedgerSnapshot,
    load_snapshot,
    save_snapshot,
)
from snwallet.wallet.registry import KeyRegistry

if TYPE_CHECKING:
    from snwallet.config import WalletSettings

Subscriber = Callable[[], None]

_unlock_hash = TypeAdapter(UnlockHash)


class WalletLedger:
    """
    Wallet output ledger.

    All state (key registry, pending diff set, wallet age, subscribers) is
    guarded by a single lock. Readers take the same lock so they never see a
    ledger between the unwind and re-overlay steps of an update.
    """

    def __init__(
        self,
        policy: StrictnessPolicy = StrictnessPolicy.LENIENT,
        registry: KeyRegistry | None = None,
        age: int = 0,
    ):
        self.policy = policy
        self._registry = registry if registry is not None else KeyRegistry()
        self._unconfirmed_diffs: list[OutputDiff] = []
        self._age = age
        self._subscribers: list[Subscriber] = []
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: WalletSettings) -> WalletLedger:
        """Configure logging and load the ledger described by the settings."""
        from snwallet.config import setup_logging

        setup_logging(settings.log_level)
        return cls.load(settings.data_dir, policy=settings.strictness)

    @classmethod
    def from_snapshot(
        cls, snapshot: LedgerSnapshot, policy: StrictnessPolicy = StrictnessPolicy.LENIENT
    ) -> WalletLedger:
        """Rebuild a ledger from persisted state."""
        registry = KeyRegistry()
        for key in snapshot.keys:
            entry = registry.add_key(key.address)
            for o in key.outputs:
                entry.insert(
                    KnownOutput(id=o.id, output=o.output, spendable=o.spendable, age=o.age)
                )

        ledger = cls(policy=policy, registry=registry, age=snapshot.age)
        ledger._unconfirmed_diffs = list(snapshot.pending_diffs)
        logger.info(
            f"Restored wallet ledger: {len(registry)} addresses, age {snapshot.age}, "
            f"{len(snapshot.pending_diffs)} pending diffs"
        )
        return ledger

    def subscribe(self, callback: Subscriber) -> None:
        """Register a zero-argument callback fired after every completed update."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            logger.debug("Unsubscribe called for unknown subscriber")

    def _notify_subscribers(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback()
            except Exception as e:
                logger.warning(f"Wallet subscriber {callback!r} failed: {e}")

    async def add_key(self, address: str) -> None:
        """Start tracking outputs sent to a wallet-controlled address."""
        address = _unlock_hash.validate_python(address)
        async with self._lock:
            self._registry.add_key(address)

    async def reconcile(
        self,
        confirmed_diffs: Sequence[OutputDiff],
        reverted_block_count: int,
        applied_block_count: int,
        unconfirmed_diffs: Sequence[OutputDiff],
    ) -> None:
        """
        Bring the ledger up to date with a consensus change and a new pool set.

        Args:
            confirmed_diffs: Ordered output diffs now part of the canonical chain
            reverted_block_count: Number of blocks removed from the chain
            applied_block_count: Number of blocks added to the chain
            unconfirmed_diffs: The complete current pool diff set (not a delta)

        Raises:
            ValueError: If a block count is negative
            InvariantViolationError: Under STRICT policy, when a diff reverts an
                unknown output. Every change made by the call is rolled back and
                subscribers are not notified.
        """
        if reverted_block_count < 0 or applied_block_count < 0:
            raise ValueError(
                f"Block counts must be non-negative, got reverted={reverted_block_count} "
                f"applied={applied_block_count}"
            )

        async with self._lock:
            pending = list(unconfirmed_diffs)
            journal: Journal = []
            try:
                unwound = 0
                for diff in self._unconfirmed_diffs:
                    if apply_diff(
                        self._registry, diff, DiffDirection.REVERT, self.policy, journal
                    ):
                        unwound += 1

                confirmed = 0
                for diff in confirmed_diffs:
                    if apply_diff(
                        self._registry, diff, DiffDirection.APPLY, self.policy, journal
                    ):
                        confirmed += 1

                overlaid = 0
                for diff in pending:
                    if apply_diff(
                        self._registry, diff, DiffDirection.APPLY, self.policy, journal
                    ):
                        overlaid += 1
            except InvariantViolationError:
                rollback(journal)
                logger.error("Wallet update rejected, ledger left at its previous state")
                raise

            self._unconfirmed_diffs = pending
            self._age -= reverted_block_count
            self._age += applied_block_count

            logger.debug(
                f"Wallet update: unwound {unwound}, confirmed {confirmed}/{len(confirmed_diffs)}, "
                f"overlaid {overlaid}/{len(pending)}, age {self._age}"
            )

            self._notify_subscribers()

    async def receive_update(
        self, change: ConsensusChange, unconfirmed_diffs: Sequence[OutputDiff]
    ) -> None:
        """Entry point for the consensus set and transaction pool."""
        await self.reconcile(
            change.output_diffs,
            change.reverted_block_count,
            change.applied_block_count,
            unconfirmed_diffs,
        )

    async def age(self) -> int:
        async with self._lock:
            return self._age

    async def addresses(self) -> list[str]:
        async with self._lock:
            return self._registry.addresses()

    async def pending_diffs(self) -> list[OutputDiff]:
        async with self._lock:
            return list(self._unconfirmed_diffs)

    async def get_output(self, address: str, output_id: str) -> KnownOutput | None:
        """Get a copy of the ledger entry for an output, if the wallet knows it."""
        async with self._lock:
            entry = self._registry.lookup(address)
            if entry is None:
                return None
            known = entry.lookup(output_id)
            if known is None:
                return None
            return KnownOutput(
                id=known.id, output=known.output, spendable=known.spendable, age=known.age
            )

    async def spendable_outputs(self, address: str | None = None) -> list[KnownOutput]:
        """Get spendable outputs, optionally restricted to one address."""
        async with self._lock:
            if address is not None:
                entry = self._registry.lookup(address)
                outputs = entry.spendable_outputs() if entry is not None else []
            else:
                outputs = [o for o in self._registry.iter_outputs() if o.spendable]
            return [
                KnownOutput(id=o.id, output=o.output, spendable=o.spendable, age=o.age)
                for o in outputs
            ]

    async def balance(self) -> int:
        """Sum of all spendable outputs, including the unconfirmed overlay"""
        async with self._lock:
            return sum(o.value for o in self._registry.iter_outputs() if o.spendable)

    async def snapshot(self) -> LedgerSnapshot:
        """Export the ledger state for persistence."""
        async with self._lock:
            keys = []
            for entry in self._registry.entries():
                keys.append(
                    KeySnapshot(
                        address=entry.address,
                        outputs=[
                            KnownOutputSnapshot(
                                id=o.id, output=o.output, spendable=o.spendable, age=o.age
                            )
                            for o in entry.outputs.values()
                        ],
                    )
                )
            return LedgerSnapshot(
                age=self._age, keys=keys, pending_diffs=list(self._unconfirmed_diffs)
            )

    @classmethod
    def load(
        cls, data_dir: Path, policy: StrictnessPolicy = StrictnessPolicy.LENIENT
    ) -> WalletLedger:
        """Load the persisted ledger from data_dir, or start an empty one."""
        snapshot = load_snapshot(data_dir)
        if snapshot is None:
            logger.info(f"No wallet ledger in {data_dir}, starting empty")
            return cls(policy=policy)
        return cls.from_snapshot(snapshot, policy=policy)

    async def save(self, data_dir: Path) -> Path:
        return save_snapshot(await self.snapshot(), data_dir)
