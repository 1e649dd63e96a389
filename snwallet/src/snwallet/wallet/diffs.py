"""
Application of output diffs to the key registry.

A diff is applied with a direction. When the diff's own direction matches
the pass direction the output becomes spendable; otherwise it becomes
unspendable. Running the same diff with the opposite pass direction
therefore undoes it, which is how the unconfirmed overlay is unwound.
"""

from __future__ import annotations

from enum import Enum

from loguru import logger
from sncore.models import DiffDirection, OutputDiff

from snwallet.wallet.models import KeyEntry, KnownOutput
from snwallet.wallet.registry import KeyRegistry


class StrictnessPolicy(str, Enum):
    STRICT = "strict"
    LENIENT = "lenient"


# (entry, output id, spendable flag before the change or None if the output was created)
Journal = list[tuple[KeyEntry, str, bool | None]]


class InvariantViolationError(Exception):
    """Raised when a diff tries to spend an output the wallet never saw."""

    def __init__(self, address: str, output_id: str):
        self.address = address
        self.output_id = output_id
        super().__init__(
            f"Reverting unknown output {output_id} for address {address}: "
            "diffs were delivered out of order or the ledger is corrupt"
        )


def apply_diff(
    registry: KeyRegistry,
    diff: OutputDiff,
    direction: DiffDirection,
    policy: StrictnessPolicy = StrictnessPolicy.LENIENT,
    journal: Journal | None = None,
) -> bool:
    """
    Apply a single output diff to the registry.

    Args:
        registry: Registry of wallet-controlled addresses
        diff: The output diff to apply
        direction: Direction of the pass being run (APPLY or REVERT)
        policy: What to do when reverting an output that was never observed
        journal: If given, every change is recorded so it can be undone with rollback()

    Returns:
        True if a ledger entry was created or changed, False otherwise

    Raises:
        InvariantViolationError: Reverting an unknown output under STRICT policy
    """
    entry = registry.lookup(diff.address)
    if entry is None:
        logger.debug(f"Skipping diff for foreign address {diff.address[:16]}...")
        return False

    if diff.direction == direction:
        # Outputs can be reported several times (local funding, pool echoes),
        # and spent outputs are kept, so reactivate instead of re-creating.
        known = entry.lookup(diff.id)
        if known is not None:
            if known.spendable:
                return False
            if journal is not None:
                journal.append((entry, diff.id, False))
            known.spendable = True
            return True

        if journal is not None:
            journal.append((entry, diff.id, None))
        entry.insert(KnownOutput(id=diff.id, output=diff.output, spendable=True, age=0))
        return True

    known = entry.lookup(diff.id)
    if known is None:
        if policy == StrictnessPolicy.STRICT:
            raise InvariantViolationError(diff.address, diff.id)
        logger.warning(
            f"Ignoring revert of unknown output {diff.id} for address {diff.address}"
        )
        return False

    if not known.spendable:
        return False
    if journal is not None:
        journal.append((entry, diff.id, True))
    known.spendable = False
    return True


def rollback(journal: Journal) -> None:
    """Undo the changes recorded in a journal, newest first."""
    for entry, output_id, previous in reversed(journal):
        if previous is None:
            # Created during the failed update, so it was never really observed
            del entry.outputs[output_id]
        else:
            entry.outputs[output_id].spendable = previous
    journal.clear()
