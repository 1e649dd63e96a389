"""
Persistence of the wallet ledger.

The ledger is stored as a single JSON document in the data directory. Writes
go to a temporary file which is then moved into place so a crash never
leaves a half-written ledger behind.
"""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, ValidationError
from sncore.models import CoinOutput, OutputDiff, OutputID, UnlockHash

LEDGER_FILENAME = "wallet.json"
SNAPSHOT_VERSION = 1


class SnapshotError(Exception):
    """Raised when a persisted ledger cannot be read."""


class KnownOutputSnapshot(BaseModel):
    id: OutputID
    output: CoinOutput
    spendable: bool
    age: int = 0


class KeySnapshot(BaseModel):
    address: UnlockHash
    outputs: list[KnownOutputSnapshot] = Field(default_factory=list)


class LedgerSnapshot(BaseModel):
    version: int = SNAPSHOT_VERSION
    age: int = 0
    keys: list[KeySnapshot] = Field(default_factory=list)
    pending_diffs: list[OutputDiff] = Field(default_factory=list)


def get_ledger_path(data_dir: Path) -> Path:
    return data_dir / LEDGER_FILENAME


def save_snapshot(snapshot: LedgerSnapshot, data_dir: Path) -> Path:
    """
    Write a ledger snapshot to the data directory.

    Args:
        snapshot: Ledger state to persist
        data_dir: Directory holding the wallet files (created if missing)

    Returns:
        Path of the written ledger file
    """
    data_dir.mkdir(parents=True, exist_ok=True)
    path = get_ledger_path(data_dir)
    tmp_path = path.with_suffix(".json.tmp")

    # A leftover temp file could carry wider permissions, so start fresh
    tmp_path.unlink(missing_ok=True)
    fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(snapshot.model_dump_json(indent=2))
    os.replace(tmp_path, path)

    logger.debug(f"Saved wallet ledger to {path} ({len(snapshot.keys)} addresses)")
    return path


def load_snapshot(data_dir: Path) -> LedgerSnapshot | None:
    """
    Read the ledger snapshot from the data directory.

    Returns:
        The snapshot, or None if no ledger has been saved yet

    Raises:
        SnapshotError: If the file is corrupt or was written by an unsupported version
    """
    path = get_ledger_path(data_dir)
    if not path.exists():
        return None

    try:
        snapshot = LedgerSnapshot.model_validate_json(path.read_bytes())
    except OSError as e:
        raise SnapshotError(f"Failed to read wallet ledger {path}: {e}") from e
    except ValidationError as e:
        raise SnapshotError(f"Invalid wallet ledger {path}: {e}") from e

    if snapshot.version != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported wallet ledger version: {snapshot.version}")
    return snapshot
