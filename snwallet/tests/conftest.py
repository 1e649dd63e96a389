"""
Pytest configuration and fixtures for wallet tests.
"""

from collections.abc import Callable

import pytest
import pytest_asyncio
from sncore.models import CoinOutput, DiffDirection, OutputDiff, derive_output_id

from snwallet.wallet.diffs import StrictnessPolicy
from snwallet.wallet.ledger import WalletLedger
from snwallet.wallet.registry import KeyRegistry

MakeDiff = Callable[..., OutputDiff]


@pytest.fixture
def wallet_address() -> str:
    """Address controlled by the test wallet"""
    return "aa" * 32


@pytest.fixture
def foreign_address() -> str:
    """Address belonging to somebody else"""
    return "ff" * 32


@pytest.fixture
def make_diff(wallet_address: str) -> MakeDiff:
    """Build an output diff for test output number n."""

    def _make(
        n: int,
        direction: DiffDirection = DiffDirection.APPLY,
        address: str | None = None,
        value: int = 1000,
    ) -> OutputDiff:
        return OutputDiff(
            direction=direction,
            id=derive_output_id("00" * 31 + f"{n:02x}", 0),
            output=CoinOutput(value=value, unlock_hash=address or wallet_address),
        )

    return _make


@pytest.fixture
def registry(wallet_address: str) -> KeyRegistry:
    reg = KeyRegistry()
    reg.add_key(wallet_address)
    return reg


@pytest_asyncio.fixture
async def ledger(wallet_address: str) -> WalletLedger:
    wallet = WalletLedger(policy=StrictnessPolicy.STRICT)
    await wallet.add_key(wallet_address)
    return wallet
