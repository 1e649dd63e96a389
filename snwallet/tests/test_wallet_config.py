"""
Tests for wallet settings and logging setup.
"""

import sys
from pathlib import Path

import pytest
from loguru import logger

from snwallet.config import WalletSettings, get_settings, setup_logging
from snwallet.wallet.diffs import StrictnessPolicy
from snwallet.wallet.ledger import WalletLedger


def test_defaults(monkeypatch):
    monkeypatch.delenv("SNWALLET_STRICTNESS", raising=False)
    monkeypatch.delenv("SNWALLET_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SNWALLET_DATA_DIR", raising=False)

    settings = WalletSettings(_env_file=None)

    assert settings.strictness == StrictnessPolicy.LENIENT
    assert settings.log_level == "INFO"
    assert settings.data_dir == Path.home() / ".snwallet"


def test_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("SNWALLET_STRICTNESS", "strict")
    monkeypatch.setenv("SNWALLET_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SNWALLET_LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.strictness == StrictnessPolicy.STRICT
    assert settings.data_dir == tmp_path
    assert settings.log_level == "debug"


def test_invalid_strictness(monkeypatch):
    monkeypatch.setenv("SNWALLET_STRICTNESS", "paranoid")

    with pytest.raises(ValueError):
        get_settings()


@pytest.mark.asyncio
async def test_ledger_from_settings(tmp_path, capsys):
    settings = WalletSettings(
        strictness=StrictnessPolicy.STRICT, data_dir=tmp_path, log_level="warning"
    )

    try:
        ledger = WalletLedger.from_settings(settings)
        logger.info("hidden message")
        logger.warning("visible message")
        captured = capsys.readouterr()
    finally:
        logger.remove()
        logger.add(sys.__stderr__)

    assert ledger.policy == StrictnessPolicy.STRICT
    assert await ledger.age() == 0
    assert "visible message" in captured.err
    assert "hidden message" not in captured.err


def test_setup_logging_level(capsys):
    setup_logging("warning")
    try:
        logger.info("hidden message")
        logger.warning("visible message")
        captured = capsys.readouterr()
    finally:
        logger.remove()
        logger.add(sys.__stderr__)

    assert "visible message" in captured.err
    assert "hidden message" not in captured.err
