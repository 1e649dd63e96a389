"""
Configuration management using pydantic-settings.
"""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger
from pydantic_settings import BaseSettings, SettingsConfigDict

from snwallet.wallet.diffs import StrictnessPolicy


class WalletSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SNWALLET_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    # STRICT aborts the update on a revert of an unknown output; LENIENT logs and skips it
    strictness: StrictnessPolicy = StrictnessPolicy.LENIENT

    data_dir: Path = Path.home() / ".snwallet"

    log_level: str = "INFO"


def get_settings() -> WalletSettings:
    return WalletSettings()


def setup_logging(level: str = "INFO") -> None:
    """Configure loguru logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
