"""
flushkv Configuration Settings

This module contains the configuration defaults for flushkv stores and the
maintenance CLI. Every value can be overridden through the environment.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


@dataclass
class Settings:
    """flushkv configuration settings."""

    # Persistence settings
    STORE_PATH: str = os.environ.get("FLUSHKV_STORE_PATH", "flushkv.dat")
    FLUSH_INTERVAL: float = float(os.environ.get("FLUSHKV_FLUSH_INTERVAL", "0"))  # Seconds, <= 0 disables the timer

    # Snapshot check around iterate(); never active under python -O
    VERIFY_ITERATION: bool = __debug__ and _env_flag("FLUSHKV_VERIFY_ITERATION", "true")

    # Logging settings
    DEBUG: bool = _env_flag("FLUSHKV_DEBUG", "false")
    LOG_LEVEL: str = os.environ.get("FLUSHKV_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
