"""
cnaerisk Configuration

Settings come from environment variables with module-level defaults:

    CNAERISK_LOG_LEVEL       Logging level (default INFO)
    CNAERISK_LOG_FORMAT      "json" or "text" (default json)
    CNAERISK_RULES_PATH      Rule pack to load (default: bundled SESA pack)
    CNAERISK_READY_TIMEOUT   Seconds analyze() waits for a loading rule
                             table before classifying anyway (default 0)
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


DEFAULT_RULES_PATH = Path(__file__).parent / "packs" / "data" / "sesa_1034_2020.yaml"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "json"
LOG_FORMATS = ("json", "text")


@dataclass(frozen=True)
class Settings:
    log_level: str = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    rules_path: Path = DEFAULT_RULES_PATH
    ready_timeout: float = 0.0

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from CNAERISK_* environment variables."""
        log_format = os.getenv("CNAERISK_LOG_FORMAT", DEFAULT_LOG_FORMAT).lower()
        if log_format not in LOG_FORMATS:
            raise ValueError(
                f"CNAERISK_LOG_FORMAT must be one of {LOG_FORMATS}, got {log_format!r}"
            )

        timeout_raw = os.getenv("CNAERISK_READY_TIMEOUT", "0")
        try:
            ready_timeout = float(timeout_raw)
        except ValueError:
            raise ValueError(
                f"CNAERISK_READY_TIMEOUT must be a number, got {timeout_raw!r}"
            ) from None
        if ready_timeout < 0:
            raise ValueError("CNAERISK_READY_TIMEOUT must not be negative")

        rules_path = os.getenv("CNAERISK_RULES_PATH")
        return cls(
            log_level=os.getenv("CNAERISK_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
            log_format=log_format,
            rules_path=Path(rules_path) if rules_path else DEFAULT_RULES_PATH,
            ready_timeout=ready_timeout,
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the process settings."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the environment is read again."""
    global _settings
    _settings = None
