"""
Logging Setup

Library modules log through logging.getLogger(__name__) under the
"cnaerisk" hierarchy and never install handlers themselves. Applications
call configure_logging() once at startup.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import Settings, get_settings


LOGGER_NAME = "cnaerisk"

# Extra record attributes copied into JSON log lines when present
_EXTRA_FIELDS = (
    "cnae",
    "risk_level",
    "competence",
    "rule_count",
    "table_state",
    "code_count",
    "pending_count",
    "original_risk",
    "manual_risk",
    "path",
)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False, default=str)


def configure_logging(settings: Optional[Settings] = None) -> logging.Logger:
    """
    Attach a single stream handler to the "cnaerisk" logger.

    Calling it again replaces the previous handler instead of stacking.
    """
    settings = settings or get_settings()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    for existing in list(logger.handlers):
        if getattr(existing, "_cnaerisk_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler()
    if settings.log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    handler._cnaerisk_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
