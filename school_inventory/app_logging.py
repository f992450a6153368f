"""
# path: school_inventory/app_logging.py

JSON logger for the inventory service.

Notes:
- The file must NOT be called logging.py (it would shadow the stdlib module
  that uvicorn and alembic import on startup).
- Services log events as dicts: `log.info({"event": "loan_returned", ...})`.
  The dict keys land at the top level of the JSON line.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict


class EventFormatter(logging.Formatter):
    """One JSON line per record: time, level, logger, then the event fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "time": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
        }
        if isinstance(record.msg, dict):
            payload.update(record.msg)
        else:
            payload["event"] = record.getMessage()

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        # dates, Decimals and enums go out as strings
        return json.dumps(payload, ensure_ascii=False, default=str)


def get_logger(name: str) -> logging.Logger:
    """Stdout JSON logger, configured once per name; level from LOG_LEVEL."""
    logger = logging.getLogger(f"school_inventory.{name}")
    if logger.handlers:
        return logger

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    logger.setLevel(level)
    logger.propagate = False

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(EventFormatter())
    logger.addHandler(handler)
    return logger
