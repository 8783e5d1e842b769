"""Centralized logging setup with an optional JSON formatter."""

import json
import logging
import math
import sys
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict

import numpy as np

_PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Attributes every LogRecord carries; anything else came in via ``extra=``.
_RESERVED = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


def _to_json(value: Any) -> Any:
    """Convert enum, numpy and path values found in ``extra=`` fields."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [_to_json(v) for v in value]
        return sorted(items, key=str) if isinstance(value, (set, frozenset)) else items
    return value


class JsonFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects.

    Fields passed through ``extra=`` land at the top level of the payload
    so diagnostic scope (kind, country, category, year) can be filtered
    on directly.  NaN statistics become ``null``.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (key, _to_json(value))
            for key, value in vars(record).items()
            if key not in _RESERVED
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str, allow_nan=False)


def configure_logging(level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """Attach a single stderr handler to the ``activetravel`` logger.

    Calling it again replaces the handler rather than adding another.

    Args:
        level: Logging level name, e.g. ``"DEBUG"``.
        json_format: Use :class:`JsonFormatter` instead of plain text.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("activetravel")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(_PLAIN_FORMAT))
    logger.addHandler(handler)
    return logger
