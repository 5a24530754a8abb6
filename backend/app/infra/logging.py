"""Structured logging helpers shared by every backend module.

Call sites log snake_case event names and pass context through ``extra``::

    logger.info("entry_created", extra={"entry_id": entry.id})

``configure_logging`` installs a single handler whose formatter renders those
extra fields after the message, either as ``key=value`` pairs or, when JSON
output is requested, as one JSON object per line.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

__all__ = ["StructuredFormatter", "configure_logging", "get_logger"]

_HANDLER_NAME = "contact_desk"

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}


def get_logger(name: str) -> logging.Logger:
    """Return the stdlib logger for ``name``."""

    return logging.getLogger(name)


class StructuredFormatter(logging.Formatter):
    """Render log records with their structured ``extra`` payload."""

    def __init__(self, *, json_output: bool = False) -> None:
        super().__init__()
        self._json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        extra = _extract_extra(record)
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()

        if self._json_output:
            payload: Dict[str, Any] = {
                "timestamp": timestamp,
                "level": record.levelname,
                "logger": record.name,
                "event": message,
            }
            payload.update(extra)
            if record.exc_info:
                payload["exc_info"] = self.formatException(record.exc_info)
            return json.dumps(payload, default=str)

        line = f"{timestamp} {record.levelname} {record.name} {message}"
        if extra:
            rendered = " ".join(f"{key}={value!r}" for key, value in extra.items())
            line = f"{line} {rendered}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(level: str = "INFO", *, json_output: bool = False) -> None:
    """Install the structured handler on the root logger (idempotent)."""

    root = logging.getLogger()
    root.setLevel(level.upper())
    for handler in list(root.handlers):
        if handler.get_name() == _HANDLER_NAME:
            root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(StructuredFormatter(json_output=json_output))
    root.addHandler(handler)


def _extract_extra(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }
