"""Structured Logging - JSON formatter and setup for table registration diagnostics.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - ErrorContext fields passed as log extras (table_name, data_class, column_name,
      field_name) and error_code are surfaced when present
    - A logged DataAccessError also contributes its to_dict() envelope under "error"
    - JSON format by default, human-readable text on request

Design Decisions:
    - setup_logging is called once by the embedding application; library modules only
      create module loggers
"""

import logging
import json
from datetime import datetime, timezone

from ormtable.config import get_settings
from ormtable.core.errors import DataAccessError

_EXTRA_KEYS = (
    "table_name", "data_class", "column_name", "field_name", "error_code", "field_count",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            exc = record.exc_info[1]
            if isinstance(exc, DataAccessError):
                log["error"] = exc.to_dict()["error"]
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str | None = None, fmt: str | None = None) -> logging.Handler:
    """Configure the ormtable logger. Missing arguments come from settings."""
    settings = get_settings()
    level = level or settings.log_level
    fmt = fmt or settings.log_format

    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    logger = logging.getLogger("ormtable")
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
