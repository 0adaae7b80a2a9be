"""
Structured Logging

JSON log formatting for the translation engine. Cascade and dispatch log
calls pass ``extra={"field": ..., "from_locale": ..., "to_locale": ...}``
so failed translations can be traced per request in log aggregation.
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_KEYS = ("host_type", "host_id", "field", "from_locale", "to_locale")

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Library loggers kept quiet unless something goes wrong
QUIET_LOGGERS = ("apscheduler", "httpx", "sqlalchemy.engine")


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, carrying whichever translation extras were passed."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        entry.update({key: getattr(record, key) for key in EXTRA_KEYS if hasattr(record, key)})
        return json.dumps(entry)


def setup_structured_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    log_file: str | None = None,
) -> logging.Handler:
    """Replace the root handlers with a single stream or file handler and return it."""
    level = getattr(logging, log_level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.FileHandler(log_file, encoding="utf-8") if log_file else logging.StreamHandler()
    handler.setFormatter(StructuredFormatter() if json_format else logging.Formatter(PLAIN_FORMAT))
    root_logger.addHandler(handler)

    logging.getLogger("autotranslate").setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return handler
