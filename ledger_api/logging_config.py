"""
Structured Logging Configuration Module

Ledger events are logged as one JSON object per line. Each event names the
action taken, the account it touched and any amounts involved.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .config import LedgerConfig, get_config


TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Attributes log_action attaches to a record, in output order
EVENT_FIELDS = ("action", "resource", "extra")


class JSONFormatter(logging.Formatter):
    """Render a ledger event record as a single JSON line"""

    def format(self, record):
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in EVENT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(settings: Optional[LedgerConfig] = None,
                  logger_name: str = "ledger") -> logging.Logger:
    """
    Attach a single stream handler to the application logger.

    Args:
        settings: Ledger configuration; the global one when omitted.
            log_level picks the threshold, log_format picks json or text lines
        logger_name: Application logger every ledger.* logger rolls up to

    Returns:
        The configured application logger
    """
    settings = settings or get_config()
    logger = logging.getLogger(logger_name)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if settings.log_format.lower() == "text":
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    else:
        handler.setFormatter(JSONFormatter())

    logger.addHandler(handler)
    logger.setLevel(settings.log_level.upper())
    logger.propagate = False
    return logger


def get_logger(name: str = "ledger") -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               action: Optional[str] = None, resource: Optional[str] = None,
               extra: Optional[dict] = None):
    """
    Log a ledger event.

    Args:
        logger: Component logger, e.g. ledger.store
        level: Level name (info, warning, ...)
        message: Human readable summary
        action: Operation that produced the event, e.g. apply_transaction
        resource: Entity touched, e.g. account:42
        extra: Event details such as amounts and resulting balance
    """
    fields = {"action": action, "resource": resource, "extra": extra or None}
    logger.log(logging.getLevelName(level.upper()), message, extra=fields)
