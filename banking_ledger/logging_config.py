"""
Logging configuration.

The application logger is built once at startup and handed to the
services that need it. Nothing here touches the root logger, so
importing the package never changes how a host process logs.
"""

import json
import logging
from datetime import datetime, timezone

APP_LOGGER_NAME = "banking_ledger"

LOCAL_ENVIRONMENT = "local"

TEXT_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s "
    "[%(pathname)s:%(lineno)d] %(message)s"
)

# Attributes every LogRecord carries; anything else came in via extra=
_RESERVED_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with extra= fields merged in."""

    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(
    environment: str = LOCAL_ENVIRONMENT,
    level: str = "INFO",
    logger_name: str = APP_LOGGER_NAME,
) -> logging.Logger:
    """
    Build the application logger.

    In the local environment logs are human-readable, include the
    source location and go down to DEBUG. Everywhere else they are
    JSON lines at the configured level.
    """
    logger = logging.getLogger(logger_name)

    # Remove existing handlers to avoid duplicates on re-configuration
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    if environment == LOCAL_ENVIRONMENT:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
        logger.setLevel(logging.DEBUG)
    else:
        handler.setFormatter(JSONFormatter())
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the application logger."""
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")
