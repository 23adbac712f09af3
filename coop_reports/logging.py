"""Logging setup for report scripts: console output as text or JSON lines."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from coop_reports.exceptions import ConfigurationError

LOG_FORMATS = ("standard", "json")

# Attributes every LogRecord carries; anything else came in through ``extra=``
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: TextIO | None = None,
) -> logging.Handler:
    """Send coop-reports logs to the console.

    Parameters
    ----------
    level : str
        Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown
        names fall back to INFO.
    format_type : str
        ``"standard"`` for human-readable lines or ``"json"`` for one JSON
        object per line.
    stream : TextIO | None
        Output stream, stdout by default.

    Returns
    -------
    logging.Handler
        The handler installed on the root logger.

    Raises
    ------
    ConfigurationError
        If ``format_type`` is not a known format.
    """
    if format_type not in LOG_FORMATS:
        raise ConfigurationError(f"Unknown log format {format_type!r}, expected one of {LOG_FORMATS}")

    log_level = getattr(logging, level.upper(), logging.INFO)
    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("coop_reports").setLevel(log_level)
    # Faker logs every locale lookup at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)
    return handler


class JsonFormatter(logging.Formatter):
    """One JSON object per record, including fields passed via ``extra=``."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Decimals and dates from report figures are written as strings
        return json.dumps(log_data, ensure_ascii=False, default=str)


def get_logger(name: str) -> logging.Logger:
    """Logger for a module or script, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(name)
