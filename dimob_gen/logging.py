"""Logging setup for dimob-gen.

Two output formats are supported: a human-readable line format for
operators running the command line, and one JSON object per line for log
collectors. Per-owner pipeline runs log through :class:`RunLogAdapter`, which
attaches the owner and fiscal year to every record so that interleaved
batch output can be told apart.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers kept at WARNING whatever the application level
QUIET_LOGGERS = ("psycopg", "faker")


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
) -> None:
    """Configure logging for dimob-gen.

    Replaces any handler already installed on the root logger with a single
    stdout handler.

    Parameters
    ----------
    level : str
        Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Unknown names
        fall back to INFO.
    format_type : str
        Format type: "standard" or "json".
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=STANDARD_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger("dimob_gen").setLevel(log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Run context set through ``extra={"extra": {...}}`` (see
    :class:`RunLogAdapter`) is merged into the top-level object.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        context = getattr(record, "extra", None)
        if isinstance(context, dict):
            log_data.update(context)

        return json.dumps(log_data, default=str)


class RunLogAdapter(logging.LoggerAdapter):
    """Logger adapter carrying the owner and fiscal year of one pipeline run.

    The standard format prefixes messages with ``[owner/year]``; the JSON
    format receives both as separate keys.
    """

    def __init__(self, logger: logging.Logger, owner_id: str, fiscal_year: int) -> None:
        super().__init__(logger, {"owner_id": owner_id, "fiscal_year": fiscal_year})

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        context = dict(self.extra)
        context.update(kwargs.pop("extra", {}).get("extra", {}))
        kwargs["extra"] = {"extra": context}
        return f"[{self.extra['owner_id']}/{self.extra['fiscal_year']}] {msg}", kwargs


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (usually ``__name__``)."""
    return logging.getLogger(name)
