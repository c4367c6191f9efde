"""Logging configuration for the correlator and its provider threads."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Sequence

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"
TEXT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# HTTP client loggers that log every connection at INFO/DEBUG
NOISY_LOGGERS = ("urllib3",)


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    logger_name: str = "campaign_correlator",
    quiet: Sequence[str] = NOISY_LOGGERS,
) -> logging.Logger:
    """
    Route correlator logs to stderr, one line per record.

    Records from provider worker threads carry the thread name, so
    interleaved provider output stays attributable. Loggers listed in
    ``quiet`` are held at WARNING unless ``level`` is DEBUG.

    Args:
        level: Logging level name
        json_format: Emit one JSON object per record instead of text
        logger_name: Logger to configure
        quiet: Third-party loggers to hold at WARNING

    Returns:
        The configured logger
    """
    numeric_level = logging.getLevelName(level.upper())

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        JsonFormatter() if json_format else logging.Formatter(TEXT_FORMAT, TEXT_DATEFMT)
    )

    logger = logging.getLogger(logger_name)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.propagate = False

    for name in quiet:
        logging.getLogger(name).setLevel(
            logging.DEBUG if numeric_level == logging.DEBUG else logging.WARNING
        )

    return logger


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys from a ``context`` dict passed as ``extra={"context": {...}}`` are
    merged at the top level; they never replace the fixed keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {}
        context = getattr(record, "context", None)
        if isinstance(context, dict):
            entry.update(context)

        entry.update(
            {
                "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "thread": record.threadName,
                "message": record.getMessage(),
            }
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
