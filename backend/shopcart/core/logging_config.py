"""Logging setup.

Human-readable lines in debug mode, one JSON object per line otherwise.
When ``LOG_DIR`` is set, three daily-rotated files are written next to the
console output: ``combined.log`` (INFO and up), ``error.log`` (ERROR and up)
and ``requests.log`` (the ``requests`` access logger only).
"""

import json
import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from shopcart.core.config import settings

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

REQUEST_LOGGER = "requests"
AUDIT_LOGGER = "audit"


class JSONFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "ts": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["stack"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class _OnlyLogger(logging.Filter):
    def __init__(self, name: str):
        super().__init__()
        self.logger_name = name

    def filter(self, record):
        return record.name == self.logger_name


def _rotating_handler(log_dir: Path, filename: str, level: int) -> logging.Handler:
    handler = TimedRotatingFileHandler(
        log_dir / filename, when="midnight", backupCount=14, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def configure_logging() -> None:
    """Configure the root logger. Safe to call more than once."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.log_level))
    root_logger.handlers.clear()

    if settings.debug:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
    root_logger.addHandler(handler)

    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_handler(log_dir, "combined.log", logging.INFO))
        root_logger.addHandler(_rotating_handler(log_dir, "error.log", logging.ERROR))
        requests_handler = _rotating_handler(log_dir, "requests.log", logging.INFO)
        requests_handler.addFilter(_OnlyLogger(REQUEST_LOGGER))
        root_logger.addHandler(requests_handler)

    # SQL statements only when explicitly asked for
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )
