"""Structured logging for the Mesh HUD backend."""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH

TEXT_FORMAT = "%(asctime)s %(levelname)-7s [%(taskName)s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Records emitted from the supervisor and poller carry the name of their
    asyncio task (``mesh-events`` / ``mesh-snapshot``), so both background
    loops can be told apart in a single stream.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "task": getattr(record, "taskName", None),
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # logger.x(..., extra={"context": {...}})
        context = getattr(record, "context", None)
        if context:
            entry["context"] = context

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable console lines for local runs."""

    def __init__(self):
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        # taskName only exists from Python 3.12 on; other handlers share the record
        if getattr(record, "taskName", None) is None:
            record = logging.makeLogRecord({**record.__dict__, "taskName": "-"})
        return super().format(record)


def setup_logging(
    log_level: str | None = None,
    log_file: str | Path | None = None,
    console_format: str | None = None,
) -> None:
    """
    Configure the root logger for the dashboard backend.

    Args:
        log_level: Root level. Defaults to LOG_LEVEL env var or INFO.
        log_file: Rotating JSON log. Defaults to 04_logs/app.log.
        console_format: "json" or "text" for stdout. Defaults to
                        LOG_FORMAT env var or json.
    """
    log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    console_format = (console_format or os.getenv("LOG_FORMAT", "json")).lower()
    if console_format not in ("json", "text"):
        raise ValueError(f"LOG_FORMAT must be 'json' or 'text', got {console_format!r}")

    log_path = Path(log_file) if log_file else DEFAULT_LOG_PATH
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "meshhud.logging_config.JSONFormatter"},
                "text": {"()": "meshhud.logging_config.TextFormatter"},
            },
            "handlers": {
                "file": {
                    "class": "logging.handlers.RotatingFileHandler",
                    "filename": str(log_path),
                    "maxBytes": 10 * 1024 * 1024,  # 10 MB
                    "backupCount": 5,
                    "formatter": "json",
                    "encoding": "utf-8",
                },
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": console_format,
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"level": log_level, "handlers": ["file", "console"]},
            "loggers": {
                # httpx logs every request at INFO; the poller alone makes one per interval
                "httpx": {"level": "WARNING"},
                "httpcore": {"level": "WARNING"},
            },
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Module logger, e.g. ``get_logger(__name__)``."""
    return logging.getLogger(name)
