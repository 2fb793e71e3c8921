"""
Logging setup.

``setup_logging`` installs a ``dictConfig`` with:
- a stdout handler, always on
- ``<log dir>/ledgerline.log`` and ``<log dir>/error.log`` rotating files when
  ``LOG_FILE_ENABLED`` is set
- a ``detailed`` text format or a python-json-logger ``json`` format
- a filter that copies the current request id onto every record

Modules log through ``logging.getLogger(__name__)``; everything under the
``src`` package is routed to the same handlers as the root logger.
"""

import logging
import logging.config
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

from src.core.config import settings

# Bound by RequestIDMiddleware while a request is being served
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that would otherwise flood the output
QUIET_LOGGERS = {
    "uvicorn": "INFO",
    "uvicorn.access": "WARNING",  # RequestLoggingMiddleware logs each request
    "sqlalchemy.engine": "WARNING",  # INFO echoes every statement
}


class RequestIdFilter(logging.Filter):
    """Stamp ``record.request_id`` (``-`` outside of a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get() or "-"
        return True


def _formatters() -> dict[str, dict[str, Any]]:
    return {
        "default": {
            "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            "datefmt": DATE_FORMAT,
        },
        "detailed": {
            "format": (
                "%(asctime)s %(levelname)-8s [%(request_id)s] "
                "%(name)s:%(lineno)d %(message)s"
            ),
            "datefmt": DATE_FORMAT,
        },
        "json": {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "format": (
                "%(asctime)s %(levelname)s %(name)s %(request_id)s "
                "%(module)s %(funcName)s %(lineno)d %(message)s"
            ),
            "rename_fields": {"levelname": "level", "asctime": "timestamp"},
        },
    }


def _rotating_file(filename: Path, level: str, formatter: str) -> dict[str, Any]:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "level": level,
        "formatter": formatter,
        "filename": str(filename),
        "maxBytes": settings.log_file_max_bytes,
        "backupCount": settings.log_file_backup_count,
        "encoding": "utf-8",
        "filters": ["request_id"],
    }


def build_logging_config() -> dict[str, Any]:
    """Return the ``dictConfig`` mapping for the current settings."""
    formatter = "json" if settings.log_format == "json" else "detailed"

    handlers: dict[str, dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": settings.log_level,
            "formatter": formatter,
            "stream": sys.stdout,
            "filters": ["request_id"],
        },
    }
    if settings.log_file_enabled:
        log_path = Path(settings.log_file_path)
        handlers["file"] = _rotating_file(log_path, settings.log_level, formatter)
        handlers["error_file"] = _rotating_file(
            log_path.with_name("error.log"), "ERROR", formatter
        )

    handler_names = list(handlers)
    loggers: dict[str, dict[str, Any]] = {
        name: {"level": level, "handlers": ["console"], "propagate": False}
        for name, level in QUIET_LOGGERS.items()
    }
    loggers["src"] = {
        "level": settings.log_level,
        "handlers": handler_names,
        "propagate": False,
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": _formatters(),
        "filters": {"request_id": {"()": RequestIdFilter}},
        "handlers": handlers,
        "root": {"level": settings.log_level, "handlers": handler_names},
        "loggers": loggers,
    }


def setup_logging() -> None:
    """Apply the logging configuration. Safe to call more than once."""
    if settings.log_file_enabled:
        Path(settings.log_file_path).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config())
    logging.getLogger(__name__).info(
        "Logging ready (level=%s, format=%s, files=%s)",
        settings.log_level,
        settings.log_format,
        "on" if settings.log_file_enabled else "off",
    )
