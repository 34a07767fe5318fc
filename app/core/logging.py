# app/core/logging.py

import logging
import sys
from logging.config import dictConfig

from app.core.config import APP_ENV, LOG_LEVEL

ACCESS_FIELDS = ("client_addr", "method", "path", "status_code", "process_time_ms", "company_id")


class AccessContextFilter(logging.Filter):
    """Fill access fields a record was logged without, so the format never breaks."""

    def filter(self, record: logging.LogRecord) -> bool:
        for field in ACCESS_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, "-")
        return True


def setup_logging():
    level = LOG_LEVEL or ("DEBUG" if APP_ENV == "development" else "INFO")

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "access_context": {"()": AccessContextFilter},
            },
            "formatters": {
                "app": {
                    "format": "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
                },
                "access": {
                    "format": (
                        "%(asctime)s | ACCESS  | company=%(company_id)s | "
                        "%(client_addr)s %(method)s %(path)s -> "
                        "%(status_code)s in %(process_time_ms)sms"
                    ),
                },
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "app",
                },
                "access_stdout": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "formatter": "access",
                    "filters": ["access_context"],
                },
            },
            "loggers": {
                "access": {
                    "handlers": ["access_stdout"],
                    "level": "INFO",
                    "propagate": False,
                },
                # request_logging_middleware already writes one line per request
                "uvicorn.access": {"level": "WARNING"},
                "sqlalchemy.engine": {"level": "WARNING"},
            },
            "root": {
                "level": level,
                "handlers": ["stdout"],
            },
        }
    )
