# src/wksprofile/util/log.py: Logging setup.
# Configures the root logger either as plain text on stderr or as structured
# JSON (python-json-logger). In JSON mode a contextvar carrying the profile URL
# currently being operated on is injected into every record.

import contextvars
import logging
import logging.config
import sys

profile_context = contextvars.ContextVar("profile_context", default=None)


class ProfileContextFilter(logging.Filter):
    """Adds the current profile URL to each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.profile = profile_context.get()
        return True


def setup_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Configure the root logger for the application."""
    log_level = level.upper()

    if json_format:
        logging.config.dictConfig({
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "profile": {
                    "()": ProfileContextFilter,
                },
            },
            "formatters": {
                "json": {
                    "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                    "format": "%(asctime)s %(name)s %(levelname)s %(profile)s %(message)s",
                },
            },
            "handlers": {
                "json": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "filters": ["profile"],
                    "stream": "ext://sys.stderr",
                },
            },
            "root": {
                "handlers": ["json"],
                "level": log_level,
            },
        })
    else:
        logging.basicConfig(
            level=log_level,
            format="%(levelname)s %(message)s",
            stream=sys.stderr,
        )
