"""
Centralized logging configuration with structured logging support.
"""
import json
import logging
import logging.config
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from mcq_breakdown.config import settings

# Identifies the report run currently being computed. Set by the aggregation
# engine for the duration of one build so every log entry can be correlated.
run_context: ContextVar[Optional[Dict[str, Any]]] = ContextVar(
    "run_context", default=None
)


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for production logging.

    Produces structured log entries with consistent fields for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_entry: Dict[str, Any] = {
            "timestamp": timestamp.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add run identifiers (quiz_id, run_id) from context if available
        context = run_context.get()
        if context:
            log_entry.update(context)

        # Add extra structured fields from record
        for field_name in ("question_id", "attempt_id", "user_id", "duration_ms"):
            if hasattr(record, field_name):
                log_entry[field_name] = getattr(record, field_name)

        # Add source location for error-level logs
        if record.levelno >= logging.ERROR:
            log_entry["source"] = f"{record.pathname}:{record.lineno}"

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging() -> None:
    """
    Configure logging for the command-line entry point.

    Configures:
    - Log level from settings
    - JSON formatting for production (structured for log aggregators)
    - Human-readable format for development
    - Run correlation via context variables

    Library callers embedding the engine are expected to configure logging
    themselves; the engine modules only create named loggers.
    """
    log_level_name = getattr(settings, "LOG_LEVEL", "INFO")
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)

    is_production = settings.ENV == "production"

    logging_config: Dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JSONFormatter,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "json" if is_production else "default",
                # stdout carries the report itself
                "stream": sys.stderr,
            },
        },
        "root": {
            "level": logging.WARNING,
            "handlers": ["console"],
        },
        "loggers": {
            "mcq_breakdown": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
