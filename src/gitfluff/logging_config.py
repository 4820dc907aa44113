"""
Logging configuration for gitfluff.

Configures logging based on environment variables:
- GITFLUFF_LOG_LEVEL / LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL
- LOG_FORMAT: simple, detailed, json

Logs go to stderr; stdout is reserved for rewritten commit messages.
"""

import os
import sys
import logging
import json
from datetime import datetime
from typing import Optional


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON for easy parsing and analysis.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON"""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data["extra"] = record.extra_data

        return json.dumps(log_data)


def configure_logging(
    level: Optional[str] = None,
    format_style: Optional[str] = None,
    default_level: str = "INFO",
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to GITFLUFF_LOG_LEVEL, then LOG_LEVEL, then `default_level`.
        format_style: Format style (simple, detailed, json).
                     Defaults to LOG_FORMAT env var or simple.
        default_level: Level used when neither argument nor env var is set.
                       The CLI passes WARNING so hooks stay quiet.
    """
    log_level = (
        level
        or os.getenv("GITFLUFF_LOG_LEVEL")
        or os.getenv("LOG_LEVEL")
        or default_level
    ).upper()
    log_format = (format_style or os.getenv("LOG_FORMAT", "simple")).lower()

    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if log_level not in valid_levels:
        sys.stderr.write(
            f"Warning: Invalid log level '{log_level}', defaulting to {default_level}\n"
        )
        log_level = default_level.upper()

    numeric_level = getattr(logging, log_level)

    if log_format == "json":
        formatter = JSONFormatter()
    elif log_format == "detailed":
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )
    else:  # simple or default
        formatter = logging.Formatter(
            fmt="%(levelname)s - %(message)s"
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    root_logger.debug(f"Logging configured: level={log_level}, format={log_format}")

    # Set log levels for noisy third-party libraries
    logging.getLogger("git").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
