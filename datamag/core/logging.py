"""
Structured logging configuration.
Every module logs through a named StructuredLogger so extra fields end up
as ``key=value`` pairs on the same line.
"""

import logging
import sys
from typing import Optional

from datamag.core.config import Settings, settings as default_settings

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "timestamp", "asctime"}


class StructuredLogger:
    """Structured logger with consistent formatting and levels."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, message: str, **kwargs):
        self.logger.debug(message, extra=kwargs)

    def info(self, message: str, **kwargs):
        self.logger.info(message, extra=kwargs)

    def warning(self, message: str, **kwargs):
        self.logger.warning(message, extra=kwargs)

    def error(self, message: str, exc: Optional[Exception] = None, **kwargs):
        """Log error message, attaching the traceback of *exc* when given."""
        if exc:
            self.logger.error(message, exc_info=exc, extra=kwargs)
        else:
            self.logger.error(message, extra=kwargs)


class StructuredFormatter(logging.Formatter):
    """Render ``[time] LEVEL name: message | k=v | k=v``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = self.formatTime(record, self.default_time_format)
        base_format = f"[{timestamp}] {record.levelname} {record.name}: {record.getMessage()}"

        extra_fields = [
            f"{key}={value}"
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        ]
        line = f"{base_format} | {' | '.join(extra_fields)}" if extra_fields else base_format

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def configure_logging(
    level: str = "INFO",
    format_type: str = "structured",
    enable_file: bool = False,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Format type ('structured' or 'simple')
        enable_file: Enable file logging
        log_file: Log file path (required if enable_file=True)
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger.setLevel(numeric_level)

    if format_type == "structured":
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if enable_file and log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Set levels for noisy libraries
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance for the given name."""
    return StructuredLogger(name)


app_logger = get_logger("app")
db_logger = get_logger("db")
api_logger = get_logger("api")
analytics_logger = get_logger("analytics")


def init_app_logging(settings: Optional[Settings] = None):
    """Initialize application logging based on settings."""
    settings = settings or default_settings
    log_config = {
        "level": settings.LOG_LEVEL,
        "format_type": settings.LOG_FORMAT,
        "enable_file": settings.LOG_TO_FILE,
        "log_file": settings.LOG_FILE_PATH,
    }

    configure_logging(**log_config)
    app_logger.info("Application logging initialized", **log_config)
