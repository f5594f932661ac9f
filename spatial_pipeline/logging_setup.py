"""
Structured logging for the spatial narration pipeline.

Thin layer over the standard logging module:
- JSON-formatted records (timestamp, severity, component, message, extras)
- component tagging so playback, provider and CLI logs can be told apart
- keyword fields instead of formatted strings
"""

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

_STANDARD_ATTRS = frozenset(
    [
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "thread", "threadName", "exc_info", "exc_text", "stack_info",
        "taskName", "component", "message",
    ]
)


class Component(str, Enum):
    """Pipeline components used for log tagging."""
    PIPELINE = "pipeline"
    PLAYBACK = "playback"
    PROVIDERS = "providers"
    CONFIG = "config"
    CLI = "cli"


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "severity": record.levelname.lower(),
            "component": getattr(record, "component", "unknown"),
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class StructuredLogger:
    """
    Wrapper around a stdlib logger that attaches the component and any
    keyword fields to the record.

    Usage:
        logger = get_logger(Component.PLAYBACK)
        logger.info("Playback started", pan=0.6, duration_s=2.4)
    """

    def __init__(self, component: Union[str, Component], logger_name: Optional[str] = None):
        self.component = component.value if isinstance(component, Component) else component
        self.logger = logging.getLogger(logger_name or f"spatial_pipeline.{self.component}")

    def _log(self, level: int, message: str, **kwargs) -> None:
        exc_info = kwargs.pop("exc_info", None)
        extra = {"component": self.component, **kwargs}
        self.logger.log(level, message, exc_info=exc_info, extra=extra, stacklevel=3)

    def debug(self, message: str, **kwargs) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        """Log at ERROR level with the active exception attached."""
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, message, **kwargs)


def setup_logging(level: str = "INFO", use_json: bool = True) -> None:
    """
    Configure the root logger. Call once at application startup.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        use_json: JSON lines (True) or a plain text format (False)
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    if use_json:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s")
        )
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(component: Union[str, Component]) -> StructuredLogger:
    """Get a structured logger for a pipeline component."""
    return StructuredLogger(component)
