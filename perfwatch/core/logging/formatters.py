"""
Custom logging formatters for perfwatch.

JSON output for log shippers and a compact structured line format for
consoles and log files.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from typing import Any, Dict, Optional

_RESERVED_ATTRS = frozenset({
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "exc_info", "exc_text", "stack_info",
    "taskName", "message",
})

# Already present at the top level of every JSON record
_TOP_LEVEL_KEYS = frozenset({"timestamp", "level", "logger"})


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging output."""

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        style: str = "%",
    ) -> None:
        super().__init__(fmt, datefmt, style)
        self.datefmt = datefmt or "%Y-%m-%dT%H:%M:%S"

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON formatted log string
        """
        log_data = self._build_log_data(record)
        return json.dumps(log_data, default=self._json_serializer, ensure_ascii=False)

    def _build_log_data(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Build log data dictionary from log record."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).strftime(self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread_name": record.threadName,
            "process": record.process,
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if record.stack_info:
            log_data["stack_info"] = record.stack_info

        # Fields passed through ``extra=``
        custom_fields = {
            key: value for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and key not in _TOP_LEVEL_KEYS
        }
        if custom_fields:
            log_data["custom"] = custom_fields

        return log_data

    def _json_serializer(self, obj: Any) -> str:
        """JSON serializer for non-standard types."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        return str(obj)


class StructuredFormatter(logging.Formatter):
    """Structured formatter for human-readable structured output."""

    level_colors = {
        "DEBUG": "\033[36m",    # Cyan
        "INFO": "\033[32m",     # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",    # Red
        "CRITICAL": "\033[35m", # Magenta
    }
    reset_color = "\033[0m"

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        style: str = "%",
        use_colors: bool = True,
    ) -> None:
        super().__init__(fmt, datefmt, style)
        self.datefmt = datefmt or "%H:%M:%S"
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record in structured format.

        Args:
            record: Log record to format

        Returns:
            Formatted log string
        """
        timestamp = datetime.fromtimestamp(record.created).strftime(self.datefmt)

        level = record.levelname
        if self.use_colors:
            color = self.level_colors.get(level, "")
            level = f"{color}{level:8}{self.reset_color}"
        else:
            level = f"{level:8}"

        logger_name = record.name
        if len(logger_name) > 20:
            logger_name = "..." + logger_name[-17:]

        message_parts = [
            timestamp,
            level,
            f"{logger_name:20}",
            f"{record.funcName}:{record.lineno}",
            record.getMessage(),
        ]

        base_message = " | ".join(message_parts)

        if record.exc_info:
            base_message += f"\n{self.formatException(record.exc_info)}"

        if record.stack_info:
            base_message += f"\n{record.stack_info}"

        return base_message


def create_formatter(format_type: str, **kwargs: Any) -> logging.Formatter:
    """
    Create a formatter by name.

    Args:
        format_type: One of ``json``, ``structured`` or ``simple``
        **kwargs: Formatter arguments

    Returns:
        Formatter instance
    """
    if format_type == "json":
        return JsonFormatter(**kwargs)
    if format_type == "structured":
        return StructuredFormatter(**kwargs)
    if format_type == "simple":
        return logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s", **kwargs)
    raise ValueError(f"Unknown formatter type: {format_type}")
