"""
Logger factory module for perfwatch.

This module provides a centralized logger factory with support for different
output formats, automatic configuration, and structured logging.
"""

from __future__ import annotations

import logging
import logging.config
from typing import Any, Dict, Optional

import structlog

from ..config import LogFormat, Settings


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    _initialized = False
    _settings: Optional[Settings] = None

    @classmethod
    def initialize(cls, settings: Settings) -> None:
        """
        Initialize the logging system with the provided settings.

        Args:
            settings: Application settings containing logging configuration
        """
        cls._settings = settings

        cls._configure_python_logging()
        cls._configure_structlog()

        cls._initialized = True

    @classmethod
    def is_initialized(cls) -> bool:
        """Check whether logging has been configured."""
        return cls._initialized

    @classmethod
    def get_logger(cls, name: str) -> structlog.stdlib.BoundLogger:
        """
        Get a logger instance.

        Loggers are lazy proxies, so module-level loggers created before
        ``initialize`` pick up the configuration on first use.

        Args:
            name: Logger name (typically __name__)

        Returns:
            Logger instance
        """
        return structlog.get_logger(name)

    @classmethod
    def get_stdlib_logger(cls, name: str) -> logging.Logger:
        """Get a standard library logger instance."""
        return logging.getLogger(name)

    @classmethod
    def _configure_python_logging(cls) -> None:
        """Configure Python standard library logging."""
        if not cls._settings:
            return

        logging.config.dictConfig(cls._get_logging_config())

    @classmethod
    def _configure_structlog(cls) -> None:
        """Configure structlog for structured logging."""
        if not cls._settings:
            return

        structlog.configure(
            processors=cls._get_processors(cls._settings.logging.format),
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

    @classmethod
    def _get_logging_config(cls) -> Dict[str, Any]:
        """Get Python logging configuration dictionary."""
        if not cls._settings:
            raise RuntimeError("Settings not initialized")

        log_level = cls._settings.logging.level.value
        log_file = cls._settings.logging.file_path
        max_bytes = cls._parse_size(cls._settings.logging.max_size)
        backup_count = cls._settings.logging.backup_count

        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_formatter = {
            LogFormat.JSON: "json",
            LogFormat.STRUCTURED: "structured",
            LogFormat.SIMPLE: "detailed",
        }[cls._settings.logging.format]

        config = {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "standard": {
                    "format": "%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "detailed": {
                    "format": "%(asctime)s [%(levelname)8s] %(name)s:%(lineno)d: %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {
                    "()": "perfwatch.core.logging.formatters.JsonFormatter",
                },
                "structured": {
                    "()": "perfwatch.core.logging.formatters.StructuredFormatter",
                    "use_colors": False,
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "json" if file_formatter == "json" else "standard",
                    "stream": "ext://sys.stderr",
                },
                "file": {
                    "class": "logging.handlers.RotatingFileHandler",
                    "level": "DEBUG",
                    "formatter": file_formatter,
                    "filename": str(log_file),
                    "maxBytes": max_bytes,
                    "backupCount": backup_count,
                    "encoding": "utf-8",
                },
            },
            "loggers": {
                "perfwatch": {
                    "level": "DEBUG",
                    "handlers": ["console", "file"],
                    "propagate": False,
                },
                "urllib3": {
                    "level": "WARNING",
                    "handlers": ["file"],
                    "propagate": False,
                },
            },
            "root": {
                "level": log_level,
                "handlers": ["console", "file"],
            },
        }

        # Rich console output for development
        if cls._settings.is_development():
            config["handlers"]["rich"] = {
                "class": "rich.logging.RichHandler",
                "level": log_level,
                "show_time": True,
                "show_level": True,
                "show_path": True,
                "markup": False,
                "rich_tracebacks": True,
            }
            config["loggers"]["perfwatch"]["handlers"] = ["rich", "file"]
            config["root"]["handlers"] = ["rich", "file"]

        return config

    @classmethod
    def _get_processors(cls, log_format: LogFormat) -> list:
        """
        Get the structlog processor chain for an output format.

        JSON output leaves logger name, level and timestamp to
        ``JsonFormatter``, which reads them from the log record, so they
        are not duplicated among the ``extra`` fields.
        """
        processors = [structlog.stdlib.filter_by_level]

        if log_format != LogFormat.JSON:
            timestamp_format = "%Y-%m-%d %H:%M:%S" if log_format == LogFormat.STRUCTURED else "%H:%M:%S"
            processors += [
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt=timestamp_format),
            ]

        processors += [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if log_format == LogFormat.JSON:
            # Hand the event dict to JsonFormatter as ``extra`` fields
            processors.append(structlog.stdlib.render_to_log_kwargs)
        elif log_format == LogFormat.STRUCTURED:
            is_development = cls._settings.is_development() if cls._settings else False
            processors.append(structlog.dev.ConsoleRenderer(colors=is_development))
        else:
            processors.append(structlog.processors.KeyValueRenderer())

        return processors

    @classmethod
    def _parse_size(cls, size_str: str) -> int:
        """
        Parse size string to bytes.

        Args:
            size_str: Size string (e.g., "10MB", "1GB")

        Returns:
            Size in bytes
        """
        size_str = size_str.upper().strip()

        if size_str.endswith("B"):
            size_str = size_str[:-1]

        multipliers = {
            "K": 1024,
            "M": 1024 ** 2,
            "G": 1024 ** 3,
            "T": 1024 ** 4,
        }

        for suffix, multiplier in multipliers.items():
            if size_str.endswith(suffix):
                return int(float(size_str[:-1]) * multiplier)

        return int(size_str)

    @classmethod
    def reset(cls) -> None:
        """Reset the logger factory (mainly for testing)."""
        cls._initialized = False
        cls._settings = None
        structlog.reset_defaults()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance (convenience function).

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return LoggerFactory.get_logger(name)


def setup_logging(settings: Settings) -> None:
    """
    Setup logging with the provided settings (convenience function).

    Args:
        settings: Application settings
    """
    LoggerFactory.initialize(settings)
