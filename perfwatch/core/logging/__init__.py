"""
Core logging module for perfwatch.

This module provides the logging framework with support for structured
logging, multiple output formats, and rotating file output.
"""

from .formatters import JsonFormatter, StructuredFormatter, create_formatter
from .logger_factory import LoggerFactory, get_logger, setup_logging

__all__ = [
    # Logger factory
    "LoggerFactory",
    "get_logger",
    "setup_logging",
    # Formatters
    "JsonFormatter",
    "StructuredFormatter",
    "create_formatter",
]
