"""
Core module for perfwatch.

This module provides the foundational components: configuration, logging,
exception handling and the performance monitoring engine.
"""

from .config import (
    ConfigLoader,
    Environment,
    MonitorSettings,
    Settings,
    load_settings,
    validate_settings,
)
from .exceptions import (
    CollaboratorError,
    CollectionError,
    ConfigurationError,
    PerfwatchError,
    SamplerError,
    ValidationError,
)
from .logging import (
    LoggerFactory,
    get_logger,
    setup_logging,
)

__version__ = "1.0.0"

__all__ = [
    # Version
    "__version__",
    # Configuration
    "Settings",
    "MonitorSettings",
    "Environment",
    "ConfigLoader",
    "load_settings",
    "validate_settings",
    # Logging
    "LoggerFactory",
    "get_logger",
    "setup_logging",
    # Exceptions
    "PerfwatchError",
    "ConfigurationError",
    "ValidationError",
    "CollectionError",
    "CollaboratorError",
    "SamplerError",
]
