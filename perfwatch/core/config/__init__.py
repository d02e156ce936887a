"""
Core configuration module for perfwatch.

This module provides configuration management using Pydantic Settings
with environment-specific YAML file support and validation.
"""

from .config_loader import ConfigLoader, load_settings
from .settings import (
    AlertThresholdConfig,
    ApiThresholds,
    CacheThresholds,
    DatabaseThresholds,
    Environment,
    LogFormat,
    LoggingSettings,
    LogLevel,
    MonitorSettings,
    Settings,
    SystemThresholds,
)
from .validation import ConfigValidator, check_configuration, validate_settings

__all__ = [
    # Settings classes
    "Settings",
    "Environment",
    "LogLevel",
    "LogFormat",
    "LoggingSettings",
    "MonitorSettings",
    "AlertThresholdConfig",
    "DatabaseThresholds",
    "CacheThresholds",
    "ApiThresholds",
    "SystemThresholds",
    # Configuration loading
    "ConfigLoader",
    "load_settings",
    # Validation
    "ConfigValidator",
    "validate_settings",
    "check_configuration",
]
