"""
Configuration settings module using Pydantic Settings.

This module defines the application configuration structure using Pydantic models
for type safety, validation, and environment variable loading.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment enumeration."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log format enumeration."""

    STRUCTURED = "structured"
    JSON = "json"
    SIMPLE = "simple"


class DatabaseThresholds(BaseModel):
    """Database alert thresholds."""

    slow_query_time_ms: float = Field(
        default=1000.0,
        ge=0,
        description="Average query time above which queries count as slow"
    )
    error_rate_percent: float = Field(
        default=5.0,
        ge=0,
        description="Database error rate alert threshold"
    )
    connection_usage_percent: float = Field(
        default=80.0,
        ge=0,
        description="Connection pool usage alert threshold"
    )

    model_config = ConfigDict(frozen=True)


class CacheThresholds(BaseModel):
    """Cache alert thresholds."""

    min_hit_rate_percent: float = Field(
        default=70.0,
        ge=0,
        description="Minimum acceptable cache hit rate"
    )
    # Reserved: not evaluated by the alert rules
    max_error_rate_percent: float = Field(
        default=2.0,
        ge=0,
        description="Maximum cache error rate"
    )

    model_config = ConfigDict(frozen=True)


class ApiThresholds(BaseModel):
    """API alert thresholds (reserved, not evaluated by the alert rules)."""

    max_response_time_ms: float = Field(
        default=2000.0,
        ge=0,
        description="Maximum average API response time"
    )
    max_error_rate_percent: float = Field(
        default=1.0,
        ge=0,
        description="Maximum API error rate"
    )

    model_config = ConfigDict(frozen=True)


class SystemThresholds(BaseModel):
    """Process resource alert thresholds."""

    max_memory_usage_mb: float = Field(
        default=512.0,
        ge=0,
        description="Maximum process memory usage in MB"
    )
    max_cpu_usage_percent: float = Field(
        default=80.0,
        ge=0,
        description="Maximum process CPU usage"
    )

    model_config = ConfigDict(frozen=True)


class AlertThresholdConfig(BaseModel):
    """Alert thresholds, one block per metric category."""

    database: DatabaseThresholds = Field(default_factory=DatabaseThresholds)
    cache: CacheThresholds = Field(default_factory=CacheThresholds)
    api: ApiThresholds = Field(default_factory=ApiThresholds)
    system: SystemThresholds = Field(default_factory=SystemThresholds)

    model_config = ConfigDict(frozen=True)


class MonitorSettings(BaseModel):
    """Performance monitor configuration."""

    collect_interval_ms: int = Field(
        default=30000,
        gt=0,
        description="Interval between collection ticks in milliseconds"
    )
    cpu_sample_window_ms: int = Field(
        default=100,
        gt=0,
        le=10000,
        description="CPU sampling window in milliseconds"
    )
    max_alert_history: int = Field(
        default=100,
        ge=1,
        description="Number of alerts kept in memory"
    )
    thresholds: AlertThresholdConfig = Field(default_factory=AlertThresholdConfig)

    model_config = ConfigDict(frozen=True)

    @property
    def collect_interval_seconds(self) -> float:
        """Get the collection interval in seconds."""
        return self.collect_interval_ms / 1000.0


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    file_path: Path = Field(
        default=Path("logs/perfwatch.log"),
        description="Log file path"
    )
    max_size: str = Field(
        default="10MB",
        description="Maximum log file size"
    )
    backup_count: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Number of backup log files"
    )
    format: LogFormat = Field(
        default=LogFormat.STRUCTURED,
        description="Log format type"
    )

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("file_path", mode="before")
    @classmethod
    def validate_file_path(cls, v: Union[str, Path]) -> Path:
        """Normalize the log file path."""
        return Path(v)


class Settings(BaseSettings):
    """Main application settings."""

    app_name: str = Field(default="perfwatch", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment"
    )
    debug: bool = Field(default=True, description="Debug mode")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    monitoring: MonitorSettings = Field(default_factory=MonitorSettings)

    model_config = SettingsConfigDict(
        env_prefix="PERFWATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        validate_assignment=True,
        extra="forbid",
    )

    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == Environment.TESTING

    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION

    def get_log_level(self) -> str:
        """Get the logging level."""
        return self.logging.level.value

    def get_logs_dir(self) -> Path:
        """Get the logs directory."""
        return self.logging.file_path.parent
