"""
Configuration validation module.

Semantic checks that pydantic field constraints cannot express, such as
thresholds that can never fire or intervals shorter than a collection tick.
"""

from __future__ import annotations

from typing import List, Tuple

from ..exceptions import ConfigurationError
from .settings import Settings


class ConfigValidator:
    """Configuration validator collecting errors and warnings."""

    def __init__(self, settings: Settings) -> None:
        """
        Initialize the configuration validator.

        Args:
            settings: Settings instance to validate
        """
        self.settings = settings
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate_all(self) -> Tuple[List[str], List[str]]:
        """
        Perform validation of all configuration.

        Returns:
            Tuple of (errors, warnings)
        """
        self.errors.clear()
        self.warnings.clear()

        self._validate_environment()
        self._validate_monitoring()
        self._validate_thresholds()

        return self.errors.copy(), self.warnings.copy()

    def validate_and_raise(self) -> List[str]:
        """
        Validate configuration and raise ConfigurationError if any errors are found.

        Returns:
            List of warnings

        Raises:
            ConfigurationError: If validation errors are found
        """
        errors, warnings = self.validate_all()

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(
                f"  - {error}" for error in errors
            )
            raise ConfigurationError(error_msg, context={"errors": errors})

        if warnings:
            from ..logging import get_logger
            logger = get_logger(__name__)
            for warning in warnings:
                logger.warning("Configuration warning", detail=warning)

        return warnings

    def _validate_environment(self) -> None:
        """Validate environment-specific settings."""
        if self.settings.is_production():
            if self.settings.debug:
                self.errors.append("Debug mode must be disabled in production")

            if self.settings.logging.level.value == "DEBUG":
                self.warnings.append("Debug logging level in production may impact performance")

        elif self.settings.is_development():
            if not self.settings.debug:
                self.warnings.append("Debug mode is typically enabled in development")

    def _validate_monitoring(self) -> None:
        """Validate collection timing."""
        monitoring = self.settings.monitoring

        # Every tick blocks for the CPU sampling window
        if monitoring.collect_interval_ms <= monitoring.cpu_sample_window_ms:
            self.warnings.append(
                f"Collection interval ({monitoring.collect_interval_ms}ms) is not longer than "
                f"the CPU sampling window ({monitoring.cpu_sample_window_ms}ms); "
                "ticks will run back to back"
            )

    def _validate_thresholds(self) -> None:
        """Flag thresholds that can never or will always trigger."""
        thresholds = self.settings.monitoring.thresholds

        if thresholds.database.error_rate_percent >= 100:
            self.warnings.append("Database error rate threshold >= 100% will never trigger")

        if thresholds.cache.min_hit_rate_percent > 100:
            self.warnings.append("Cache minimum hit rate above 100% triggers on every tick")

        if thresholds.system.max_cpu_usage_percent == 0:
            self.warnings.append("CPU usage threshold of 0% triggers on any CPU activity")


def validate_settings(settings: Settings) -> List[str]:
    """
    Validate settings and raise ConfigurationError if any errors are found.

    Args:
        settings: Settings instance to validate

    Returns:
        List of warnings

    Raises:
        ConfigurationError: If validation errors are found
    """
    validator = ConfigValidator(settings)
    return validator.validate_and_raise()


def check_configuration(settings: Settings) -> Tuple[List[str], List[str]]:
    """
    Check configuration and return errors and warnings.

    Args:
        settings: Settings instance to check

    Returns:
        Tuple of (errors, warnings)
    """
    validator = ConfigValidator(settings)
    return validator.validate_all()
