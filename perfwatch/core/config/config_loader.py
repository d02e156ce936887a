"""
Configuration loader module for YAML files.

This module provides functionality to load and merge configuration from YAML files
with environment-specific overrides and validation.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from .settings import Environment, Settings


class ConfigLoader:
    """Configuration loader for YAML files with environment-specific overrides."""

    def __init__(self, config_dir: Union[str, Path] = "config") -> None:
        """
        Initialize the configuration loader.

        Args:
            config_dir: Directory containing configuration files
        """
        self.config_dir = Path(config_dir)

    def load_yaml(self, file_path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load a YAML file and return its contents.

        Args:
            file_path: Path to the YAML file

        Returns:
            Dictionary containing the YAML contents, empty if the file is missing

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        try:
            path = Path(file_path)
            if not path.exists():
                return {}

            with path.open("r", encoding="utf-8") as file:
                content = yaml.safe_load(file)
                return content if content is not None else {}

        except yaml.YAMLError as e:
            raise ConfigurationError(f"Error parsing YAML file {file_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Error reading file {file_path}: {e}") from e

    def save_yaml(self, data: Dict[str, Any], file_path: Union[str, Path]) -> None:
        """
        Save data to a YAML file.

        Args:
            data: Dictionary to save
            file_path: Path to save the YAML file

        Raises:
            ConfigurationError: If the file cannot be saved
        """
        try:
            path = Path(file_path)
            path.parent.mkdir(parents=True, exist_ok=True)

            with path.open("w", encoding="utf-8") as file:
                yaml.safe_dump(
                    data,
                    file,
                    default_flow_style=False,
                    indent=2,
                    sort_keys=False,
                    allow_unicode=True,
                )

        except OSError as e:
            raise ConfigurationError(f"Error writing file {file_path}: {e}") from e

    def merge_configs(self, *configs: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge multiple configuration dictionaries.

        Later configurations override earlier ones. Nested dictionaries are merged recursively.

        Args:
            *configs: Configuration dictionaries to merge

        Returns:
            Merged configuration dictionary
        """
        result: Dict[str, Any] = {}

        for config in configs:
            if not isinstance(config, dict):
                continue

            for key, value in config.items():
                if (
                    key in result
                    and isinstance(result[key], dict)
                    and isinstance(value, dict)
                ):
                    result[key] = self.merge_configs(result[key], value)
                else:
                    result[key] = value

        return result

    def load_environment_config(self, environment: Union[str, Environment]) -> Dict[str, Any]:
        """
        Load configuration for a specific environment.

        Reads ``base.yaml``, then ``<environment>.yaml``, then ``local.yaml``.

        Args:
            environment: Environment name or Environment enum

        Returns:
            Environment-specific configuration dictionary
        """
        if isinstance(environment, Environment):
            env_name = environment.value
        else:
            env_name = str(environment).lower()

        base_config = self.load_yaml(self.config_dir / "base.yaml")
        env_config = self.load_yaml(self.config_dir / f"{env_name}.yaml")

        # Local overrides (not tracked in git)
        local_config = self.load_yaml(self.config_dir / "local.yaml")

        return self.merge_configs(base_config, env_config, local_config)

    def create_default_configs(self) -> None:
        """Create default configuration files if they don't exist."""
        configs = {
            "base.yaml": self._get_base_config(),
            "development.yaml": self._get_development_config(),
            "testing.yaml": self._get_testing_config(),
            "production.yaml": self._get_production_config(),
        }

        for filename, config in configs.items():
            file_path = self.config_dir / filename
            if not file_path.exists():
                self.save_yaml(config, file_path)

    def _get_base_config(self) -> Dict[str, Any]:
        """Get base configuration template."""
        return {
            "app_name": "perfwatch",
            "logging": {
                "level": "INFO",
                "file_path": "logs/perfwatch.log",
                "max_size": "10MB",
                "backup_count": 5,
                "format": "structured",
            },
            "monitoring": {
                "collect_interval_ms": 30000,
                "cpu_sample_window_ms": 100,
                "max_alert_history": 100,
                "thresholds": {
                    "database": {
                        "slow_query_time_ms": 1000,
                        "error_rate_percent": 5,
                        "connection_usage_percent": 80,
                    },
                    "cache": {
                        "min_hit_rate_percent": 70,
                        "max_error_rate_percent": 2,
                    },
                    "api": {
                        "max_response_time_ms": 2000,
                        "max_error_rate_percent": 1,
                    },
                    "system": {
                        "max_memory_usage_mb": 512,
                        "max_cpu_usage_percent": 80,
                    },
                },
            },
        }

    def _get_development_config(self) -> Dict[str, Any]:
        """Get development configuration template."""
        return {
            "environment": "development",
            "debug": True,
            "logging": {
                "level": "DEBUG",
            },
            "monitoring": {
                "collect_interval_ms": 5000,
            },
        }

    def _get_testing_config(self) -> Dict[str, Any]:
        """Get testing configuration template."""
        return {
            "environment": "testing",
            "debug": False,
            "logging": {
                "level": "WARNING",
                "file_path": "logs/test.log",
            },
        }

    def _get_production_config(self) -> Dict[str, Any]:
        """Get production configuration template."""
        return {
            "environment": "production",
            "debug": False,
            "logging": {
                "level": "INFO",
                "format": "json",
            },
        }


def load_settings(
    environment: Optional[Union[str, Environment]] = None,
    config_dir: Union[str, Path] = "config",
    create_defaults: bool = False,
) -> Settings:
    """
    Load application settings with environment-specific configuration.

    Args:
        environment: Environment to load (defaults to PERFWATCH_ENVIRONMENT env var or development)
        config_dir: Configuration directory path
        create_defaults: Write default YAML templates into config_dir first

    Returns:
        Validated Settings instance

    Raises:
        ConfigurationError: If configuration loading or validation fails
    """
    try:
        if environment is None:
            environment = os.getenv("PERFWATCH_ENVIRONMENT", Environment.DEVELOPMENT.value)

        if isinstance(environment, str):
            environment = Environment(environment.lower())

        loader = ConfigLoader(config_dir)
        if create_defaults:
            loader.create_default_configs()

        config_data = loader.load_environment_config(environment)
        config_data["environment"] = environment.value

        return Settings(**config_data)

    except ConfigurationError:
        raise
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation error: {e}") from e
    except ValueError as e:
        raise ConfigurationError(f"Invalid environment: {environment}") from e
