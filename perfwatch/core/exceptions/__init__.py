"""
Core exception handling module for perfwatch.

This module provides the exception hierarchy used by configuration loading,
metric collection and the public monitor operations.
"""

from .base import (
    CollaboratorError,
    CollectionError,
    ConfigurationError,
    PerfwatchError,
    SamplerError,
    ValidationError,
    handle_exception,
)

__all__ = [
    "PerfwatchError",
    "ConfigurationError",
    "ValidationError",
    "CollectionError",
    "CollaboratorError",
    "SamplerError",
    "handle_exception",
]
