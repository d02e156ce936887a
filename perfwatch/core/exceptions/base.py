"""
Base exception classes for perfwatch.

This module defines the exception hierarchy with base classes that provide
structured error handling, logging integration, and context preservation.
"""

from __future__ import annotations

import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type


class PerfwatchError(Exception):
    """
    Base exception class for all perfwatch errors.

    Carries an error code, a category, a severity and free-form context so
    that errors can be logged as structured events.
    """

    error_code: str = "PERFWATCH_ERROR"
    error_category: str = "general"
    severity: str = "error"  # debug, info, warning, error, critical

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ) -> None:
        """
        Initialize base error.

        Args:
            message: Detailed error message
            error_code: Specific error code for programmatic handling
            context: Additional context information
            cause: Original exception that caused this error
        """
        super().__init__(message)

        self.error_code = error_code or self.__class__.error_code
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now(timezone.utc)

        # Capture stack trace
        self.stack_trace = traceback.format_stack()[:-1]

        if cause:
            self.__cause__ = cause

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for structured logging.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "error_category": self.error_category,
            "severity": self.severity,
            "error_message": super().__str__(),
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
            "cause_type": self.cause.__class__.__name__ if self.cause else None,
        }

    def add_context(self, key: str, value: Any) -> None:
        """Add context information to the exception."""
        self.context[key] = value

    def with_context(self, **kwargs: Any) -> PerfwatchError:
        """Add context and return self for method chaining."""
        self.context.update(kwargs)
        return self

    def log_error(self, logger: Optional[Any] = None) -> None:
        """
        Log the error with appropriate level and context.

        Args:
            logger: Logger instance to use
        """
        if logger is None:
            # Import here to avoid circular imports
            from ..logging import get_logger
            logger = get_logger(__name__)

        log_data = self.to_dict()

        if self.severity == "critical":
            logger.critical(str(self), **log_data)
        elif self.severity == "error":
            logger.error(str(self), **log_data)
        elif self.severity == "warning":
            logger.warning(str(self), **log_data)
        else:
            logger.info(str(self), **log_data)

    def __str__(self) -> str:
        message = super().__str__()
        if self.error_code != "PERFWATCH_ERROR":
            message = f"[{self.error_code}] {message}"
        return message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{str(self)}', "
            f"error_code='{self.error_code}', "
            f"context={self.context})"
        )


class ConfigurationError(PerfwatchError):
    """Exception raised for configuration-related errors."""

    error_code = "CONFIG_ERROR"
    error_category = "configuration"
    severity = "error"


class ValidationError(PerfwatchError):
    """Exception raised for invalid arguments passed to public operations."""

    error_code = "VALIDATION_ERROR"
    error_category = "validation"
    severity = "error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected_type: Optional[Type] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field that failed validation
            value: Invalid value
            expected_type: Expected type or format
            **kwargs: Additional arguments for base class
        """
        super().__init__(message, **kwargs)

        if field:
            self.add_context("field", field)
        if value is not None:
            self.add_context("value", str(value)[:100])  # Truncate long values
        if expected_type:
            self.add_context("expected_type", expected_type.__name__)


class CollectionError(PerfwatchError):
    """Exception raised when a metrics collection tick fails."""

    error_code = "COLLECTION_ERROR"
    error_category = "collection"
    severity = "error"

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize collection error.

        Args:
            message: Error message
            stage: Collection stage that failed (database, cache, system)
            **kwargs: Additional arguments for base class
        """
        super().__init__(message, **kwargs)

        if stage:
            self.add_context("stage", stage)


class CollaboratorError(CollectionError):
    """Exception raised when a metric source fails or returns malformed data."""

    error_code = "COLLABORATOR_ERROR"
    error_category = "collaborator"

    def __init__(
        self,
        message: str,
        *,
        collaborator: Optional[str] = None,
        accessor: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize collaborator error.

        Args:
            message: Error message
            collaborator: Name of the metric source (database, cache)
            accessor: Accessor that failed (get_metrics, get_query_stats)
            **kwargs: Additional arguments for base class
        """
        super().__init__(message, **kwargs)

        if collaborator:
            self.add_context("collaborator", collaborator)
        if accessor:
            self.add_context("accessor", accessor)


class SamplerError(PerfwatchError):
    """Exception raised when process CPU or memory cannot be read."""

    error_code = "SAMPLER_ERROR"
    error_category = "sampler"
    severity = "warning"

    def __init__(
        self,
        message: str,
        *,
        resource: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)

        if resource:
            self.add_context("resource", resource)


def handle_exception(
    exception: Exception,
    logger: Optional[Any] = None,
    reraise: bool = True,
) -> Optional[PerfwatchError]:
    """
    Handle any exception and convert to a perfwatch exception if needed.

    Args:
        exception: Exception to handle
        logger: Logger to use for logging
        reraise: Whether to reraise the exception

    Returns:
        Perfwatch exception if not reraised
    """
    if isinstance(exception, PerfwatchError):
        error = exception
    else:
        error = PerfwatchError(message=str(exception), cause=exception)

    if logger is not None:
        error.log_error(logger)

    if reraise:
        raise error from exception

    return error
