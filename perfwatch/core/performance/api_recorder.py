"""
API request recording.

Updated by the request-handling layer once per completed request,
independently of the collection timer.
"""

from __future__ import annotations

import threading

from ..exceptions import ValidationError
from ..logging import get_logger
from .models import ApiMetrics

logger = get_logger(__name__)


class ApiRecorder:
    """
    Running API latency and error statistics.

    The error rate rises by ``failure_step`` on every failed request and
    decays by ``success_step`` on every successful one, so it reacts quickly
    to failures and recovers slowly.
    """

    alpha = 0.2
    failure_step = 0.1
    success_step = 0.01

    def __init__(self) -> None:
        self._metrics = ApiMetrics()
        self._lock = threading.Lock()

    def record(
        self,
        endpoint: str,
        duration_ms: float,
        success: bool,
        rate_limited: bool = False,
    ) -> None:
        """
        Record one completed API request.

        Args:
            endpoint: Request endpoint (accepted, not aggregated per endpoint)
            duration_ms: Request duration in milliseconds
            success: Whether the request succeeded
            rate_limited: Whether the request was rejected by a rate limiter

        Raises:
            ValidationError: If duration_ms is negative
        """
        if duration_ms < 0:
            raise ValidationError(
                "API request duration cannot be negative",
                field="duration_ms",
                value=duration_ms,
            )

        with self._lock:
            metrics = self._metrics
            metrics.request_count += 1
            metrics.average_response_time = (
                metrics.average_response_time * (1 - self.alpha) + duration_ms * self.alpha
            )

            if success:
                metrics.error_rate = max(0.0, metrics.error_rate - self.success_step)
            else:
                metrics.error_rate = min(100.0, metrics.error_rate + self.failure_step)

            if rate_limited:
                metrics.rate_limited_requests += 1

        logger.debug(
            "API request recorded",
            endpoint=endpoint,
            duration_ms=duration_ms,
            success=success,
        )

    def snapshot(self) -> ApiMetrics:
        """Get a copy of the current API metrics."""
        with self._lock:
            return self._metrics.model_copy()
