"""
Alert storage and notification.

Alerts are kept in a bounded in-memory history and pushed synchronously to
every registered subscriber.
"""

from __future__ import annotations

import itertools
import threading
import time
from collections import deque
from typing import Callable, Deque, List, Union

from ..exceptions import ValidationError
from ..logging import get_logger
from .models import AlertCategory, AlertSeverity, PerformanceAlert, utc_now

logger = get_logger(__name__)

AlertCallback = Callable[[PerformanceAlert], None]

DEFAULT_MAX_ALERTS = 100


def _coerce_severity(severity: Union[str, AlertSeverity]) -> AlertSeverity:
    try:
        return AlertSeverity(severity)
    except ValueError as e:
        raise ValidationError(
            f"Unknown alert severity: {severity}",
            field="severity",
            value=severity,
        ) from e


class AlertManager:
    """Bounded alert history with synchronous subscriber notification."""

    def __init__(self, max_alerts: int = DEFAULT_MAX_ALERTS) -> None:
        """
        Initialize alert manager.

        Args:
            max_alerts: Number of most recent alerts to keep
        """
        self.max_alerts = max_alerts
        self._alerts: Deque[PerformanceAlert] = deque(maxlen=max_alerts)
        self._callbacks: List[AlertCallback] = []
        self._sequence = itertools.count(1)
        self._lock = threading.RLock()

    def create_alert(
        self,
        severity: Union[str, AlertSeverity],
        category: Union[str, AlertCategory],
        message: str,
        metric: str,
        value: float,
        threshold: float,
    ) -> PerformanceAlert:
        """
        Create, store and broadcast an alert.

        Args:
            severity: Alert severity
            category: Metric category
            message: Human readable message
            metric: Name of the breached metric
            value: Observed value
            threshold: Configured bound

        Returns:
            The created alert
        """
        category = AlertCategory(category)
        severity = _coerce_severity(severity)

        with self._lock:
            # Sequence suffix keeps ids unique within the same millisecond
            alert = PerformanceAlert(
                id=f"{category.value}-{metric}-{int(time.time() * 1000)}-{next(self._sequence)}",
                severity=severity,
                category=category,
                message=message,
                metric=metric,
                value=value,
                threshold=threshold,
                timestamp=utc_now(),
            )
            # deque(maxlen) drops the oldest entry on overflow
            self._alerts.append(alert)
            callbacks = list(self._callbacks)

        for callback in callbacks:
            try:
                callback(alert)
            except Exception as e:
                logger.error(
                    "Alert callback failed",
                    alert_id=alert.id,
                    callback=getattr(callback, "__name__", repr(callback)),
                    error=str(e),
                    exc_info=True,
                )

        self._log_alert(alert)
        return alert

    def on_alert(self, callback: AlertCallback) -> None:
        """Register an alert subscriber."""
        with self._lock:
            self._callbacks.append(callback)

    def get_alerts(self, limit: int = 50) -> List[PerformanceAlert]:
        """
        Get the most recent alerts.

        Args:
            limit: Maximum number of alerts to return

        Returns:
            Up to ``limit`` newest alerts, oldest first
        """
        if limit <= 0:
            return []

        with self._lock:
            alerts = list(self._alerts)
        return alerts[-limit:]

    def get_alerts_by_severity(self, severity: Union[str, AlertSeverity]) -> List[PerformanceAlert]:
        """Get all retained alerts of the given severity, oldest first."""
        severity = _coerce_severity(severity)
        with self._lock:
            return [alert for alert in self._alerts if alert.severity == severity]

    def __len__(self) -> int:
        with self._lock:
            return len(self._alerts)

    @staticmethod
    def _log_alert(alert: PerformanceAlert) -> None:
        log_data = {
            "alert_id": alert.id,
            "metric": alert.metric,
            "value": alert.value,
            "threshold": alert.threshold,
        }
        if alert.severity == AlertSeverity.CRITICAL:
            logger.error(f"Performance alert: {alert.message}", **log_data)
        elif alert.severity == AlertSeverity.WARNING:
            logger.warning(f"Performance alert: {alert.message}", **log_data)
        else:
            logger.info(f"Performance alert: {alert.message}", **log_data)
