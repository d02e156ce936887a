"""
Threshold evaluation.

Compares a snapshot against the configured thresholds. There is no
hysteresis: every evaluation of a breached rule produces a new alert.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List

from pydantic.alias_generators import to_camel

from ..config import AlertThresholdConfig
from .models import AlertCategory, AlertSeverity, PerformanceMetrics


@dataclass(frozen=True)
class AlertRule:
    """One row of the alert rule table."""

    category: AlertCategory
    field: str                      # attribute on the category block
    condition: str                  # "gt" or "lt"
    severity: AlertSeverity
    threshold: Callable[[AlertThresholdConfig], float]
    message: str                    # formatted with the observed value
    ignore_zero: bool = False       # a zero reading means "no data yet"

    @property
    def metric(self) -> str:
        """Metric name as it appears in serialized snapshots."""
        return to_camel(self.field)

    def read(self, metrics: PerformanceMetrics) -> float:
        """Read the observed value from a snapshot."""
        return getattr(getattr(metrics, self.category.value), self.field)

    def is_breached(self, value: float, threshold: float) -> bool:
        """Check the rule condition."""
        if self.ignore_zero and value == 0:
            return False
        if self.condition == "gt":
            return value > threshold
        if self.condition == "lt":
            return value < threshold
        raise ValueError(f"Unsupported rule condition: {self.condition}")


@dataclass(frozen=True)
class ThresholdBreach:
    """A triggered rule with the observed and configured values."""

    rule: AlertRule
    value: float
    threshold: float

    @property
    def message(self) -> str:
        return self.rule.message.format(value=self.value)


# API thresholds are configured but intentionally not evaluated
DEFAULT_RULES: List[AlertRule] = [
    AlertRule(
        category=AlertCategory.DATABASE,
        field="average_query_time",
        condition="gt",
        severity=AlertSeverity.WARNING,
        threshold=lambda t: t.database.slow_query_time_ms,
        message="Slow database queries detected: {value:.2f}ms",
    ),
    AlertRule(
        category=AlertCategory.DATABASE,
        field="error_rate",
        condition="gt",
        severity=AlertSeverity.CRITICAL,
        threshold=lambda t: t.database.error_rate_percent,
        message="High database error rate: {value:.2f}%",
    ),
    AlertRule(
        category=AlertCategory.DATABASE,
        field="connection_pool_usage",
        condition="gt",
        severity=AlertSeverity.WARNING,
        threshold=lambda t: t.database.connection_usage_percent,
        message="High connection pool usage: {value:.2f}%",
    ),
    AlertRule(
        category=AlertCategory.CACHE,
        field="hit_rate",
        condition="lt",
        severity=AlertSeverity.WARNING,
        threshold=lambda t: t.cache.min_hit_rate_percent,
        message="Low cache hit rate: {value:.2f}%",
        ignore_zero=True,
    ),
    AlertRule(
        category=AlertCategory.SYSTEM,
        field="memory_usage",
        condition="gt",
        severity=AlertSeverity.CRITICAL,
        threshold=lambda t: t.system.max_memory_usage_mb,
        message="High memory usage: {value:.2f}MB",
    ),
    AlertRule(
        category=AlertCategory.SYSTEM,
        field="cpu_usage",
        condition="gt",
        severity=AlertSeverity.WARNING,
        threshold=lambda t: t.system.max_cpu_usage_percent,
        message="High CPU usage: {value:.2f}%",
    ),
]


class ThresholdEvaluator:
    """Evaluates the alert rule table against snapshots."""

    def __init__(self, thresholds: AlertThresholdConfig, rules: List[AlertRule] = None) -> None:
        self.thresholds = thresholds
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def evaluate(self, metrics: PerformanceMetrics) -> List[ThresholdBreach]:
        """
        Evaluate all rules against a snapshot.

        Args:
            metrics: Snapshot to check

        Returns:
            Breaches in rule-table order
        """
        breaches = []
        for rule in self.rules:
            value = rule.read(metrics)
            threshold = rule.threshold(self.thresholds)
            if rule.is_breached(value, threshold):
                breaches.append(ThresholdBreach(rule=rule, value=value, threshold=threshold))
        return breaches
