"""
Prometheus text exposition of a metrics snapshot.

The document has a fixed set of metrics in a fixed order, one
``# HELP`` / ``# TYPE`` pair and one value line each.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, List, Union

from .models import MetricType, PerformanceMetrics


@dataclass(frozen=True)
class ExportedMetric:
    """Definition of one exported metric."""

    name: str
    type: MetricType
    help: str
    read: Callable[[PerformanceMetrics], Union[int, float]]


EXPORTED_METRICS: List[ExportedMetric] = [
    ExportedMetric(
        "database_query_count", MetricType.COUNTER,
        "Total number of database queries",
        lambda m: m.database.query_count,
    ),
    ExportedMetric(
        "database_average_query_time", MetricType.GAUGE,
        "Average database query time in milliseconds",
        lambda m: m.database.average_query_time,
    ),
    ExportedMetric(
        "database_slow_queries", MetricType.COUNTER,
        "Number of slow database queries",
        lambda m: m.database.slow_queries,
    ),
    ExportedMetric(
        "database_error_rate", MetricType.GAUGE,
        "Database error rate percentage",
        lambda m: m.database.error_rate,
    ),
    ExportedMetric(
        "database_connection_pool_usage", MetricType.GAUGE,
        "Connection pool usage percentage",
        lambda m: m.database.connection_pool_usage,
    ),
    ExportedMetric(
        "cache_hit_rate", MetricType.GAUGE,
        "Cache hit rate percentage",
        lambda m: m.cache.hit_rate,
    ),
    ExportedMetric(
        "cache_miss_rate", MetricType.GAUGE,
        "Cache miss rate percentage",
        lambda m: m.cache.miss_rate,
    ),
    ExportedMetric(
        "api_average_response_time", MetricType.GAUGE,
        "Average API response time in milliseconds",
        lambda m: m.api.average_response_time,
    ),
    ExportedMetric(
        "api_error_rate", MetricType.GAUGE,
        "API error rate percentage",
        lambda m: m.api.error_rate,
    ),
    ExportedMetric(
        "system_memory_usage", MetricType.GAUGE,
        "Memory usage in MB",
        lambda m: m.system.memory_usage,
    ),
    ExportedMetric(
        "system_cpu_usage", MetricType.GAUGE,
        "CPU usage percentage",
        lambda m: m.system.cpu_usage,
    ),
    ExportedMetric(
        "system_uptime_seconds", MetricType.COUNTER,
        "System uptime in seconds",
        lambda m: m.system.uptime,
    ),
]


def format_value(value: Union[int, float]) -> str:
    """
    Render a sample value.

    Integral values have no decimal part (``15``, ``0``); other floats use
    the shortest round-trip representation.
    """
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def render_prometheus(metrics: PerformanceMetrics) -> str:
    """
    Render a snapshot as Prometheus exposition text.

    Args:
        metrics: Snapshot to render

    Returns:
        Text document without leading or trailing blank lines
    """
    blocks = []
    for metric in EXPORTED_METRICS:
        blocks.append("\n".join([
            f"# HELP {metric.name} {metric.help}",
            f"# TYPE {metric.name} {metric.type.value}",
            f"{metric.name} {format_value(metric.read(metrics))}",
        ]))
    return "\n\n".join(blocks).strip()
