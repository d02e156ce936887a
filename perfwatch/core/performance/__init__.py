"""
Performance monitoring components for perfwatch.

This module provides the collection engine, alerting and Prometheus export
for database, cache, API and process metrics.
"""

from .aggregator import MetricsAggregator, aggregate_query_stats, connection_pool_usage
from .alerts import AlertCallback, AlertManager
from .api_recorder import ApiRecorder
from .exporter import EXPORTED_METRICS, format_value, render_prometheus
from .models import (
    AlertCategory,
    AlertSeverity,
    ApiMetrics,
    CacheMetrics,
    DatabaseMetrics,
    MetricType,
    PerformanceAlert,
    PerformanceMetrics,
    SystemMetrics,
)
from .monitor import PerformanceMonitor, create_performance_monitor
from .sampler import SystemSampler
from .sources import (
    CacheStats,
    CacheStatsProvider,
    DatabasePoolMetrics,
    DatabaseStatsProvider,
    QueryStats,
)
from .thresholds import DEFAULT_RULES, AlertRule, ThresholdBreach, ThresholdEvaluator

__all__ = [
    # Engine
    "PerformanceMonitor",
    "create_performance_monitor",

    # Models
    "PerformanceMetrics",
    "DatabaseMetrics",
    "CacheMetrics",
    "ApiMetrics",
    "SystemMetrics",
    "PerformanceAlert",
    "AlertSeverity",
    "AlertCategory",
    "MetricType",

    # Sources
    "DatabaseStatsProvider",
    "CacheStatsProvider",
    "QueryStats",
    "DatabasePoolMetrics",
    "CacheStats",

    # Pipeline
    "MetricsAggregator",
    "aggregate_query_stats",
    "connection_pool_usage",
    "SystemSampler",
    "ThresholdEvaluator",
    "AlertRule",
    "ThresholdBreach",
    "DEFAULT_RULES",
    "AlertManager",
    "AlertCallback",
    "ApiRecorder",

    # Export
    "render_prometheus",
    "format_value",
    "EXPORTED_METRICS",
]
