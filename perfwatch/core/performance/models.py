"""
Performance data models.

Snapshot and alert types shared by the collection engine, the alert store
and the exporter. Fields are snake_case attributes that serialize under
their camelCase names (``average_query_time`` <-> ``averageQueryTime``).
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class MetricType(Enum):
    """Types of exported metrics."""
    COUNTER = "counter"          # Monotonic values
    GAUGE = "gauge"             # Current value snapshots


class AlertSeverity(str, Enum):
    """Alert severity levels."""

    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertCategory(str, Enum):
    """Metric categories an alert can belong to."""

    DATABASE = "database"
    CACHE = "cache"
    API = "api"
    SYSTEM = "system"


class _MetricsBlock(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )


class DatabaseMetrics(_MetricsBlock):
    """Aggregated database query metrics."""

    query_count: int = Field(default=0, ge=0, description="Total queries observed")
    average_query_time: float = Field(default=0.0, description="Weighted average query time (ms)")
    slow_queries: int = Field(default=0, ge=0, description="Occurrences of slow query shapes")
    error_rate: float = Field(default=0.0, description="Query error rate (%)")
    # Not clamped: inconsistent pool accounting can push this past 100
    connection_pool_usage: float = Field(default=0.0, description="Connection pool usage (%)")


class CacheMetrics(_MetricsBlock):
    """Cache effectiveness metrics, copied from the cache collaborator."""

    hit_rate: float = Field(default=0.0, description="Cache hit rate (%)")
    miss_rate: float = Field(default=0.0, description="Cache miss rate (%)")
    eviction_rate: float = Field(default=0.0, description="Cache eviction rate (%)")
    memory_usage: float = Field(default=0.0, description="Cache memory usage (collaborator unit)")


class ApiMetrics(_MetricsBlock):
    """Running API request statistics."""

    request_count: int = Field(default=0, ge=0, description="Requests recorded")
    average_response_time: float = Field(default=0.0, description="EMA of response time (ms)")
    error_rate: float = Field(default=0.0, ge=0, le=100, description="Decaying error rate (%)")
    rate_limited_requests: int = Field(default=0, ge=0, description="Requests flagged as rate limited")


class SystemMetrics(_MetricsBlock):
    """Process resource metrics."""

    memory_usage: float = Field(default=0.0, description="Process memory usage (MB)")
    cpu_usage: float = Field(default=0.0, description="Process CPU usage (%)")
    uptime: float = Field(default=0.0, description="Seconds since monitor start")
    active_connections: int = Field(default=0, description="Active database connections")


class PerformanceMetrics(_MetricsBlock):
    """Point-in-time snapshot of every monitored metric."""

    database: DatabaseMetrics = Field(default_factory=DatabaseMetrics)
    cache: CacheMetrics = Field(default_factory=CacheMetrics)
    api: ApiMetrics = Field(default_factory=ApiMetrics)
    system: SystemMetrics = Field(default_factory=SystemMetrics)
    timestamp: datetime = Field(default_factory=utc_now, description="Last successful collection")

    def to_dict(self) -> Dict[str, Any]:
        """Convert snapshot to a camelCase dictionary."""
        return self.model_dump(mode="json", by_alias=True)


class PerformanceAlert(BaseModel):
    """Threshold breach raised during a collection tick."""

    id: str = Field(description="Alert identifier: category-metric-epoch_ms-sequence")
    severity: AlertSeverity = Field(description="Alert severity")
    category: AlertCategory = Field(description="Metric category")
    message: str = Field(description="Human readable description")
    metric: str = Field(description="Name of the breached metric")
    value: float = Field(description="Observed value")
    threshold: float = Field(description="Configured bound")
    timestamp: datetime = Field(default_factory=utc_now, description="Creation time")

    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert alert to dictionary."""
        return {
            "id": self.id,
            "severity": self.severity.value,
            "category": self.category.value,
            "message": self.message,
            "metric": self.metric,
            "value": self.value,
            "threshold": self.threshold,
            "timestamp": self.timestamp.isoformat(),
        }
