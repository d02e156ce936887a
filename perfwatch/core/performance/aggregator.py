"""
Metric aggregation.

Pulls counters from the database and cache collaborators and the system
sampler and folds them into one ``PerformanceMetrics`` snapshot.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Optional

from ..config import DatabaseThresholds
from ..exceptions import CollaboratorError, CollectionError
from .models import (
    ApiMetrics,
    CacheMetrics,
    DatabaseMetrics,
    PerformanceMetrics,
    utc_now,
)
from .sampler import SystemSampler
from .sources import (
    CacheStats,
    CacheStatsProvider,
    DatabasePoolMetrics,
    DatabaseStatsProvider,
    QueryStats,
    coerce_query_stats,
    coerce_record,
)


def aggregate_query_stats(
    query_stats: Mapping[str, QueryStats],
    slow_query_time_ms: float,
) -> Dict[str, Any]:
    """
    Combine per-query statistics into overall database figures.

    ``slow_queries`` counts every execution of a query shape whose average
    time exceeds the slow-query threshold.

    Args:
        query_stats: Mapping of query id to statistics
        slow_query_time_ms: Slow query threshold in milliseconds

    Returns:
        Dictionary with query_count, average_query_time, slow_queries, error_rate
    """
    total_queries = 0
    total_time = 0.0
    total_errors = 0
    slow_queries = 0

    for stats in query_stats.values():
        total_queries += stats.count
        total_time += stats.average_time * stats.count
        total_errors += stats.error_count

        if stats.average_time > slow_query_time_ms:
            slow_queries += stats.count

    return {
        "query_count": total_queries,
        "average_query_time": total_time / total_queries if total_queries > 0 else 0.0,
        "slow_queries": slow_queries,
        "error_rate": (total_errors / total_queries) * 100 if total_queries > 0 else 0.0,
    }


def connection_pool_usage(pool: DatabasePoolMetrics) -> float:
    """Percentage of pool connections in use, 0 for an empty pool."""
    if pool.total_connections <= 0:
        return 0.0
    return (pool.active_connections / pool.total_connections) * 100


class MetricsAggregator:
    """Builds a fresh snapshot from all metric sources."""

    def __init__(
        self,
        database: DatabaseStatsProvider,
        cache: CacheStatsProvider,
        sampler: SystemSampler,
        thresholds: DatabaseThresholds,
        clock: Callable[[], Any] = utc_now,
    ) -> None:
        """
        Initialize aggregator.

        Args:
            database: Database stats provider
            cache: Cache stats provider
            sampler: System sampler
            thresholds: Database thresholds (slow query time)
            clock: Returns the snapshot timestamp
        """
        self.database = database
        self.cache = cache
        self.sampler = sampler
        self.thresholds = thresholds
        self._clock = clock

    def collect(self, api: Optional[ApiMetrics] = None) -> PerformanceMetrics:
        """
        Collect one snapshot.

        Args:
            api: Current API metrics to embed in the snapshot

        Returns:
            New snapshot

        Raises:
            CollectionError: If any source fails or returns malformed data
        """
        pool = self._read_pool_metrics()
        query_stats = self._read_query_stats()

        database = DatabaseMetrics(
            **aggregate_query_stats(query_stats, self.thresholds.slow_query_time_ms),
            connection_pool_usage=connection_pool_usage(pool),
        )

        cache_stats = self._read_cache_stats()
        cache = CacheMetrics(
            hit_rate=cache_stats.hit_rate,
            miss_rate=cache_stats.miss_rate,
            eviction_rate=cache_stats.eviction_rate,
            memory_usage=cache_stats.memory_usage,
        )

        try:
            system = self.sampler.sample(active_connections=pool.active_connections)
        except Exception as e:
            raise CollectionError("System sampling failed", stage="system", cause=e) from e

        return PerformanceMetrics(
            database=database,
            cache=cache,
            api=api.model_copy() if api is not None else ApiMetrics(),
            system=system,
            timestamp=self._clock(),
        )

    def _read_pool_metrics(self) -> DatabasePoolMetrics:
        value = self._call("database", "get_metrics", self.database.get_metrics)
        return coerce_record(
            DatabasePoolMetrics, value, collaborator="database", accessor="get_metrics"
        )

    def _read_query_stats(self) -> Dict[str, QueryStats]:
        value = self._call("database", "get_query_stats", self.database.get_query_stats)
        return coerce_query_stats(value)

    def _read_cache_stats(self) -> CacheStats:
        value = self._call("cache", "get_metrics", self.cache.get_metrics)
        return coerce_record(CacheStats, value, collaborator="cache", accessor="get_metrics")

    @staticmethod
    def _call(collaborator: str, accessor: str, func: Callable[[], Any]) -> Any:
        """Invoke a collaborator accessor, wrapping failures."""
        try:
            return func()
        except Exception as e:
            raise CollaboratorError(
                f"{collaborator}.{accessor} failed: {e}",
                collaborator=collaborator,
                accessor=accessor,
                stage=collaborator,
                cause=e,
            ) from e
