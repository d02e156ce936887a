"""
Unit tests for snapshot models and source records.
"""

from types import SimpleNamespace

import pytest
from pydantic import ValidationError as PydanticValidationError

from conftest import FakeCache, FakeDatabase
from perfwatch.core.exceptions import CollaboratorError
from perfwatch.core.performance import (
    CacheStats,
    CacheStatsProvider,
    DatabaseStatsProvider,
    PerformanceAlert,
    PerformanceMetrics,
    QueryStats,
)
from perfwatch.core.performance.sources import coerce_query_stats, coerce_record


class TestPerformanceMetrics:
    """Test snapshot serialization."""

    def test_defaults_are_zero(self):
        metrics = PerformanceMetrics()

        assert metrics.database.query_count == 0
        assert metrics.cache.hit_rate == 0.0
        assert metrics.api.error_rate == 0.0
        assert metrics.system.uptime == 0.0
        assert metrics.timestamp.tzinfo is not None

    def test_to_dict_uses_camel_case(self):
        data = PerformanceMetrics().to_dict()

        assert set(data) == {"database", "cache", "api", "system", "timestamp"}
        assert "averageQueryTime" in data["database"]
        assert "connectionPoolUsage" in data["database"]
        assert "rateLimitedRequests" in data["api"]
        assert "activeConnections" in data["system"]

    def test_accepts_either_field_name(self):
        metrics = PerformanceMetrics.model_validate({
            "database": {"queryCount": 3, "error_rate": 1.5},
        })

        assert metrics.database.query_count == 3
        assert metrics.database.error_rate == 1.5

    def test_api_error_rate_bounds(self):
        with pytest.raises(PydanticValidationError):
            PerformanceMetrics.model_validate({"api": {"errorRate": 101}})

    def test_alert_to_dict(self):
        alert = PerformanceAlert(
            id="system-cpuUsage-1",
            severity="warning",
            category="system",
            message="High CPU usage: 91.00%",
            metric="cpuUsage",
            value=91.0,
            threshold=80.0,
        )

        data = alert.to_dict()

        assert data["severity"] == "warning"
        assert data["category"] == "system"
        assert data["timestamp"].endswith("+00:00")


class TestSourceRecords:
    """Test validation of collaborator results."""

    def test_query_stats_key_variants(self):
        for payload in (
            {"count": 2, "averageTime": 10, "errorCount": 1},
            {"count": 2, "avgTime": 10, "errors": 1},
            {"count": 2, "average_time": 10, "error_count": 1},
        ):
            stats = QueryStats.model_validate(payload)
            assert (stats.count, stats.average_time, stats.error_count) == (2, 10.0, 1)

    def test_missing_fields_default_to_zero(self):
        stats = QueryStats.model_validate({"count": 4})
        assert stats.average_time == 0.0
        assert stats.error_count == 0

    def test_coerce_from_attributes(self):
        record = coerce_record(
            CacheStats,
            SimpleNamespace(hit_rate=80.0, miss_rate=20.0, eviction_rate=0.0, memory_usage=1.0),
            collaborator="cache",
            accessor="get_metrics",
        )

        assert record.hit_rate == 80.0

    def test_coerce_passes_records_through(self):
        stats = CacheStats(hit_rate=50.0)
        assert coerce_record(CacheStats, stats, collaborator="cache", accessor="get_metrics") is stats

    def test_coerce_invalid_record(self):
        with pytest.raises(CollaboratorError) as exc_info:
            coerce_record(CacheStats, {"hitRate": "lots"}, collaborator="cache", accessor="get_metrics")

        assert exc_info.value.context["collaborator"] == "cache"

    def test_coerce_query_stats_keys_are_strings(self):
        result = coerce_query_stats({42: {"count": 1}})
        assert list(result) == ["42"]

    def test_providers_satisfy_protocols(self):
        assert isinstance(FakeDatabase(), DatabaseStatsProvider)
        assert isinstance(FakeCache(), CacheStatsProvider)
