"""
Pytest configuration and fixtures for perfwatch.

This module provides shared fixtures for all tests: fake metric sources,
a sampler that never sleeps, and monitor factories.
"""

from __future__ import annotations

import os
import tempfile
import threading
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Generator, Optional

import pytest

from perfwatch.core.config import Environment, MonitorSettings, Settings
from perfwatch.core.logging import LoggerFactory
from perfwatch.core.performance import PerformanceMonitor, SystemSampler


# Test Environment Setup

@pytest.fixture(scope="session", autouse=True)
def setup_test_environment():
    """Set up test environment variables."""
    os.environ["PERFWATCH_ENVIRONMENT"] = "testing"


@pytest.fixture(autouse=True)
def reset_logging():
    """Leave structlog unconfigured between tests."""
    yield
    LoggerFactory.reset()


# Directory Fixtures

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def test_config_dir(temp_dir: Path) -> Path:
    """Create temporary config directory."""
    config_dir = temp_dir / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


@pytest.fixture
def mock_settings(temp_dir: Path) -> Settings:
    """Create settings for unit tests."""
    return Settings(
        environment=Environment.TESTING,
        debug=False,
        logging={"file_path": temp_dir / "logs" / "test.log"},
    )


# Fake Metric Sources

class FakeDatabase:
    """In-memory database stats provider."""

    def __init__(
        self,
        query_stats: Optional[Dict[str, Dict[str, Any]]] = None,
        active_connections: int = 2,
        total_connections: int = 10,
    ) -> None:
        self.query_stats = query_stats or {}
        self.active_connections = active_connections
        self.total_connections = total_connections
        self.fail_with: Optional[Exception] = None
        self.query_stats_calls = 0
        self._lock = threading.Lock()

    def get_metrics(self) -> Dict[str, int]:
        if self.fail_with is not None:
            raise self.fail_with
        return {
            "activeConnections": self.active_connections,
            "totalConnections": self.total_connections,
        }

    def get_query_stats(self) -> Dict[str, Dict[str, Any]]:
        with self._lock:
            self.query_stats_calls += 1
        return dict(self.query_stats)


class FakeCache:
    """In-memory cache stats provider."""

    def __init__(self, hit_rate: float = 90.0, miss_rate: float = 10.0,
                 eviction_rate: float = 1.0, memory_usage: float = 64.0) -> None:
        self.metrics = {
            "hitRate": hit_rate,
            "missRate": miss_rate,
            "evictionRate": eviction_rate,
            "memoryUsage": memory_usage,
        }

    def get_metrics(self) -> Dict[str, float]:
        return dict(self.metrics)


class FakeProcess:
    """Stand-in for psutil.Process with scripted readings."""

    def __init__(self, cpu_seconds=(1.0, 1.05), rss_bytes: int = 100 * 1024 * 1024) -> None:
        self._cpu_readings = list(cpu_seconds)
        self._index = 0
        self.rss_bytes = rss_bytes

    def cpu_times(self):
        value = self._cpu_readings[min(self._index, len(self._cpu_readings) - 1)]
        self._index += 1
        return SimpleNamespace(user=value, system=0.0)

    def memory_info(self):
        return SimpleNamespace(rss=self.rss_bytes)


class FakeClock:
    """Manually advanced clock; sleeping advances it."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


def make_sampler(cpu_seconds=(0.0, 0.0), rss_mb: float = 100.0) -> SystemSampler:
    """Sampler over a fake process that returns without sleeping."""
    clock = FakeClock()
    return SystemSampler(
        sample_window=0.1,
        process=FakeProcess(cpu_seconds=cpu_seconds, rss_bytes=int(rss_mb * 1024 * 1024)),
        clock=clock,
        sleep=clock.sleep,
    )


@pytest.fixture
def fake_database() -> FakeDatabase:
    """Database with two query shapes, one of them slow."""
    return FakeDatabase(
        query_stats={
            "A": {"count": 10, "averageTime": 1200, "errorCount": 1},
            "B": {"count": 5, "averageTime": 200, "errorCount": 0},
        },
        active_connections=2,
        total_connections=10,
    )


@pytest.fixture
def fake_cache() -> FakeCache:
    """Healthy cache."""
    return FakeCache()


@pytest.fixture
def quiet_sampler() -> SystemSampler:
    """Sampler reporting 100 MB and 0% CPU without sleeping."""
    return make_sampler()


@pytest.fixture
def monitor_settings() -> MonitorSettings:
    """Default thresholds with a short interval."""
    return MonitorSettings(collect_interval_ms=50)


@pytest.fixture
def monitor(fake_database, fake_cache, quiet_sampler, monitor_settings) -> Generator[PerformanceMonitor, None, None]:
    """Monitor over fake sources; stopped after the test."""
    perf_monitor = PerformanceMonitor(
        fake_database, fake_cache, settings=monitor_settings, sampler=quiet_sampler
    )
    yield perf_monitor
    perf_monitor.stop()
