"""
perfwatch.

Performance monitoring and alerting engine: samples database, cache, API
and process metrics, raises threshold alerts and exports Prometheus text.
"""

from .core import (
    __version__,
    Environment,
    MonitorSettings,
    PerfwatchError,
    Settings,
    get_logger,
    load_settings,
    setup_logging,
)
from .core.performance import (
    AlertSeverity,
    PerformanceAlert,
    PerformanceMetrics,
    PerformanceMonitor,
    create_performance_monitor,
)

# Package metadata
__title__ = "perfwatch"
__description__ = "Performance monitoring and alerting engine with Prometheus text export"
__license__ = "MIT"

__all__ = [
    # Metadata
    "__version__",
    "__title__",
    "__description__",
    "__license__",
    # Core exports
    "Environment",
    "Settings",
    "MonitorSettings",
    "load_settings",
    "get_logger",
    "setup_logging",
    "PerfwatchError",
    # Monitoring
    "PerformanceMonitor",
    "create_performance_monitor",
    "PerformanceMetrics",
    "PerformanceAlert",
    "AlertSeverity",
]
