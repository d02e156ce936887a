"""
Performance monitoring engine.

This module ties the collection pipeline together: a background thread
periodically aggregates a snapshot, evaluates thresholds and raises alerts,
while read accessors and API recording may be called from any thread.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Dict, List, Optional, Union

from ..config import MonitorSettings, Settings
from ..exceptions import handle_exception
from ..logging import get_logger
from .aggregator import MetricsAggregator
from .alerts import AlertCallback, AlertManager
from .api_recorder import ApiRecorder
from .exporter import render_prometheus
from .models import AlertSeverity, PerformanceAlert, PerformanceMetrics, utc_now
from .sampler import SystemSampler
from .sources import CacheStatsProvider, DatabaseStatsProvider
from .thresholds import ThresholdEvaluator

logger = get_logger(__name__)


class PerformanceMonitor:
    """
    Performance monitoring and alerting engine.

    Collects database, cache, API and process metrics on a fixed interval,
    raises alerts when thresholds are breached and exposes the latest
    snapshot for export.

    Each collection blocks for the CPU sampling window (100 ms by default),
    so a tick always takes at least that long. Ticks never overlap: a tick
    that would start while another is still running is skipped.
    """

    def __init__(
        self,
        database: DatabaseStatsProvider,
        cache: CacheStatsProvider,
        settings: Optional[MonitorSettings] = None,
        sampler: Optional[SystemSampler] = None,
    ) -> None:
        """
        Initialize performance monitor.

        Args:
            database: Database stats provider
            cache: Cache stats provider
            settings: Monitor settings (defaults if None)
            sampler: System sampler (psutil-backed sampler if None)
        """
        self.settings = settings or MonitorSettings()

        self._sampler = sampler or SystemSampler(
            sample_window=self.settings.cpu_sample_window_ms / 1000.0
        )
        self._aggregator = MetricsAggregator(
            database=database,
            cache=cache,
            sampler=self._sampler,
            thresholds=self.settings.thresholds.database,
        )
        self._evaluator = ThresholdEvaluator(self.settings.thresholds)
        self._alerts = AlertManager(max_alerts=self.settings.max_alert_history)
        self._api = ApiRecorder()

        self._metrics = PerformanceMetrics()
        self._lock = threading.RLock()
        self._collection_lock = threading.Lock()

        # Monitoring state
        self._lifecycle_lock = threading.RLock()
        self._is_monitoring = False
        self._stop_event: Optional[threading.Event] = None
        self._monitor_thread: Optional[threading.Thread] = None

        self._monitor_stats = {
            "collections": 0,
            "collection_errors": 0,
            "skipped_ticks": 0,
            "alerts_triggered": 0,
            "start_time": None,
        }

        logger.info(
            "Performance monitor initialized",
            collect_interval_ms=self.settings.collect_interval_ms,
        )

    @property
    def is_running(self) -> bool:
        """Whether monitoring is active."""
        return self._is_monitoring

    def start(self) -> bool:
        """
        Start performance monitoring.

        Collects once immediately, then every ``collect_interval_ms``.
        Calling ``start`` while already running does nothing. An alert
        callback may call ``stop`` during the initial collection, in which
        case no collection thread is started.

        Returns:
            True if monitoring is running
        """
        with self._lifecycle_lock:
            if self._is_monitoring:
                logger.warning("Performance monitoring already started")
                return True

            logger.info("Starting performance monitoring")

            stop_event = threading.Event()
            self._stop_event = stop_event
            self._is_monitoring = True
            with self._lock:
                self._monitor_stats["start_time"] = utc_now()

            self.collect_metrics()

            if stop_event.is_set():
                logger.info("Performance monitoring stopped during initial collection")
                return False

            thread = threading.Thread(
                target=self._monitor_loop,
                args=(stop_event,),
                name="PerformanceMonitor",
                daemon=True,
            )

            try:
                thread.start()
            except RuntimeError as e:
                self._is_monitoring = False
                self._stop_event = None
                logger.error("Failed to start performance monitoring", error=str(e))
                return False

            self._monitor_thread = thread
            return True

    def stop(self) -> None:
        """
        Stop performance monitoring.

        Safe to call repeatedly or before ``start``. When this returns from
        a thread other than the collection thread, no further ticks run.
        """
        with self._lifecycle_lock:
            if not self._is_monitoring:
                return

            logger.info("Stopping performance monitoring...")

            self._is_monitoring = False
            stop_event, self._stop_event = self._stop_event, None
            thread, self._monitor_thread = self._monitor_thread, None

        if stop_event is not None:
            stop_event.set()

        # An alert callback may call stop() from the collection thread itself
        if thread is not None and thread is not threading.current_thread():
            thread.join()

        logger.info("Performance monitoring stopped")

    def collect_metrics(self) -> bool:
        """
        Run one collection tick.

        Failures are logged and leave the previous snapshot in place.

        Returns:
            True if a new snapshot was stored, False if the tick failed or
            was skipped because another tick was in progress
        """
        if not self._collection_lock.acquire(blocking=False):
            with self._lock:
                self._monitor_stats["skipped_ticks"] += 1
            logger.debug("Collection already in progress, skipping tick")
            return False

        try:
            try:
                snapshot = self._aggregator.collect(api=self._api.snapshot())
            except Exception as e:
                self._record_collection_error()
                handle_exception(e, logger=logger, reraise=False)
                return False

            with self._lock:
                self._metrics = snapshot
                self._monitor_stats["collections"] += 1

            self._check_alert_thresholds(snapshot)
            return True

        finally:
            self._collection_lock.release()

    def get_metrics(self) -> PerformanceMetrics:
        """
        Get the current snapshot.

        API figures are live; everything else is as of the last successful
        collection.

        Returns:
            Independent copy of the snapshot
        """
        with self._lock:
            snapshot = self._metrics.model_copy(deep=True)
        snapshot.api = self._api.snapshot()
        return snapshot

    def get_alerts(self, limit: int = 50) -> List[PerformanceAlert]:
        """Get up to ``limit`` most recent alerts, oldest first."""
        return self._alerts.get_alerts(limit)

    def get_alerts_by_severity(self, severity: Union[str, AlertSeverity]) -> List[PerformanceAlert]:
        """Get retained alerts of one severity."""
        return self._alerts.get_alerts_by_severity(severity)

    def on_alert(self, callback: AlertCallback) -> None:
        """Register a callback invoked synchronously for every new alert."""
        self._alerts.on_alert(callback)

    def record_api_request(
        self,
        endpoint: str,
        duration_ms: float,
        success: bool,
        rate_limited: bool = False,
    ) -> None:
        """
        Record API request performance.

        Args:
            endpoint: Request endpoint
            duration_ms: Request duration in milliseconds
            success: Whether the request succeeded
            rate_limited: Whether the request was rate limited
        """
        self._api.record(endpoint, duration_ms, success, rate_limited=rate_limited)

    def export_prometheus_metrics(self) -> str:
        """Export the current snapshot in Prometheus text format."""
        return render_prometheus(self.get_metrics())

    def get_monitor_stats(self) -> Dict[str, Any]:
        """Get collection statistics."""
        with self._lock:
            stats = self._monitor_stats.copy()
        stats["is_running"] = self._is_monitoring
        return stats

    def _monitor_loop(self, stop_event: threading.Event) -> None:
        """Background collection loop."""
        interval = self.settings.collect_interval_seconds
        next_run = time.monotonic() + interval

        logger.debug("Started monitoring loop")

        while not stop_event.wait(max(0.0, next_run - time.monotonic())):
            self.collect_metrics()

            next_run += interval
            now = time.monotonic()
            if next_run <= now:
                missed = int((now - next_run) // interval) + 1
                next_run += missed * interval
                with self._lock:
                    self._monitor_stats["skipped_ticks"] += missed
                logger.warning("Collection overran its interval", skipped_ticks=missed)

        logger.debug("Exited monitoring loop")

    def _check_alert_thresholds(self, snapshot: PerformanceMetrics) -> None:
        """Raise an alert for every breached threshold."""
        try:
            breaches = self._evaluator.evaluate(snapshot)
        except Exception as e:
            logger.error("Error checking alert thresholds", error=str(e), exc_info=True)
            return

        for breach in breaches:
            self._alerts.create_alert(
                severity=breach.rule.severity,
                category=breach.rule.category,
                message=breach.message,
                metric=breach.rule.metric,
                value=breach.value,
                threshold=breach.threshold,
            )
            with self._lock:
                self._monitor_stats["alerts_triggered"] += 1

    def _record_collection_error(self) -> None:
        with self._lock:
            self._monitor_stats["collection_errors"] += 1


def create_performance_monitor(
    database: DatabaseStatsProvider,
    cache: CacheStatsProvider,
    settings: Optional[Union[MonitorSettings, Settings]] = None,
) -> PerformanceMonitor:
    """
    Create a performance monitor with the default profile.

    Args:
        database: Database stats provider
        cache: Cache stats provider
        settings: Monitor settings or full application settings

    Returns:
        Configured, not yet started monitor
    """
    if isinstance(settings, Settings):
        settings = settings.monitoring
    return PerformanceMonitor(database, cache, settings=settings)
