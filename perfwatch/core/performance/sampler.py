"""
Process resource sampling.

CPU usage is measured rather than estimated: process CPU time is read,
the sampler sleeps for a fixed window, and CPU time is read again. Every
call to ``sample()`` therefore blocks for at least the window length, so
it must only run on the collection thread.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

import psutil

from ..exceptions import SamplerError
from ..logging import get_logger
from .models import SystemMetrics

logger = get_logger(__name__)

BYTES_PER_MB = 1024 * 1024


class SystemSampler:
    """Measures process memory, CPU utilization and uptime."""

    def __init__(
        self,
        sample_window: float = 0.1,
        process: Optional[psutil.Process] = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize system sampler.

        Args:
            sample_window: CPU sampling window in seconds
            process: Process to sample (current process if None)
            clock: Monotonic wall clock in seconds
            sleep: Function used to wait out the sampling window
        """
        self.sample_window = sample_window
        self._process = process or psutil.Process()
        self._clock = clock
        self._sleep = sleep
        self._start_time = clock()

    @property
    def uptime(self) -> float:
        """Seconds elapsed since the sampler was created."""
        return self._clock() - self._start_time

    def sample(self, active_connections: int = 0) -> SystemMetrics:
        """
        Take a full system sample.

        Args:
            active_connections: Active database connections to report

        Returns:
            System metrics; unreadable values are reported as 0
        """
        return SystemMetrics(
            memory_usage=self.memory_usage_mb(),
            cpu_usage=self.cpu_usage_percent(),
            uptime=self.uptime,
            active_connections=active_connections,
        )

    def memory_usage_mb(self) -> float:
        """
        Resident memory (RSS) of the process in MB, 0 if unavailable.

        Python exposes no separate heap figure, so RSS is what the
        ``max_memory_usage_mb`` threshold is compared against.
        """
        try:
            return self._read_memory_bytes() / BYTES_PER_MB
        except SamplerError as e:
            logger.warning("Memory sampling failed, reporting 0", error=str(e))
            return 0.0

    def cpu_usage_percent(self) -> float:
        """
        CPU used by the process over the sampling window, 0 if unavailable.

        Blocks for ``sample_window`` seconds.
        """
        try:
            cpu_start = self._read_cpu_seconds()
            wall_start = self._clock()

            self._sleep(self.sample_window)

            cpu_end = self._read_cpu_seconds()
            wall_end = self._clock()
        except SamplerError as e:
            logger.warning("CPU sampling failed, reporting 0", error=str(e))
            return 0.0

        wall_delta = wall_end - wall_start
        if wall_delta <= 0:
            return 0.0

        return 100.0 * (cpu_end - cpu_start) / wall_delta

    def _read_cpu_seconds(self) -> float:
        """User plus system CPU time consumed by the process."""
        try:
            cpu_times = self._process.cpu_times()
        except (psutil.Error, OSError, NotImplementedError) as e:
            raise SamplerError("Unable to read process CPU time", resource="cpu", cause=e) from e
        return cpu_times.user + cpu_times.system

    def _read_memory_bytes(self) -> int:
        """Resident set size of the process."""
        try:
            return self._process.memory_info().rss
        except (psutil.Error, OSError, NotImplementedError) as e:
            raise SamplerError("Unable to read process memory", resource="memory", cause=e) from e
