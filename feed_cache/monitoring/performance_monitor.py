"""
Performance monitoring implementation for the feed cache system.

Tracks run timing, per-file outcomes and process resource usage (via psutil)
for a batch run.
"""

import logging
import threading

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import psutil

from ..interfaces import PerformanceMonitorInterface
from ..models import ProcessingResult, WorkResult


@dataclass
class PerformanceMetrics:
    """Container for performance metrics."""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    files_processed: int = 0
    files_successful: int = 0
    files_failed: int = 0
    entries_written: int = 0
    entries_duplicate: int = 0
    entries_dropped: int = 0

    # System resource metrics
    peak_memory_mb: float = 0.0
    avg_cpu_percent: float = 0.0

    # Throughput metrics
    files_per_second: float = 0.0
    entries_per_second: float = 0.0

    # Custom metrics
    custom_metrics: Dict[str, Any] = field(default_factory=dict)


class PerformanceMonitor(PerformanceMonitorInterface):
    """
    Performance monitor for a batch run.

    A background thread samples resident memory and CPU usage of the current
    process every sample_interval seconds while monitoring is active.
    """

    def __init__(self, sample_interval: float = 0.5):
        """
        Initialize the performance monitor.

        Args:
            sample_interval: Seconds between resource samples
        """
        self.logger = logging.getLogger(__name__)
        self.sample_interval = sample_interval
        self._metrics = PerformanceMetrics()
        self._is_monitoring = False
        self._monitoring_thread = None
        self._stop_monitoring_flag = threading.Event()
        self._process = psutil.Process()

        self._memory_samples: List[float] = []
        self._cpu_samples: List[float] = []

    @property
    def is_monitoring(self) -> bool:
        return self._is_monitoring

    def start_monitoring(self) -> None:
        """Start performance monitoring with resource tracking."""
        if self._is_monitoring:
            self.logger.warning("Performance monitoring already started")
            return

        self._metrics = PerformanceMetrics()
        self._metrics.start_time = datetime.now()
        self._memory_samples = []
        self._cpu_samples = []
        self._is_monitoring = True
        self._stop_monitoring_flag.clear()

        # Prime cpu_percent so the first sample is meaningful
        self._process.cpu_percent(interval=None)

        self._monitoring_thread = threading.Thread(target=self._monitor_resources, daemon=True)
        self._monitoring_thread.start()

        self.logger.debug("Performance monitoring started")

    def stop_monitoring(self) -> ProcessingResult:
        """Stop monitoring and return the collected totals."""
        if not self._is_monitoring:
            self.logger.warning("Performance monitoring not started")
            return ProcessingResult()

        self._metrics.end_time = datetime.now()
        self._is_monitoring = False
        self._stop_monitoring_flag.set()

        if self._monitoring_thread and self._monitoring_thread.is_alive():
            self._monitoring_thread.join(timeout=1.0)

        # Take a final sample so very short runs still report memory
        self._sample_once()
        self._calculate_final_metrics()

        result = ProcessingResult(
            files_processed=self._metrics.files_processed,
            files_successful=self._metrics.files_successful,
            files_failed=self._metrics.files_failed,
            entries_written=self._metrics.entries_written,
            entries_duplicate=self._metrics.entries_duplicate,
            entries_dropped=self._metrics.entries_dropped,
            processing_time_seconds=self._get_total_processing_time(),
            performance_metrics=self._get_performance_summary()
        )

        self.logger.debug(
            f"Performance monitoring stopped. Processed {result.files_processed} files "
            f"in {result.processing_time_seconds:.2f} seconds"
        )
        return result

    def record_metric(self, metric_name: str, value: Any) -> None:
        """Record a custom performance metric."""
        if not self._is_monitoring:
            return
        self._metrics.custom_metrics[metric_name] = value
        self.logger.debug(f"Recorded metric: {metric_name} = {value}")

    def record_work_result(self, result: WorkResult) -> None:
        """Record the outcome of processing a single feed file."""
        self._metrics.files_processed += 1
        if result.success:
            self._metrics.files_successful += 1
        else:
            self._metrics.files_failed += 1
        self._metrics.entries_written += result.entries_written
        self._metrics.entries_duplicate += result.entries_duplicate
        self._metrics.entries_dropped += result.entries_dropped

    def get_current_metrics(self) -> Dict[str, Any]:
        """Get current performance metrics snapshot."""
        if not self._is_monitoring:
            return {}

        elapsed_seconds = (datetime.now() - self._metrics.start_time).total_seconds()
        return {
            'elapsed_time_seconds': elapsed_seconds,
            'files_processed': self._metrics.files_processed,
            'files_successful': self._metrics.files_successful,
            'files_failed': self._metrics.files_failed,
            'files_per_second': self._metrics.files_processed / elapsed_seconds if elapsed_seconds > 0 else 0,
            'current_memory_mb': self._get_current_memory_mb(),
            'peak_memory_mb': self._metrics.peak_memory_mb,
            'avg_cpu_percent': self._get_avg_cpu_percent(),
            'custom_metrics': self._metrics.custom_metrics.copy()
        }

    def _monitor_resources(self) -> None:
        """Monitor system resources in background thread."""
        while not self._stop_monitoring_flag.is_set():
            try:
                self._sample_once()
            except psutil.Error as e:
                self.logger.warning(f"Error monitoring resources: {e}")
                break
            self._stop_monitoring_flag.wait(self.sample_interval)

    def _sample_once(self) -> None:
        memory_mb = self._get_current_memory_mb()
        self._memory_samples.append(memory_mb)
        if memory_mb > self._metrics.peak_memory_mb:
            self._metrics.peak_memory_mb = memory_mb
        self._cpu_samples.append(self._process.cpu_percent(interval=None))

    def _get_current_memory_mb(self) -> float:
        """Get current resident memory usage in MB."""
        return self._process.memory_info().rss / 1024 / 1024

    def _get_avg_cpu_percent(self) -> float:
        if not self._cpu_samples:
            return 0.0
        return sum(self._cpu_samples) / len(self._cpu_samples)

    def _calculate_final_metrics(self) -> None:
        total_time = self._get_total_processing_time()
        if total_time > 0:
            self._metrics.files_per_second = self._metrics.files_processed / total_time
            self._metrics.entries_per_second = self._metrics.entries_written / total_time
        self._metrics.avg_cpu_percent = self._get_avg_cpu_percent()

    def _get_total_processing_time(self) -> float:
        if not self._metrics.start_time or not self._metrics.end_time:
            return 0.0
        return (self._metrics.end_time - self._metrics.start_time).total_seconds()

    def _get_performance_summary(self) -> Dict[str, Any]:
        """Get comprehensive performance summary."""
        processed = self._metrics.files_processed
        return {
            'total_processing_time_seconds': self._get_total_processing_time(),
            'files_per_second': self._metrics.files_per_second,
            'entries_per_second': self._metrics.entries_per_second,
            'success_rate_percent': (self._metrics.files_successful / processed * 100) if processed > 0 else 0.0,
            'resource_usage': {
                'peak_memory_mb': self._metrics.peak_memory_mb,
                'avg_cpu_percent': self._metrics.avg_cpu_percent,
                'memory_samples_count': len(self._memory_samples),
                'cpu_samples_count': len(self._cpu_samples),
            },
            'custom_metrics': self._metrics.custom_metrics.copy()
        }
