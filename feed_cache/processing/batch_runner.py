"""
Batch driver for a directory of feed documents.

Enumerates the source directory, prepares the destination, picks a
processing strategy (sequential for one worker, a process pool otherwise)
and wraps the run with the performance monitor.
"""

import json
import logging

from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from .parallel_coordinator import ParallelCoordinator
from .sequential_processor import SequentialProcessor
from ..exceptions import ArtifactWriteError, ConfigurationError
from ..interfaces import BatchProcessorInterface
from ..models import ProcessingConfig, ProcessingResult, WorkItem
from ..monitoring.performance_monitor import PerformanceMonitor


class FeedBatchRunner:
    """
    Runs every feed file in a source directory through the pipeline.

    Only regular files directly inside the source directory are processed;
    subdirectories are ignored and file extensions are not checked. Files are
    processed in name order so logs and metrics are deterministic.
    """

    def __init__(self, source_dir: Union[str, Path], destination_dir: Union[str, Path],
                 config: Optional[ProcessingConfig] = None, worker_log_level: str = "ERROR",
                 metrics_file: Optional[Union[str, Path]] = None):
        """
        Initialize the batch runner.

        Args:
            source_dir: Directory containing feed documents
            destination_dir: Directory receiving artifacts (created if missing)
            config: Processing configuration
            worker_log_level: Logging level used inside worker processes
            metrics_file: Optional path for a JSON run summary
        """
        self.logger = logging.getLogger(__name__)
        self.source_dir = Path(source_dir)
        self.destination_dir = Path(destination_dir)
        self.config = config or ProcessingConfig()
        self.worker_log_level = worker_log_level
        self.metrics_file = Path(metrics_file) if metrics_file else None

    def discover_feed_files(self) -> List[Path]:
        """
        List the feed files to process.

        Raises:
            ConfigurationError: If the source directory does not exist
        """
        if not self.source_dir.is_dir():
            raise ConfigurationError(f"Source directory does not exist: {self.source_dir}")
        return sorted(p for p in self.source_dir.iterdir() if p.is_file())

    def prepare_destination(self) -> None:
        """
        Create the destination directory if needed.

        Raises:
            ArtifactWriteError: If the directory cannot be created
        """
        try:
            self.destination_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactWriteError(
                f"Cannot create destination directory: {e}", target_path=str(self.destination_dir)
            ) from e
        if not self.destination_dir.is_dir():
            raise ArtifactWriteError(
                "Destination is not a directory", target_path=str(self.destination_dir)
            )

    def create_processor(self, monitor: Optional[PerformanceMonitor] = None) -> BatchProcessorInterface:
        if self.config.workers == 1:
            return SequentialProcessor(self.destination_dir, self.config, monitor=monitor)
        return ParallelCoordinator(
            self.destination_dir,
            self.config,
            num_workers=self.config.workers,
            log_level=self.worker_log_level,
            monitor=monitor
        )

    def run(self) -> ProcessingResult:
        """
        Process the whole source directory.

        Per-file failures are reported in the result and never abort the run.

        Raises:
            ConfigurationError: If the source directory is missing
            ArtifactWriteError: If the destination cannot be prepared
        """
        feed_files = self.discover_feed_files()
        self.prepare_destination()

        self.logger.info(
            f"Found {len(feed_files)} feed files in {self.source_dir}, "
            f"writing artifacts to {self.destination_dir} with {self.config.workers} workers"
        )
        if not feed_files:
            self.logger.warning(f"No feed files found in {self.source_dir}")

        work_items = [WorkItem(sequence=i, source_path=str(path)) for i, path in enumerate(feed_files)]

        monitor = PerformanceMonitor()
        monitor.start_monitoring()
        monitor.record_metric('field_set', self.config.field_set)
        monitor.record_metric('hash_algorithm', self.config.hash_algorithm)
        try:
            result = self.create_processor(monitor).process_feed_batch(work_items)
        finally:
            monitor_result = monitor.stop_monitoring()

        result.performance_metrics.update(monitor_result.performance_metrics)
        if not result.processing_time_seconds:
            result.processing_time_seconds = monitor_result.processing_time_seconds

        self._log_summary(result)
        if self.metrics_file is not None:
            self._save_metrics(result)
        return result

    def _log_summary(self, result: ProcessingResult) -> None:
        self.logger.info(
            f"Run complete: {result.files_successful}/{result.files_processed} files successful "
            f"({result.success_rate:.1f}%), {result.entries_written} artifacts written, "
            f"{result.entries_duplicate} already present, {result.entries_dropped} incomplete entries dropped "
            f"in {result.processing_time_seconds:.2f}s"
        )
        if result.files_failed:
            stages = Counter(
                r['error_stage'] for r in result.performance_metrics.get('individual_results', [])
                if not r['success']
            )
            self.logger.warning(
                f"{result.files_failed} files failed: "
                + ", ".join(f"{stage}={count}" for stage, count in sorted(stages.items()))
            )
            for error in result.errors:
                self.logger.warning(f"  {error}")

    def _save_metrics(self, result: ProcessingResult) -> None:
        """
        Save the run summary to a JSON file.

        Includes:
        - Run configuration
        - Overall run statistics
        - Failure list
        - Per-file breakdown
        """
        metrics = {
            'run_timestamp': datetime.now().isoformat(),
            'source_dir': str(self.source_dir),
            'destination_dir': str(self.destination_dir),
            'workers': self.config.workers,
            'field_set': self.config.field_set,
            'required_fields': list(self.config.required_fields),
            'hash_algorithm': self.config.hash_algorithm,
            'files_processed': result.files_processed,
            'files_successful': result.files_successful,
            'files_failed': result.files_failed,
            'success_rate': result.success_rate,
            'entries_written': result.entries_written,
            'entries_duplicate': result.entries_duplicate,
            'entries_dropped': result.entries_dropped,
            'total_duration_seconds': result.processing_time_seconds,
            'errors': result.errors,
            'performance_metrics': result.performance_metrics,
        }
        try:
            self.metrics_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.metrics_file, 'w', encoding='utf-8') as f:
                json.dump(metrics, f, indent=2, default=str)
            self.logger.info(f"Metrics saved to: {self.metrics_file}")
        except OSError as e:
            self.logger.error(f"Failed to save metrics: {e}")
