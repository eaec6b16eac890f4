"""
Parallel Processing Coordinator - Multiprocessing Worker Pool Manager

Distributes feed files across a bounded pool of worker processes. Each worker
builds its own FeedFileProcessor once and then handles one file per task.

KEY FEATURES:
- Multiprocessing: N independent worker processes (isolated memory/interpreters)
- One file per task: no ordering or data dependency between files
- Failure isolation: a failing or crashing file becomes a failed WorkResult,
  sibling tasks keep running
- Shared resource: only the destination directory; racing writes of identical
  entries are benign because artifacts are content-addressed and moved into
  place atomically

ARCHITECTURE:
- Data flow: feed file -> Worker -> FeedParser -> RecordAssembler -> ArtifactWriter -> destination
- Results are aggregated in the main process
"""

import logging
import multiprocessing as mp
import time

from pathlib import Path
from typing import List, Optional, Union

from .feed_processor import FeedFileProcessor, aggregate_results
from ..interfaces import BatchProcessorInterface, PerformanceMonitorInterface
from ..models import ProcessingConfig, ProcessingResult, WorkItem, WorkResult


class ParallelCoordinator(BatchProcessorInterface):
    """
    Multiprocessing Pool Manager for parallel feed file processing.

    Worker Lifecycle:
    1. ParallelCoordinator creates mp.Pool(processes=num_workers)
    2. Each worker process runs _init_worker() once
       - Configures ERROR-level logging
       - Creates its own FeedFileProcessor (parser, assembler, writer)
    3. For each feed file, a worker runs _process_work_item()
    4. Results are collected in submission order and aggregated
    """

    def __init__(self, destination: Union[str, Path], config: Optional[ProcessingConfig] = None,
                 num_workers: Optional[int] = None, log_level: str = "ERROR",
                 monitor: Optional[PerformanceMonitorInterface] = None):
        """
        Initialize the parallel coordinator.

        Args:
            destination: Directory receiving artifacts
            config: Processing configuration shared by every worker
            num_workers: Number of worker processes (defaults to config.workers)
            log_level: Logging level for workers
            monitor: Optional monitor notified of every per-file result
        """
        self.logger = logging.getLogger(__name__)
        self.destination = str(destination)
        self.config = config or ProcessingConfig()
        self.num_workers = num_workers or self.config.workers
        self.log_level = log_level
        self.monitor = monitor

        self.logger.info(f"ParallelCoordinator initialized with {self.num_workers} workers")

    def process_feed_batch(self, work_items: List[WorkItem]) -> ProcessingResult:
        """
        Process feed files in parallel using multiprocessing.Pool.

        Args:
            work_items: Files to process, one task each

        Returns:
            ProcessingResult with per-file results in performance_metrics
        """
        if not work_items:
            return ProcessingResult()

        start_time = time.time()
        pool_size = min(self.num_workers, len(work_items))
        self.logger.info(f"Starting parallel processing of {len(work_items)} feed files with {pool_size} workers")

        results: List[WorkResult] = []
        successful = 0
        failed = 0
        with mp.Pool(
            processes=pool_size,
            initializer=_init_worker,
            initargs=(self.destination, self.config, self.log_level)
        ) as pool:

            async_results = [
                (work_item, pool.apply_async(_process_work_item, (work_item,)))
                for work_item in work_items
            ]

            for work_item, async_result in async_results:
                try:
                    result = async_result.get()
                except Exception as e:
                    self.logger.error(f"Worker process failed on {work_item.source_path}: {e}")
                    result = WorkResult(
                        sequence=work_item.sequence,
                        source_path=str(work_item.source_path),
                        success=False,
                        error_stage='worker_process',
                        error_message=str(e)
                    )
                results.append(result)
                if self.monitor is not None:
                    self.monitor.record_work_result(result)
                if result.success:
                    successful += 1
                else:
                    failed += 1

                if len(results) % self.config.progress_reporting_interval == 0 or len(results) == len(work_items):
                    self._log_progress(len(results), len(work_items), successful, failed, start_time)

        processing_time = time.time() - start_time
        processing_result = aggregate_results(results, processing_time, workers=pool_size)
        processing_result.performance_metrics['parallel_efficiency'] = self._calculate_parallel_efficiency(
            results, processing_time, pool_size
        )

        self.logger.info(
            f"Parallel processing completed: {processing_result.files_successful}/{processing_result.files_processed} "
            f"files successful in {processing_time:.2f}s, {processing_result.entries_written} artifacts written"
        )
        return processing_result

    def _log_progress(self, completed: int, total: int, successful: int, failed: int, start_time: float) -> None:
        """Log current progress with throughput metrics."""
        elapsed_time = time.time() - start_time
        if elapsed_time <= 0:
            return
        current_rate = completed / elapsed_time * 60  # per minute
        eta_minutes = (total - completed) / current_rate if current_rate > 0 else 0
        self.logger.info(
            f"Progress: {completed}/{total} ({completed / total * 100:.1f}%) - "
            f"Rate: {current_rate:.1f} files/min - "
            f"ETA: {eta_minutes:.1f} min - "
            f"Success: {successful}, Failed: {failed}"
        )

    @staticmethod
    def _calculate_parallel_efficiency(results: List[WorkResult], total_time: float, workers: int) -> float:
        """
        Ratio of actual to ideal speedup (0.0 to 1.0).

        Sequential time is the sum of per-file processing times; ideal speedup
        is the worker count.
        """
        if not results or total_time <= 0 or workers <= 0:
            return 0.0
        sequential_time = sum(r.processing_time for r in results)
        actual_speedup = sequential_time / total_time
        return min(actual_speedup / workers, 1.0)


# Global worker state (initialized once per worker process)
_worker_processor: Optional[FeedFileProcessor] = None


def _init_worker(destination: str, config: ProcessingConfig, log_level: str = "ERROR") -> None:
    """
    Initialize worker process with its own pipeline components.

    Runs once per worker process at startup.
    """
    global _worker_processor

    logging.basicConfig(level=getattr(logging, log_level.upper(), logging.ERROR))
    _worker_processor = FeedFileProcessor(destination, config)


def _process_work_item(work_item: WorkItem) -> WorkResult:
    """Process a single feed file in a worker process."""
    return _worker_processor.process(work_item)
