"""
Sequential Feed Processor - Single-process processing for testing and debugging.

Implements the same BatchProcessorInterface as ParallelCoordinator but processes
files one at a time in the main process. Useful for:
- Unit and integration testing (no multiprocessing complexity)
- Debugging (plain stack traces, logs from the main process)
- Baseline for comparing against parallel runs
"""

import logging
import time

from pathlib import Path
from typing import List, Optional, Union

from .feed_processor import FeedFileProcessor, aggregate_results
from ..interfaces import BatchProcessorInterface, PerformanceMonitorInterface
from ..models import ProcessingConfig, ProcessingResult, WorkItem


class SequentialProcessor(BatchProcessorInterface):
    """
    Single-process feed processor.

    Runs the same FeedFileProcessor pipeline the parallel workers use, on one
    file at a time, in work item order.
    """

    def __init__(self, destination: Union[str, Path], config: Optional[ProcessingConfig] = None,
                 monitor: Optional[PerformanceMonitorInterface] = None):
        """
        Initialize the sequential processor.

        Args:
            destination: Directory receiving artifacts
            config: Processing configuration
            monitor: Optional monitor notified of every per-file result
        """
        self.logger = logging.getLogger(__name__)
        self.config = config or ProcessingConfig(workers=1)
        self.file_processor = FeedFileProcessor(destination, self.config)
        self.monitor = monitor

    def process_feed_batch(self, work_items: List[WorkItem]) -> ProcessingResult:
        if not work_items:
            return ProcessingResult()

        start_time = time.time()
        self.logger.info(f"Starting sequential processing of {len(work_items)} feed files")

        results = []
        for work_item in work_items:
            result = self.file_processor.process(work_item)
            results.append(result)
            if self.monitor is not None:
                self.monitor.record_work_result(result)
            if len(results) % self.config.progress_reporting_interval == 0 or len(results) == len(work_items):
                self.logger.info(f"Progress: {len(results)}/{len(work_items)} files")

        processing_result = aggregate_results(results, time.time() - start_time, workers=1)
        self.logger.info(
            f"Sequential processing completed: {processing_result.files_successful}/{processing_result.files_processed} "
            f"files successful, {processing_result.entries_written} artifacts written"
        )
        return processing_result
