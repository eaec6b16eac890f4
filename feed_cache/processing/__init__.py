"""
Processing module for the feed cache system.

Contains the per-file pipeline, the sequential and parallel batch
processors and the directory-level batch runner.
"""

from .feed_processor import FeedFileProcessor, aggregate_results
from .sequential_processor import SequentialProcessor
from .parallel_coordinator import ParallelCoordinator
from .batch_runner import FeedBatchRunner

__all__ = [
    'FeedFileProcessor',
    'aggregate_results',
    'SequentialProcessor',
    'ParallelCoordinator',
    'FeedBatchRunner'
]
