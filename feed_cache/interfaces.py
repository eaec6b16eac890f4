"""
Abstract interfaces and base classes for the feed cache system.

This module defines the contracts that the pipeline components implement
so batch processors, writers and parsers can be swapped or mocked in tests.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional

from .models import Artifact, EntryBuilder, ProcessingConfig, ProcessingResult, VideoEntry, WorkItem, WorkResult


class FeedParserInterface(ABC):
    """Abstract interface for feed entry extraction components."""

    @abstractmethod
    def iter_entries(self, source: bytes, source_path: Optional[str] = None) -> Iterator[EntryBuilder]:
        """
        Walk a feed document and yield one builder per entry scope, in document order.

        Args:
            source: Raw document bytes
            source_path: Optional path used in diagnostics

        Returns:
            Iterator of finished (possibly incomplete) entry builders

        Raises:
            FeedParsingError: If the document is malformed or ends inside an open scope
        """
        pass


class ArtifactWriterInterface(ABC):
    """Abstract interface for content-addressed persistence."""

    @abstractmethod
    def serialize(self, entry: VideoEntry) -> bytes:
        """
        Serialize a completed entry to its canonical byte form.

        Args:
            entry: Completed entry

        Returns:
            Canonical serialized bytes
        """
        pass

    @abstractmethod
    def content_hash(self, data: bytes) -> str:
        """
        Compute the content address of serialized bytes.

        Args:
            data: Serialized bytes

        Returns:
            Hex-encoded digest
        """
        pass

    @abstractmethod
    def write(self, entry: VideoEntry, source_path: Optional[str] = None) -> Artifact:
        """
        Persist a completed entry as {destination}/{digest}.json.

        Args:
            entry: Completed entry

        Returns:
            Artifact describing the target file
        """
        pass


class ConfigurationManagerInterface(ABC):
    """Abstract interface for configuration management components."""

    @abstractmethod
    def get_processing_config(self) -> ProcessingConfig:
        """
        Get processing configuration parameters.

        Returns:
            Processing configuration object
        """
        pass

    @abstractmethod
    def validate_configuration(self) -> bool:
        """
        Validate the loaded configuration.

        Returns:
            True if the configuration is usable
        """
        pass


class PerformanceMonitorInterface(ABC):
    """Abstract interface for performance monitoring components."""

    @abstractmethod
    def start_monitoring(self) -> None:
        """Start performance monitoring."""
        pass

    @abstractmethod
    def stop_monitoring(self) -> ProcessingResult:
        """
        Stop monitoring and return results.

        Returns:
            Processing results with performance metrics
        """
        pass

    @abstractmethod
    def record_metric(self, metric_name: str, value: Any) -> None:
        """
        Record a performance metric.

        Args:
            metric_name: Name of the metric
            value: Metric value
        """
        pass

    @abstractmethod
    def record_work_result(self, result: WorkResult) -> None:
        """Record the outcome of processing a single feed file."""
        pass

    @abstractmethod
    def get_current_metrics(self) -> Dict[str, Any]:
        """
        Get current performance metrics.

        Returns:
            Dictionary of current metric values
        """
        pass


class BatchProcessorInterface(ABC):
    """
    Abstract interface for batch feed processing strategies.

    Allows:
    - Parallel processing via ParallelCoordinator (production)
    - Sequential processing for testing and debugging
    - Mock processors for unit testing
    """

    @abstractmethod
    def process_feed_batch(self, work_items: List[WorkItem]) -> ProcessingResult:
        """
        Process a batch of feed files using the implementation's strategy.

        Args:
            work_items: Files to process, one per work item

        Returns:
            ProcessingResult with metrics and per-file results
        """
        pass
