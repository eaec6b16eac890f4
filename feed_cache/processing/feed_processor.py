"""
Per-file feed pipeline.

Runs one feed file through read -> parse -> assemble -> write and reports the
outcome as a WorkResult. Both batch processors (sequential and parallel) use
this class so a file is handled identically regardless of scheduling.
"""

import logging
import time

from pathlib import Path
from typing import List, Optional, Union

from ..assembly.record_assembler import RecordAssembler
from ..exceptions import (ArtifactWriteError, FeedCacheError, FeedParsingError,
                          SerializationError, SourceReadError)
from ..models import ProcessingConfig, ProcessingResult, VideoEntry, WorkItem, WorkResult
from ..parsing.feed_parser import FeedParser
from ..storage.artifact_writer import ArtifactWriter


class FeedFileProcessor:
    """
    Processes a single feed document into content-addressed artifacts.

    The whole document is parsed before the first artifact is written, so a
    malformed or truncated document produces no artifacts at all. Entries are
    then written in document order.

    Error stages reported in WorkResult.error_stage:
    - 'read': the source file could not be read
    - 'parsing': malformed XML or end of input inside an open scope
    - 'writing': the destination directory rejected a write
    - 'processing': any other FeedCacheError
    - 'unknown': anything else
    Serialization failures only skip the affected entry and are reported as
    quality issues on an otherwise successful result.
    """

    def __init__(self, destination: Union[str, Path], config: Optional[ProcessingConfig] = None):
        """
        Initialize the per-file pipeline.

        Args:
            destination: Directory receiving artifacts
            config: Processing configuration (field set, required fields, hash)
        """
        self.logger = logging.getLogger(__name__)
        self.config = config or ProcessingConfig()
        self.parser = FeedParser(self.config.field_names)
        self.assembler = RecordAssembler(self.config.required_fields, self.config.field_names)
        self.writer = ArtifactWriter(destination, self.config.hash_algorithm)

    def read_source(self, source_path: Union[str, Path]) -> bytes:
        try:
            return Path(source_path).read_bytes()
        except OSError as e:
            raise SourceReadError(f"Failed to read feed file: {e}", str(source_path)) from e

    def extract_entries(self, data: bytes, source_path: Optional[str] = None) -> List[VideoEntry]:
        """
        Parse a document and return its completed entries in document order.

        Raises:
            FeedParsingError: If the document is malformed or truncated
        """
        entries = []
        for builder in self.parser.parse_entries(data, source_path):
            entry = self.assembler.assemble(builder, source_path)
            if entry is not None:
                entries.append(entry)
        return entries

    def process(self, work_item: WorkItem) -> WorkResult:
        """Process one feed file. Never raises for per-file failures."""
        start_time = time.time()
        source_path = str(work_item.source_path)
        dropped_before = self.assembler.dropped_count
        found_before = self.parser.entries_seen

        result = WorkResult(sequence=work_item.sequence, source_path=source_path, success=False)
        quality_issues = []

        try:
            data = self.read_source(source_path)
            entries = self.extract_entries(data, source_path)
            result.entries_found = self.parser.entries_seen - found_before
            result.entries_dropped = self.assembler.dropped_count - dropped_before

            for entry in entries:
                try:
                    artifact = self.writer.write(entry, source_path)
                except SerializationError as e:
                    quality_issues.append(f"entry {e.video_id or '<unknown>'}: {e}")
                    self.logger.warning(f"Skipping entry in {source_path}: {e}")
                    continue
                result.artifacts.append(artifact.digest)
                if artifact.written:
                    result.entries_written += 1
                else:
                    result.entries_duplicate += 1

            result.success = True

        except Exception as e:
            result.entries_found = self.parser.entries_seen - found_before
            result.entries_dropped = self.assembler.dropped_count - dropped_before
            result.error_stage = self._error_stage(e)
            result.error_message = str(e)
            self.logger.error(f"Failed to process {source_path} ({result.error_stage}): {e}")

        result.quality_issues = quality_issues if quality_issues else None
        result.processing_time = time.time() - start_time
        return result

    @staticmethod
    def _error_stage(error: Exception) -> str:
        """Determine error stage from exception type."""
        if isinstance(error, SourceReadError):
            return 'read'
        if isinstance(error, FeedParsingError):
            return 'parsing'
        if isinstance(error, ArtifactWriteError):
            return 'writing'
        if isinstance(error, FeedCacheError):
            return 'processing'
        return 'unknown'


def aggregate_results(results: List[WorkResult], processing_time: float, workers: int) -> ProcessingResult:
    """
    Fold per-file results into a batch ProcessingResult.

    Args:
        results: WorkResults in any order
        processing_time: Wall-clock time for the batch
        workers: Worker count used (reported in the metrics)
    """
    ordered = sorted(results, key=lambda r: r.sequence)
    successful = [r for r in ordered if r.success]
    failed = [r for r in ordered if not r.success]

    return ProcessingResult(
        files_processed=len(ordered),
        files_successful=len(successful),
        files_failed=len(failed),
        entries_written=sum(r.entries_written for r in ordered),
        entries_duplicate=sum(r.entries_duplicate for r in ordered),
        entries_dropped=sum(r.entries_dropped for r in ordered),
        processing_time_seconds=processing_time,
        errors=[f"{r.source_path}: {r.error_stage}: {r.error_message}" for r in failed],
        performance_metrics={
            'files_per_second': len(ordered) / processing_time if processing_time > 0 else 0,
            'entries_found': sum(r.entries_found for r in ordered),
            'avg_processing_time_per_file': sum(r.processing_time for r in ordered) / len(ordered) if ordered else 0,
            'worker_count': workers,
            'individual_results': [
                {
                    'sequence': r.sequence,
                    'source_path': r.source_path,
                    'success': r.success,
                    'processing_time': r.processing_time,
                    'entries_found': r.entries_found,
                    'entries_written': r.entries_written,
                    'entries_duplicate': r.entries_duplicate,
                    'entries_dropped': r.entries_dropped,
                    'error_stage': r.error_stage,
                    'error_message': r.error_message,
                    'quality_issues': r.quality_issues,
                }
                for r in ordered
            ],
        },
    )
