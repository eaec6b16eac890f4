"""
Core data models for the feed cache system.

This module defines the field sets, the per-entry builder, the immutable
completed entry, artifacts and the configuration/result containers used
throughout the pipeline.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple


BASIC_FIELDS: Tuple[str, ...] = (
    "video_id",
    "channel_id",
    "title",
    "author",
    "published",
)

EXTENDED_FIELDS: Tuple[str, ...] = BASIC_FIELDS + (
    "updated",
    "description",
    "thumbnail",
    "views",
    "star_rating",
    "rating_count",
    "category",
    "keywords",
)

# Field order here is the canonical serialization order.
FIELD_SETS: Dict[str, Tuple[str, ...]] = {
    "basic": BASIC_FIELDS,
    "extended": EXTENDED_FIELDS,
}


def resolve_field_set(name: str) -> Tuple[str, ...]:
    """
    Look up a named field set.

    Args:
        name: Field set name ("basic" or "extended")

    Returns:
        Ordered tuple of field names

    Raises:
        ValueError: If the name is not a known field set
    """
    try:
        return FIELD_SETS[name]
    except KeyError:
        raise ValueError(f"Unknown field set '{name}' (expected one of: {', '.join(sorted(FIELD_SETS))})")


@dataclass(frozen=True)
class VideoEntry:
    """
    Completed, immutable video entry record.

    Attributes:
        fields: Ordered (name, value) pairs in field-set order. Optional fields
                that were never seen hold None.
    """
    fields: Tuple[Tuple[str, Optional[str]], ...]

    def get(self, name: str) -> Optional[str]:
        for field_name, value in self.fields:
            if field_name == name:
                return value
        return None

    @property
    def video_id(self) -> Optional[str]:
        return self.get("video_id")

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Return the record as an insertion-ordered dict in field-set order."""
        return {name: value for name, value in self.fields}


class EntryBuilder:
    """
    Mutable accumulator for one entry scope.

    Every field of the active field set starts unset. Setting a field that
    was already set overwrites it (last occurrence wins). Names outside the
    active field set are ignored so a basic field set can be driven by the
    same handlers that know about extended fields.
    """

    def __init__(self, field_names: Iterable[str] = BASIC_FIELDS):
        self.field_names: Tuple[str, ...] = tuple(field_names)
        self._values: Dict[str, Optional[str]] = {name: None for name in self.field_names}

    def set(self, name: str, value: Optional[str]) -> bool:
        """
        Set a field value.

        Returns:
            True if the field belongs to the active field set and was stored
        """
        if name not in self._values:
            return False
        self._values[name] = value
        return True

    def update(self, values: Dict[str, Optional[str]]) -> None:
        for name, value in values.items():
            self.set(name, value)

    def get(self, name: str) -> Optional[str]:
        return self._values.get(name)

    def missing(self, required: Iterable[str]) -> List[str]:
        """List required fields that are still unset, in the order given."""
        return [name for name in required if self._values.get(name) is None]

    def build(self) -> VideoEntry:
        return VideoEntry(fields=tuple((name, self._values[name]) for name in self.field_names))

    def finalize(self, required: Iterable[str]) -> Optional[VideoEntry]:
        """Return the completed entry, or None if any required field is unset."""
        if self.missing(required):
            return None
        return self.build()

    def __repr__(self) -> str:
        populated = sum(1 for value in self._values.values() if value is not None)
        return f"EntryBuilder({populated}/{len(self._values)} fields set)"


@dataclass(frozen=True)
class Artifact:
    """
    Content-addressed artifact produced from a completed entry.

    Attributes:
        digest: Hex digest of the serialized bytes (the artifact identity)
        path: Target file path ({destination}/{digest}.json)
        size_bytes: Length of the serialized bytes
        written: False when an identical artifact already existed
    """
    digest: str
    path: str
    size_bytes: int
    written: bool


@dataclass
class ProcessingConfig:
    """
    Configuration parameters for a batch run.

    Attributes:
        workers: Number of parallel worker processes (1 = sequential)
        field_set: Name of the field set to extract
        required_fields: Fields that must be present for an entry to be kept
        hash_algorithm: hashlib algorithm name used for content addresses
        progress_reporting_interval: Log progress every N completed files
    """
    workers: int = 4
    field_set: str = "basic"
    required_fields: Tuple[str, ...] = BASIC_FIELDS
    hash_algorithm: str = "sha256"
    progress_reporting_interval: int = 5

    def __post_init__(self):
        """Validate processing configuration."""
        if self.workers <= 0:
            raise ValueError("workers must be positive")
        if self.progress_reporting_interval <= 0:
            raise ValueError("progress_reporting_interval must be positive")
        field_names = resolve_field_set(self.field_set)
        self.required_fields = tuple(self.required_fields)
        unknown = [name for name in self.required_fields if name not in field_names]
        if unknown:
            raise ValueError(
                f"Required fields not in field set '{self.field_set}': {', '.join(unknown)}"
            )

    @property
    def field_names(self) -> Tuple[str, ...]:
        return resolve_field_set(self.field_set)


@dataclass
class ProcessingResult:
    """
    Results from a batch run.

    Attributes:
        files_processed: Total number of feed files processed
        files_successful: Number of files processed without a fatal error
        files_failed: Number of files that failed
        entries_written: Artifacts newly written
        entries_duplicate: Artifacts skipped because identical content already existed
        entries_dropped: Entry scopes dropped for missing required fields
        processing_time_seconds: Total processing time
        errors: Diagnostic messages (file + reason) for failed files
        performance_metrics: Dictionary of performance metrics
    """
    files_processed: int = 0
    files_successful: int = 0
    files_failed: int = 0
    entries_written: int = 0
    entries_duplicate: int = 0
    entries_dropped: int = 0
    processing_time_seconds: float = 0.0
    errors: List[str] = None
    performance_metrics: Dict[str, Any] = None

    def __post_init__(self):
        """Initialize default values for mutable fields."""
        if self.errors is None:
            self.errors = []
        if self.performance_metrics is None:
            self.performance_metrics = {}

    @property
    def success_rate(self) -> float:
        """Calculate the success rate as a percentage."""
        if self.files_processed == 0:
            return 0.0
        return (self.files_successful / self.files_processed) * 100.0


@dataclass
class WorkItem:
    """Work item for the batch processors: one feed file."""
    sequence: int
    source_path: str


@dataclass
class WorkResult:
    """Result from processing a work item."""
    sequence: int
    source_path: str
    success: bool
    error_stage: Optional[str] = None
    error_message: Optional[str] = None
    entries_found: int = 0
    entries_written: int = 0
    entries_duplicate: int = 0
    entries_dropped: int = 0
    processing_time: float = 0.0
    artifacts: List[str] = field(default_factory=list)
    quality_issues: List[str] = None  # Non-fatal per-entry problems (e.g. serialization failures)
