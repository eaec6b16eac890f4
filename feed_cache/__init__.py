"""
YouTube Feed Cache

Extracts video entries from YouTube Atom feed documents and stores each
complete entry as a content-addressed JSON artifact.
"""

__version__ = "1.0.0"

# Import core models and interfaces for easy access
from .models import (
    BASIC_FIELDS,
    EXTENDED_FIELDS,
    FIELD_SETS,
    VideoEntry,
    EntryBuilder,
    Artifact,
    ProcessingConfig,
    ProcessingResult,
    WorkItem,
    WorkResult
)

from .interfaces import (
    FeedParserInterface,
    ArtifactWriterInterface,
    ConfigurationManagerInterface,
    PerformanceMonitorInterface,
    BatchProcessorInterface
)

from .exceptions import (
    FeedCacheError,
    FeedParsingError,
    SourceReadError,
    ArtifactWriteError,
    SerializationError,
    ConfigurationError
)

__all__ = [
    # Core models
    "BASIC_FIELDS",
    "EXTENDED_FIELDS",
    "FIELD_SETS",
    "VideoEntry",
    "EntryBuilder",
    "Artifact",
    "ProcessingConfig",
    "ProcessingResult",
    "WorkItem",
    "WorkResult",

    # Interfaces
    "FeedParserInterface",
    "ArtifactWriterInterface",
    "ConfigurationManagerInterface",
    "PerformanceMonitorInterface",
    "BatchProcessorInterface",

    # Exceptions
    "FeedCacheError",
    "FeedParsingError",
    "SourceReadError",
    "ArtifactWriteError",
    "SerializationError",
    "ConfigurationError"
]
