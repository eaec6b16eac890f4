"""
Custom exceptions for the feed cache system.

This module defines specific exception types for the error conditions that
can occur while reading feed documents, extracting entries and writing
content-addressed artifacts.
"""


class FeedCacheError(Exception):
    """Base exception for all feed cache related errors."""

    def __init__(self, message: str, source_path: str = None):
        """
        Initialize feed cache error.

        Args:
            message: Error description
            source_path: Optional path of the feed document that caused the error
        """
        super().__init__(message)
        self.source_path = source_path


class FeedParsingError(FeedCacheError):
    """Exception raised when a feed document is malformed or ends inside an open scope."""

    def __init__(self, message: str, source_path: str = None, line: int = None, column: int = None):
        """
        Initialize feed parsing error.

        Args:
            message: Error description
            source_path: Optional path of the feed document
            line: Line number reported by the parser, if known
            column: Column number reported by the parser, if known
        """
        super().__init__(message, source_path)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        base = super().__str__()
        location = []
        if self.source_path:
            location.append(str(self.source_path))
        if self.line is not None:
            location.append(f"line {self.line}")
        if self.column is not None:
            location.append(f"column {self.column}")
        return f"{base} ({', '.join(location)})" if location else base


class SourceReadError(FeedCacheError):
    """Exception raised when a source feed file cannot be read."""
    pass


class ArtifactWriteError(FeedCacheError):
    """Exception raised when an artifact cannot be written to the destination directory."""

    def __init__(self, message: str, source_path: str = None, target_path: str = None):
        super().__init__(message, source_path)
        self.target_path = target_path


class SerializationError(FeedCacheError):
    """Exception raised when a completed entry cannot be serialized."""

    def __init__(self, message: str, source_path: str = None, video_id: str = None):
        super().__init__(message, source_path)
        self.video_id = video_id


class ConfigurationError(FeedCacheError):
    """Exception raised when configuration is invalid or missing."""
    pass
