"""Content-addressed artifact storage."""

from .artifact_writer import ArtifactWriter

__all__ = ['ArtifactWriter']
