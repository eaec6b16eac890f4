"""
Content-addressed artifact writer.

Each completed entry is serialized to canonical JSON, hashed, and stored as
{destination}/{digest}.json. The digest is the artifact's identity, so two
entries that serialize to the same bytes share one file and re-running a
batch over the same feeds changes nothing on disk.
"""

import hashlib
import json
import logging
import os
import tempfile

from pathlib import Path
from typing import Optional, Union

from ..exceptions import ArtifactWriteError, ConfigurationError, SerializationError
from ..interfaces import ArtifactWriterInterface
from ..models import Artifact, VideoEntry


ARTIFACT_SUFFIX = ".json"


class ArtifactWriter(ArtifactWriterInterface):
    """
    Writes completed entries as content-addressed JSON files.

    Canonical form:
    - Keys in field-set order (VideoEntry preserves it), so key order never
      depends on how the document ordered its elements
    - json.dumps default separators, non-ASCII kept as-is, encoded as UTF-8
    - Unset optional fields serialize as null

    Writes are idempotent: when the target already exists the write is
    skipped. New files are written to a temporary file in the destination
    directory and moved into place with os.replace(), so a worker racing on
    an identical entry never sees a partially written artifact.
    """

    def __init__(self, destination: Union[str, Path], hash_algorithm: str = "sha256"):
        """
        Initialize the artifact writer.

        Args:
            destination: Directory receiving the artifacts
            hash_algorithm: Any hashlib algorithm name (default sha256)

        Raises:
            ConfigurationError: If the hash algorithm is not available
        """
        self.logger = logging.getLogger(__name__)
        self.destination = Path(destination)
        try:
            digest_size = hashlib.new(hash_algorithm).digest_size
        except ValueError:
            raise ConfigurationError(f"Unsupported hash algorithm: {hash_algorithm}")
        if digest_size == 0:
            # shake_* digests need an explicit length
            raise ConfigurationError(f"Hash algorithm has no fixed digest size: {hash_algorithm}")
        self.hash_algorithm = hash_algorithm

        self.written_count = 0
        self.skipped_count = 0

    def serialize(self, entry: VideoEntry) -> bytes:
        try:
            return json.dumps(entry.to_dict(), ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize entry: {e}", video_id=entry.video_id) from e

    def content_hash(self, data: bytes) -> str:
        return hashlib.new(self.hash_algorithm, data).hexdigest()

    def target_path(self, digest: str) -> Path:
        return self.destination / f"{digest}{ARTIFACT_SUFFIX}"

    def write(self, entry: VideoEntry, source_path: Optional[str] = None) -> Artifact:
        """
        Persist a completed entry.

        Args:
            entry: Completed entry
            source_path: Optional feed path for diagnostics

        Returns:
            Artifact with written=False when identical content was already on disk

        Raises:
            SerializationError: If the entry cannot be serialized
            ArtifactWriteError: If the destination cannot be written
        """
        data = self.serialize(entry)
        digest = self.content_hash(data)
        target = self.target_path(digest)

        if target.exists():
            self.skipped_count += 1
            self.logger.debug(f"Artifact {target.name} already exists, skipping write")
            return Artifact(digest=digest, path=str(target), size_bytes=len(data), written=False)

        try:
            self._write_atomic(target, data)
        except OSError as e:
            raise ArtifactWriteError(
                f"Failed to write artifact {target}: {e}", source_path, str(target)
            ) from e

        self.written_count += 1
        self.logger.debug(f"Wrote artifact {target.name} ({len(data)} bytes) for video {entry.video_id}")
        return Artifact(digest=digest, path=str(target), size_bytes=len(data), written=True)

    def _write_atomic(self, target: Path, data: bytes) -> None:
        """Write data to a temp file beside target, then move it into place."""
        fd, tmp_name = tempfile.mkstemp(prefix=".tmp-", suffix=ARTIFACT_SUFFIX, dir=str(target.parent))
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            # mkstemp creates 0600 files
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, target)
        except OSError:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise
