"""Content Hasher - streaming SHA-1 digest of the encoded artifact."""

import hashlib
from pathlib import Path
from typing import Any

from slideshow.core.config import Settings
from slideshow.core.errors import HashError
from slideshow.models.schemas import EncodedArtifact
from slideshow.utils.io_utils import iter_file_chunks


class ContentHasher:
    """Computes the digest the storage service verifies on upload."""

    def __init__(self, settings: Settings, logger: Any):
        self.settings = settings
        self.logger = logger

    def digest(self, file_path: Path) -> str:
        """
        Return the hex SHA-1 of ``file_path``, read in chunks.

        Raises:
            HashError: If the file cannot be read
        """
        sha1 = hashlib.sha1()
        try:
            for chunk in iter_file_chunks(file_path, self.settings.download_chunk_bytes):
                sha1.update(chunk)
        except OSError as e:
            raise HashError(f"could not read {file_path}: {e}", cause=e) from e
        return sha1.hexdigest()

    def describe(self, file_path: Path) -> EncodedArtifact:
        """Digest and size the artifact in one step."""
        sha1 = self.digest(file_path)
        try:
            size = file_path.stat().st_size
        except OSError as e:
            raise HashError(f"could not stat {file_path}: {e}", cause=e) from e

        self.logger.info(f"Artifact sha1={sha1} size={size}")
        return EncodedArtifact(path=file_path, size_bytes=size, sha1=sha1)
