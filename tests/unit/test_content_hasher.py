"""Tests for Content Hasher service."""

import hashlib

import pytest

from slideshow.core.errors import HashError
from slideshow.services.content_hasher import ContentHasher


@pytest.fixture
def hasher(settings, logger):
    settings.download_chunk_bytes = 7
    return ContentHasher(settings, logger)


def test_digest_matches_whole_file_sha1(hasher, tmp_path):
    """Chunked hashing equals hashing the bytes in one go."""
    data = bytes(range(256)) * 41
    path = tmp_path / "output.mp4"
    path.write_bytes(data)

    assert hasher.digest(path) == hashlib.sha1(data).hexdigest()


def test_digest_of_empty_file(hasher, tmp_path):
    path = tmp_path / "empty.mp4"
    path.write_bytes(b"")

    assert hasher.digest(path) == "da39a3ee5e6b4b0d3255bfef95601890afd80709"


def test_digest_missing_file(hasher, tmp_path):
    with pytest.raises(HashError):
        hasher.digest(tmp_path / "missing.mp4")


def test_describe_reports_size_and_digest(hasher, tmp_path):
    path = tmp_path / "output.mp4"
    path.write_bytes(b"fake video content")

    artifact = hasher.describe(path)

    assert artifact.path == path
    assert artifact.size_bytes == len(b"fake video content")
    assert artifact.sha1 == hashlib.sha1(b"fake video content").hexdigest()
