"""I/O utility functions for streaming file operations."""

# This module is part of slideshow.utils package

from pathlib import Path
from typing import Iterable, Iterator


def write_chunks(chunks: Iterable[bytes], dest: Path) -> int:
    """
    Write an iterable of byte chunks to a file without buffering it whole.

    Args:
        chunks: Byte chunks (e.g. from a streamed HTTP response)
        dest: Destination file path

    Returns:
        Number of bytes written.
    """
    total = 0
    with open(dest, "wb") as f:
        for chunk in chunks:
            # Keep-alive chunks are empty
            if not chunk:
                continue
            f.write(chunk)
            total += len(chunk)
    return total


def iter_file_chunks(path: Path, chunk_size: int = 1024 * 1024) -> Iterator[bytes]:
    """
    Yield a file's contents in fixed-size chunks.

    Args:
        path: File to read
        chunk_size: Bytes per chunk

    Yields:
        Successive chunks until EOF.
    """
    with open(path, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            yield chunk


def to_megabytes(num_bytes: float) -> float:
    return num_bytes / 1024 / 1024
