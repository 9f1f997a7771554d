"""Utility functions for the Slideshow Video Service."""

from slideshow.utils.io_utils import iter_file_chunks, write_chunks
from slideshow.utils.parallel_executor import ParallelExecutor
from slideshow.utils.retry import call_with_retry

__all__ = [
    "iter_file_chunks",
    "write_chunks",
    "ParallelExecutor",
    "call_with_retry",
]
