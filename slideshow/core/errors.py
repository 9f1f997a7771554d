"""Stage-tagged pipeline errors."""

from enum import Enum
from typing import Optional


class PipelineStage(str, Enum):
    """Pipeline stage that produced an error."""

    FETCH = "fetch"
    PROBE = "probe"
    PLAN = "plan"
    ENCODE = "encode"
    HASH = "hash"
    UPLOAD = "upload"
    FILESYSTEM = "filesystem"


class PipelineError(Exception):
    """Base class for every failure raised by a pipeline stage."""

    stage: PipelineStage = PipelineStage.FILESYSTEM

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def label(self) -> str:
        return self.stage.value.capitalize()

    def __str__(self) -> str:
        return f"{self.label} failed: {self.message}"


class FetchError(PipelineError):
    """Download of a remote asset failed."""

    stage = PipelineStage.FETCH

    def __init__(
        self,
        url: Optional[str],
        message: str,
        cause: Optional[BaseException] = None,
        status_code: Optional[int] = None,
        retryable: Optional[bool] = None,
    ):
        super().__init__(f"{url}: {message}" if url else message, cause)
        self.url = url
        self.status_code = status_code
        self.retryable = retryable

    @property
    def transient(self) -> bool:
        """Client errors (4xx), malformed URLs and local write failures will not succeed on retry."""
        if self.retryable is not None:
            return self.retryable
        return self.status_code is None or self.status_code >= 500 or self.status_code == 429


class ProbeError(PipelineError):
    stage = PipelineStage.PROBE


class PlanError(PipelineError):
    stage = PipelineStage.PLAN


class EncodeError(PipelineError):
    """Encoder could not be started or exited non-zero."""

    stage = PipelineStage.ENCODE

    def __init__(
        self,
        message: str,
        exit_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.exit_code = exit_code


class HashError(PipelineError):
    stage = PipelineStage.HASH


class UploadError(PipelineError):
    """Any step of the storage upload protocol failed."""

    stage = PipelineStage.UPLOAD

    def __init__(
        self,
        step: str,
        message: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(f"{step}: {message}", cause)
        self.step = step
        self.status_code = status_code


class FileSystemError(PipelineError):
    stage = PipelineStage.FILESYSTEM
