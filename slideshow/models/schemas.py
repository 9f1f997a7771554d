"""Pydantic models and schemas for the slideshow pipeline."""

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# Enums
# ============================================================================


class PipelineState(str, Enum):
    """Lifecycle state of a single pipeline run."""

    IDLE = "idle"
    FETCHING = "fetching"
    PROBING = "probing"
    PLANNING = "planning"
    ENCODING = "encoding"
    HASHING = "hashing"
    UPLOADING = "uploading"
    CLEANING_UP = "cleaning_up"
    COMPLETED = "completed"
    FAILED = "failed"


# ============================================================================
# API Models
# ============================================================================


class GenerateVideoRequest(BaseModel):
    """Request body for POST /generate-video."""

    model_config = ConfigDict(populate_by_name=True)

    images: list[str] = Field(..., min_length=1, description="Image URLs, in display order")
    audio_url: str = Field(..., alias="audioUrl", description="Audio track URL; sets the video length")

    @field_validator("images")
    @classmethod
    def images_not_blank(cls, value: list[str]) -> list[str]:
        if any(not url.strip() for url in value):
            raise ValueError("image URLs must be non-empty strings")
        return value

    @field_validator("audio_url")
    @classmethod
    def audio_url_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("audioUrl must not be empty")
        return value

    def to_video_request(self) -> "VideoRequest":
        return VideoRequest(image_urls=tuple(self.images), audio_url=self.audio_url)


class GenerateVideoResponse(BaseModel):
    """Successful response for POST /generate-video."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field(default="success", description="Always 'success'")
    video_url: str = Field(..., alias="videoUrl", description="Public URL of the uploaded video")


class ErrorResponse(BaseModel):
    """Error body returned with 400 and 500 responses."""

    error: str = Field(..., description="Human-readable error message")
    stage: Optional[str] = Field(default=None, description="Pipeline stage that failed (500 only)")


# ============================================================================
# Pipeline Models
# ============================================================================


class VideoRequest(BaseModel):
    """An accepted request: ordered image URLs plus one audio URL."""

    model_config = ConfigDict(frozen=True)

    image_urls: tuple[str, ...] = Field(..., min_length=1, description="Image URLs in display order")
    audio_url: str = Field(..., description="Audio track URL")


class Workspace(BaseModel):
    """An exclusively-owned ephemeral directory for one request."""

    model_config = ConfigDict(frozen=True)

    path: Path = Field(..., description="Workspace directory")

    @property
    def audio_path(self) -> Path:
        return self.path / "audio.mp3"

    @property
    def concat_path(self) -> Path:
        return self.path / "ffmpeg_input.txt"

    @property
    def output_path(self) -> Path:
        return self.path / "output.mp4"

    def image_path(self, index: int) -> Path:
        return self.path / f"img{index}.jpg"


class ConcatEntry(BaseModel):
    """One image held on screen for a fixed duration."""

    model_config = ConfigDict(frozen=True)

    image_path: Path = Field(..., description="Local image path")
    duration_seconds: float = Field(..., gt=0, description="Display duration (3 decimal places)")


class ConcatPlan(BaseModel):
    """Ordered image/duration sequence consumed by the encoder."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[ConcatEntry, ...] = Field(..., min_length=1, description="One entry per image")
    total_duration_seconds: float = Field(..., gt=0, description="Probed audio duration")

    @property
    def planned_duration_seconds(self) -> float:
        return sum(entry.duration_seconds for entry in self.entries)


class EncodedArtifact(BaseModel):
    """The encoded video produced by a successful run."""

    path: Path = Field(..., description="Artifact path inside the workspace")
    size_bytes: int = Field(..., ge=0, description="Exact byte size")
    sha1: str = Field(..., description="Hex SHA-1 content digest")


class UploadResult(BaseModel):
    """Outcome of publishing an artifact to object storage."""

    url: str = Field(..., description="Publicly resolvable URL")
    object_name: str = Field(..., description="Object name within the bucket")
    file_id: Optional[str] = Field(default=None, description="Storage service file identifier")
