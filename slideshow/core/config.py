"""Application configuration using pydantic-settings."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via environment variables or a .env file.
    See .env.example for a template.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================================================
    # Application Settings
    # ========================================================================
    app_name: str = Field(default="Slideshow Video Service", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_file: Optional[str] = Field(default=None, description="Optional log file path (rotated)")
    host: str = Field(default="0.0.0.0", description="Interface the HTTP server binds to")
    port: int = Field(default=3000, description="Listening port (PORT env var)")

    # ========================================================================
    # Object Storage (Backblaze B2)
    # ========================================================================
    b2_key_id: Optional[str] = Field(default=None, description="B2 application key ID")
    b2_application_key: Optional[str] = Field(default=None, description="B2 application key")
    b2_bucket_id: Optional[str] = Field(default=None, description="Bucket ID used to request upload URLs")
    b2_bucket_name: Optional[str] = Field(default=None, description="Bucket name used in public URLs")
    b2_api_url: str = Field(
        default="https://api.backblazeb2.com", description="B2 account authorization endpoint"
    )
    b2_object_prefix: str = Field(default="videos", description="Object name prefix for uploaded videos")

    # ========================================================================
    # Encoder Settings
    # ========================================================================
    ffmpeg_binary: Optional[str] = Field(
        default=None,
        description="Path to the ffmpeg binary. When unset, the binary bundled with imageio-ffmpeg is used.",
    )
    video_width: int = Field(default=1080, description="Output width in pixels (portrait)")
    video_height: int = Field(default=1920, description="Output height in pixels (portrait)")
    video_crf: int = Field(default=20, description="x264 constant rate factor")
    encoder_threads: int = Field(default=1, description="Encoder thread budget (bounds peak memory)")
    resource_poll_interval_seconds: float = Field(
        default=5.0, description="Interval between encoder memory/CPU samples (0 disables sampling)"
    )
    probe_timeout_seconds: float = Field(default=60.0, description="Timeout for the duration probe")
    encode_timeout_seconds: Optional[float] = Field(
        default=None, description="Optional encoder timeout; unbounded when unset"
    )

    # ========================================================================
    # Workspace Settings
    # ========================================================================
    workspace_root: Optional[str] = Field(
        default=None, description="Parent directory for per-request workspaces (default: system temp)"
    )
    workspace_prefix: str = Field(default="video-", description="Workspace directory name prefix")

    # ========================================================================
    # Network Settings
    # ========================================================================
    download_timeout_seconds: float = Field(default=60.0, description="Per-request download timeout")
    download_chunk_bytes: int = Field(default=1024 * 1024, description="Streaming chunk size for downloads and hashing")
    upload_timeout_seconds: float = Field(default=300.0, description="Timeout for each storage request")
    fetch_max_attempts: int = Field(default=3, description="Attempts per asset download (1 disables retry)")
    upload_max_attempts: int = Field(default=3, description="Attempts per upload (1 disables retry)")
    retry_delays_seconds: list[float] = Field(
        default=[2.0, 5.0, 10.0], description="Delay before each retry attempt"
    )

    # ========================================================================
    # Parallelism Settings
    # ========================================================================
    max_parallel_downloads: int = Field(
        default=4, description="Maximum concurrent asset downloads within a single request"
    )
    max_concurrent_pipelines: int = Field(
        default=2, description="Maximum pipelines (and encoder subprocesses) running at once"
    )


# Global settings instance
settings = Settings()
