"""Shared pytest fixtures and configuration."""

import pytest

from slideshow.core.config import Settings
from slideshow.core.logging_config import get_logger


@pytest.fixture
def settings(tmp_path):
    """Create test settings instance with an isolated workspace root."""
    return Settings(
        workspace_root=str(tmp_path / "workspaces"),
        retry_delays_seconds=[0.0],
        resource_poll_interval_seconds=0.05,
        b2_key_id="key-id",
        b2_application_key="app-key",
        b2_bucket_id="bucket-id",
        b2_bucket_name="my-bucket",
    )


@pytest.fixture
def logger():
    """Create test logger instance."""
    return get_logger(__name__)
