"""Tests for the FastAPI application."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from slideshow.api import routes_video
from slideshow.api.routes_video import get_pipeline_gate, get_settings
from slideshow.core.errors import EncodeError
from slideshow.main import app
from slideshow.models.schemas import UploadResult
from slideshow.pipelines.video_pipeline import PipelineGate, PipelineOrchestrator
from slideshow.storage.workspace import WorkspaceManager

VALID_BODY = {"images": ["https://x/a.jpg", "https://x/b.jpg"], "audioUrl": "https://x/audio.mp3"}


@pytest.fixture
def client(settings, logger):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_pipeline_gate] = lambda: PipelineGate(2, logger)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def workspaces():
    """Directories ever handed out during a request."""
    return []


@pytest.fixture
def stub_pipeline(monkeypatch, settings, workspaces):
    """Replace network and ffmpeg stages; keep the real workspace and plan/hash stages."""
    encoder = MagicMock()
    encoder.encode.side_effect = lambda plan, audio, output, duration: output.write_bytes(b"video")
    uploader = MagicMock()
    uploader.upload.return_value = UploadResult(
        url="https://f005.backblazeb2.com/file/my-bucket/videos/abc.mp4", object_name="videos/abc.mp4"
    )

    def fetch_all(request, workspace):
        workspaces.append(workspace.path)
        workspace.audio_path.write_bytes(b"audio")
        paths = [workspace.image_path(i) for i in range(len(request.image_urls))]
        for path in paths:
            path.write_bytes(b"img")
        return paths

    fetcher = MagicMock()
    fetcher.fetch_all.side_effect = fetch_all
    prober = MagicMock()
    prober.probe.return_value = 10.0

    def factory(settings, logger):
        return PipelineOrchestrator(
            settings,
            logger,
            workspace_manager=WorkspaceManager(settings, logger),
            fetcher=fetcher,
            prober=prober,
            encoder=encoder,
            uploader=uploader,
        )

    monkeypatch.setattr(routes_video, "PipelineOrchestrator", factory)
    return {"encoder": encoder, "uploader": uploader, "fetcher": fetcher}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_generate_video_success(client, stub_pipeline, workspaces):
    response = client.post("/generate-video", json=VALID_BODY)

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "videoUrl": "https://f005.backblazeb2.com/file/my-bucket/videos/abc.mp4",
    }
    assert len(workspaces) == 1
    assert not workspaces[0].exists()


@pytest.mark.parametrize(
    "body,message",
    [
        ({"images": [], "audioUrl": "https://x/audio.mp3"}, "`images` must be a non-empty array"),
        ({"audioUrl": "https://x/audio.mp3"}, "`images` must be a non-empty array"),
        ({"images": "https://x/a.jpg", "audioUrl": "https://x/audio.mp3"}, "`images` must be a non-empty array"),
        ({"images": [42], "audioUrl": "https://x/audio.mp3"}, "`images` must be a non-empty array"),
        ({"images": ["https://x/a.jpg"]}, "`audioUrl` is required"),
        ({"images": ["https://x/a.jpg"], "audioUrl": ""}, "`audioUrl` is required"),
    ],
)
def test_generate_video_rejects_bad_input(client, stub_pipeline, settings, workspaces, body, message):
    """Malformed bodies are 400s and never touch the pipeline or the filesystem."""
    response = client.post("/generate-video", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": message}
    stub_pipeline["fetcher"].fetch_all.assert_not_called()
    assert workspaces == []
    assert not any(Path(settings.workspace_root).glob("*"))


def test_generate_video_rejects_non_json(client, stub_pipeline):
    response = client.post("/generate-video", content=b"not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert "error" in response.json()


def test_encode_failure_is_500_and_cleans_up(client, stub_pipeline, workspaces):
    stub_pipeline["encoder"].encode.side_effect = EncodeError("ffmpeg exited 1: Invalid data", exit_code=1)

    response = client.post("/generate-video", json=VALID_BODY)

    assert response.status_code == 500
    body = response.json()
    assert body["stage"] == "encode"
    assert body["error"].startswith("Encode failed:")
    assert len(workspaces) == 1
    assert not workspaces[0].exists()
    stub_pipeline["uploader"].upload.assert_not_called()
