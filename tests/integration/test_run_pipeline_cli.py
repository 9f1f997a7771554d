"""Tests for the command-line entrypoint."""

from unittest.mock import MagicMock, patch

from slideshow.core.errors import ProbeError
from slideshow.models.schemas import UploadResult


@patch("slideshow.pipelines.run_pipeline.PipelineOrchestrator")
def test_cli_prints_url(mock_orchestrator_class, capsys):
    from slideshow.pipelines.run_pipeline import main

    mock_orchestrator = MagicMock()
    mock_orchestrator.run.return_value = UploadResult(
        url="https://f005.backblazeb2.com/file/my-bucket/videos/abc.mp4", object_name="videos/abc.mp4"
    )
    mock_orchestrator_class.return_value = mock_orchestrator

    exit_code = main(["--image", "https://x/a.jpg", "--image", "https://x/b.jpg", "--audio", "https://x/audio.mp3"])

    assert exit_code == 0
    request = mock_orchestrator.run.call_args.args[0]
    assert request.image_urls == ("https://x/a.jpg", "https://x/b.jpg")
    assert request.audio_url == "https://x/audio.mp3"
    assert capsys.readouterr().out.strip() == "https://f005.backblazeb2.com/file/my-bucket/videos/abc.mp4"


@patch("slideshow.pipelines.run_pipeline.PipelineOrchestrator")
def test_cli_pipeline_failure(mock_orchestrator_class):
    from slideshow.pipelines.run_pipeline import main

    mock_orchestrator_class.return_value.run.side_effect = ProbeError("could not parse audio duration")

    assert main(["--image", "https://x/a.jpg", "--audio", "https://x/audio.mp3"]) == 1


@patch("slideshow.pipelines.run_pipeline.PipelineOrchestrator")
def test_cli_requires_images_and_audio(mock_orchestrator_class):
    from slideshow.pipelines.run_pipeline import main

    assert main(["--audio", "https://x/audio.mp3"]) == 2
    assert main(["--image", "https://x/a.jpg"]) == 2
    mock_orchestrator_class.assert_not_called()
