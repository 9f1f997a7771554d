"""FastAPI routes for slideshow generation."""

from functools import lru_cache

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from slideshow.core.config import Settings
from slideshow.core.errors import PipelineError
from slideshow.core.logging_config import get_logger
from slideshow.models.schemas import ErrorResponse, GenerateVideoRequest, GenerateVideoResponse
from slideshow.pipelines.video_pipeline import PipelineGate, PipelineOrchestrator

router = APIRouter(tags=["video"])


def get_settings() -> Settings:
    """Settings dependency (overridable in tests)."""
    from slideshow.core.config import settings

    return settings


@lru_cache(maxsize=1)
def get_pipeline_gate() -> PipelineGate:
    """Process-wide pipeline concurrency limit."""
    settings = get_settings()
    return PipelineGate(settings.max_concurrent_pipelines, get_logger(__name__))


@router.post(
    "/generate-video",
    response_model=GenerateVideoResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def generate_video(
    request: GenerateVideoRequest,
    settings: Settings = Depends(get_settings),
    gate: PipelineGate = Depends(get_pipeline_gate),
):
    """
    Build a portrait slideshow from the images, sized to the audio, and upload it.

    Pipeline:
    fetch → probe → plan → encode → hash → upload (workspace always removed)
    """
    logger = get_logger(__name__)
    orchestrator = PipelineOrchestrator(settings, logger)

    try:
        with gate.slot():
            result = orchestrator.run(request.to_video_request())
    except PipelineError as e:
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error=str(e), stage=e.stage.value).model_dump(),
        )

    return GenerateVideoResponse(status="success", videoUrl=result.url)
