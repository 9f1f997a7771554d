"""Slideshow pipeline orchestrator - fetch → probe → plan → encode → hash → upload → cleanup."""

import threading
import time
import uuid
from contextlib import contextmanager
from functools import partial
from typing import Any, Callable, Iterator, Optional

from slideshow.core.config import Settings
from slideshow.core.errors import EncodeError, FetchError, HashError, PipelineError, PlanError, ProbeError, UploadError
from slideshow.core.logging_config import log_memory
from slideshow.models.schemas import PipelineState, UploadResult, VideoRequest, Workspace
from slideshow.services.artifact_uploader import ArtifactUploader
from slideshow.services.asset_fetcher import AssetFetcher
from slideshow.services.concat_plan_builder import ConcatPlanBuilder
from slideshow.services.content_hasher import ContentHasher
from slideshow.services.duration_prober import DurationProber
from slideshow.services.encoder import EncoderInvoker
from slideshow.storage.workspace import WorkspaceManager
from slideshow.utils.error_handler import format_error_message, get_fallback_suggestion


class PipelineGate:
    """Caps how many pipelines (and therefore ffmpeg processes) run at once."""

    def __init__(self, max_concurrent: int, logger: Any):
        self.max_concurrent = max(1, max_concurrent)
        self.logger = logger
        self._semaphore = threading.BoundedSemaphore(self.max_concurrent)

    @contextmanager
    def slot(self) -> Iterator[None]:
        if not self._semaphore.acquire(blocking=False):
            self.logger.info(f"All {self.max_concurrent} pipeline slots busy, waiting...")
            self._semaphore.acquire()
        try:
            yield
        finally:
            self._semaphore.release()


class PipelineOrchestrator:
    """
    Runs one VideoRequest through every stage.

    One instance serves exactly one request. Any stage failure moves the run
    to CLEANING_UP and then FAILED; success moves it to CLEANING_UP and then
    COMPLETED. The workspace is released exactly once on every path.
    """

    def __init__(
        self,
        settings: Settings,
        logger: Any,
        workspace_manager: Optional[WorkspaceManager] = None,
        fetcher: Optional[AssetFetcher] = None,
        prober: Optional[DurationProber] = None,
        planner: Optional[ConcatPlanBuilder] = None,
        encoder: Optional[EncoderInvoker] = None,
        hasher: Optional[ContentHasher] = None,
        uploader: Optional[ArtifactUploader] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            settings: Application settings
            logger: Logger instance
            workspace_manager, fetcher, prober, planner, encoder, hasher, uploader:
                Optional stage implementations; defaults are built from settings
        """
        self.request_id = f"req_{uuid.uuid4().hex[:12]}"
        self.settings = settings
        self.logger = logger.bind(request_id=self.request_id)
        logger = self.logger
        self.workspace_manager = workspace_manager or WorkspaceManager(settings, logger)
        self.fetcher = fetcher or AssetFetcher(settings, logger)
        self.prober = prober or DurationProber(settings, logger)
        self.planner = planner or ConcatPlanBuilder(settings, logger)
        self.encoder = encoder or EncoderInvoker(settings, logger)
        self.hasher = hasher or ContentHasher(settings, logger)
        self.uploader = uploader or ArtifactUploader(settings, logger)

        self.state = PipelineState.IDLE
        self.history: list[PipelineState] = [PipelineState.IDLE]
        self.workspace: Optional[Workspace] = None

    def run(self, request: VideoRequest) -> UploadResult:
        """
        Execute the pipeline for ``request``.

        Returns:
            UploadResult with the public video URL

        Raises:
            PipelineError: Stage-tagged failure, raised after cleanup
        """
        if self.state != PipelineState.IDLE:
            raise RuntimeError(f"Orchestrator {self.request_id} already ran (state={self.state.value})")

        self.logger.info("=" * 60)
        self.logger.info(f"Starting slideshow pipeline {self.request_id}")
        self.logger.info(f"Images: {len(request.image_urls)} | Audio: {request.audio_url}")
        self.logger.info("=" * 60)
        start_time = time.time()
        log_memory(self.logger, "start")

        try:
            # fail before spending a download and encode on an unpublishable result
            self.uploader.check_configured()
            with self.workspace_manager.scoped() as workspace:
                self.workspace = workspace
                try:
                    result = self._run_stages(request, workspace)
                finally:
                    self._transition(PipelineState.CLEANING_UP)
        except PipelineError as e:
            self._transition(PipelineState.FAILED)
            log_memory(self.logger, "on-error")
            self.logger.error(
                format_error_message(
                    f"Slideshow pipeline ({e.stage.value} stage)",
                    e,
                    context={"request_id": self.request_id},
                    suggestion=get_fallback_suggestion(e),
                )
            )
            raise

        self._transition(PipelineState.COMPLETED)
        log_memory(self.logger, "after-cleanup")
        self.logger.info(f"Pipeline {self.request_id} complete in {time.time() - start_time:.2f}s: {result.url}")
        return result

    def _run_stages(self, request: VideoRequest, workspace: Workspace) -> UploadResult:
        with self._stage(PipelineState.FETCHING, partial(FetchError, None)):
            image_paths = self.fetcher.fetch_all(request, workspace)
        log_memory(self.logger, "after-downloads")

        with self._stage(PipelineState.PROBING, ProbeError):
            duration = self.prober.probe(workspace.audio_path)

        with self._stage(PipelineState.PLANNING, PlanError):
            plan = self.planner.build(image_paths, duration)
            self.planner.write(plan, workspace.concat_path)

        with self._stage(PipelineState.ENCODING, EncodeError):
            log_memory(self.logger, "before-ffmpeg")
            self.encoder.encode(workspace.concat_path, workspace.audio_path, workspace.output_path, duration)
        log_memory(self.logger, "after-ffmpeg")

        with self._stage(PipelineState.HASHING, HashError):
            artifact = self.hasher.describe(workspace.output_path)

        with self._stage(PipelineState.UPLOADING, partial(UploadError, "upload")):
            result = self.uploader.upload(artifact)
        log_memory(self.logger, "after-upload")

        return result

    @contextmanager
    def _stage(self, state: PipelineState, wrap: Callable[..., PipelineError]) -> Iterator[None]:
        """Enter ``state`` and tag any unexpected exception with it."""
        self._transition(state)
        try:
            yield
        except PipelineError:
            raise
        except Exception as e:
            raise wrap(f"unexpected error: {e}", cause=e) from e

    def _transition(self, state: PipelineState) -> None:
        self.logger.debug(f"[{self.request_id}] {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)
