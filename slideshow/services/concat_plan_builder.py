"""Concat Plan Builder - spreads the audio length evenly across the images."""

from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from slideshow.core.config import Settings
from slideshow.core.errors import FileSystemError, PlanError
from slideshow.models.schemas import ConcatEntry, ConcatPlan
from slideshow.utils.ffmpeg_utils import quote_concat_path

DURATION_PRECISION = 3


class ConcatPlanBuilder:
    """Builds the ordered image/duration plan and its ffconcat file."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize concat plan builder.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger

    def build(self, image_paths: Sequence[Path], total_duration: float) -> ConcatPlan:
        """
        Give every image the same share of ``total_duration``.

        Args:
            image_paths: Local image paths in display order
            total_duration: Probed audio duration in seconds

        Returns:
            ConcatPlan with one entry per image

        Raises:
            PlanError: If there are no images or the durations are unusable
        """
        if not image_paths:
            raise PlanError("at least one image is required")
        if total_duration <= 0:
            raise PlanError(f"total duration must be positive, got {total_duration}")

        per_image = round(total_duration / len(image_paths), DURATION_PRECISION)
        try:
            plan = ConcatPlan(
                entries=tuple(ConcatEntry(image_path=Path(p), duration_seconds=per_image) for p in image_paths),
                total_duration_seconds=total_duration,
            )
        except ValidationError as e:
            raise PlanError(
                f"{len(image_paths)} images over {total_duration:.3f}s leaves no displayable duration per image",
                cause=e,
            ) from e

        self.logger.info(f"Concat plan: {len(image_paths)} image(s) x {per_image:.3f}s")
        return plan

    def render(self, plan: ConcatPlan) -> str:
        """
        Render ``plan`` in ffconcat syntax.

        The demuxer ignores the duration of the final entry unless another
        ``file`` directive follows it, so the last image is listed once more
        without a duration. Output length is capped separately by the encoder.
        """
        lines = ["ffconcat version 1.0"]
        for entry in plan.entries:
            lines.append(f"file {quote_concat_path(str(entry.image_path))}")
            lines.append(f"duration {entry.duration_seconds:.{DURATION_PRECISION}f}")
        lines.append(f"file {quote_concat_path(str(plan.entries[-1].image_path))}")
        return "\n".join(lines) + "\n"

    def write(self, plan: ConcatPlan, destination: Path) -> Path:
        """
        Write the rendered plan to ``destination``.

        Raises:
            FileSystemError: If the file cannot be written
        """
        try:
            destination.write_text(self.render(plan), encoding="utf-8")
        except OSError as e:
            raise FileSystemError(f"could not write concat plan {destination}: {e}", cause=e) from e
        return destination
