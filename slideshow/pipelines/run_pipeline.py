"""Command-line entrypoint - runs one slideshow pipeline without the HTTP server."""

import argparse
import sys
from typing import Optional

from pydantic import ValidationError

from slideshow.core.config import settings
from slideshow.core.errors import PipelineError
from slideshow.core.logging_config import get_logger, setup_logging
from slideshow.models.schemas import GenerateVideoRequest
from slideshow.pipelines.video_pipeline import PipelineOrchestrator
from slideshow.utils.error_handler import describe_validation_errors


def main(argv: Optional[list[str]] = None) -> int:
    """Main entrypoint for a single pipeline run."""
    parser = argparse.ArgumentParser(
        description="Slideshow Video Service - build and upload one slideshow",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--image",
        dest="images",
        action="append",
        default=[],
        metavar="URL",
        help="Image URL (repeat for each image, in display order)",
    )
    parser.add_argument(
        "--audio",
        dest="audio_url",
        default=None,
        metavar="URL",
        help="Audio URL; the video is as long as this track",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.log_level})",
    )
    args = parser.parse_args(argv)

    setup_logging(log_level=args.log_level, log_file=settings.log_file)
    logger = get_logger(__name__)

    try:
        payload = GenerateVideoRequest(images=args.images, audioUrl=args.audio_url or "")
    except ValidationError as e:
        logger.error(describe_validation_errors(e.errors()))
        return 2

    orchestrator = PipelineOrchestrator(settings, logger)
    try:
        result = orchestrator.run(payload.to_video_request())
    except PipelineError as e:
        logger.error(str(e))
        return 1

    print(result.url)
    return 0


if __name__ == "__main__":
    sys.exit(main())
