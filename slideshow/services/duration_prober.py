"""Duration Prober - reads an audio file's length from ffmpeg's diagnostics."""

import re
import subprocess
from pathlib import Path
from typing import Any

from slideshow.core.config import Settings
from slideshow.core.errors import ProbeError
from slideshow.utils.ffmpeg_utils import resolve_ffmpeg_binary

DURATION_PATTERN = re.compile(r"Duration:\s*(\d+):(\d+):(\d+(?:\.\d+)?)")


def parse_duration(diagnostics: str) -> float:
    """
    Extract ``Duration: HH:MM:SS.ff`` from ffmpeg stderr.

    Raises:
        ProbeError: If no duration marker is present
    """
    match = DURATION_PATTERN.search(diagnostics)
    if not match:
        raise ProbeError("could not parse audio duration")
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + float(seconds)


class DurationProber:
    """Measures audio length with ``ffmpeg -i``."""

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize duration prober.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger

    def probe(self, audio_path: Path) -> float:
        """
        Return the duration of ``audio_path`` in seconds.

        ``ffmpeg -i`` without an output always exits non-zero; the exit code
        is ignored and only the diagnostic text is inspected.

        Raises:
            ProbeError: If ffmpeg cannot run or prints no usable duration
        """
        cmd = [resolve_ffmpeg_binary(self.settings), "-hide_banner", "-i", str(audio_path)]
        try:
            proc = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                errors="ignore",
                timeout=self.settings.probe_timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeError(f"ffmpeg probe timed out after {self.settings.probe_timeout_seconds}s", cause=e) from e
        except OSError as e:
            raise ProbeError(f"could not start ffmpeg: {e}", cause=e) from e

        duration = parse_duration(proc.stderr or "")
        if duration <= 0:
            raise ProbeError(f"audio duration must be positive, got {duration:.3f}s")

        self.logger.info(f"Audio duration: {duration:.3f}s")
        return duration
