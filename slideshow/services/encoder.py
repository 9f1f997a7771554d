"""Encoder Invoker - runs ffmpeg to turn a concat plan and audio into a portrait MP4."""

import subprocess
import threading
from collections import deque
from pathlib import Path
from typing import IO, Any, Optional

import psutil

from slideshow.core.config import Settings
from slideshow.core.errors import EncodeError
from slideshow.utils.ffmpeg_utils import resolve_ffmpeg_binary
from slideshow.utils.io_utils import to_megabytes


class ResourceSampler:
    """Logs a subprocess's memory and CPU on a fixed interval from a background thread."""

    def __init__(self, pid: int, interval: float, logger: Any):
        self.pid = pid
        self.interval = interval
        self.logger = logger
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, name=f"sampler-{pid}", daemon=True)

    def start(self) -> "ResourceSampler":
        if self.interval > 0:
            self._thread.start()
        return self

    def stop(self) -> None:
        self._stop.set()
        if self._thread.is_alive():
            self._thread.join(timeout=1.0)

    def _run(self) -> None:
        try:
            process = psutil.Process(self.pid)
            # First cpu_percent call only primes the counter
            process.cpu_percent(interval=None)
            while not self._stop.wait(self.interval):
                rss = process.memory_info().rss
                cpu = process.cpu_percent(interval=None)
                self.logger.info(f"[FFMPEG MEM] rss={to_megabytes(rss):.1f}MB cpu={cpu:.1f}%")
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            self.logger.debug(f"Resource sampling stopped for pid {self.pid}: {e}")


class EncoderInvoker:
    """Drives a single resource-bounded ffmpeg encode."""

    TAIL_LINES = 20

    def __init__(self, settings: Settings, logger: Any):
        """
        Initialize encoder invoker.

        Args:
            settings: Application settings
            logger: Logger instance
        """
        self.settings = settings
        self.logger = logger

    def build_command(
        self,
        plan_path: Path,
        audio_path: Path,
        output_path: Path,
        target_duration: float,
    ) -> list[str]:
        """Build the ffmpeg argument list."""
        width = self.settings.video_width
        height = self.settings.video_height
        return [
            resolve_ffmpeg_binary(self.settings),
            "-hide_banner",
            "-nostdin",
            "-y",
            # concat and input
            "-f", "concat", "-safe", "0", "-i", str(plan_path),
            "-i", str(audio_path),
            # scale & crop portrait
            "-vf", f"scale={width}:{height}:force_original_aspect_ratio=increase,crop={width}:{height}",
            # x264 encode with ultrafast/zerolatency + no bframes/ref
            "-c:v", "libx264",
            "-preset", "ultrafast",
            "-tune", "zerolatency",
            "-x264-params", "bframes=0:ref=1",
            "-crf", str(self.settings.video_crf),
            "-c:a", "aac",
            "-pix_fmt", "yuv420p",
            # output-side so the budget binds libx264, not just the decoder
            "-threads", str(self.settings.encoder_threads),
            # stop at audio end
            "-t", f"{target_duration:.3f}",
            str(output_path),
        ]

    def encode(
        self,
        plan_path: Path,
        audio_path: Path,
        output_path: Path,
        target_duration: float,
    ) -> None:
        """
        Encode the slideshow and block until ffmpeg exits.

        ffmpeg's diagnostics are forwarded to the log line by line; only the
        exit status decides success.

        Raises:
            EncodeError: If ffmpeg cannot start, times out, or exits non-zero
        """
        cmd = self.build_command(plan_path, audio_path, output_path, target_duration)
        self.logger.info(f"Starting ffmpeg: {' '.join(cmd)}")

        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                errors="ignore",
                bufsize=1,
            )
        except OSError as e:
            raise EncodeError(f"could not start ffmpeg: {e}", cause=e) from e

        tail: deque[str] = deque(maxlen=self.TAIL_LINES)
        reader = threading.Thread(target=self._pump_stderr, args=(proc.stderr, tail), daemon=True)
        reader.start()
        sampler = ResourceSampler(proc.pid, self.settings.resource_poll_interval_seconds, self.logger).start()

        try:
            exit_code = self._wait(proc)
        finally:
            sampler.stop()
            reader.join(timeout=5.0)

        if exit_code != 0:
            detail = tail[-1] if tail else "no diagnostics"
            raise EncodeError(f"ffmpeg exited {exit_code}: {detail}", exit_code=exit_code)
        if not output_path.exists():
            raise EncodeError(f"ffmpeg exited 0 but produced no output at {output_path}", exit_code=0)

        self.logger.info(f"✅ Encoded {output_path.name} ({to_megabytes(output_path.stat().st_size):.2f}MB)")

    def _wait(self, proc: subprocess.Popen) -> int:
        timeout: Optional[float] = self.settings.encode_timeout_seconds
        try:
            return proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            self.logger.error(f"ffmpeg timed out after {timeout}s, terminating pid {proc.pid}")
            proc.terminate()
            try:
                proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.wait()
            raise EncodeError(f"ffmpeg timed out after {timeout}s", exit_code=proc.returncode, cause=e) from e

    def _pump_stderr(self, stream: Optional[IO[str]], tail: deque) -> None:
        if stream is None:
            return
        try:
            for line in stream:
                line = line.rstrip()
                if not line:
                    continue
                tail.append(line)
                self.logger.debug(f"[ffmpeg] {line}")
        finally:
            stream.close()
