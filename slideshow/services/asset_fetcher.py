"""Asset Fetcher - streams remote images and audio into the request workspace."""

from pathlib import Path
from typing import Any, Optional

import requests

from slideshow.core.config import Settings
from slideshow.core.errors import FetchError
from slideshow.models.schemas import VideoRequest, Workspace
from slideshow.utils.io_utils import to_megabytes, write_chunks
from slideshow.utils.parallel_executor import ParallelExecutor
from slideshow.utils.retry import call_with_retry


class AssetFetcher:
    """Downloads remote resources to disk without buffering them in memory."""

    def __init__(self, settings: Settings, logger: Any, session: Optional[requests.Session] = None):
        """
        Initialize asset fetcher.

        Args:
            settings: Application settings
            logger: Logger instance
            session: Optional requests session (shared connection pool)
        """
        self.settings = settings
        self.logger = logger
        self.session = session or requests.Session()

    def fetch(self, url: str, destination: Path) -> None:
        """
        Download ``url`` to ``destination``, retrying transient failures.

        Partially written files are left in place; the workspace owner
        removes them.

        Raises:
            FetchError: On non-success status or transport failure
        """
        try:
            call_with_retry(
                lambda: self._fetch_once(url, destination),
                attempts=self.settings.fetch_max_attempts,
                delays=self.settings.retry_delays_seconds,
                retry_on=(FetchError,),
                should_retry=lambda e: e.transient,
                logger=self.logger,
                operation=f"Download {url}",
            )
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(url, f"unexpected error: {e}", cause=e, retryable=False) from e

    def _fetch_once(self, url: str, destination: Path) -> None:
        try:
            with self.session.get(
                url,
                stream=True,
                timeout=self.settings.download_timeout_seconds,
                allow_redirects=True,
            ) as response:
                if not response.ok:
                    raise FetchError(
                        url,
                        f"HTTP {response.status_code} {response.reason}",
                        status_code=response.status_code,
                    )
                written = write_chunks(
                    response.iter_content(chunk_size=self.settings.download_chunk_bytes),
                    destination,
                )
        except (requests.exceptions.MissingSchema, requests.exceptions.InvalidSchema, requests.exceptions.InvalidURL) as e:
            raise FetchError(url, f"invalid URL: {e}", cause=e, retryable=False) from e
        except requests.RequestException as e:
            raise FetchError(url, f"transport error: {e}", cause=e) from e
        except OSError as e:
            raise FetchError(url, f"could not write {destination}: {e}", cause=e, retryable=False) from e

        self.logger.debug(f"Downloaded {url} -> {destination.name} ({to_megabytes(written):.2f}MB)")

    def fetch_all(self, request: VideoRequest, workspace: Workspace) -> list[Path]:
        """
        Download the audio track and every image of a request.

        All downloads run concurrently; the first failure aborts the batch.

        Returns:
            Local image paths in request order
        """
        image_paths = [workspace.image_path(i) for i in range(len(request.image_urls))]

        tasks = [lambda: self.fetch(request.audio_url, workspace.audio_path)]
        names = ["audio"]
        for i, (url, path) in enumerate(zip(request.image_urls, image_paths)):
            tasks.append(lambda url=url, path=path: self.fetch(url, path))
            names.append(f"image_{i}")

        self.logger.info(f"Downloading audio + {len(image_paths)} image(s)...")
        executor = ParallelExecutor(self.settings.max_parallel_downloads, self.logger)
        executor.run_all(tasks, names)
        self.logger.info("✅ All assets downloaded")

        return image_paths
