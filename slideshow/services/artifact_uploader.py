"""Artifact Uploader - publishes videos to Backblaze B2 via the native API."""

import uuid
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import quote

import requests

from slideshow.core.config import Settings
from slideshow.core.errors import UploadError
from slideshow.models.schemas import EncodedArtifact, UploadResult
from slideshow.utils.retry import call_with_retry


@dataclass(frozen=True)
class B2Session:
    """Result of b2_authorize_account."""

    api_url: str
    download_url: str
    authorization_token: str


@dataclass(frozen=True)
class B2UploadTarget:
    """Result of b2_get_upload_url; valid for one upload at a time."""

    upload_url: str
    authorization_token: str


class ArtifactUploader:
    """Uploads an encoded artifact and derives its public URL."""

    def __init__(self, settings: Settings, logger: Any, session: Optional[requests.Session] = None):
        """
        Initialize artifact uploader.

        Args:
            settings: Application settings
            logger: Logger instance
            session: Optional requests session
        """
        self.settings = settings
        self.logger = logger
        self.session = session or requests.Session()

    def upload(self, artifact: EncodedArtifact) -> UploadResult:
        """
        Authorize, obtain an upload target and stream the artifact.

        Each attempt re-authorizes and asks for a fresh upload target, as
        B2 requires after a failed upload or an expired token.

        Raises:
            UploadError: On missing configuration, any non-success response
                or a transport failure
        """
        self.check_configured()
        object_name = self.new_object_name()

        self.logger.info("=" * 60)
        self.logger.info("Starting B2 upload")
        self.logger.info(f"File: {artifact.path.name} ({artifact.size_bytes} bytes)")
        self.logger.info(f"Object: {object_name}")
        self.logger.info("=" * 60)

        def attempt() -> tuple[B2Session, dict]:
            # account tokens expire, so every attempt starts from authorize
            b2 = self.authorize()
            target = self.get_upload_target(b2)
            return b2, self.send(target, artifact, object_name)

        b2, response = call_with_retry(
            attempt,
            attempts=self.settings.upload_max_attempts,
            delays=self.settings.retry_delays_seconds,
            retry_on=(UploadError,),
            should_retry=self.is_retryable,
            logger=self.logger,
            operation="B2 upload",
        )

        url = self.public_url(b2.download_url, object_name)
        self.logger.info(f"✅ Upload complete: {url}")
        return UploadResult(url=url, object_name=object_name, file_id=response.get("fileId"))

    @staticmethod
    def is_retryable(error: UploadError) -> bool:
        """Transport errors, 5xx, 408, 429 and expired tokens; rejected credentials are final."""
        if error.status_code is None or error.status_code >= 500:
            return True
        if error.status_code == 401:
            return error.step != "authorize"
        return error.status_code in (408, 429)

    def new_object_name(self) -> str:
        return f"{self.settings.b2_object_prefix.strip('/')}/{uuid.uuid4()}.mp4"

    def public_url(self, download_url: str, object_name: str) -> str:
        return f"{download_url.rstrip('/')}/file/{self.settings.b2_bucket_name}/{object_name}"

    def authorize(self) -> B2Session:
        """Step 1: b2_authorize_account."""
        data = self._call(
            "authorize",
            "GET",
            f"{self.settings.b2_api_url.rstrip('/')}/b2api/v2/b2_authorize_account",
            auth=(self.settings.b2_key_id, self.settings.b2_application_key),
        )
        try:
            return B2Session(
                api_url=data["apiUrl"],
                download_url=data["downloadUrl"],
                authorization_token=data["authorizationToken"],
            )
        except KeyError as e:
            raise UploadError("authorize", f"response missing {e}") from e

    def get_upload_target(self, b2: B2Session) -> B2UploadTarget:
        """Step 2: b2_get_upload_url for the configured bucket."""
        data = self._call(
            "get_upload_url",
            "POST",
            f"{b2.api_url.rstrip('/')}/b2api/v2/b2_get_upload_url",
            headers={"Authorization": b2.authorization_token},
            json={"bucketId": self.settings.b2_bucket_id},
        )
        try:
            return B2UploadTarget(upload_url=data["uploadUrl"], authorization_token=data["authorizationToken"])
        except KeyError as e:
            raise UploadError("get_upload_url", f"response missing {e}") from e

    def send(self, target: B2UploadTarget, artifact: EncodedArtifact, object_name: str) -> dict:
        """Step 3: stream the bytes with name, type, length and SHA-1 headers."""
        headers = {
            "Authorization": target.authorization_token,
            "X-Bz-File-Name": quote(object_name, safe="/"),
            "Content-Type": "b2/x-auto",
            "Content-Length": str(artifact.size_bytes),
            "X-Bz-Content-Sha1": artifact.sha1,
        }
        try:
            with open(artifact.path, "rb") as body:
                return self._call("upload_file", "POST", target.upload_url, headers=headers, data=body)
        except OSError as e:
            raise UploadError("upload_file", f"could not read {artifact.path}: {e}", cause=e) from e

    def _call(self, step: str, method: str, url: str, **kwargs: Any) -> dict:
        try:
            response = self.session.request(method, url, timeout=self.settings.upload_timeout_seconds, **kwargs)
        except requests.RequestException as e:
            raise UploadError(step, f"transport error: {e}", cause=e) from e

        if not response.ok:
            error_body = response.text[:500] if response.text else response.reason
            raise UploadError(step, f"HTTP {response.status_code}: {error_body}", status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise UploadError(step, "response was not JSON", cause=e) from e

    def check_configured(self) -> None:
        """Raise UploadError naming every missing B2 setting."""
        missing = [
            name
            for name in ("b2_key_id", "b2_application_key", "b2_bucket_id", "b2_bucket_name")
            if not getattr(self.settings, name)
        ]
        if missing:
            raise UploadError("configure", f"{', '.join(m.upper() for m in missing)} not configured")
