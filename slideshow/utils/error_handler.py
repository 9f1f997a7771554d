"""Error Handler - provides user-friendly error messages for pipeline failures."""

from typing import Any, Optional

from slideshow.core.errors import EncodeError, FetchError, PipelineError, PipelineStage, UploadError


def format_error_message(
    operation: str,
    error: Exception,
    context: Optional[dict] = None,
    suggestion: Optional[str] = None,
) -> str:
    """
    Format a user-friendly error message.

    Args:
        operation: What operation was being performed (e.g., "Encoding slideshow")
        error: The exception that occurred
        context: Additional context (e.g., {"request_id": "req_123", "images": 4})
        suggestion: Optional suggestion for how to fix the issue

    Returns:
        Formatted error message
    """
    error_type = type(error).__name__
    error_msg = str(error)

    # Build context string
    context_str = ""
    if context:
        context_parts = [f"{k}={v}" for k, v in context.items()]
        context_str = f" ({', '.join(context_parts)})"

    # Build message
    message = f"❌ {operation} failed{context_str}\n"
    message += f"   Error: {error_type}: {error_msg}"

    if suggestion:
        message += f"\n   💡 Suggestion: {suggestion}"

    return message


def get_fallback_suggestion(error: PipelineError) -> Optional[str]:
    """
    Get an operator hint for a stage failure.

    Args:
        error: The stage-tagged error

    Returns:
        Suggestion string or None
    """
    error_msg = str(error).lower()

    if error.stage == PipelineStage.FETCH:
        if isinstance(error, FetchError) and error.status_code in (401, 403):
            return "The asset URL is not publicly readable. Check link permissions."
        elif isinstance(error, FetchError) and error.status_code == 404:
            return "The asset URL does not exist. Check the request payload."
        elif "timeout" in error_msg or "timed out" in error_msg:
            return "Download timed out. Check the asset host or raise DOWNLOAD_TIMEOUT_SECONDS."
        else:
            return "Asset download failed. Check the URL and network connectivity."

    elif error.stage == PipelineStage.PROBE:
        return "Could not read the audio duration. Make sure audioUrl points to a valid audio file."

    elif error.stage == PipelineStage.ENCODE:
        if isinstance(error, EncodeError) and error.exit_code is None:
            return "ffmpeg could not be started. Check FFMPEG_BINARY or the imageio-ffmpeg install."
        else:
            return "ffmpeg rejected the inputs. Check that every image URL returns a decodable image."

    elif error.stage == PipelineStage.UPLOAD:
        if isinstance(error, UploadError) and error.status_code == 401:
            return "Storage credentials were rejected. Check B2_KEY_ID and B2_APPLICATION_KEY."
        elif "not configured" in error_msg:
            return "Set B2_KEY_ID, B2_APPLICATION_KEY, B2_BUCKET_ID and B2_BUCKET_NAME."
        else:
            return "Upload failed. Check storage service status and bucket configuration."

    elif error.stage == PipelineStage.FILESYSTEM:
        return "Check free disk space and permissions of WORKSPACE_ROOT."

    return None


def describe_validation_errors(errors: list[dict[str, Any]]) -> str:
    """
    Turn request validation errors into a single client-facing message.

    Args:
        errors: Errors as reported by pydantic / FastAPI

    Returns:
        Message describing the first offending field
    """
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if "images" in loc:
            return "`images` must be a non-empty array"
        if "audioUrl" in loc or "audio_url" in loc:
            return "`audioUrl` is required"
    return "Request body must be a JSON object with `images` and `audioUrl`"
