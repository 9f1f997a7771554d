"""Helpers shared by the ffmpeg-backed services."""

from slideshow.core.config import Settings


def resolve_ffmpeg_binary(settings: Settings) -> str:
    """
    Return the ffmpeg executable to run.

    ``FFMPEG_BINARY`` wins when set; otherwise the static build shipped with
    imageio-ffmpeg is used (downloaded on first use if missing).
    """
    if settings.ffmpeg_binary:
        return settings.ffmpeg_binary

    import imageio_ffmpeg

    return imageio_ffmpeg.get_ffmpeg_exe()


def quote_concat_path(path: str) -> str:
    """Quote a path for an ffconcat ``file`` directive."""
    return "'" + path.replace("'", "'\\''") + "'"
