"""yt-captions: YouTube caption track discovery, download and normalization."""

__version__ = "0.1.0"

import asyncio

from yt_captions.core.models import SubtitleEntry, SubtitleTrack, VideoMetadata
from yt_captions.core.options import CaptionOptions


def get_video_info(video_id: str, options: CaptionOptions | None = None) -> VideoMetadata:
    """Fetch metadata and the available caption tracks for a video.

    Args:
        video_id: YouTube video ID.
        options: Configuration options. Uses defaults if not provided.

    Raises:
        ToolUnavailable, ExtractionFailed, MalformedMetadata
    """
    from yt_captions.services.subtitles import SubtitleService

    return asyncio.run(SubtitleService(options).get_video_info(video_id))


def download_subtitle(video_id: str, lang: str, options: CaptionOptions | None = None) -> str:
    """Fetch the deduplicated plain-text transcript for a language.

    Results are cached on disk under ``options.cache_dir``; a cached
    transcript is returned without running yt-dlp.

    Args:
        video_id: YouTube video ID.
        lang: Language code as listed by get_video_info, e.g. "en" or "en (auto)".
        options: Configuration options. Uses defaults if not provided.

    Raises:
        ToolUnavailable, ExtractionFailed, SubtitleNotFound
    """
    from yt_captions.services.subtitles import SubtitleService

    return asyncio.run(SubtitleService(options).download_subtitle(video_id, lang))


def get_subtitle_with_timestamps(
    video_id: str, lang: str, options: CaptionOptions | None = None
) -> list[SubtitleEntry]:
    """Fetch timed caption entries, or an empty list when none are available."""
    from yt_captions.services.subtitles import SubtitleService

    return asyncio.run(
        SubtitleService(options).get_subtitle_with_timestamps(video_id, lang)
    )


__all__ = [
    "__version__",
    "get_video_info",
    "download_subtitle",
    "get_subtitle_with_timestamps",
    "CaptionOptions",
    "VideoMetadata",
    "SubtitleTrack",
    "SubtitleEntry",
]
