"""Video metadata and caption track discovery via yt-dlp."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from yt_captions.core.models import CaptionFormat, InfoEnvelope, SubtitleTrack, VideoMetadata
from yt_captions.services.id_parser import watch_url
from yt_captions.services.runner import CaptionError, ProcessRunner

logger = logging.getLogger("yt_captions")

AUTO_SUFFIX = " (auto)"

DUMP_ARGS = [
    "--dump-json",
    "--skip-download",
    "--no-warnings",
    "--ignore-errors",
    "--no-check-formats",
]


class MalformedMetadata(CaptionError):
    """Raised when yt-dlp output cannot be parsed as video metadata."""


async def get_video_info(video_id: str, runner: ProcessRunner) -> VideoMetadata:
    """Fetch metadata and the available caption tracks for a video.

    Runner failures (ToolUnavailable, ExtractionFailed) propagate unchanged.
    """
    output = await runner.run([*DUMP_ARGS, watch_url(video_id)])
    info = parse_info(output, video_id)
    metadata = _map_info(info)
    logger.debug(
        "Found %d caption tracks for %s", len(metadata.subtitles), video_id
    )
    return metadata


def parse_info(output: str, video_id: str = "") -> InfoEnvelope:
    """Validate ``--dump-json`` output as an InfoEnvelope."""
    try:
        return InfoEnvelope.model_validate_json(output)
    except ValidationError as exc:
        raise MalformedMetadata(
            f"Could not parse metadata for {video_id or 'video'}: {exc}"
        ) from exc


def _map_info(info: InfoEnvelope) -> VideoMetadata:
    return VideoMetadata(
        video_id=info.id,
        title=info.title,
        description=info.description,
        duration=int(info.duration),
        thumbnail=info.thumbnail,
        channel=info.channel or info.uploader,
        upload_date=info.upload_date,
        view_count=info.view_count,
        subtitles=select_tracks(info.subtitles, info.automatic_captions),
    )


def select_tracks(
    manual: dict[str, list[CaptionFormat]],
    automatic: dict[str, list[CaptionFormat]],
) -> list[SubtitleTrack]:
    """Collapse yt-dlp caption maps into one track per language.

    Manual tracks come first, in upstream order. An automatic track is only
    exposed when no manual track exists for the same code; its code gets the
    " (auto)" suffix.
    """
    tracks: list[SubtitleTrack] = []
    manual_langs: set[str] = set()

    for lang, formats in manual.items():
        fmt = _pick_format(formats)
        if fmt is None:
            continue
        manual_langs.add(lang)
        tracks.append(
            SubtitleTrack(lang=lang, name=fmt.name or lang, url=fmt.url, origin="manual")
        )

    for lang, formats in automatic.items():
        if lang in manual_langs:
            continue
        fmt = _pick_format(formats)
        if fmt is None:
            continue
        tracks.append(
            SubtitleTrack(
                lang=f"{lang}{AUTO_SUFFIX}",
                name=fmt.name or f"{lang} (auto-generated)",
                url=fmt.url,
                origin="automatic",
            )
        )

    return tracks


def _pick_format(formats: list[CaptionFormat]) -> CaptionFormat | None:
    """Prefer the VTT format, else the first one listed."""
    for fmt in formats:
        if fmt.ext == "vtt":
            return fmt
    return formats[0] if formats else None


def normalize_lang(lang: str) -> str:
    """Strip the " (auto)" qualifier to get the code yt-dlp understands."""
    return lang.replace(AUTO_SUFFIX, "").strip()
