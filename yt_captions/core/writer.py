"""Transcript rendering (txt, JSON, VTT, SRT) and atomic file writes."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from yt_captions.core.models import SubtitleEntry, VideoMetadata
from yt_captions.utils.time_fmt import seconds_to_srt, seconds_to_vtt


def render_entries_txt(entries: list[SubtitleEntry]) -> str:
    """Render entries as plain text, one entry per line (no timestamps)."""
    return "\n".join(entry.text for entry in entries) + "\n"


def render_entries_json(entries: list[SubtitleEntry]) -> str:
    data = [entry.model_dump(mode="json") for entry in entries]
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def render_entries_vtt(entries: list[SubtitleEntry]) -> str:
    parts = ["WEBVTT", ""]
    for entry in entries:
        parts.append(f"{seconds_to_vtt(entry.start)} --> {seconds_to_vtt(entry.end)}")
        parts.append(entry.text)
        parts.append("")
    return "\n".join(parts)


def render_entries_srt(entries: list[SubtitleEntry]) -> str:
    parts = []
    for i, entry in enumerate(entries, start=1):
        parts.append(str(i))
        parts.append(f"{seconds_to_srt(entry.start)} --> {seconds_to_srt(entry.end)}")
        parts.append(entry.text)
        parts.append("")
    return "\n".join(parts)


RENDERERS = {
    "txt": render_entries_txt,
    "json": render_entries_json,
    "vtt": render_entries_vtt,
    "srt": render_entries_srt,
}


def render_metadata_json(metadata: VideoMetadata) -> str:
    return json.dumps(metadata.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"


def write_text(dest: Path, content: str) -> Path:
    """Write text atomically: write to temp file, then rename.

    Returns the written file path.
    """
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(
        dir=dest.parent, suffix=".tmp", prefix=".yt_captions_"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, dest)
    except BaseException:
        os.unlink(tmp_path)
        raise
    return dest
