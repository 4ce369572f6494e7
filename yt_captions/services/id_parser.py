"""Video ID parsing and watch URL construction."""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

_VIDEO_ID_RE = re.compile(r"^[A-Za-z0-9_-]{11}$")

_YOUTUBE_HOSTS = ("youtube.com", "m.youtube.com", "music.youtube.com")
_PATH_PREFIXES = ("/shorts/", "/embed/", "/v/", "/live/")


def is_valid_video_id(candidate: str) -> bool:
    """Check if a string looks like a valid YouTube video ID."""
    return bool(_VIDEO_ID_RE.match(candidate))


def parse_video_id(input_str: str) -> str | None:
    """Extract a YouTube video ID from a URL or raw ID string.

    Accepts bare 11-character ids, watch URLs, youtu.be short links and
    shorts/embed/v/live paths. Returns None if input cannot be parsed.
    """
    text = input_str.strip()
    if not text:
        return None

    if is_valid_video_id(text):
        return text

    try:
        parsed = urlparse(text)
    except ValueError:
        return None

    host = (parsed.hostname or "").lower().removeprefix("www.")
    candidate = ""

    if host == "youtu.be":
        candidate = parsed.path.lstrip("/").split("/")[0]
    elif host in _YOUTUBE_HOSTS:
        if parsed.path == "/watch":
            candidate = parse_qs(parsed.query).get("v", [""])[0]
        else:
            for prefix in _PATH_PREFIXES:
                if parsed.path.startswith(prefix):
                    candidate = parsed.path.removeprefix(prefix).split("/")[0]
                    break

    return candidate if is_valid_video_id(candidate) else None


def watch_url(video_id: str) -> str:
    """Canonical watch URL handed to yt-dlp."""
    return f"https://www.youtube.com/watch?v={video_id}"
