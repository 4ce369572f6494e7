"""WebVTT parsing into plain text or timed entries."""

from __future__ import annotations

import re

from yt_captions.core.models import SubtitleEntry

_TIMING_RE = re.compile(
    r"(\d{2,}):(\d{2}):(\d{2})\.(\d{3})\s*-->\s*(\d{2,}):(\d{2}):(\d{2})\.(\d{3})"
)
_TAG_RE = re.compile(r"<[^>]+>")
_NUMERIC_RE = re.compile(r"^\d+$")

_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
)

HEADER = "WEBVTT"
METADATA_PREFIXES = ("Kind:", "Language:")


def _is_skipped(line: str) -> bool:
    """Header, blank, cue index and header metadata lines carry no caption text."""
    return (
        line == HEADER
        or not line
        or bool(_NUMERIC_RE.match(line))
        or line.startswith(METADATA_PREFIXES)
    )


def _clean(text: str) -> str:
    text = _TAG_RE.sub("", text)
    for entity, char in _ENTITIES:
        text = text.replace(entity, char)
    return text.strip()


def _timestamp(h: str, m: str, s: str, ms: str) -> float:
    return int(h) * 3600 + int(m) * 60 + int(s) + int(ms) / 1000


def _lines(payload: str) -> list[str]:
    return [line.strip() for line in payload.lstrip("\ufeff").splitlines()]


def parse_vtt_to_text(payload: str) -> str:
    """Flatten a VTT payload into a newline-joined transcript.

    A line is dropped when it equals the line kept just before it. Rolling
    auto-captions repeat the previous line as each new one is typed in;
    repeats further apart are kept.
    """
    kept: list[str] = []
    last = ""

    for line in _lines(payload):
        if _is_skipped(line) or "-->" in line:
            continue
        text = _clean(line)
        if text and text != last:
            kept.append(text)
            last = text

    return "\n".join(kept)


def parse_vtt_to_entries(payload: str) -> list[SubtitleEntry]:
    """Parse a VTT payload into one timed entry per cue block.

    A block runs from a timing line to the first blank line after its text,
    the next timing line, or end of input. Text lines of a block are joined
    with a space. Identical cues are kept; only the plain-text flattening
    deduplicates.
    """
    entries: list[SubtitleEntry] = []
    start = end = 0.0
    text_lines: list[str] = []
    in_block = False

    def flush() -> None:
        text = _clean(" ".join(text_lines))
        if text:
            entries.append(SubtitleEntry(start=start, end=max(end, start), text=text))
        text_lines.clear()

    for line in _lines(payload):
        match = _TIMING_RE.search(line)
        if match:
            flush()
            g = match.groups()
            start = _timestamp(*g[:4])
            end = _timestamp(*g[4:])
            in_block = True
            continue

        if not line:
            # YouTube auto-captions put a blank line between the timing
            # line and the cue text.
            if text_lines:
                flush()
                in_block = False
            continue

        if not in_block or _is_skipped(line) or "-->" in line:
            continue

        text_lines.append(line)

    flush()
    return entries
