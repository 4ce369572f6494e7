"""YouTube json3 caption parsing."""

from __future__ import annotations

from yt_captions.core.models import Json3Payload, SubtitleEntry


def parse_json3_to_entries(payload: str) -> list[SubtitleEntry]:
    """Parse a json3 event stream into timed entries.

    Each event's segments are concatenated as-is; events that carry no text
    (window setup, line breaks) are dropped. Unlike VTT flattening, no
    deduplication is applied across events.

    Raises:
        pydantic.ValidationError: the payload is not a json3 document.
    """
    data = Json3Payload.model_validate_json(payload)

    entries: list[SubtitleEntry] = []
    for event in data.events:
        text = "".join(seg.utf8 for seg in event.segs).strip()
        if not text:
            continue
        start_ms = event.start_ms
        end_ms = start_ms + max(event.duration_ms, 0)
        entries.append(
            SubtitleEntry(start=start_ms / 1000, end=end_ms / 1000, text=text)
        )
    return entries
