"""Permanent on-disk cache of plain-text transcripts."""

from __future__ import annotations

import logging
from pathlib import Path

from yt_captions.core.writer import write_text

logger = logging.getLogger("yt_captions")


class TranscriptCache:
    """Directory-backed key -> text store.

    One ``<key>.txt`` file per (video id, language) pair. Entries are never
    expired or evicted; pruning the directory is left to the operator.
    Writes replace the whole file atomically. There is no locking between
    concurrent writers of the same key.
    """

    def __init__(self, cache_dir: Path) -> None:
        self._dir = Path(cache_dir)

    @property
    def directory(self) -> Path:
        return self._dir

    @staticmethod
    def key_for(video_id: str, lang: str) -> str:
        return f"{video_id}_{lang}"

    def path_for(self, key: str) -> Path:
        return self._dir / f"{key}.txt"

    def has(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def get(self, key: str) -> str:
        return self.path_for(key).read_text(encoding="utf-8")

    def put(self, key: str, text: str) -> Path:
        path = write_text(self.path_for(key), text)
        logger.debug("Cached transcript %s (%d chars)", key, len(text))
        return path
