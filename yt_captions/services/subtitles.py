"""Transcript service: cache lookup, yt-dlp download, parse, cache write."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import tempfile
from pathlib import Path
from typing import Iterator

from yt_captions.core.cache import TranscriptCache
from yt_captions.core.logging import log_event
from yt_captions.core.models import SubtitleEntry, VideoMetadata
from yt_captions.core.options import CaptionOptions
from yt_captions.services.id_parser import watch_url
from yt_captions.services.json3 import parse_json3_to_entries
from yt_captions.services.metadata import get_video_info, normalize_lang
from yt_captions.services.runner import CaptionError, ProcessRunner
from yt_captions.services.vtt import parse_vtt_to_entries, parse_vtt_to_text

logger = logging.getLogger("yt_captions")


class SubtitleNotFound(CaptionError):
    """yt-dlp succeeded but wrote no subtitle file for the language."""


class SubtitleService:
    """Async entry point for metadata, transcripts and timed captions.

    Plain-text transcripts are cached permanently under
    ``options.cache_dir``. Metadata and timed entries are fetched fresh on
    every call. Each download goes to its own scratch directory, which is
    removed when the call returns or fails.
    """

    def __init__(
        self,
        options: CaptionOptions | None = None,
        *,
        runner: ProcessRunner | None = None,
        cache: TranscriptCache | None = None,
    ) -> None:
        self.options = options or CaptionOptions()
        self.runner = runner or ProcessRunner(self.options)
        self.cache = cache or TranscriptCache(self.options.cache_dir)

    async def get_video_info(self, video_id: str) -> VideoMetadata:
        """Fetch metadata and caption tracks.

        Raises:
            ToolUnavailable, ExtractionFailed, MalformedMetadata
        """
        return await get_video_info(video_id, self.runner)

    async def download_subtitle(self, video_id: str, lang: str) -> str:
        """Return the plain-text transcript for ``lang``, from cache if present.

        ``lang`` may carry the " (auto)" qualifier reported by
        get_video_info; the cache key keeps it, the yt-dlp language code
        does not.

        Raises:
            ToolUnavailable, ExtractionFailed, SubtitleNotFound
        """
        key = self.cache.key_for(video_id, lang)
        if await asyncio.to_thread(self.cache.has, key):
            log_event(
                logging.DEBUG, "Transcript cache hit",
                video_id=video_id, lang=lang, event="cache_hit",
            )
            return await asyncio.to_thread(self.cache.get, key)

        code = normalize_lang(lang)
        with self._scratch() as scratch:
            payload = await self._fetch(video_id, code, "vtt", scratch)
            if payload is None:
                raise SubtitleNotFound(
                    f"No {code!r} subtitle found for {video_id}"
                )
            text = await asyncio.to_thread(parse_vtt_to_text, payload)

        await asyncio.to_thread(self.cache.put, key, text)
        log_event(
            logging.INFO, f"Cached transcript for {video_id} [{lang}]",
            video_id=video_id, lang=lang, event="cache_write",
        )
        return text

    async def get_subtitle_with_timestamps(self, video_id: str, lang: str) -> list[SubtitleEntry]:
        """Return timed caption entries, or an empty list if none can be had.

        Tries json3 first and falls back to VTT when yt-dlp writes no json3
        file. Never raises: every failure is logged and reported as ``[]``.
        """
        try:
            entries = await self._timed_entries(video_id, normalize_lang(lang))
        except Exception as exc:
            log_event(
                logging.WARNING, f"Timed subtitles unavailable for {video_id} [{lang}]",
                video_id=video_id, lang=lang, event="timestamps_failed", error=str(exc),
            )
            return []
        return entries if entries is not None else []

    async def _timed_entries(self, video_id: str, code: str) -> list[SubtitleEntry] | None:
        with self._scratch() as scratch:
            payload = await self._fetch(video_id, code, "json3", scratch)
            if payload is not None:
                return await asyncio.to_thread(parse_json3_to_entries, payload)

        log_event(
            logging.DEBUG, "No json3 subtitle, falling back to VTT",
            video_id=video_id, lang=code, event="timestamps_fallback",
        )
        with self._scratch() as scratch:
            payload = await self._fetch(video_id, code, "vtt", scratch)
            if payload is not None:
                return await asyncio.to_thread(parse_vtt_to_entries, payload)

        return None

    async def _fetch(self, video_id: str, code: str, ext: str, scratch: Path) -> str | None:
        """Download one subtitle file into ``scratch`` and return its contents.

        Returns None when yt-dlp exits cleanly but writes neither the manual
        nor the auto-suffixed file.
        """
        log_event(
            logging.DEBUG, f"Downloading {ext} subtitle",
            video_id=video_id, lang=code, event="subtitle_fetch",
        )
        await self.runner.run(
            [
                "--write-sub",
                "--write-auto-sub",
                "--sub-lang", code,
                "--sub-format", ext,
                "--skip-download",
                "-o", str(scratch / f"{video_id}.%(ext)s"),
                watch_url(video_id),
            ]
        )

        for candidate in subtitle_candidates(scratch, video_id, code, ext):
            if candidate.is_file():
                return await asyncio.to_thread(candidate.read_text, encoding="utf-8")

        logger.debug("yt-dlp wrote no %s file for %s [%s]", ext, video_id, code)
        return None

    @contextlib.contextmanager
    def _scratch(self) -> Iterator[Path]:
        base = self.options.scratch_dir
        if base is not None:
            base.mkdir(parents=True, exist_ok=True)
        with tempfile.TemporaryDirectory(prefix="yt_captions_", dir=base) as tmp:
            yield Path(tmp)


def subtitle_candidates(scratch: Path, video_id: str, code: str, ext: str) -> list[Path]:
    """Files yt-dlp may write for a subtitle request, in probe order."""
    return [
        scratch / f"{video_id}.{code}.{ext}",
        scratch / f"{video_id}.{code}.auto.{ext}",
    ]
