"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from yt_captions.core.options import CaptionOptions
from yt_captions.services.subtitles import SubtitleService


class FakeRunner:
    """Stands in for ProcessRunner.

    Records every argument list and, for subtitle downloads, writes the
    configured files next to the ``-o`` template the way yt-dlp would.
    ``files`` maps a ``<lang>.<ext>`` suffix (e.g. ``"en.auto.vtt"``) to
    file contents.
    """

    def __init__(
        self,
        files: dict[str, str] | None = None,
        *,
        stdout: str = "",
        error: Exception | None = None,
        fail_formats: set[str] | None = None,
    ) -> None:
        self.files = files or {}
        self.stdout = stdout
        self.error = error
        self.fail_formats = fail_formats or set()
        self.calls: list[list[str]] = []
        self.scratch_dirs: list[Path] = []

    async def run(self, args, *, use_cookies=None) -> str:
        args = list(args)
        self.calls.append(args)
        if self.error is not None:
            raise self.error

        if "-o" in args:
            template = Path(args[args.index("-o") + 1])
            ext = args[args.index("--sub-format") + 1]
            if ext in self.fail_formats:
                raise RuntimeError(f"{ext} download blew up")
            self.scratch_dirs.append(template.parent)
            stem = template.name.removesuffix(".%(ext)s")
            for suffix, content in self.files.items():
                if suffix.endswith(f".{ext}"):
                    (template.parent / f"{stem}.{suffix}").write_text(content, encoding="utf-8")

        return self.stdout


@pytest.fixture
def options(tmp_path) -> CaptionOptions:
    return CaptionOptions(
        cache_dir=tmp_path / "cache",
        scratch_dir=tmp_path / "scratch",
        use_browser_cookies=False,
    )


@pytest.fixture
def make_service(options):
    def _make(runner: FakeRunner) -> SubtitleService:
        return SubtitleService(options, runner=runner)

    return _make


@pytest.fixture
def fake_runner():
    """The FakeRunner class, for building per-test doubles."""
    return FakeRunner
