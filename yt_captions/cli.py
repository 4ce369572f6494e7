# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""CLI entry point for yt-captions."""

from __future__ import annotations

import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from yt_captions import (
    __version__,
    download_subtitle,
    get_subtitle_with_timestamps,
    get_video_info,
)
from yt_captions.core.logging import get_logger, setup_logging
from yt_captions.core.options import CaptionOptions
from yt_captions.core.writer import RENDERERS, render_metadata_json, write_text
from yt_captions.services.id_parser import parse_video_id
from yt_captions.services.runner import CaptionError
from yt_captions.services.subtitles import SubtitleNotFound
from yt_captions.utils.time_fmt import format_duration


# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_FOUND = 3


def _common_options(fn):
    """Shared Click options that map to CaptionOptions fields."""
    decorators = [
        click.option("--cache-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Transcript cache directory."),
        click.option("--cookies/--no-cookies", "use_browser_cookies", default=None, help="Pass browser cookies to yt-dlp."),
        click.option("--browser", "cookies_browser", type=str, default=None, help="Browser to read cookies from."),
        click.option("--timeout", type=float, default=None, help="Seconds to wait for yt-dlp."),
        click.option("--verbose", is_flag=True, default=None, help="Verbose console output."),
    ]
    for decorator in reversed(decorators):
        fn = decorator(fn)
    return fn


def _build_options(**cli_kwargs) -> CaptionOptions:
    """Build CaptionOptions from CLI kwargs, filtering out unset (None) values.

    Unset flags fall through to env vars → YAML → defaults.
    """
    overrides = {key: value for key, value in cli_kwargs.items() if value is not None}
    return CaptionOptions(**overrides)


def _resolve_id(raw: str) -> str:
    video_id = parse_video_id(raw)
    if video_id is None:
        get_logger().error("Invalid video ID or URL: %s", raw)
        sys.exit(EXIT_ERROR)
    return video_id


def _emit(content: str, out: Path | None) -> None:
    if out is None:
        click.echo(content, nl=not content.endswith("\n"))
    else:
        try:
            write_text(out, content)
        except OSError as exc:
            get_logger().error("Could not write %s: %s", out, exc)
            sys.exit(EXIT_ERROR)
        get_logger().info("Wrote %s", out)


@click.group()
@click.version_option(version=__version__, prog_name="yt_captions")
def cli() -> None:
    """YouTube caption discovery and transcript fetcher."""


@cli.command()
@click.argument("video")
@click.option("--json", "as_json", is_flag=True, help="Print metadata as JSON.")
@_common_options
def info(video, as_json, **kwargs):
    """Show metadata and available caption tracks."""
    options = _build_options(**kwargs)
    setup_logging(verbose=options.verbose)
    video_id = _resolve_id(video)

    try:
        meta = get_video_info(video_id, options)
    except CaptionError as exc:
        get_logger().error("%s", exc)
        sys.exit(EXIT_ERROR)

    if as_json:
        _emit(render_metadata_json(meta), None)
        return

    console = Console()
    console.print(meta.title, style="bold", markup=False)
    console.print(
        f"{meta.channel} · {format_duration(meta.duration)} · {meta.view_count:,} views",
        markup=False,
    )

    table = Table("Language", "Name", "Origin")
    for track in meta.subtitles:
        table.add_row(track.lang, track.name, track.origin)
    console.print(table)


@cli.command()
@click.argument("video")
@click.option("--lang", default="en", show_default=True, help="Caption language, e.g. 'en' or 'en (auto)'.")
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write to file instead of stdout.")
@_common_options
def transcript(video, lang, out, **kwargs):
    """Print the deduplicated plain-text transcript."""
    options = _build_options(**kwargs)
    setup_logging(verbose=options.verbose)
    video_id = _resolve_id(video)

    try:
        text = download_subtitle(video_id, lang, options)
    except SubtitleNotFound as exc:
        get_logger().error("%s", exc)
        sys.exit(EXIT_NOT_FOUND)
    except (CaptionError, OSError) as exc:
        get_logger().error("%s", exc)
        sys.exit(EXIT_ERROR)

    if not text:
        get_logger().error("Empty transcript for %s [%s]", video_id, lang)
        sys.exit(EXIT_NOT_FOUND)

    _emit(text + "\n", out)


@cli.command()
@click.argument("video")
@click.option("--lang", default="en", show_default=True, help="Caption language, e.g. 'en' or 'en (auto)'.")
@click.option("--format", "format_", type=click.Choice(sorted(RENDERERS)), default="json", show_default=True, help="Output format.")
@click.option("--out", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write to file instead of stdout.")
@_common_options
def timestamps(video, lang, format_, out, **kwargs):
    """Print timed caption entries."""
    options = _build_options(**kwargs)
    setup_logging(verbose=options.verbose)
    video_id = _resolve_id(video)

    entries = get_subtitle_with_timestamps(video_id, lang, options)
    if not entries:
        get_logger().error("No timed subtitles for %s [%s]", video_id, lang)
        sys.exit(EXIT_NOT_FOUND)

    _emit(RENDERERS[format_](entries), out)


if __name__ == "__main__":
    cli()
