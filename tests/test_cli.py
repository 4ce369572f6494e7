# Copyright (c) 2026 Pointmatic
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Smoke tests for yt_captions CLI subcommands."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from yt_captions.cli import EXIT_ERROR, EXIT_NOT_FOUND, EXIT_OK, _build_options, cli
from yt_captions.core.models import SubtitleEntry, SubtitleTrack, VideoMetadata
from yt_captions.services.runner import ExtractionFailed, ToolUnavailable
from yt_captions.services.subtitles import SubtitleNotFound


VIDEO_ID = "dQw4w9WgXcQ"


def _make_metadata() -> VideoMetadata:
    return VideoMetadata(
        video_id=VIDEO_ID,
        title="Test Video",
        channel="Chan",
        duration=212,
        view_count=1000,
        subtitles=[
            SubtitleTrack(lang="en", name="English"),
            SubtitleTrack(lang="de (auto)", name="German", origin="automatic"),
        ],
    )


def _entries() -> list[SubtitleEntry]:
    return [
        SubtitleEntry(start=0.0, end=1.5, text="Hello"),
        SubtitleEntry(start=1.5, end=3.0, text="world"),
    ]


@pytest.fixture
def runner():
    return CliRunner()


class TestBuildOptions:
    def test_unset_flags_fall_through_to_defaults(self, monkeypatch):
        monkeypatch.delenv("YT_CAPTIONS_TIMEOUT", raising=False)
        opts = _build_options(timeout=None, cookies_browser=None)
        assert opts.timeout == 300.0
        assert opts.cookies_browser == "chrome"

    def test_explicit_flags_override(self, tmp_path):
        opts = _build_options(cache_dir=tmp_path, use_browser_cookies=False, cookies_browser="firefox")
        assert opts.cache_dir == tmp_path
        assert opts.use_browser_cookies is False
        assert opts.cookies_browser == "firefox"


class TestCliGroup:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("info", "transcript", "timestamps"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestInfoCommand:
    @patch("yt_captions.cli.get_video_info")
    def test_table_output(self, mock_info, runner):
        mock_info.return_value = _make_metadata()
        result = runner.invoke(cli, ["info", VIDEO_ID])
        assert result.exit_code == EXIT_OK
        assert "Test Video" in result.output
        assert "3:32" in result.output
        assert "de (auto)" in result.output
        assert "automatic" in result.output

    @patch("yt_captions.cli.get_video_info")
    def test_json_output(self, mock_info, runner):
        mock_info.return_value = _make_metadata()
        result = runner.invoke(cli, ["info", VIDEO_ID, "--json"])
        assert result.exit_code == EXIT_OK
        data = json.loads(result.output)
        assert data["video_id"] == VIDEO_ID
        assert [t["lang"] for t in data["subtitles"]] == ["en", "de (auto)"]

    @patch("yt_captions.cli.get_video_info")
    def test_accepts_url(self, mock_info, runner):
        mock_info.return_value = _make_metadata()
        result = runner.invoke(cli, ["info", f"https://youtu.be/{VIDEO_ID}", "--json"])
        assert result.exit_code == EXIT_OK
        assert mock_info.call_args.args[0] == VIDEO_ID

    @patch("yt_captions.cli.get_video_info")
    def test_invalid_id(self, mock_info, runner):
        result = runner.invoke(cli, ["info", "not-a-video"])
        assert result.exit_code == EXIT_ERROR
        mock_info.assert_not_called()

    @patch("yt_captions.cli.get_video_info")
    def test_extraction_failure(self, mock_info, runner):
        mock_info.side_effect = ExtractionFailed(1, "ERROR: Video unavailable")
        result = runner.invoke(cli, ["info", VIDEO_ID])
        assert result.exit_code == EXIT_ERROR

    @patch("yt_captions.cli.get_video_info")
    def test_options_forwarded(self, mock_info, runner, tmp_path):
        mock_info.return_value = _make_metadata()
        runner.invoke(
            cli,
            ["info", VIDEO_ID, "--json", "--no-cookies", "--timeout", "12", "--cache-dir", str(tmp_path)],
        )
        opts = mock_info.call_args.args[1]
        assert opts.use_browser_cookies is False
        assert opts.timeout == 12.0
        assert opts.cache_dir == tmp_path


class TestTranscriptCommand:
    @patch("yt_captions.cli.download_subtitle")
    def test_prints_text(self, mock_download, runner):
        mock_download.return_value = "Hello\nworld"
        result = runner.invoke(cli, ["transcript", VIDEO_ID, "--lang", "en (auto)"])
        assert result.exit_code == EXIT_OK
        assert result.output == "Hello\nworld\n"
        assert mock_download.call_args.args[:2] == (VIDEO_ID, "en (auto)")

    @patch("yt_captions.cli.download_subtitle")
    def test_default_lang(self, mock_download, runner):
        mock_download.return_value = "x"
        runner.invoke(cli, ["transcript", VIDEO_ID])
        assert mock_download.call_args.args[1] == "en"

    @patch("yt_captions.cli.download_subtitle")
    def test_out_file(self, mock_download, runner, tmp_path):
        mock_download.return_value = "Hello\nworld"
        out = tmp_path / "t.txt"
        result = runner.invoke(cli, ["transcript", VIDEO_ID, "--out", str(out)])
        assert result.exit_code == EXIT_OK
        assert out.read_text(encoding="utf-8") == "Hello\nworld\n"

    @patch("yt_captions.cli.download_subtitle")
    def test_not_found_exit_code(self, mock_download, runner):
        mock_download.side_effect = SubtitleNotFound("No 'fr' subtitle found")
        result = runner.invoke(cli, ["transcript", VIDEO_ID, "--lang", "fr"])
        assert result.exit_code == EXIT_NOT_FOUND

    @patch("yt_captions.cli.download_subtitle")
    def test_missing_tool_exit_code(self, mock_download, runner):
        mock_download.side_effect = ToolUnavailable("yt-dlp not found")
        result = runner.invoke(cli, ["transcript", VIDEO_ID])
        assert result.exit_code == EXIT_ERROR

    @patch("yt_captions.cli.download_subtitle")
    def test_empty_transcript_exit_code(self, mock_download, runner, tmp_path):
        mock_download.return_value = ""
        out = tmp_path / "t.txt"
        result = runner.invoke(cli, ["transcript", VIDEO_ID, "--out", str(out)])
        assert result.exit_code == EXIT_NOT_FOUND
        assert not out.exists()

    @patch("yt_captions.cli.download_subtitle")
    def test_unwritable_cache_exit_code(self, mock_download, runner):
        mock_download.side_effect = PermissionError(13, "Permission denied", "/cache")
        result = runner.invoke(cli, ["transcript", VIDEO_ID])
        assert result.exit_code == EXIT_ERROR
        assert not isinstance(result.exception, PermissionError)

    @patch("yt_captions.cli.write_text")
    @patch("yt_captions.cli.download_subtitle")
    def test_unwritable_out_exit_code(self, mock_download, mock_write, runner, tmp_path):
        mock_download.return_value = "Hello"
        mock_write.side_effect = OSError("read-only file system")
        result = runner.invoke(cli, ["transcript", VIDEO_ID, "--out", str(tmp_path / "t.txt")])
        assert result.exit_code == EXIT_ERROR


class TestTimestampsCommand:
    @patch("yt_captions.cli.get_subtitle_with_timestamps")
    def test_json_default(self, mock_ts, runner):
        mock_ts.return_value = _entries()
        result = runner.invoke(cli, ["timestamps", VIDEO_ID])
        assert result.exit_code == EXIT_OK
        data = json.loads(result.output)
        assert data[1] == {"start": 1.5, "end": 3.0, "text": "world"}

    @patch("yt_captions.cli.get_subtitle_with_timestamps")
    def test_srt_format(self, mock_ts, runner):
        mock_ts.return_value = _entries()
        result = runner.invoke(cli, ["timestamps", VIDEO_ID, "--format", "srt"])
        assert result.exit_code == EXIT_OK
        assert "00:00:01,500 --> 00:00:03,000" in result.output

    @patch("yt_captions.cli.get_subtitle_with_timestamps")
    def test_vtt_out_file(self, mock_ts, runner, tmp_path):
        mock_ts.return_value = _entries()
        out = tmp_path / "captions.vtt"
        result = runner.invoke(cli, ["timestamps", VIDEO_ID, "--format", "vtt", "--out", str(out)])
        assert result.exit_code == EXIT_OK
        assert out.read_text(encoding="utf-8").startswith("WEBVTT")

    @patch("yt_captions.cli.get_subtitle_with_timestamps")
    def test_empty_result_exit_code(self, mock_ts, runner):
        mock_ts.return_value = []
        result = runner.invoke(cli, ["timestamps", VIDEO_ID])
        assert result.exit_code == EXIT_NOT_FOUND

    def test_unknown_format_rejected(self, runner):
        result = runner.invoke(cli, ["timestamps", VIDEO_ID, "--format", "xml"])
        assert result.exit_code == 2
