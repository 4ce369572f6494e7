"""Async subprocess runner for the yt-dlp executable."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Sequence

from yt_captions.core.options import CaptionOptions

logger = logging.getLogger("yt_captions")


class CaptionError(Exception):
    """Base class for caption pipeline failures."""


class ToolUnavailable(CaptionError):
    """The extraction tool could not be started (missing or not executable)."""


class ExtractionFailed(CaptionError):
    """The extraction tool ran but exited with a non-zero status."""

    def __init__(self, returncode: int | None, stderr: str, message: str | None = None) -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message or f"yt-dlp exited with code {returncode}: {stderr.strip()}")


class ExtractionTimeout(ExtractionFailed):
    """The extraction tool did not finish in time and was killed."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(None, "", f"yt-dlp did not finish within {timeout:g}s and was killed")


class ProcessRunner:
    """Runs the extraction tool and captures its output.

    When browser cookies are enabled, every invocation is prefixed with
    ``--cookies-from-browser <browser>`` so that caption tracks gated behind
    a signed-in session are reachable. Callers may opt out per call.
    """

    def __init__(self, options: CaptionOptions | None = None) -> None:
        self._options = options or CaptionOptions()

    @property
    def options(self) -> CaptionOptions:
        return self._options

    def build_command(self, args: Sequence[str], *, use_cookies: bool | None = None) -> list[str]:
        if use_cookies is None:
            use_cookies = self._options.use_browser_cookies
        command = [self._options.ytdlp_command]
        if use_cookies:
            command += ["--cookies-from-browser", self._options.cookies_browser]
        command += list(args)
        return command

    async def run(self, args: Sequence[str], *, use_cookies: bool | None = None) -> str:
        """Run the tool with ``args`` and return its standard output.

        Raises:
            ToolUnavailable: the executable could not be started.
            ExtractionFailed: the process exited non-zero.
            ExtractionTimeout: the process exceeded ``options.timeout``.
        """
        command = self.build_command(args, use_cookies=use_cookies)
        logger.debug("Running %s", " ".join(command))

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise ToolUnavailable(
                f"Could not start {command[0]!r}: {exc}. Is yt-dlp installed and on PATH?"
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self._options.timeout
            )
        except asyncio.TimeoutError as exc:
            await _kill(proc)
            logger.warning("yt-dlp timed out after %gs, killed", self._options.timeout)
            raise ExtractionTimeout(self._options.timeout) from exc
        except BaseException:
            # Cancellation included: the child must not outlive its scratch dir.
            await _kill(proc)
            raise

        out_text = stdout.decode("utf-8", errors="replace")
        err_text = stderr.decode("utf-8", errors="replace")

        if proc.returncode != 0:
            logger.warning("yt-dlp exited with code %s", proc.returncode)
            raise ExtractionFailed(proc.returncode, err_text)

        return out_text


async def _kill(proc: asyncio.subprocess.Process) -> None:
    """Kill and reap ``proc`` if it is still running."""
    if proc.returncode is not None:
        return
    with contextlib.suppress(ProcessLookupError):
        proc.kill()
    await asyncio.shield(proc.wait())
