"""FFmpeg media tool — async subprocess wrapper with captured output."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from adforge.config import settings
from adforge.errors import MediaToolError
from adforge.tools.capabilities import MediaToolResult

logger = structlog.get_logger()

_STDERR_TAIL_CHARS = 600


class FFmpegTool:
    """Runs the ``ffmpeg`` binary with an argument vector (no shell)."""

    def __init__(self, binary: str | None = None, timeout_sec: float | None = None):
        self.binary = binary or settings.ffmpeg_binary
        self.timeout_sec = timeout_sec if timeout_sec is not None else settings.ffmpeg_timeout_sec

    async def run(self, args: Sequence[str]) -> MediaToolResult:
        """Run ffmpeg with *args* and return its captured output.

        Raises:
            MediaToolError: If the binary is missing, times out, or exits non-zero.
        """
        logger.debug("ffmpeg.run.start", args=list(args))
        try:
            proc = await asyncio.create_subprocess_exec(
                self.binary,
                *args,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise MediaToolError(
                f"{self.binary} is not installed or not on PATH",
                diagnostic=str(exc),
            ) from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout_sec)
        except asyncio.TimeoutError as exc:
            _kill(proc)
            await proc.wait()
            raise MediaToolError(
                f"{self.binary} timed out after {self.timeout_sec}s",
            ) from exc
        except asyncio.CancelledError:
            _kill(proc)
            await proc.wait()
            raise

        result = MediaToolResult(
            exit_code=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
        )
        if result.exit_code != 0:
            logger.warning(
                "ffmpeg.run.failed",
                exit_code=result.exit_code,
                stderr=result.stderr[-300:],
            )
            raise MediaToolError(
                f"{self.binary} exited with status {result.exit_code}",
                diagnostic=result.stderr[-_STDERR_TAIL_CHARS:],
                exit_code=result.exit_code,
            )
        return result


def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
