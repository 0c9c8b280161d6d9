"""Tests for the FFmpeg subprocess wrapper, using stand-in binaries."""

import asyncio
import sys

import pytest

from adforge.errors import MediaToolError
from adforge.tools.media_tool import FFmpegTool


class TestFFmpegTool:
    def test_missing_binary(self):
        tool = FFmpegTool(binary="/nonexistent/ffmpeg-adforge")
        with pytest.raises(MediaToolError, match="not installed"):
            asyncio.run(tool.run(["-version"]))

    def test_non_zero_exit_carries_stderr_tail(self):
        tool = FFmpegTool(binary=sys.executable)
        script = "import sys; sys.stderr.write('x' * 1000 + 'Invalid data found'); sys.exit(3)"
        with pytest.raises(MediaToolError) as exc_info:
            asyncio.run(tool.run(["-c", script]))

        err = exc_info.value
        assert err.exit_code == 3
        assert err.diagnostic.endswith("Invalid data found")
        assert len(err.diagnostic) == 600

    def test_captures_stdout(self):
        tool = FFmpegTool(binary=sys.executable)
        result = asyncio.run(tool.run(["-c", "print('ffmpeg version 9.9')"]))
        assert result.exit_code == 0
        assert result.stdout.strip() == "ffmpeg version 9.9"

    def test_timeout(self):
        tool = FFmpegTool(binary=sys.executable, timeout_sec=0.2)
        with pytest.raises(MediaToolError, match="timed out"):
            asyncio.run(tool.run(["-c", "import time; time.sleep(30)"]))
