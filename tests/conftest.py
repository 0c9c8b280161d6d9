"""Shared fakes and fixtures — no network, no real FFmpeg binary."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from adforge.config import settings
from adforge.errors import AnalysisError, MediaToolError
from adforge.models.asset import UploadedAsset
from adforge.tools.capabilities import Capabilities, MediaToolResult


class FakeMediaTool:
    """Records every argument vector and touches the output file (last arg)."""

    def __init__(self, fail_when=None):
        self.calls: list[list[str]] = []
        self.fail_when = fail_when

    async def run(self, args):
        args = list(args)
        self.calls.append(args)
        if args == ["-version"]:
            return MediaToolResult(exit_code=0, stdout="ffmpeg version 7.0-fake\nbuilt with gcc", stderr="")
        if self.fail_when is not None and self.fail_when(args):
            raise MediaToolError("ffmpeg exited with status 1", diagnostic="boom: invalid input", exit_code=1)
        Path(args[-1]).write_bytes(b"fake-media")
        return MediaToolResult(exit_code=0, stdout="", stderr="")

    def calls_with(self, flag: str) -> list[list[str]]:
        return [c for c in self.calls if flag in c]


class FakeSynthesizer:
    def __init__(self, audio: bytes = b"ID3fake-mp3"):
        self.audio = audio
        self.calls: list[tuple[str, str]] = []

    async def synthesize(self, text: str, voice: str) -> bytes:
        self.calls.append((text, voice))
        return self.audio


class FakeDescriber:
    """Fails the first *failures* calls, then answers with *text*."""

    def __init__(self, text: str = "A modern, spacious kitchen with granite counters.", failures: int = 0):
        self.text = text
        self.failures = failures
        self.calls = 0

    async def describe(self, image_bytes: bytes, mime_type: str, prompt: str) -> str:
        self.calls += 1
        if self.calls <= self.failures:
            raise AnalysisError("rate limited", stage="analysis")
        return self.text


class FakeDrafter:
    def __init__(self, script: str = "Welcome home. [Scene 1] Your dream kitchen awaits."):
        self.script = script
        self.calls: list[tuple[str, str]] = []

    async def draft(self, combined_descriptions: str, niche: str) -> str:
        self.calls.append((combined_descriptions, niche))
        return self.script


@pytest.fixture
def dirs(tmp_path, monkeypatch):
    """Point every writable directory at tmp_path."""
    layout = {
        "output": tmp_path / "output",
        "uploads": tmp_path / "uploads",
        "scratch": tmp_path / "scratch",
        "music": tmp_path / "assets" / "music",
    }
    for path in layout.values():
        path.mkdir(parents=True)
    monkeypatch.setattr(settings, "output_base_dir", str(layout["output"]))
    monkeypatch.setattr(settings, "upload_dir", str(layout["uploads"]))
    monkeypatch.setattr(settings, "scratch_dir", str(layout["scratch"]))
    monkeypatch.setattr(settings, "assets_dir", str(tmp_path / "assets"))
    monkeypatch.setattr(settings, "vision_backoff_sec", 0.0)
    return layout


def write_image(path: Path, size=(64, 48), color=(200, 30, 30), mode="RGB") -> Path:
    Image.new(mode, size, color).save(path, format="PNG")
    return path


@pytest.fixture
def make_asset(dirs):
    counter = {"n": 0}

    def _make(category: str = "general", valid: bool = True) -> UploadedAsset:
        counter["n"] += 1
        path = dirs["uploads"] / f"upload-{counter['n']}.png"
        if valid:
            write_image(path)
        else:
            path.write_bytes(b"definitely not an image")
        return UploadedAsset(
            file_name=f"photo{counter['n']}.png",
            mime_type="image/png",
            size_bytes=path.stat().st_size,
            category_label=category,
            path=str(path),
        )

    return _make


@pytest.fixture
def media_tool():
    return FakeMediaTool()


@pytest.fixture
def synthesizer():
    return FakeSynthesizer()


@pytest.fixture
def capabilities(synthesizer, media_tool):
    return Capabilities(synthesizer=synthesizer, media_tool=media_tool)
