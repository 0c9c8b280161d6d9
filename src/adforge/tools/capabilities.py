"""Capability interfaces consumed by analysis, drafting and the pipeline.

Each external service is reached through one narrow protocol so the
orchestrator can be exercised with fakes that never touch the network or
a real FFmpeg binary.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class MediaToolResult:
    exit_code: int
    stdout: str
    stderr: str


class ImageDescriber(Protocol):
    async def describe(self, image_bytes: bytes, mime_type: str, prompt: str) -> str:
        """Describe an image; raises AnalysisError on failure."""
        ...


class ScriptDrafter(Protocol):
    async def draft(self, combined_descriptions: str, niche: str) -> str:
        """Draft an ad script; raises DraftError on failure."""
        ...


class SpeechSynthesizer(Protocol):
    async def synthesize(self, text: str, voice: str) -> bytes:
        """Render speech audio (MP3 bytes); raises SynthesisError on failure."""
        ...


class MediaTool(Protocol):
    async def run(self, args: Sequence[str]) -> MediaToolResult:
        """Run the media tool; raises MediaToolError on non-zero exit."""
        ...


@dataclass
class Capabilities:
    """Bundle of capabilities handed to a pipeline run."""

    synthesizer: SpeechSynthesizer
    media_tool: MediaTool
