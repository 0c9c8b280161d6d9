"""Pipeline run state and per-run context for the LangGraph workflow."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from langchain_core.runnables import RunnableConfig
from typing_extensions import TypedDict

from adforge.errors import AdForgeError
from adforge.models.asset import UploadedAsset
from adforge.models.timing import TimingPlan
from adforge.planning.vocabulary import KeywordVocabulary
from adforge.tools.capabilities import Capabilities
from adforge.workspace import RunWorkspace


class RunState(TypedDict):
    """State shared across all pipeline nodes of one run."""

    # Run configuration (set once at start)
    run_id: str
    assets: list[UploadedAsset]
    script: str
    voice: str
    music: str
    music_gain: int
    aspect_ratio: str
    niche: str

    # Lifecycle ("uploaded" → ... → "finalized" | "failed")
    stage: str

    # Node outputs
    sanitized_script: Optional[str]
    timing: Optional[TimingPlan]
    voiceover_path: Optional[str]
    normalized_images: Optional[list[str]]
    clips: Optional[list[str]]
    silent_video_path: Optional[str]
    final_video_path: Optional[str]
    audio_mode: Optional[str]  # "voiceover_only" | "music_mix"
    result: Optional[dict]

    # Error tracking
    failure: Optional[AdForgeError]


@dataclass
class RunContext:
    """Non-serializable collaborators of a run, passed via ``config["configurable"]``."""

    workspace: RunWorkspace
    capabilities: Capabilities
    music_dir: Path
    fps: int = 30
    chars_per_second: int = 15
    vocabulary: Optional[KeywordVocabulary] = None
    cancel_event: Optional[asyncio.Event] = None


def get_run_context(config: RunnableConfig) -> RunContext:
    return config["configurable"]["run"]
