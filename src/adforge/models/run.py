"""Pydantic models for a pipeline run request and its lifecycle stages."""

from enum import Enum

from pydantic import BaseModel, Field

from adforge.models.asset import UploadedAsset
from adforge.models.options import (
    DEFAULT_MUSIC_GAIN,
    MAX_MUSIC_GAIN,
    MIN_MUSIC_GAIN,
    AspectRatio,
    MusicTrack,
    Niche,
    Voice,
)


class RunStage(str, Enum):
    UPLOADED = "uploaded"
    VOICEOVER_SYNTHESIZED = "voiceover_synthesized"
    IMAGES_NORMALIZED = "images_normalized"
    CLIPS_BUILT = "clips_built"
    CONCATENATED = "concatenated"
    AUDIO_MIXED = "audio_mixed"
    FINALIZED = "finalized"
    FAILED = "failed"


class VideoRequest(BaseModel):
    assets: list[UploadedAsset] = Field(min_length=1)
    script: str
    voice: Voice = "alloy"
    music: MusicTrack = "upbeat"
    music_gain: int = Field(default=DEFAULT_MUSIC_GAIN, ge=MIN_MUSIC_GAIN, le=MAX_MUSIC_GAIN)
    aspect_ratio: AspectRatio = "16:9"
    niche: Niche = "real-estate"
