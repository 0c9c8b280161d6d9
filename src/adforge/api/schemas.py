"""Request/Response schemas for the FastAPI endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from adforge.models.analysis import AnalysisOutcome, ImageAnalysisItem
from adforge.models.options import Niche, Voice


class HealthResponse(BaseModel):
    status: str = "ok"
    message: str = "AdForge API is running"


class CheckKeyResponse(BaseModel):
    api_key_configured: bool
    key_preview: str
    message: str


class CheckFFmpegResponse(BaseModel):
    installed: bool
    version: Optional[str] = None
    message: str


class AnalyzeImageResponse(BaseModel):
    analysis: str
    features: list[str]
    category: str
    session_id: str


class AnalyzeImagesResponse(BaseModel):
    session_id: str
    results: list[AnalysisOutcome]


class GenerateScriptRequest(BaseModel):
    niche: Niche = "real-estate"
    image_analysis: dict[str, ImageAnalysisItem] = Field(
        default_factory=dict, description="file_name → analysis; falls back to the session's analysis"
    )
    user_script: Optional[str] = None
    session_id: Optional[str] = None


class GenerateScriptResponse(BaseModel):
    script: str
    session_id: Optional[str] = None


class VoiceoverRequest(BaseModel):
    script: str = Field(min_length=1)
    voice: Voice = "alloy"


class VoiceoverResponse(BaseModel):
    success: bool = True
    audio_path: str
    audio_file: str
    duration: int
    message: str = "Voiceover generated successfully"
