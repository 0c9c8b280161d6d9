"""FastAPI route handlers for analysis, drafting, voiceover and video generation."""

from __future__ import annotations

import asyncio
import contextlib
import time
from pathlib import Path
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from pydantic import ValidationError

from adforge.analysis import analyze_asset, analyze_batch
from adforge.api.dependencies import (
    get_capabilities,
    get_describer,
    get_drafter,
    get_media_tool,
    get_session_store,
    get_synthesizer,
)
from adforge.api.schemas import (
    AnalyzeImageResponse,
    AnalyzeImagesResponse,
    CheckFFmpegResponse,
    CheckKeyResponse,
    GenerateScriptRequest,
    GenerateScriptResponse,
    HealthResponse,
    VoiceoverRequest,
    VoiceoverResponse,
)
from adforge.api.uploads import discard_files, save_upload, save_uploads
from adforge.config import settings
from adforge.drafting import draft_ad_script
from adforge.errors import MediaToolError, SynthesisError
from adforge.models.output import VideoResult
from adforge.models.run import VideoRequest
from adforge.orchestrator import run_pipeline
from adforge.planning.allocator import estimate_speech_duration
from adforge.planning.sanitizer import sanitize
from adforge.session import AdSession, SessionStore
from adforge.tools.capabilities import (
    Capabilities,
    ImageDescriber,
    MediaTool,
    ScriptDrafter,
    SpeechSynthesizer,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/api")


async def _load_or_create_session(
    store: SessionStore, session_id: Optional[str], niche: str
) -> AdSession:
    session = await store.load(session_id) if session_id else None
    if session is None:
        session = AdSession(session_id=session_id, niche=niche) if session_id else AdSession(niche=niche)
    session.niche = niche
    return session


async def _watch_disconnect(request: Request, cancel_event: asyncio.Event) -> None:
    """Signal cancellation when the client goes away mid-run."""
    while not cancel_event.is_set():
        if await request.is_disconnected():
            logger.warning("generate_video.client_disconnected")
            cancel_event.set()
            return
        await asyncio.sleep(1.0)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse()


@router.get("/check-key", response_model=CheckKeyResponse)
async def check_key():
    """Report whether the OpenAI key is configured (masked preview only)."""
    key = settings.openai_api_key
    if not key:
        return CheckKeyResponse(
            api_key_configured=False,
            key_preview="NOT FOUND",
            message="OpenAI API key not found. Add OPENAI_API_KEY to your .env file",
        )
    return CheckKeyResponse(
        api_key_configured=True,
        key_preview=f"{key[:7]}...{key[-4:]}",
        message="OpenAI API key is configured",
    )


@router.get("/check-ffmpeg", response_model=CheckFFmpegResponse)
async def check_ffmpeg(media_tool: MediaTool = Depends(get_media_tool)):
    try:
        result = await media_tool.run(["-version"])
    except MediaToolError as exc:
        logger.warning("check_ffmpeg.missing", error=exc.message)
        return CheckFFmpegResponse(
            installed=False,
            message="FFmpeg is not installed. Please install FFmpeg to generate videos.",
        )
    version = result.stdout.splitlines()[0] if result.stdout else ""
    return CheckFFmpegResponse(installed=True, version=version, message="FFmpeg is installed")


# ---------------------------------------------------------------------------
# Analysis & drafting
# ---------------------------------------------------------------------------


@router.post("/analyze-image", response_model=AnalyzeImageResponse)
async def analyze_image(
    image: Optional[UploadFile] = File(None),
    category: str = Form("general"),
    niche: str = Form("real-estate"),
    session_id: Optional[str] = Form(None),
    describer: ImageDescriber = Depends(get_describer),
    store: SessionStore = Depends(get_session_store),
):
    """Describe one uploaded image; the upload is deleted afterwards either way."""
    asset = await save_upload(image, category)
    try:
        item = await analyze_asset(asset, niche, describer)
    finally:
        discard_files([asset.path])

    session = await _load_or_create_session(store, session_id, niche)
    session.record_analysis(asset.file_name, item)
    await store.save(session)

    return AnalyzeImageResponse(
        analysis=item.description,
        features=item.features,
        category=item.category_label,
        session_id=session.session_id,
    )


@router.post("/analyze-images", response_model=AnalyzeImagesResponse)
async def analyze_images(
    images: list[UploadFile] = File(...),
    categories: list[str] = Form(default=[]),
    niche: str = Form("real-estate"),
    session_id: Optional[str] = Form(None),
    describer: ImageDescriber = Depends(get_describer),
    store: SessionStore = Depends(get_session_store),
):
    """Describe several images one at a time; failures are reported per image."""
    assets = await save_uploads(images, categories)
    try:
        outcomes = await analyze_batch(assets, niche, describer)
    finally:
        discard_files([a.path for a in assets])

    session = await _load_or_create_session(store, session_id, niche)
    for outcome in outcomes:
        if outcome.ok and outcome.analysis is not None:
            session.record_analysis(outcome.file_name, outcome.analysis)
    await store.save(session)

    return AnalyzeImagesResponse(session_id=session.session_id, results=outcomes)


@router.post("/generate-script", response_model=GenerateScriptResponse)
async def generate_script(
    request: GenerateScriptRequest,
    store: SessionStore = Depends(get_session_store),
    drafter: ScriptDrafter = Depends(get_drafter),
):
    session = await store.load(request.session_id) if request.session_id else None
    analysis = request.image_analysis or (session.analysis if session else {})

    script = await draft_ad_script(analysis, request.niche, drafter, user_script=request.user_script)

    if session is not None:
        session.set_script(script)
        await store.save(session)

    return GenerateScriptResponse(script=script, session_id=request.session_id)


# ---------------------------------------------------------------------------
# Voiceover & video
# ---------------------------------------------------------------------------


@router.post("/generate-voiceover", response_model=VoiceoverResponse)
async def generate_voiceover(
    request: VoiceoverRequest,
    synthesizer: SpeechSynthesizer = Depends(get_synthesizer),
):
    spoken = sanitize(request.script)
    if not spoken:
        raise SynthesisError("Script is empty after removing stage directions", stage="voiceover")

    audio = await synthesizer.synthesize(spoken, request.voice)

    output_dir = Path(settings.output_base_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    audio_file = f"voiceover-{int(time.time() * 1000)}.mp3"
    (output_dir / audio_file).write_bytes(audio)

    logger.info("voiceover.generated", audio_file=audio_file, size_kb=round(len(audio) / 1024, 2))
    return VoiceoverResponse(
        audio_path=f"/output/{audio_file}",
        audio_file=audio_file,
        duration=estimate_speech_duration(spoken, settings.speech_chars_per_second),
    )


@router.post("/generate-video", response_model=VideoResult)
async def generate_video(
    http_request: Request,
    images: list[UploadFile] = File(...),
    categories: list[str] = Form(default=[]),
    script: str = Form(...),
    voice: str = Form("alloy"),
    music: str = Form("upbeat"),
    music_volume: int = Form(15),
    aspect_ratio: str = Form("16:9"),
    niche: str = Form("real-estate"),
    capabilities: Capabilities = Depends(get_capabilities),
):
    """Assemble the final ad; blocks until the run finishes or times out."""
    assets = await save_uploads(images, categories)
    try:
        video_request = VideoRequest(
            assets=assets,
            script=script,
            voice=voice,
            music=music,
            music_gain=music_volume,
            aspect_ratio=aspect_ratio,
            niche=niche,
        )
    except ValidationError as exc:
        discard_files([a.path for a in assets])
        raise HTTPException(status_code=422, detail=exc.errors(include_url=False, include_context=False))

    cancel_event = asyncio.Event()
    watcher = asyncio.create_task(_watch_disconnect(http_request, cancel_event))
    try:
        return await asyncio.wait_for(
            run_pipeline(video_request, capabilities, cancel_event=cancel_event),
            timeout=settings.run_timeout_sec,
        )
    except asyncio.TimeoutError:
        logger.error("generate_video.timeout", timeout_sec=settings.run_timeout_sec)
        raise HTTPException(
            status_code=504,
            detail=f"Video generation exceeded {settings.run_timeout_sec}s",
        )
    finally:
        cancel_event.set()
        watcher.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watcher
