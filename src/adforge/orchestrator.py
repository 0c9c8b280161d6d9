"""Pipeline orchestrator — runs the stage graph for one request and always cleans up."""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from adforge.config import get_music_dir, settings
from adforge.errors import PipelineError
from adforge.graph.builder import get_pipeline_graph
from adforge.graph.state import RunContext, RunState
from adforge.models.output import VideoResult
from adforge.models.run import RunStage, VideoRequest
from adforge.planning.vocabulary import KeywordVocabulary, build_vocabulary
from adforge.tools.capabilities import Capabilities
from adforge.workspace import RunWorkspace, discard_uploads

logger = structlog.get_logger()


def _initial_state(request: VideoRequest, run_id: str) -> RunState:
    return {
        "run_id": run_id,
        "assets": list(request.assets),
        "script": request.script,
        "voice": request.voice,
        "music": request.music,
        "music_gain": request.music_gain,
        "aspect_ratio": request.aspect_ratio,
        "niche": request.niche,
        "stage": RunStage.UPLOADED.value,
        "sanitized_script": None,
        "timing": None,
        "voiceover_path": None,
        "normalized_images": None,
        "clips": None,
        "silent_video_path": None,
        "final_video_path": None,
        "audio_mode": None,
        "result": None,
        "failure": None,
    }


async def run_pipeline(
    request: VideoRequest,
    capabilities: Capabilities,
    workspace: RunWorkspace | None = None,
    cancel_event: asyncio.Event | None = None,
    music_dir: Path | None = None,
    vocabulary: KeywordVocabulary | None = None,
) -> VideoResult:
    """Execute one run end to end and return the final artifact.

    The run owns its workspace and the uploaded files in *request*; all of
    them are deleted when this coroutine exits, whether it returns, raises,
    or is cancelled. Only a successful run keeps its final video.

    Raises:
        PipelineError: A stage failed or *cancel_event* was set; ``stage``
            names the failing stage and ``cause`` holds the stage error.
    """
    try:
        ws = workspace or RunWorkspace.create()
    except OSError as exc:
        discard_uploads(request.assets)
        logger.error("pipeline.workspace_failed", error=str(exc), uploads_removed=len(request.assets))
        raise PipelineError(
            f"Video generation failed at {RunStage.UPLOADED.value}: could not prepare the run workspace",
            stage=RunStage.UPLOADED.value,
            diagnostic=str(exc),
        ) from exc
    ws.adopt_uploads(request.assets)

    succeeded = False
    try:
        ctx = RunContext(
            workspace=ws,
            capabilities=capabilities,
            music_dir=music_dir or get_music_dir(),
            fps=settings.video_fps,
            chars_per_second=settings.speech_chars_per_second,
            vocabulary=vocabulary if vocabulary is not None else build_vocabulary(),
            cancel_event=cancel_event,
        )

        logger.info(
            "pipeline.start",
            run_id=ws.run_id,
            images=len(request.assets),
            voice=request.voice,
            music=request.music,
            music_gain=request.music_gain,
            aspect_ratio=request.aspect_ratio,
            niche=request.niche,
        )

        final_state = await get_pipeline_graph().ainvoke(
            _initial_state(request, ws.run_id),
            config={"configurable": {"run": ctx}},
        )

        failure = final_state.get("failure")
        if failure is not None:
            raise PipelineError(
                f"Video generation failed at {failure.stage}: {failure.message}",
                stage=failure.stage,
                diagnostic=failure.diagnostic,
                cause=failure,
            )

        result = VideoResult(**final_state["result"])
        succeeded = True
        logger.info(
            "pipeline.complete",
            run_id=ws.run_id,
            video_file=result.video_file,
            size_mb=result.size_mb,
            duration_sec=result.duration_sec,
            audio_mode=final_state.get("audio_mode"),
        )
        return result
    except asyncio.CancelledError:
        logger.warning("pipeline.cancelled", run_id=ws.run_id)
        raise
    finally:
        ws.cleanup(keep_final=succeeded)
