"""Voiceover node — sanitizes the script, plans image timing, synthesizes speech."""

from __future__ import annotations

import structlog

from adforge.errors import SynthesisError
from adforge.graph.state import RunContext, RunState
from adforge.models.run import RunStage
from adforge.nodes.stage import pipeline_stage
from adforge.planning.allocator import plan_timing
from adforge.planning.sanitizer import sanitize

logger = structlog.get_logger()


@pipeline_stage("voiceover", completes=RunStage.VOICEOVER_SYNTHESIZED)
async def voiceover(state: RunState, ctx: RunContext) -> dict:
    """Lock the script in: sanitize → timing plan → TTS → ``voiceover.mp3``."""
    raw_script = state.get("script") or ""
    spoken = sanitize(raw_script)
    if not spoken:
        raise SynthesisError("Script is empty after removing stage directions")

    logger.info(
        "voiceover.script_sanitized",
        original_len=len(raw_script),
        cleaned_len=len(spoken),
    )

    timing = plan_timing(
        state["assets"],
        spoken,
        vocabulary=ctx.vocabulary,
        chars_per_second=ctx.chars_per_second,
    )

    audio = await ctx.capabilities.synthesizer.synthesize(spoken, state.get("voice") or "alloy")

    path = ctx.workspace.voiceover_path
    path.write_bytes(audio)

    logger.info(
        "voiceover.saved",
        path=str(path),
        size_kb=round(len(audio) / 1024, 2),
        estimated_sec=timing.total_duration_sec,
        timing_strategy=timing.strategy,
    )
    return {
        "sanitized_script": spoken,
        "timing": timing,
        "voiceover_path": str(path),
    }
