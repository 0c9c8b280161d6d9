"""Clip builder node — one silent, fixed-duration clip per normalized image."""

from __future__ import annotations

import structlog

from adforge.graph.state import RunContext, RunState
from adforge.models.options import resolution_for
from adforge.models.run import RunStage
from adforge.nodes.stage import pipeline_stage
from adforge.tools.ffmpeg_commands import still_clip_args

logger = structlog.get_logger()


@pipeline_stage("build_clips", completes=RunStage.CLIPS_BUILT)
async def build_clips(state: RunState, ctx: RunContext) -> dict:
    width, height = resolution_for(state.get("aspect_ratio") or "16:9")
    timing = state["timing"]
    images = state["normalized_images"] or []

    clips: list[str] = []
    for index, (image_path, entry) in enumerate(zip(images, timing.entries)):
        clip_path = str(ctx.workspace.clip_path(index))
        await ctx.capabilities.media_tool.run(
            still_clip_args(
                image_path,
                clip_path,
                entry.duration_sec,
                width,
                height,
                fps=ctx.fps,
            )
        )
        clips.append(clip_path)
        logger.info(
            "build_clips.clip_done",
            index=index + 1,
            total=len(images),
            duration_sec=round(entry.duration_sec, 3),
        )

    return {"clips": clips}
