"""Concatenation node — stream-copies the per-image clips into one silent video."""

from __future__ import annotations

from adforge.graph.state import RunContext, RunState
from adforge.models.run import RunStage
from adforge.nodes.stage import pipeline_stage
from adforge.tools.ffmpeg_commands import concat_args, concat_manifest


@pipeline_stage("concatenate", completes=RunStage.CONCATENATED)
async def concatenate(state: RunState, ctx: RunContext) -> dict:
    manifest = ctx.workspace.manifest_path
    manifest.write_text(concat_manifest(state["clips"] or []), encoding="utf-8")

    output = ctx.workspace.silent_video_path
    await ctx.capabilities.media_tool.run(concat_args(str(manifest), str(output)))
    return {"silent_video_path": str(output)}
