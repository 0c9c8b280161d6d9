"""Finalize node — reports the final artifact's path, size and duration."""

from __future__ import annotations

import os

from adforge.errors import MediaToolError
from adforge.graph.state import RunContext, RunState
from adforge.models.output import TimingSummaryItem, VideoResult
from adforge.models.run import RunStage
from adforge.nodes.stage import pipeline_stage


@pipeline_stage("finalize", completes=RunStage.FINALIZED)
async def finalize(state: RunState, ctx: RunContext) -> dict:
    final_path = state["final_video_path"]
    if not final_path or not os.path.isfile(final_path):
        raise MediaToolError("Media tool reported success but produced no output file")

    size = os.path.getsize(final_path)
    timing = state["timing"]
    file_name = ctx.workspace.final_file_name
    result = VideoResult(
        run_id=state["run_id"],
        video_file=file_name,
        video_url=f"/output/{file_name}",
        video_path=final_path,
        size_bytes=size,
        size_mb=round(size / (1024 * 1024), 2),
        duration_sec=timing.total_duration_sec,
        timing_strategy=timing.strategy,
        timing=[
            TimingSummaryItem(
                file_name=e.asset.file_name,
                category_label=e.asset.category_label,
                duration_sec=round(e.duration_sec, 3),
            )
            for e in timing.entries
        ],
    )
    return {"result": result.model_dump()}
