"""Image normalization node — re-encodes every upload to a canonical JPEG."""

from __future__ import annotations

import asyncio

import structlog

from adforge.graph.state import RunContext, RunState
from adforge.models.run import RunStage
from adforge.nodes.stage import pipeline_stage
from adforge.tools.ffmpeg_commands import convert_image_args
from adforge.tools.image_convert import NORMALIZED_SUFFIX, DecodeFailure, normalize_image

logger = structlog.get_logger()


@pipeline_stage("normalize_images", completes=RunStage.IMAGES_NORMALIZED)
async def normalize_images(state: RunState, ctx: RunContext) -> dict:
    """Write ``images/000.jpg``, ``001.jpg``, ... in display order.

    Pillow handles the common formats; anything it can't decode is handed
    to the media tool, which reads far more containers and codecs.
    """
    timing = state["timing"]
    normalized: list[str] = []

    for index, entry in enumerate(timing.entries):
        source = entry.asset.path
        dest = str(ctx.workspace.image_path(index, NORMALIZED_SUFFIX))
        try:
            await asyncio.to_thread(normalize_image, source, dest)
        except DecodeFailure as exc:
            logger.warning(
                "normalize_images.pillow_failed",
                file_name=entry.asset.file_name,
                error=str(exc),
            )
            await ctx.capabilities.media_tool.run(convert_image_args(source, dest))
        normalized.append(dest)

    return {"normalized_images": normalized}
