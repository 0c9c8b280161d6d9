"""Audio mix node — voiceover plus optional looping music bed onto the video."""

from __future__ import annotations

from pathlib import Path

import structlog

from adforge.graph.state import RunContext, RunState
from adforge.models.run import RunStage
from adforge.nodes.stage import pipeline_stage
from adforge.tools.ffmpeg_commands import music_mix_args, voiceover_only_args

logger = structlog.get_logger()


def resolve_music_path(music: str | None, music_dir: Path) -> Path | None:
    """Return the music bed file for *music*, or None for "none"/missing files."""
    if not music or music == "none":
        return None
    path = music_dir / f"{music}.mp3"
    if not path.is_file():
        logger.warning("mix_audio.music_missing", music=music, path=str(path))
        return None
    return path


@pipeline_stage("mix_audio", completes=RunStage.AUDIO_MIXED)
async def mix_audio(state: RunState, ctx: RunContext) -> dict:
    video = state["silent_video_path"]
    voiceover = state["voiceover_path"]
    final_path = str(ctx.workspace.final_path)
    music_path = resolve_music_path(state.get("music"), ctx.music_dir)

    if music_path is not None:
        gain = state.get("music_gain") or 15
        logger.info("mix_audio.music_bed", music=state.get("music"), gain_percent=gain)
        args = music_mix_args(
            video,
            str(music_path),
            voiceover,
            final_path,
            gain_percent=gain,
            total_duration_sec=state["timing"].total_duration_sec,
        )
        audio_mode = "music_mix"
    else:
        logger.info("mix_audio.voiceover_only", music=state.get("music"))
        args = voiceover_only_args(video, voiceover, final_path)
        audio_mode = "voiceover_only"

    await ctx.capabilities.media_tool.run(args)
    return {"final_video_path": final_path, "audio_mode": audio_mode}
