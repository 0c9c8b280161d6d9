"""FFmpeg argument vectors for each pipeline stage.

Builders return argument lists without the binary name; ``FFmpegTool``
prepends it. Keeping them pure makes the exact filters easy to assert on.
"""

from __future__ import annotations

from pathlib import Path

MUSIC_FADE_OUT_SEC = 3

_COMMON = ["-hide_banner", "-y"]


def format_gain(percent: int) -> str:
    """Music gain percent → FFmpeg volume factor (50 → "0.5", 15 → "0.15")."""
    return f"{percent / 100:g}"


def convert_image_args(source: str, dest: str) -> list[str]:
    """Decode anything FFmpeg understands into a single still frame."""
    return [*_COMMON, "-i", source, "-frames:v", "1", "-q:v", "2", dest]


def still_clip_args(
    image_path: str,
    clip_path: str,
    duration_sec: float,
    width: int,
    height: int,
    fps: int = 30,
) -> list[str]:
    """Silent clip showing one image, letterboxed to width×height."""
    vf = (
        f"scale={width}:{height}:force_original_aspect_ratio=decrease,"
        f"pad={width}:{height}:(ow-iw)/2:(oh-ih)/2,setsar=1"
    )
    return [
        *_COMMON,
        "-loop", "1",
        "-i", image_path,
        "-t", f"{duration_sec:.3f}",
        "-vf", vf,
        "-r", str(fps),
        "-c:v", "libx264",
        "-pix_fmt", "yuv420p",
        clip_path,
    ]


def concat_manifest(clip_paths: list[str]) -> str:
    """Concat-demuxer manifest, one ``file '<path>'`` line per clip in order."""
    lines = []
    for clip in clip_paths:
        posix = Path(clip).as_posix().replace("'", "'\\''")
        lines.append(f"file '{posix}'")
    return "\n".join(lines) + "\n"


def concat_args(manifest_path: str, output_path: str) -> list[str]:
    """Stream-copy concatenation (no re-encode)."""
    return [*_COMMON, "-f", "concat", "-safe", "0", "-i", manifest_path, "-c", "copy", output_path]


def voiceover_only_args(video_path: str, voiceover_path: str, output_path: str) -> list[str]:
    return [
        *_COMMON,
        "-i", video_path,
        "-i", voiceover_path,
        "-map", "0:v",
        "-map", "1:a",
        "-c:v", "copy",
        "-c:a", "aac",
        "-shortest",
        output_path,
    ]


def music_mix_filter(gain_percent: int, total_duration_sec: float) -> str:
    """Music at *gain_percent* with a fade ending at the last second, voice at full gain."""
    fade_start = max(0.0, total_duration_sec - MUSIC_FADE_OUT_SEC)
    return (
        f"[1:a]volume={format_gain(gain_percent)},"
        f"afade=t=out:st={fade_start:g}:d={MUSIC_FADE_OUT_SEC}[music];"
        "[2:a]volume=1.0[voice];"
        "[music][voice]amix=inputs=2:duration=shortest:dropout_transition=2[aout]"
    )


def music_mix_args(
    video_path: str,
    music_path: str,
    voiceover_path: str,
    output_path: str,
    gain_percent: int,
    total_duration_sec: float,
) -> list[str]:
    """Mix voiceover with a looping music bed and mux onto the silent video."""
    return [
        *_COMMON,
        "-i", video_path,
        "-stream_loop", "-1",
        "-i", music_path,
        "-i", voiceover_path,
        "-filter_complex", music_mix_filter(gain_percent, total_duration_sec),
        "-map", "0:v",
        "-map", "[aout]",
        "-c:v", "copy",
        "-c:a", "aac",
        "-shortest",
        output_path,
    ]
