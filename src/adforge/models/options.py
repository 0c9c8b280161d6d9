"""Recognized run options — niche, voice, music, aspect ratio."""

from typing import Literal

Niche = Literal["real-estate", "e-commerce", "fitness", "coaching"]
Voice = Literal["alloy", "echo", "fable", "onyx", "nova", "shimmer"]
MusicTrack = Literal["upbeat", "corporate", "calm", "inspiring", "none"]
AspectRatio = Literal["16:9", "9:16", "1:1"]

NICHES: tuple[str, ...] = ("real-estate", "e-commerce", "fitness", "coaching")
VOICES: tuple[str, ...] = ("alloy", "echo", "fable", "onyx", "nova", "shimmer")
MUSIC_TRACKS: tuple[str, ...] = ("upbeat", "corporate", "calm", "inspiring", "none")

DEFAULT_MUSIC_GAIN = 15
MIN_MUSIC_GAIN = 5
MAX_MUSIC_GAIN = 50

# (width, height) per aspect ratio
RESOLUTIONS: dict[str, tuple[int, int]] = {
    "16:9": (1920, 1080),
    "9:16": (1080, 1920),
    "1:1": (1080, 1080),
}


def resolution_for(aspect_ratio: str) -> tuple[int, int]:
    """Return output (width, height); unknown ratios fall back to 16:9."""
    return RESOLUTIONS.get(aspect_ratio, RESOLUTIONS["16:9"])
