"""Conditional edge routing functions for the pipeline graph."""

from __future__ import annotations

from typing import Literal

from adforge.graph.state import RunState

END = "__end__"


def _failed(state: RunState) -> bool:
    return state.get("failure") is not None


def route_after_voiceover(state: RunState) -> Literal["normalize_images", "__end__"]:
    """Route after voiceover: proceed to image normalization, or stop on failure."""
    return END if _failed(state) else "normalize_images"


def route_after_normalize(state: RunState) -> Literal["build_clips", "__end__"]:
    return END if _failed(state) else "build_clips"


def route_after_clips(state: RunState) -> Literal["concatenate", "__end__"]:
    return END if _failed(state) else "concatenate"


def route_after_concat(state: RunState) -> Literal["mix_audio", "__end__"]:
    return END if _failed(state) else "mix_audio"


def route_after_mix(state: RunState) -> Literal["finalize", "__end__"]:
    return END if _failed(state) else "finalize"
