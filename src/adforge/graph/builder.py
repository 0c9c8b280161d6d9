"""StateGraph definition — assembles the strictly sequential run stages."""

from __future__ import annotations

from functools import lru_cache

from langgraph.graph import END, StateGraph

from adforge.graph.edges import (
    route_after_clips,
    route_after_concat,
    route_after_mix,
    route_after_normalize,
    route_after_voiceover,
)
from adforge.graph.state import RunState
from adforge.nodes.audio_mixer import mix_audio
from adforge.nodes.clip_builder import build_clips
from adforge.nodes.concatenator import concatenate
from adforge.nodes.finalizer import finalize
from adforge.nodes.image_normalizer import normalize_images
from adforge.nodes.voiceover import voiceover


def build_graph():
    """Build and compile the video assembly graph.

    voiceover → normalize_images → build_clips → concatenate → mix_audio →
    finalize, with every stage routing to END as soon as the state carries
    a failure. Nothing ever routes backwards.

    Returns:
        Compiled StateGraph ready for invocation.
    """
    graph = StateGraph(RunState)

    graph.add_node("voiceover", voiceover)
    graph.add_node("normalize_images", normalize_images)
    graph.add_node("build_clips", build_clips)
    graph.add_node("concatenate", concatenate)
    graph.add_node("mix_audio", mix_audio)
    graph.add_node("finalize", finalize)

    graph.set_entry_point("voiceover")

    graph.add_conditional_edges(
        "voiceover",
        route_after_voiceover,
        {"normalize_images": "normalize_images", END: END},
    )
    graph.add_conditional_edges(
        "normalize_images",
        route_after_normalize,
        {"build_clips": "build_clips", END: END},
    )
    graph.add_conditional_edges(
        "build_clips",
        route_after_clips,
        {"concatenate": "concatenate", END: END},
    )
    graph.add_conditional_edges(
        "concatenate",
        route_after_concat,
        {"mix_audio": "mix_audio", END: END},
    )
    graph.add_conditional_edges(
        "mix_audio",
        route_after_mix,
        {"finalize": "finalize", END: END},
    )
    graph.add_edge("finalize", END)

    return graph.compile()


@lru_cache(maxsize=1)
def get_pipeline_graph():
    """Compiled graph singleton; runs share it, never its state."""
    return build_graph()
