"""FastAPI dependency injection — capabilities and the session store."""

from __future__ import annotations

from functools import lru_cache

from adforge.session import InMemorySessionStore, SessionStore
from adforge.tools.capabilities import (
    Capabilities,
    ImageDescriber,
    MediaTool,
    ScriptDrafter,
    SpeechSynthesizer,
)
from adforge.tools.media_tool import FFmpegTool
from adforge.tools.openai_vision import OpenAIImageDescriber
from adforge.tools.script_drafter import OpenAIScriptDrafter
from adforge.tools.tts import build_synthesizer


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    return InMemorySessionStore()


@lru_cache(maxsize=1)
def get_media_tool() -> MediaTool:
    return FFmpegTool()


# Credential-backed capabilities are built lazily so a missing key surfaces
# as a ConfigurationError on the request that needs it, not at startup.


@lru_cache(maxsize=1)
def get_describer() -> ImageDescriber:
    return OpenAIImageDescriber()


@lru_cache(maxsize=1)
def get_drafter() -> ScriptDrafter:
    return OpenAIScriptDrafter()


@lru_cache(maxsize=1)
def get_synthesizer() -> SpeechSynthesizer:
    return build_synthesizer()


def get_capabilities() -> Capabilities:
    return Capabilities(synthesizer=get_synthesizer(), media_tool=get_media_tool())
