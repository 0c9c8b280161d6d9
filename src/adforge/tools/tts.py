"""Speech synthesis — OpenAI TTS (default) or ElevenLabs."""

from __future__ import annotations

import structlog
from elevenlabs import AsyncElevenLabs, VoiceSettings
from openai import AsyncOpenAI

from adforge.config import settings
from adforge.errors import ConfigurationError, SynthesisError
from adforge.tools.capabilities import SpeechSynthesizer

logger = structlog.get_logger()

_ELEVENLABS_VOICE_SETTINGS = VoiceSettings(
    stability=0.50, similarity_boost=0.75, style=0.00, speed=1.0,
)


class OpenAISpeechSynthesizer:
    """``SpeechSynthesizer`` using OpenAI's ``audio.speech`` endpoint."""

    def __init__(self, model: str | None = None, api_key: str | None = None):
        key = api_key if api_key is not None else settings.openai_api_key
        if not key:
            raise ConfigurationError("OPENAI_API_KEY is not configured", stage="voiceover")
        self.model = model or settings.tts_model
        self._client = AsyncOpenAI(api_key=key)

    async def synthesize(self, text: str, voice: str) -> bytes:
        logger.info("tts.openai.start", voice=voice, text_len=len(text))
        try:
            response = await self._client.audio.speech.create(
                model=self.model,
                voice=voice or "alloy",
                input=text,
                speed=1.0,
            )
        except Exception as exc:
            raise SynthesisError(f"OpenAI TTS failed: {exc}", stage="voiceover") from exc

        audio = response.content
        if not audio:
            raise SynthesisError(f"OpenAI TTS returned empty audio for voice={voice}", stage="voiceover")

        logger.info("tts.openai.done", bytes=len(audio))
        return audio


class ElevenLabsSpeechSynthesizer:
    """``SpeechSynthesizer`` using ElevenLabs; voice names map to voice IDs."""

    def __init__(self, voice_ids: dict[str, str] | None = None, api_key: str | None = None):
        key = api_key if api_key is not None else settings.elevenlabs_api_key
        if not key:
            raise ConfigurationError("ELEVENLABS_API_KEY is not configured", stage="voiceover")
        self.voice_ids = voice_ids if voice_ids is not None else settings.elevenlabs_voice_ids
        self._client = AsyncElevenLabs(api_key=key)

    async def synthesize(self, text: str, voice: str) -> bytes:
        voice_id = self.voice_ids.get(voice)
        if not voice_id:
            raise ConfigurationError(
                f"No ElevenLabs voice ID configured for voice '{voice}'", stage="voiceover"
            )

        logger.info("tts.elevenlabs.start", voice=voice, voice_id=voice_id, text_len=len(text))
        chunks: list[bytes] = []
        try:
            audio_iter = self._client.text_to_speech.convert(
                voice_id=voice_id,
                text=text,
                model_id="eleven_multilingual_v2",
                voice_settings=_ELEVENLABS_VOICE_SETTINGS,
            )
            async for chunk in audio_iter:
                chunks.append(chunk)
        except Exception as exc:
            raise SynthesisError(f"ElevenLabs TTS failed: {exc}", stage="voiceover") from exc

        audio = b"".join(chunks)
        if not audio:
            raise SynthesisError(
                f"ElevenLabs returned empty audio for voice_id={voice_id}", stage="voiceover"
            )

        logger.info("tts.elevenlabs.done", bytes=len(audio))
        return audio


def build_synthesizer(provider: str | None = None) -> SpeechSynthesizer:
    """Return the configured synthesizer (``settings.tts_provider``)."""
    use = provider or settings.tts_provider
    if use == "elevenlabs":
        return ElevenLabsSpeechSynthesizer()
    if use == "openai":
        return OpenAISpeechSynthesizer()
    raise ConfigurationError(f"Unknown TTS provider '{use}'", stage="voiceover")
