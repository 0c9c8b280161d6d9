"""Application configuration loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # LLM API Keys
    openai_api_key: str = ""
    elevenlabs_api_key: str = ""

    # Model Configuration
    vision_model: str = "gpt-4o"
    draft_model: str = "gpt-4o-mini"
    tts_model: str = "tts-1"

    # Speech synthesis backend: "openai" | "elevenlabs"
    tts_provider: str = "openai"
    # OpenAI voice name → ElevenLabs voice ID (only used with tts_provider="elevenlabs")
    elevenlabs_voice_ids: dict[str, str] = {}

    # Vision retry policy
    vision_max_attempts: int = 3
    vision_backoff_sec: float = 1.0

    # Timing heuristics
    speech_chars_per_second: int = 15
    # Extra category → keyword phrases, merged over the built-in vocabulary
    category_keywords: dict[str, list[str]] = {}

    # Media tool
    ffmpeg_binary: str = "ffmpeg"
    ffmpeg_timeout_sec: int = 300
    video_fps: int = 30

    # Limits
    max_upload_bytes: int = 50 * 1024 * 1024
    max_upload_files: int = 20
    run_timeout_sec: int = 600

    # Directories
    output_base_dir: str = str(_PROJECT_ROOT / "output")
    upload_dir: str = str(_PROJECT_ROOT / "uploads")
    scratch_dir: str = ""  # empty → system temp dir
    assets_dir: str = str(_PROJECT_ROOT / "assets")

    # CORS
    allowed_origins: str = ""


def get_assets_dir() -> Path:
    return Path(settings.assets_dir)


def get_music_dir() -> Path:
    return get_assets_dir() / "music"


settings = Settings()
