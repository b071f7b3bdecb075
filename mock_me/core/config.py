"""
Core configuration module for the Mock-Me interview service.
Loads settings from environment variables and config files.
"""
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    app_name: str = "Mock-Me"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: List[str] = ["http://localhost:3000"]

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "mock_me"

    # Audio assets
    uploads_dir: str = "./uploads"

    # JWT validation (tokens are issued elsewhere)
    auth_enabled: bool = False
    jwt_secret_key: str = "change-me"
    jwt_algorithm: str = "HS256"

    # Speech synthesis
    tts_provider: str = "piper"
    piper_mode: str = "binary"
    piper_url: str = "http://localhost:59125"
    piper_binary_path: str = "piper"
    piper_model_path: Optional[str] = None
    piper_voice: Optional[str] = None
    eleven_labs_api_key: Optional[str] = None
    eleven_labs_voice_id: Optional[str] = None

    # Transcription
    stt_provider: str = "deepgram"
    deepgram_api_key: Optional[str] = None
    whisper_model: Optional[str] = None

    # Text generation
    llm_provider: str = "gemini"
    gemini_api_key: Optional[str] = None
    ollama_api_url: str = "http://localhost:11434"
    provider_llm_model: Optional[str] = None

    # Voice interview sessions
    feedback_in_background: bool = True
    session_ttl_minutes: int = 180
    audio_retention_hours: int = 0
    housekeeping_interval_seconds: int = 300

    @property
    def audio_dir(self) -> Path:
        return Path(self.uploads_dir) / "audio"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_provider_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load provider defaults from YAML file.
    Environment variables override config values.
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config" / "providers.yaml"
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Provider config not found: {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f)

    settings = get_settings()
    providers = config.setdefault("providers", {})

    if settings.provider_llm_model:
        llm = providers.setdefault("llm", {})
        llm.setdefault(settings.llm_provider, {})["model"] = settings.provider_llm_model

    if settings.eleven_labs_voice_id:
        providers.setdefault("tts", {}).setdefault("elevenlabs", {})["voice_id"] = settings.eleven_labs_voice_id

    if settings.piper_voice:
        providers.setdefault("tts", {}).setdefault("piper", {})["voice"] = settings.piper_voice

    if settings.whisper_model:
        providers.setdefault("stt", {}).setdefault("faster-whisper", {})["model"] = settings.whisper_model

    return config


@lru_cache()
def get_provider_config() -> Dict[str, Any]:
    """Get cached provider configuration."""
    return load_provider_config()
