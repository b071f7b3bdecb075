"""
TTS Provider Factory.

Selects the speech synthesis provider once, from configuration.
"""
import logging
from typing import Optional

from mock_me.core.config import get_provider_config, get_settings
from mock_me.core.storage import AudioAssetStore, audio_store
from mock_me.providers.tts.base import BaseTTSProvider, TTSProvider
from mock_me.providers.tts.elevenlabs_provider import ElevenLabsTTSProvider
from mock_me.providers.tts.piper_provider import PiperTTSProvider

logger = logging.getLogger(__name__)


class TTSProviderFactory:
    """
    Factory for creating speech synthesis provider instances.
    """

    @staticmethod
    def create(
        provider_type: Optional[str] = None,
        asset_store: Optional[AudioAssetStore] = None,
    ) -> BaseTTSProvider:
        settings = get_settings()
        tts_config = get_provider_config().get("providers", {}).get("tts", {})
        provider_type = (provider_type or settings.tts_provider).lower()
        asset_store = asset_store or audio_store

        logger.info(f"Creating TTS provider: {provider_type}")

        if provider_type == TTSProvider.ELEVENLABS.value:
            cfg = tts_config.get("elevenlabs", {})
            return ElevenLabsTTSProvider(
                asset_store=asset_store,
                api_key=settings.eleven_labs_api_key,
                voice_id=cfg.get("voice_id", "EXAVITQu4vr4xnSDxMaL"),
                model_id=cfg.get("model_id", "eleven_multilingual_v2"),
                api_url=cfg.get("api_url", "https://api.elevenlabs.io/v1/text-to-speech"),
                voice_settings=cfg.get("voice_settings"),
                timeout=float(cfg.get("timeout", 30)),
            )

        elif provider_type == TTSProvider.PIPER.value:
            cfg = tts_config.get("piper", {})
            return PiperTTSProvider(
                asset_store=asset_store,
                mode=settings.piper_mode.lower(),
                server_url=settings.piper_url,
                binary_path=settings.piper_binary_path,
                model_path=settings.piper_model_path,
                voice=cfg.get("voice", "en_US-amy-medium"),
                timeout=float(cfg.get("timeout", 30)),
            )

        else:
            raise ValueError(f"Unsupported TTS provider: {provider_type}")


# Global provider instance (lazy loaded)
_tts_provider: Optional[BaseTTSProvider] = None


def get_tts_provider() -> BaseTTSProvider:
    """Get or create the global speech synthesis provider."""
    global _tts_provider
    if _tts_provider is None:
        _tts_provider = TTSProviderFactory.create()
    return _tts_provider
