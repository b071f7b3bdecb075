"""
STT Provider Factory.

Selects the transcription provider once, from configuration.
"""
import logging
from typing import Optional

from mock_me.core.config import get_provider_config, get_settings
from mock_me.providers.stt.base import BaseTranscriber, STTProvider
from mock_me.providers.stt.deepgram_provider import DeepgramTranscriber
from mock_me.providers.stt.faster_whisper_provider import FasterWhisperTranscriber

logger = logging.getLogger(__name__)


class STTProviderFactory:
    """
    Factory for creating transcription provider instances.
    """

    @staticmethod
    def create(provider_type: Optional[str] = None) -> BaseTranscriber:
        settings = get_settings()
        stt_config = get_provider_config().get("providers", {}).get("stt", {})
        provider_type = (provider_type or settings.stt_provider).lower()

        logger.info(f"Creating STT provider: {provider_type}")

        if provider_type == STTProvider.DEEPGRAM.value:
            cfg = stt_config.get("deepgram", {})
            return DeepgramTranscriber(
                api_key=settings.deepgram_api_key,
                api_url=cfg.get("api_url", "https://api.deepgram.com/v1/listen"),
                model=cfg.get("model", "nova-2"),
                smart_format=bool(cfg.get("smart_format", True)),
                timeout=float(cfg.get("timeout", 60)),
            )

        elif provider_type == STTProvider.FASTER_WHISPER.value:
            cfg = stt_config.get("faster-whisper", {})
            return FasterWhisperTranscriber(
                model_name=cfg.get("model", "base"),
                device=cfg.get("device", "cpu"),
                compute_type=cfg.get("compute_type", "int8"),
                language=cfg.get("language", "en"),
            )

        else:
            raise ValueError(f"Unsupported STT provider: {provider_type}")


# Global provider instance (lazy loaded)
_stt_provider: Optional[BaseTranscriber] = None


def get_stt_provider() -> BaseTranscriber:
    """Get or create the global transcription provider."""
    global _stt_provider
    if _stt_provider is None:
        _stt_provider = STTProviderFactory.create()
    return _stt_provider
