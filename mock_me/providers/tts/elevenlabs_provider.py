"""
ElevenLabs speech synthesis provider.

Hosted text-to-speech returning MP3 audio.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from mock_me.core.errors import SpeechSynthesisError
from mock_me.core.result import Result, failure, success
from mock_me.core.storage import AudioAssetStore
from mock_me.providers.tts.base import BaseTTSProvider

logger = logging.getLogger(__name__)

DEFAULT_VOICE_SETTINGS = {
    "stability": 0.8,
    "similarity_boost": 0.8,
    "style": 0.2,
    "use_speaker_boost": True,
}


class ElevenLabsTTSProvider(BaseTTSProvider):
    """
    ElevenLabs provider.

    Posts the text with voice settings and stores the returned MP3 bytes
    as ``audio_<ms>_<rand>.mp3``.
    """

    name = "elevenlabs"

    def __init__(
        self,
        asset_store: AudioAssetStore,
        api_key: Optional[str],
        voice_id: str = "EXAVITQu4vr4xnSDxMaL",
        model_id: str = "eleven_multilingual_v2",
        api_url: str = "https://api.elevenlabs.io/v1/text-to-speech",
        voice_settings: Optional[Dict[str, Any]] = None,
        timeout: float = 30.0,
    ):
        super().__init__(asset_store)
        self.api_key = api_key
        self.voice_id = voice_id
        self.model_id = model_id
        self.api_url = api_url.rstrip("/")
        self.voice_settings = voice_settings or dict(DEFAULT_VOICE_SETTINGS)

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
        )

    async def _synthesize(self, text: str) -> Result[str, SpeechSynthesisError]:
        if not self.api_key:
            return failure(SpeechSynthesisError(
                "ElevenLabs API key is not configured (set ELEVEN_LABS_API_KEY)"
            ))

        headers = {
            "Accept": "audio/mpeg",
            "Content-Type": "application/json",
            "xi-api-key": self.api_key,
        }
        payload = {
            "text": text,
            "model_id": self.model_id,
            "voice_settings": self.voice_settings,
        }

        try:
            response = await self._client.post(
                f"{self.api_url}/{self.voice_id}",
                json=payload,
                headers=headers,
            )
        except httpx.RequestError as e:
            logger.error(f"ElevenLabs request error: {e}")
            return failure(SpeechSynthesisError(f"ElevenLabs request failed: {e}"))

        if not response.is_success:
            logger.error(f"ElevenLabs API error: {response.status_code} - {response.text[:200]}")
            return failure(SpeechSynthesisError(
                f"ElevenLabs returned status {response.status_code}"
            ))

        if not response.content:
            return failure(SpeechSynthesisError("ElevenLabs returned no audio"))

        try:
            path = await self.asset_store.save_bytes(response.content, "audio", ".mp3")
        except OSError as e:
            logger.error(f"Failed to store synthesized audio: {e}")
            return failure(SpeechSynthesisError(f"Could not store synthesized audio: {e}"))

        return success(self.asset_store.public_url(path))

    async def health_check(self) -> bool:
        return bool(self.api_key)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
