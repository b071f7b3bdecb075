"""
Speech synthesis provider interface.

A provider turns text into an audio asset stored under the uploads
directory and returns the URL the static mount serves it from. Providers
never raise for provider-side problems; they return a ``Failure``.
"""
from abc import ABC, abstractmethod
from enum import Enum

from mock_me.core.errors import SpeechSynthesisError
from mock_me.core.result import Result, failure
from mock_me.core.storage import AudioAssetStore


class TTSProvider(str, Enum):
    """Supported speech synthesis backends."""
    PIPER = "piper"
    ELEVENLABS = "elevenlabs"


class BaseTTSProvider(ABC):
    """
    Abstract base class for speech synthesis providers.
    """

    name: str = "base"

    def __init__(self, asset_store: AudioAssetStore):
        self.asset_store = asset_store

    async def synthesize(self, text: str) -> Result[str, SpeechSynthesisError]:
        """
        Synthesize ``text`` and return the public URL of the audio asset.
        """
        if not text or not text.strip():
            return failure(SpeechSynthesisError("Cannot synthesize empty text"))
        return await self._synthesize(text.strip())

    @abstractmethod
    async def _synthesize(self, text: str) -> Result[str, SpeechSynthesisError]:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the provider is reachable and configured."""
        pass

    async def close(self) -> None:
        """Release provider resources."""
        return None
