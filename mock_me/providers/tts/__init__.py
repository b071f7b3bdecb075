"""
Text-to-Speech (TTS) providers.

Provides speech synthesis for interview greetings, questions and farewells.
"""
from mock_me.providers.tts.base import BaseTTSProvider, TTSProvider
from mock_me.providers.tts.elevenlabs_provider import ElevenLabsTTSProvider
from mock_me.providers.tts.piper_provider import PiperMode, PiperTTSProvider
from mock_me.providers.tts.factory import TTSProviderFactory, get_tts_provider

__all__ = [
    "BaseTTSProvider",
    "TTSProvider",
    "ElevenLabsTTSProvider",
    "PiperMode",
    "PiperTTSProvider",
    "TTSProviderFactory",
    "get_tts_provider",
]
