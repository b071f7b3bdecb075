"""
Speech-to-Text (STT) providers.

Transcribes recorded interview answers. Deepgram is the hosted default;
faster-whisper runs locally when the ``local-stt`` extra is installed.
"""
from mock_me.providers.stt.base import (
    BaseTranscriber,
    STTProvider,
    TranscriptionResult,
    WordTiming,
)
from mock_me.providers.stt.deepgram_provider import DeepgramTranscriber, parse_deepgram_response
from mock_me.providers.stt.faster_whisper_provider import FasterWhisperTranscriber
from mock_me.providers.stt.factory import STTProviderFactory, get_stt_provider

__all__ = [
    "BaseTranscriber",
    "STTProvider",
    "TranscriptionResult",
    "WordTiming",
    "DeepgramTranscriber",
    "parse_deepgram_response",
    "FasterWhisperTranscriber",
    "STTProviderFactory",
    "get_stt_provider",
]
