"""
Transcription provider interface.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Union

from mock_me.core.errors import TranscriptionError
from mock_me.core.result import Result


class STTProvider(str, Enum):
    """Supported transcription backends."""
    DEEPGRAM = "deepgram"
    FASTER_WHISPER = "faster-whisper"


@dataclass
class WordTiming:
    """A recognized word with its timing in seconds."""
    word: str
    start: float
    end: float
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.word,
            "start": self.start,
            "end": self.end,
            "confidence": self.confidence,
        }


@dataclass
class TranscriptionResult:
    """Result of speech-to-text transcription."""
    transcript: str
    confidence: float
    words: List[WordTiming] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transcript": self.transcript,
            "confidence": self.confidence,
            "words": [w.to_dict() for w in self.words],
        }


class BaseTranscriber(ABC):
    """
    Abstract base class for transcription providers.

    Implementations return a ``Failure`` for provider-side problems
    (unreadable file, transport or API error) instead of raising.
    """

    name: str = "base"

    @abstractmethod
    async def transcribe(
        self,
        audio_path: Union[str, Path],
    ) -> Result[TranscriptionResult, TranscriptionError]:
        """Transcribe a recorded answer stored at ``audio_path``."""
        pass

    async def close(self) -> None:
        """Release provider resources."""
        return None
