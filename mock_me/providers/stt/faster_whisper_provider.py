"""
Faster-Whisper based transcription provider.

Uses CTranslate2-optimized Whisper models for local inference. Requires the
``local-stt`` extra; the model is loaded on first use.
"""
import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Union

from mock_me.core.errors import TranscriptionError
from mock_me.core.result import Result, failure, success
from mock_me.providers.stt.base import BaseTranscriber, TranscriptionResult, WordTiming

logger = logging.getLogger(__name__)


def logprob_to_confidence(avg_logprobs: List[float]) -> float:
    """Map average segment log-probabilities onto a 0..1 confidence."""
    log_probs = [p for p in avg_logprobs if p < 0]
    if not log_probs:
        return 0.0
    avg_log_prob = sum(log_probs) / len(log_probs)
    return min(1.0, max(0.0, 1.0 + avg_log_prob / 5.0))


class FasterWhisperTranscriber(BaseTranscriber):
    """
    Local transcriber using faster-whisper.
    """

    name = "faster-whisper"

    def __init__(
        self,
        model_name: str = "base",
        device: str = "cpu",
        compute_type: str = "int8",
        language: Optional[str] = "en",
    ):
        self.model_name = model_name
        self.device = device
        self.compute_type = compute_type
        self.language = language
        self._model = None

    def _load_model(self):
        """Load the Whisper model."""
        from faster_whisper import WhisperModel

        logger.info(f"Loading Faster-Whisper model '{self.model_name}' on {self.device}...")
        self._model = WhisperModel(
            self.model_name,
            device=self.device,
            compute_type=self.compute_type,
        )
        return self._model

    def _transcribe_sync(self, audio_path: str) -> TranscriptionResult:
        model = self._model or self._load_model()
        segments_gen, _info = model.transcribe(
            audio_path,
            language=self.language,
            task="transcribe",
            word_timestamps=True,
        )

        text_parts: List[str] = []
        logprobs: List[float] = []
        words: List[WordTiming] = []
        for seg in segments_gen:
            text_parts.append(seg.text)
            logprobs.append(seg.avg_logprob)
            for w in seg.words or []:
                words.append(WordTiming(
                    word=w.word.strip(),
                    start=float(w.start),
                    end=float(w.end),
                    confidence=float(w.probability),
                ))

        return TranscriptionResult(
            transcript="".join(text_parts).strip(),
            confidence=logprob_to_confidence(logprobs),
            words=words,
        )

    async def transcribe(
        self,
        audio_path: Union[str, Path],
    ) -> Result[TranscriptionResult, TranscriptionError]:
        path = Path(audio_path)
        if not path.exists():
            return failure(TranscriptionError(f"Audio file not found: {path.name}"))

        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(None, self._transcribe_sync, str(path))
        except ImportError:
            logger.error("faster-whisper is not installed; install the 'local-stt' extra")
            return failure(TranscriptionError("Local transcription is not available"))
        except Exception as e:
            logger.error(f"Transcription failed: {e}")
            return failure(TranscriptionError(f"Local transcription failed: {e}"))

        return success(result)
