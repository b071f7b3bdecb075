"""
Deepgram transcription provider.

Posts a complete recorded answer to Deepgram's pre-recorded audio endpoint.
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import httpx

from mock_me.core.errors import TranscriptionError
from mock_me.core.result import Result, failure, success
from mock_me.providers.stt.base import BaseTranscriber, TranscriptionResult, WordTiming

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".webm": "audio/webm",
    ".ogg": "audio/ogg",
    ".m4a": "audio/mp4",
    ".flac": "audio/flac",
}


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _first_dict(items: Any) -> Dict[str, Any]:
    if isinstance(items, list) and items:
        return _as_dict(items[0])
    return {}


def parse_deepgram_response(data: Any) -> TranscriptionResult:
    """
    Extract the first alternative of the first channel.

    Any missing or malformed piece (absent, null, wrong type) defaults to an
    empty transcript, zero confidence and no words.
    """
    results = _as_dict(_as_dict(data).get("results"))
    channel = _first_dict(results.get("channels"))
    best = _first_dict(channel.get("alternatives"))

    raw_words = best.get("words")
    words: List[WordTiming] = []
    for item in raw_words if isinstance(raw_words, list) else []:
        if not isinstance(item, dict):
            continue
        words.append(WordTiming(
            word=str(item.get("word") or ""),
            start=_as_float(item.get("start")),
            end=_as_float(item.get("end")),
            confidence=_as_float(item.get("confidence")),
        ))

    transcript = best.get("transcript")
    return TranscriptionResult(
        transcript=transcript.strip() if isinstance(transcript, str) else "",
        confidence=_as_float(best.get("confidence")),
        words=words,
    )


class DeepgramTranscriber(BaseTranscriber):
    """
    Deepgram REST transcriber.
    """

    name = "deepgram"

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = "https://api.deepgram.com/v1/listen",
        model: str = "nova-2",
        smart_format: bool = True,
        timeout: float = 60.0,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.model = model
        self.smart_format = smart_format

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
        )

    async def transcribe(
        self,
        audio_path: Union[str, Path],
    ) -> Result[TranscriptionResult, TranscriptionError]:
        if not self.api_key:
            return failure(TranscriptionError(
                "Deepgram API key is not configured (set DEEPGRAM_API_KEY)"
            ))

        path = Path(audio_path)
        try:
            audio_bytes = path.read_bytes()
        except OSError as e:
            logger.error(f"Could not read audio file {path}: {e}")
            return failure(TranscriptionError(f"Could not read audio file: {path.name}"))

        if not audio_bytes:
            return failure(TranscriptionError("Audio file is empty"))

        headers = {
            "Authorization": f"Token {self.api_key}",
            "Content-Type": CONTENT_TYPES.get(path.suffix.lower(), "audio/mpeg"),
        }
        params = {
            "model": self.model,
            "smart_format": "true" if self.smart_format else "false",
        }

        try:
            response = await self._client.post(
                self.api_url,
                params=params,
                headers=headers,
                content=audio_bytes,
            )
        except httpx.RequestError as e:
            logger.error(f"Deepgram request error: {e}")
            return failure(TranscriptionError(f"Deepgram request failed: {e}"))

        if not response.is_success:
            logger.error(f"Deepgram API error: {response.status_code} - {response.text[:200]}")
            return failure(TranscriptionError(
                f"Deepgram returned status {response.status_code}"
            ))

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Deepgram returned invalid JSON: {e}")
            return failure(TranscriptionError("Deepgram returned an unreadable response"))

        if not isinstance(data, dict):
            return failure(TranscriptionError("Deepgram returned an unexpected payload"))

        if data.get("err_code") or data.get("error"):
            message = data.get("err_msg") or data.get("error")
            logger.error(f"Deepgram reported an error: {message}")
            return failure(TranscriptionError(f"Deepgram error: {message}"))

        result = parse_deepgram_response(data)
        logger.info(
            f"Transcribed {path.name}: {len(result.transcript)} chars, "
            f"confidence={result.confidence:.2f}"
        )
        return success(result)

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
