"""
Piper speech synthesis provider.

Local text-to-speech in one of two modes:
- ``server``: a Piper HTTP server, trying ``/speak`` then ``/synthesize``
- ``binary``: the ``piper`` CLI, text on stdin, WAV written to a file
"""
import asyncio
import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import List, Optional

import httpx

from mock_me.core.errors import SpeechSynthesisError
from mock_me.core.result import Result, failure, success
from mock_me.core.storage import AudioAssetStore
from mock_me.providers.tts.base import BaseTTSProvider

logger = logging.getLogger(__name__)


class PiperMode(str, Enum):
    SERVER = "server"
    BINARY = "binary"


class PiperTTSProvider(BaseTTSProvider):
    """
    Piper provider producing WAV assets.
    """

    name = "piper"

    def __init__(
        self,
        asset_store: AudioAssetStore,
        mode: str = PiperMode.BINARY.value,
        server_url: str = "http://localhost:59125",
        binary_path: str = "piper",
        model_path: Optional[str] = None,
        voice: str = "en_US-amy-medium",
        timeout: float = 30.0,
    ):
        super().__init__(asset_store)
        self.mode = PiperMode(mode)
        self.server_url = server_url.rstrip("/")
        self.binary_path = binary_path
        self.model_path = model_path
        self.voice = voice
        self.timeout = timeout

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
        )

    async def _synthesize(self, text: str) -> Result[str, SpeechSynthesisError]:
        if self.mode == PiperMode.SERVER:
            return await self._synthesize_server(text)
        return await self._synthesize_binary(text)

    async def _synthesize_server(self, text: str) -> Result[str, SpeechSynthesisError]:
        attempts = [
            ("/speak", {"text": text}),
            ("/synthesize", {"text": text, "voice": self.voice}),
        ]
        errors: List[str] = []

        for route, payload in attempts:
            try:
                response = await self._client.post(f"{self.server_url}{route}", json=payload)
            except httpx.RequestError as e:
                logger.warning(f"Piper server {route} request error: {e}")
                errors.append(f"{route}: {e}")
                continue

            if response.is_success and response.content:
                try:
                    path = await self.asset_store.save_bytes(response.content, "audio", ".wav")
                except OSError as e:
                    logger.error(f"Failed to store synthesized audio: {e}")
                    return failure(SpeechSynthesisError(f"Could not store synthesized audio: {e}"))
                return success(self.asset_store.public_url(path))

            logger.warning(f"Piper server {route} returned status {response.status_code}")
            errors.append(f"{route}: HTTP {response.status_code}")

        logger.error(f"Piper server synthesis failed: {'; '.join(errors)}")
        return failure(SpeechSynthesisError(
            f"Piper server synthesis failed ({'; '.join(errors)})"
        ))

    async def _synthesize_binary(self, text: str) -> Result[str, SpeechSynthesisError]:
        if not self.model_path:
            return failure(SpeechSynthesisError(
                "Piper model path is not configured (set PIPER_MODEL_PATH)"
            ))

        output_path = self.asset_store.new_asset_path("audio", ".wav")
        cmd = [
            self.binary_path,
            "--model", str(self.model_path),
            "--output_file", str(output_path),
        ]

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(f"Could not start piper binary '{self.binary_path}': {e}")
            return failure(SpeechSynthesisError(f"Piper binary could not be started: {e}"))

        try:
            _, stderr = await asyncio.wait_for(
                process.communicate(input=text.encode("utf-8")),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            self._discard(output_path)
            logger.error(f"Piper timed out after {self.timeout:.1f}s")
            return failure(SpeechSynthesisError(f"Piper timed out after {self.timeout:.1f}s"))

        if process.returncode != 0:
            self._discard(output_path)
            detail = (stderr or b"").decode("utf-8", errors="replace").strip()
            logger.error(f"Piper failed (exit={process.returncode}): {detail}")
            return failure(SpeechSynthesisError(
                f"Piper exited with code {process.returncode}: {detail}"
            ))

        if not output_path.exists():
            return failure(SpeechSynthesisError("Piper produced no audio file"))

        return success(self.asset_store.public_url(output_path))

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass

    async def health_check(self) -> bool:
        if self.mode == PiperMode.SERVER:
            try:
                await self._client.get(self.server_url)
                return True
            except httpx.RequestError:
                return False
        return bool(
            self.model_path
            and Path(self.model_path).exists()
            and shutil.which(self.binary_path)
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
