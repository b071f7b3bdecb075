"""
Gemini Provider Implementation.

Calls Google's hosted ``generateContent`` REST endpoint.
"""
import time
import logging
from typing import List, Optional

import httpx

from mock_me.providers.llm.base import (
    BaseLLMProvider,
    Message,
    GenerationConfig,
    LLMResponse,
    ProviderNotConfigured,
)

logger = logging.getLogger(__name__)


class GeminiProvider(BaseLLMProvider):
    """
    Gemini provider.

    System messages become the ``systemInstruction``; user and assistant
    messages map to ``user`` and ``model`` turns.
    """

    def __init__(
        self,
        model: str,
        api_key: Optional[str],
        api_url: str = "https://generativelanguage.googleapis.com/v1beta/models",
        timeout: float = 60.0,
        **kwargs
    ):
        super().__init__(model, **kwargs)
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
        )

    def _build_payload(self, messages: List[Message], config: GenerationConfig) -> dict:
        system_parts = [{"text": m.content} for m in messages if m.role == "system"]
        contents = [
            {
                "role": "model" if m.role == "assistant" else "user",
                "parts": [{"text": m.content}],
            }
            for m in messages
            if m.role != "system"
        ]

        generation_config = {
            "responseMimeType": "text/plain",
            "temperature": config.temperature,
            "topP": config.top_p,
            "maxOutputTokens": config.max_tokens,
        }
        if config.stop_sequences:
            generation_config["stopSequences"] = config.stop_sequences

        payload = {"contents": contents, "generationConfig": generation_config}
        if system_parts:
            payload["systemInstruction"] = {"parts": system_parts}
        return payload

    async def generate(
        self,
        messages: List[Message],
        config: Optional[GenerationConfig] = None,
    ) -> LLMResponse:
        """
        Generate a response using Gemini's generateContent API.
        """
        if not self.api_key:
            raise ProviderNotConfigured("Gemini API key is not configured (set GEMINI_API_KEY)")

        config = config or GenerationConfig()
        start_time = time.time()

        try:
            response = await self._client.post(
                f"{self.api_url}/{self.model}:generateContent",
                params={"key": self.api_key},
                json=self._build_payload(messages, config),
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini API error: {e.response.status_code} - {e.response.text}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Gemini connection error: {e}")
            raise

        candidates = data.get("candidates") or []
        if not candidates:
            raise ValueError("Gemini returned no candidates")

        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        usage = data.get("usageMetadata") or {}

        return LLMResponse(
            content="".join(part.get("text", "") for part in parts).strip(),
            model=data.get("modelVersion", self.model),
            finish_reason=candidate.get("finishReason"),
            usage={
                "prompt_tokens": usage.get("promptTokenCount", 0),
                "completion_tokens": usage.get("candidatesTokenCount", 0),
                "total_tokens": usage.get("totalTokenCount", 0),
            },
            latency_ms=(time.time() - start_time) * 1000,
        )

    async def health_check(self) -> bool:
        return bool(self.api_key)

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()
