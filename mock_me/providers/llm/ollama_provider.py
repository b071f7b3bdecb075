"""
Ollama provider.

Talks to a local Ollama server's ``/api/chat`` endpoint so questions and
feedback can be generated without a hosted API key.
"""
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from mock_me.providers.llm.base import (
    BaseLLMProvider,
    GenerationConfig,
    LLMResponse,
    Message,
)

logger = logging.getLogger(__name__)


class OllamaProvider(BaseLLMProvider):
    """
    Non-streaming chat completions against Ollama.
    """

    def __init__(
        self,
        model: str,
        api_url: str = "http://localhost:11434",
        timeout: float = 120.0,
        **kwargs
    ):
        super().__init__(model, **kwargs)
        self.api_url = api_url.rstrip("/")

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
        )

    def _build_payload(self, messages: List[Message], config: GenerationConfig) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "num_predict": config.max_tokens,
            "temperature": config.temperature,
            "top_p": config.top_p,
        }
        if config.stop_sequences:
            options["stop"] = config.stop_sequences

        return {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "stream": False,
            "options": options,
        }

    async def generate(
        self,
        messages: List[Message],
        config: Optional[GenerationConfig] = None,
    ) -> LLMResponse:
        config = config or GenerationConfig()
        started = time.time()

        try:
            response = await self._client.post(
                f"{self.api_url}/api/chat",
                json=self._build_payload(messages, config),
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Ollama API error: {e.response.status_code} - {e.response.text}")
            raise
        except httpx.RequestError as e:
            logger.error(f"Ollama connection error: {e}")
            raise

        prompt_tokens = data.get("prompt_eval_count", 0)
        completion_tokens = data.get("eval_count", 0)
        return LLMResponse(
            content=((data.get("message") or {}).get("content") or "").strip(),
            model=data.get("model", self.model),
            finish_reason="stop" if data.get("done") else None,
            usage={
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "total_tokens": prompt_tokens + completion_tokens,
            },
            latency_ms=(time.time() - started) * 1000,
        )

    async def health_check(self) -> bool:
        try:
            response = await self._client.get(f"{self.api_url}/api/tags")
        except httpx.RequestError:
            return False
        return response.is_success

    async def close(self) -> None:
        await self._client.aclose()
