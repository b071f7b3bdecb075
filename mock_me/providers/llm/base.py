"""
Text generation provider interface.

Question and feedback generation talk to a ``BaseLLMProvider``; the
concrete backend (hosted Gemini or a local Ollama server) is chosen once
by the factory.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class LLMProvider(str, Enum):
    """Supported text generation backends."""
    GEMINI = "gemini"
    OLLAMA = "ollama"


class ProviderNotConfigured(RuntimeError):
    """The selected provider is missing an API key or URL."""


@dataclass
class Message:
    """One chat turn; ``role`` is system, user or assistant."""
    role: str
    content: str


@dataclass
class GenerationConfig:
    """Sampling limits for one generation call."""
    max_tokens: int = 1024
    temperature: float = 0.7
    top_p: float = 0.9
    stop_sequences: List[str] = field(default_factory=list)


@dataclass
class LLMResponse:
    """Generated text plus the bookkeeping the backend reported."""
    content: str
    model: str
    finish_reason: Optional[str] = None
    usage: Dict[str, int] = field(default_factory=dict)
    latency_ms: Optional[float] = None

    @property
    def tokens_used(self) -> int:
        return self.usage.get("total_tokens", 0)


class BaseLLMProvider(ABC):
    """
    Abstract text generation backend.

    ``generate`` raises on transport, HTTP or configuration errors; the
    generators wrapping it turn those into typed failures.
    """

    def __init__(self, model: str, **kwargs):
        self.model = model
        self.options = kwargs

    @abstractmethod
    async def generate(
        self,
        messages: List[Message],
        config: Optional[GenerationConfig] = None,
    ) -> LLMResponse:
        """Complete the conversation in ``messages``."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    async def close(self) -> None:
        """Release provider resources."""
        return None


def system_message(content: str) -> Message:
    return Message(role="system", content=content)


def user_message(content: str) -> Message:
    return Message(role="user", content=content)
