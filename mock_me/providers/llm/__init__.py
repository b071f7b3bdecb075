"""
LLM Providers Package.

Provides plug-and-play text generation backends (Gemini, Ollama).
"""
from mock_me.providers.llm.base import (
    BaseLLMProvider,
    LLMProvider,
    Message,
    GenerationConfig,
    LLMResponse,
    ProviderNotConfigured,
    system_message,
    user_message,
)
from mock_me.providers.llm.gemini_provider import GeminiProvider
from mock_me.providers.llm.ollama_provider import OllamaProvider
from mock_me.providers.llm.factory import LLMProviderFactory, get_llm_provider

__all__ = [
    # Base classes
    "BaseLLMProvider",
    "LLMProvider",
    "Message",
    "GenerationConfig",
    "LLMResponse",
    "ProviderNotConfigured",
    # Message helpers
    "system_message",
    "user_message",
    # Providers
    "GeminiProvider",
    "OllamaProvider",
    # Factory
    "LLMProviderFactory",
    "get_llm_provider",
]
