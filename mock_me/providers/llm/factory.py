"""
LLM Provider Factory.

Creates the LLM provider selected by configuration.
"""
import logging
from typing import Optional

from mock_me.core.config import get_provider_config, get_settings
from mock_me.providers.llm.base import BaseLLMProvider, LLMProvider
from mock_me.providers.llm.gemini_provider import GeminiProvider
from mock_me.providers.llm.ollama_provider import OllamaProvider

logger = logging.getLogger(__name__)


class LLMProviderFactory:
    """
    Factory for creating LLM provider instances.
    """

    @staticmethod
    def create(
        provider_type: Optional[str] = None,
        model: Optional[str] = None,
        **kwargs
    ) -> BaseLLMProvider:
        """
        Create an LLM provider instance.

        Args:
            provider_type: Provider type (gemini, ollama). If None, reads from settings.
            model: Model name. If None, reads from config.
            **kwargs: Additional provider-specific arguments.
        """
        settings = get_settings()
        llm_config = get_provider_config().get("providers", {}).get("llm", {})
        provider_type = (provider_type or settings.llm_provider).lower()
        cfg = llm_config.get(provider_type, {})
        model = model or cfg.get("model")

        logger.info(f"Creating LLM provider: {provider_type} with model: {model}")

        if provider_type == LLMProvider.GEMINI.value:
            return GeminiProvider(
                model=model or "gemini-2.5-flash-preview-05-20",
                api_key=kwargs.pop("api_key", settings.gemini_api_key),
                api_url=kwargs.pop("api_url", cfg.get("api_url", "https://generativelanguage.googleapis.com/v1beta/models")),
                timeout=float(cfg.get("timeout", 60)),
                **kwargs
            )

        elif provider_type == LLMProvider.OLLAMA.value:
            return OllamaProvider(
                model=model or "qwen2.5:3b",
                api_url=kwargs.pop("api_url", settings.ollama_api_url),
                timeout=float(cfg.get("timeout", 120)),
                **kwargs
            )

        else:
            raise ValueError(f"Unsupported LLM provider: {provider_type}")


# Global provider instance (lazy loaded)
_llm_provider: Optional[BaseLLMProvider] = None


def get_llm_provider() -> BaseLLMProvider:
    """
    Get or create the global LLM provider instance.
    """
    global _llm_provider
    if _llm_provider is None:
        _llm_provider = LLMProviderFactory.create()
    return _llm_provider
