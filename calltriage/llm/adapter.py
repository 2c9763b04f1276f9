"""Unified LLM adapter interface"""

from typing import List, Optional
import structlog

from calltriage.config import Settings
from calltriage.schemas.llm import LLMMessage, LLMGenerateResponse
from calltriage.llm.providers.base import BaseLLMProvider
from calltriage.llm.providers.openai import OpenAIProvider
from calltriage.llm.providers.anthropic import AnthropicProvider
from calltriage.llm.providers.ollama import OllamaProvider

logger = structlog.get_logger()


class LLMAdapter:
    """
    Unified LLM adapter that routes to any provider.
    Implements fallback logic when primary provider fails.
    """

    def __init__(
        self,
        settings: Settings,
        provider: str,
        model: str,
        fallback_provider: Optional[str] = None,
        fallback_model: Optional[str] = None,
    ):
        self.settings = settings
        self.provider = provider
        self.model = model
        self.fallback_provider = fallback_provider
        self.fallback_model = fallback_model

    def _get_provider_instance(self, provider: str, model: str) -> BaseLLMProvider:
        """Get the appropriate provider instance"""
        if provider == "openai":
            return OpenAIProvider(model=model, api_key=self.settings.openai_api_key)
        if provider == "anthropic":
            return AnthropicProvider(model=model, api_key=self.settings.anthropic_api_key)
        if provider == "ollama":
            return OllamaProvider(model=model, base_url=self.settings.ollama_base_url)

        raise ValueError(f"Unknown provider: {provider}")

    async def generate(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.2,
        max_tokens: int = 1024,
        json_mode: bool = False,
    ) -> LLMGenerateResponse:
        """
        Generate a response from the LLM.
        Attempts fallback if primary provider fails.
        """
        try:
            provider_instance = self._get_provider_instance(self.provider, self.model)
            return await provider_instance.generate(
                system_prompt=system_prompt,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=json_mode,
            )

        except Exception as e:
            if not (self.fallback_provider and self.fallback_model):
                raise

            logger.warning(
                "Primary LLM provider failed, attempting fallback",
                provider=self.provider,
                model=self.model,
                error=str(e),
            )

            try:
                fallback_instance = self._get_provider_instance(
                    self.fallback_provider,
                    self.fallback_model,
                )
                return await fallback_instance.generate(
                    system_prompt=system_prompt,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    json_mode=json_mode,
                )

            except Exception as fallback_error:
                logger.error(
                    "Fallback LLM provider also failed",
                    fallback_provider=self.fallback_provider,
                    fallback_model=self.fallback_model,
                    error=str(fallback_error),
                )
                raise


def get_llm_adapter(settings: Settings) -> LLMAdapter:
    """Factory function to create the adapter used for call analysis"""
    return LLMAdapter(
        settings=settings,
        provider=settings.analyzer_llm_provider,
        model=settings.analyzer_llm_model,
        fallback_provider=settings.fallback_llm_provider or None,
        fallback_model=settings.fallback_llm_model or None,
    )
