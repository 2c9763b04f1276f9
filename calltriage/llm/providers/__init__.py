"""LLM provider implementations"""

from calltriage.llm.providers.base import BaseLLMProvider
from calltriage.llm.providers.openai import OpenAIProvider
from calltriage.llm.providers.anthropic import AnthropicProvider
from calltriage.llm.providers.ollama import OllamaProvider

__all__ = [
    "BaseLLMProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "OllamaProvider",
]
