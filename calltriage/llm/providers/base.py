"""Base LLM provider interface"""

from abc import ABC, abstractmethod
from typing import List

from calltriage.schemas.llm import LLMMessage, LLMGenerateResponse


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers"""

    name = "base"

    def __init__(self, model: str):
        self.model = model

    @abstractmethod
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
        With json_mode the provider is asked to answer with a single JSON object.
        """
        pass
