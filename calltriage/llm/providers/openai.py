"""OpenAI LLM provider"""

from typing import List
from openai import AsyncOpenAI
import structlog

from calltriage.schemas.llm import LLMMessage, LLMGenerateResponse, UsageStats
from calltriage.llm.providers.base import BaseLLMProvider

logger = structlog.get_logger()


class OpenAIProvider(BaseLLMProvider):
    """OpenAI GPT provider implementation"""

    name = "openai"

    def __init__(self, model: str, api_key: str):
        super().__init__(model)
        if not api_key:
            raise ValueError("OpenAI API key not configured")
        self.client = AsyncOpenAI(api_key=api_key)

    async def generate(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.2,
        max_tokens: int = 1024,
        json_mode: bool = False,
    ) -> LLMGenerateResponse:
        """Generate response using OpenAI API"""

        openai_messages = [
            {"role": "system", "content": system_prompt}
        ]

        for msg in messages:
            openai_messages.append({
                "role": msg.role,
                "content": msg.content,
            })

        kwargs = {
            "model": self.model,
            "messages": openai_messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        logger.debug(
            "OpenAI request",
            model=self.model,
            message_count=len(openai_messages),
            json_mode=json_mode,
        )

        response = await self.client.chat.completions.create(**kwargs)

        message = response.choices[0].message

        result = LLMGenerateResponse(
            content=message.content,
            provider=self.name,
            model=self.model,
            usage=UsageStats(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            ) if response.usage else None,
        )

        logger.debug(
            "OpenAI response",
            content_length=len(result.content) if result.content else 0,
        )

        return result
