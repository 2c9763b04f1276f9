"""Anthropic Claude LLM provider"""

from typing import List
from anthropic import AsyncAnthropic
import structlog

from calltriage.schemas.llm import LLMMessage, LLMGenerateResponse, UsageStats
from calltriage.llm.providers.base import BaseLLMProvider

logger = structlog.get_logger()


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude provider implementation"""

    name = "anthropic"

    def __init__(self, model: str, api_key: str):
        super().__init__(model)
        if not api_key:
            raise ValueError("Anthropic API key not configured")
        self.client = AsyncAnthropic(api_key=api_key)

    async def generate(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.2,
        max_tokens: int = 1024,
        json_mode: bool = False,
    ) -> LLMGenerateResponse:
        """Generate response using Anthropic API"""

        # Anthropic requires alternating user/assistant turns
        processed_messages = []
        last_role = None

        for msg in messages:
            role = msg.role if msg.role != "system" else "user"
            if role == last_role:
                processed_messages[-1]["content"] += "\n" + msg.content
            else:
                processed_messages.append({"role": role, "content": msg.content})
                last_role = role

        # No JSON mode flag; prefill the opening brace instead
        if json_mode:
            processed_messages.append({"role": "assistant", "content": "{"})

        kwargs = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "system": system_prompt,
            "messages": processed_messages,
        }

        logger.debug(
            "Anthropic request",
            model=self.model,
            message_count=len(processed_messages),
            json_mode=json_mode,
        )

        response = await self.client.messages.create(**kwargs)

        text = "".join(
            block.text for block in response.content if block.type == "text"
        )
        if json_mode:
            text = "{" + text

        result = LLMGenerateResponse(
            content=text,
            provider=self.name,
            model=self.model,
            usage=UsageStats(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            ),
        )

        logger.debug(
            "Anthropic response",
            content_length=len(result.content) if result.content else 0,
        )

        return result
