"""Ollama local LLM provider"""

from typing import List
import httpx
import structlog

from calltriage.schemas.llm import LLMMessage, LLMGenerateResponse, UsageStats
from calltriage.llm.providers.base import BaseLLMProvider

logger = structlog.get_logger()


class OllamaProvider(BaseLLMProvider):
    """Ollama local LLM provider implementation, for clinics keeping transcripts on-site"""

    name = "ollama"

    def __init__(self, model: str, base_url: str, timeout: float = 60.0):
        super().__init__(model)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def generate(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.2,
        max_tokens: int = 1024,
        json_mode: bool = False,
    ) -> LLMGenerateResponse:
        """Generate response using Ollama API"""

        ollama_messages = [
            {"role": "system", "content": system_prompt}
        ]

        for msg in messages:
            ollama_messages.append({
                "role": msg.role,
                "content": msg.content,
            })

        payload = {
            "model": self.model,
            "messages": ollama_messages,
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens,
            },
        }

        if json_mode:
            payload["format"] = "json"

        logger.debug(
            "Ollama request",
            model=self.model,
            base_url=self.base_url,
            message_count=len(ollama_messages),
        )

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.base_url}/api/chat",
                json=payload,
            )
            response.raise_for_status()
            data = response.json()

        result = LLMGenerateResponse(
            content=data.get("message", {}).get("content", ""),
            provider=self.name,
            model=self.model,
        )

        if "eval_count" in data:
            result.usage = UsageStats(
                prompt_tokens=data.get("prompt_eval_count", 0),
                completion_tokens=data.get("eval_count", 0),
                total_tokens=data.get("prompt_eval_count", 0) + data.get("eval_count", 0),
            )

        logger.debug(
            "Ollama response",
            content_length=len(result.content) if result.content else 0,
        )

        return result
