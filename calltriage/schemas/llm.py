"""LLM adapter schemas"""

from typing import Optional
from pydantic import BaseModel


class LLMMessage(BaseModel):
    """Message in conversation"""
    role: str  # user, assistant
    content: str


class UsageStats(BaseModel):
    """Token usage statistics"""
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class LLMGenerateResponse(BaseModel):
    """LLM generation response"""
    content: Optional[str] = None
    usage: Optional[UsageStats] = None
    provider: str
    model: str
