"""Bot schemas"""

from typing import Optional, List
from pydantic import Field

from calltriage.models.base import CamelModel


class BotCreate(CamelModel):
    """Create bot request"""
    name: str = Field(min_length=1)
    personality: List[str] = []
    greeting: Optional[str] = None
    crisis_keywords: List[str] = []
    external_bot_id: Optional[str] = None
    is_active: bool = True


class BotUpdate(CamelModel):
    """Partial bot update; only supplied fields are overwritten"""
    name: Optional[str] = Field(default=None, min_length=1)
    personality: Optional[List[str]] = None
    greeting: Optional[str] = None
    crisis_keywords: Optional[List[str]] = None
    is_active: Optional[bool] = None


class BotDeleteResponse(CamelModel):
    message: str
