"""Voice bot model"""

from datetime import datetime
from typing import List, Optional
from pydantic import Field

from calltriage.models.base import CamelModel, new_id, utcnow


class Bot(CamelModel):
    """Triage bot configuration mirrored from the OpenMic platform"""
    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)

    # Set once the bot is registered on OpenMic
    external_bot_id: Optional[str] = None

    personality: List[str] = []  # ordered trait tags: empathetic, calm, ...
    greeting: Optional[str] = None
    crisis_keywords: List[str] = []  # matched case-insensitively
    is_active: bool = True
    created_at: datetime = Field(default_factory=utcnow)
