"""Shared model base and field types"""

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


RiskLevel = Literal["low", "medium", "high"]
Severity = Literal["low", "medium", "high"]
SentimentLabel = Literal["positive", "neutral", "distress", "crisis"]
CallStatus = Literal["completed", "crisis", "follow-up"]


def new_id() -> str:
    """Generate a random record identifier"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Model serialized to and from the dashboard in camelCase"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
