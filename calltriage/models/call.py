"""Call-related models"""

from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import Field, field_validator

from calltriage.models.base import (
    CamelModel,
    SentimentLabel,
    CallStatus,
    Severity,
    new_id,
    utcnow,
)


class Call(CamelModel):
    """Processed call records"""
    id: str = Field(default_factory=new_id)
    patient_id: Optional[str] = None
    bot_id: Optional[str] = None

    # OpenMic identifier
    external_call_id: Optional[str] = None

    duration: Optional[int] = None  # seconds
    transcript: Optional[str] = None

    # Analysis
    sentiment_score: Optional[str] = None  # decimal string, e.g. "-0.7"
    sentiment_label: Optional[SentimentLabel] = None
    status: CallStatus = "completed"

    timestamp: datetime = Field(default_factory=utcnow)

    @field_validator("sentiment_score")
    @classmethod
    def score_in_range(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        score = float(value)
        if not -1.0 <= score <= 1.0:
            raise ValueError("sentiment score must lie in [-1, 1]")
        return value


class CallFlag(CamelModel):
    """Crisis indicator detected in a call transcript"""
    id: str = Field(default_factory=new_id)
    call_id: str
    flag_type: str  # suicidal, harm, hopeless, etc.
    severity: Severity = "medium"
    content: Optional[str] = None  # the text that triggered the flag
    created_at: datetime = Field(default_factory=utcnow)


class ApiCall(CamelModel):
    """Audit record of an in-call function lookup"""
    id: str = Field(default_factory=new_id)
    call_id: Optional[str] = None
    endpoint: str  # /api/getPatientInfo, etc.
    request_data: Optional[Dict[str, Any]] = None
    response_data: Optional[Any] = None
    timestamp: datetime = Field(default_factory=utcnow)
