"""Sentiment analysis schemas"""

from typing import List
from pydantic import BaseModel, Field

from calltriage.models.base import SentimentLabel, Severity


class CrisisFlag(BaseModel):
    """One concerning phrase or keyword detected in a transcript"""
    type: str = Field(min_length=1)  # suicidal, self-harm, hopeless, ...
    severity: Severity
    content: str  # the text that triggered the flag


class SentimentAnalysis(BaseModel):
    """Result of analyzing a call transcript"""
    score: float = Field(ge=-1.0, le=1.0)  # -1 severely distressed, 1 very positive
    label: SentimentLabel
    confidence: float = Field(ge=0.0, le=1.0)
    flags: List[CrisisFlag] = []
