"""Pydantic schemas for request/response validation"""

from calltriage.schemas.analysis import CrisisFlag, SentimentAnalysis
from calltriage.schemas.bot import BotCreate, BotUpdate, BotDeleteResponse
from calltriage.schemas.patient import (
    PatientCreate,
    PrecallRequest,
    PrecallResponse,
    PatientInfoRequest,
    PatientInfoResponse,
    Resource,
)
from calltriage.schemas.call import (
    CallWithDetails,
    CallUpdate,
    PostCallRequest,
    PostCallResponse,
    AnalysisSummary,
    CallSummaryResponse,
    StatsResponse,
)
from calltriage.schemas.llm import LLMMessage, LLMGenerateResponse, UsageStats

__all__ = [
    "CrisisFlag",
    "SentimentAnalysis",
    "BotCreate",
    "BotUpdate",
    "BotDeleteResponse",
    "PatientCreate",
    "PrecallRequest",
    "PrecallResponse",
    "PatientInfoRequest",
    "PatientInfoResponse",
    "Resource",
    "CallWithDetails",
    "CallUpdate",
    "PostCallRequest",
    "PostCallResponse",
    "AnalysisSummary",
    "CallSummaryResponse",
    "StatsResponse",
    "LLMMessage",
    "LLMGenerateResponse",
    "UsageStats",
]
