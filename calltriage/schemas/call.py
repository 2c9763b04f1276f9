"""Call schemas"""

from typing import Optional, List, Any, Dict
from pydantic import Field

from calltriage.models.base import CamelModel, CallStatus, SentimentLabel
from calltriage.models import Patient, Bot, Call, CallFlag, ApiCall
from calltriage.schemas.analysis import CrisisFlag


class CallWithDetails(Call):
    """Call joined with its patient, bot, flags and in-call lookups"""
    patient: Optional[Patient] = None
    bot: Optional[Bot] = None
    flags: List[CallFlag] = []
    api_calls: List[ApiCall] = []


class CallUpdate(CamelModel):
    """Manual call review update, e.g. marking a call for follow-up"""
    status: Optional[CallStatus] = None
    sentiment_label: Optional[SentimentLabel] = None
    sentiment_score: Optional[float] = Field(default=None, ge=-1.0, le=1.0)


class PostCallRequest(CamelModel):
    """OpenMic post-call webhook payload"""
    call_id: Optional[str] = None  # OpenMic call identifier
    patient_id: Optional[str] = None
    bot_id: Optional[str] = None
    transcript: Optional[str] = None
    duration: Optional[float] = None  # seconds
    metadata: Optional[Dict[str, Any]] = None


class AnalysisSummary(CamelModel):
    sentiment: SentimentLabel
    score: float
    confidence: float
    flags: List[CrisisFlag] = []


class PostCallResponse(CamelModel):
    """Post-call processing result"""
    call_id: str
    analysis: AnalysisSummary
    message: str = "Call processed successfully"


class CallSummaryResponse(CamelModel):
    call_id: str
    summary: str


class StatsResponse(CamelModel):
    """Dashboard headline numbers"""
    active_calls: int  # calls processed today
    crisis_flags: int  # high-severity flags across all calls
    avg_response_time: str
    active_bots: int
    avg_duration: int
