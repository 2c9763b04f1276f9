"""Post-call processing: transcript in, analyzed call record out"""

from decimal import Decimal
from typing import List, Optional
import structlog

from calltriage.errors import ValidationFailed
from calltriage.schemas.analysis import SentimentAnalysis
from calltriage.schemas.call import AnalysisSummary, PostCallRequest, PostCallResponse
from calltriage.services.analyzer import SentimentAnalyzer
from calltriage.store.base import RecordStore

logger = structlog.get_logger()

# Used when the call has no bot, or its bot no longer exists
DEFAULT_CRISIS_KEYWORDS = ["suicidal", "harm", "hopeless"]


def derive_status(label: str) -> str:
    """Only crisis calls get a non-default status automatically"""
    return "crisis" if label == "crisis" else "completed"


def format_score(score: float) -> str:
    """Plain decimal text of the score, full precision, no exponent"""
    if score == 0:
        return "0"
    text = format(Decimal(repr(float(score))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


class PostCallPipeline:
    """Runs once per finished call, turning its transcript into stored analysis"""

    def __init__(self, store: RecordStore, analyzer: SentimentAnalyzer):
        self.store = store
        self.analyzer = analyzer

    async def resolve_keywords(self, bot_id: Optional[str]) -> List[str]:
        if bot_id:
            bot = await self.store.get_bot(bot_id)
            if bot is not None:
                return bot.crisis_keywords
        return list(DEFAULT_CRISIS_KEYWORDS)

    async def process_call(self, request: PostCallRequest) -> PostCallResponse:
        if not request.transcript or not request.transcript.strip():
            raise ValidationFailed("Transcript is required")

        keywords = await self.resolve_keywords(request.bot_id)
        analysis: SentimentAnalysis = await self.analyzer.analyze(request.transcript, keywords)

        call, flags = await self.store.create_call_with_flags(
            {
                "patient_id": request.patient_id,
                "bot_id": request.bot_id,
                "external_call_id": request.call_id,
                "duration": round(request.duration) if request.duration is not None else None,
                "transcript": request.transcript,
                "sentiment_score": format_score(analysis.score),
                "sentiment_label": analysis.label,
                "status": derive_status(analysis.label),
            },
            [
                {
                    "flag_type": flag.type,
                    "severity": flag.severity,
                    "content": flag.content,
                }
                for flag in analysis.flags
            ],
        )

        logger.info(
            "Call processed",
            call_id=call.id,
            external_call_id=request.call_id,
            patient_id=request.patient_id,
            bot_id=request.bot_id,
            status=call.status,
            flag_count=len(flags),
            metadata_keys=sorted((request.metadata or {}).keys()),
        )

        return PostCallResponse(
            call_id=call.id,
            analysis=AnalysisSummary(
                sentiment=analysis.label,
                score=analysis.score,
                confidence=analysis.confidence,
                flags=analysis.flags,
            ),
        )
