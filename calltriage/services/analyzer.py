"""
Sentiment and crisis analysis of call transcripts.

The LLM produces the primary judgment. Whenever that path fails (timeout,
provider error, unparseable answer) the analyzer degrades to plain keyword
matching, so a transcript mentioning a crisis keyword is still flagged.
"""

import asyncio
import json
import math
from typing import Any, List, Optional
import structlog
from pydantic import ValidationError

from calltriage.errors import AnalysisError
from calltriage.schemas.analysis import CrisisFlag, SentimentAnalysis
from calltriage.schemas.llm import LLMMessage

logger = structlog.get_logger()

SENTIMENT_LABELS = ("positive", "neutral", "distress", "crisis")

FALLBACK_CRISIS_SCORE = -0.8
FALLBACK_CONFIDENCE = 0.5

SUMMARY_FAILED = "Summary generation failed"
SUMMARY_EMPTY = "Unable to generate summary"

ANALYSIS_PROMPT = """You are a mental health sentiment analysis expert. Analyze the conversation transcript for:
1. Overall sentiment score (-1 to 1, where -1 is severely distressed, 1 is very positive)
2. Sentiment label (positive, neutral, distress, crisis)
3. Confidence level (0-1)
4. Crisis flags for any concerning language

Crisis keywords to watch for: {keywords}

Look for indicators of:
- Self-harm intentions
- Suicidal ideation
- Hopelessness
- Immediate danger
- Substance abuse mentions
- Violent thoughts

Respond with JSON in this format:
{{
  "score": number,
  "label": string,
  "confidence": number,
  "flags": [
    {{
      "type": string,
      "severity": "low|medium|high",
      "content": string
    }}
  ]
}}"""

SUMMARY_PROMPT = (
    "You are a mental health professional. Create a concise, professional summary "
    "of this patient interaction. Focus on key concerns, emotional state, resources "
    "provided, and any follow-up needs. Keep it under 200 words."
)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _number(value: Any, field: str) -> float:
    """Read a numeric field; absent means 0"""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise AnalysisError(f"{field} is not a number")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise AnalysisError(f"{field} is not a number") from e
    if math.isnan(number):
        raise AnalysisError(f"{field} is not a number")
    return number


def parse_analysis_payload(content: Optional[str]) -> SentimentAnalysis:
    """
    Turn the model's JSON answer into a SentimentAnalysis.

    Score is clamped to [-1, 1] and confidence to [0, 1]; a missing label
    becomes "neutral" and missing flags an empty list. Anything that cannot
    be read raises AnalysisError.
    """
    try:
        data = json.loads(content or "")
    except ValueError as e:
        raise AnalysisError("response is not valid JSON") from e

    if not isinstance(data, dict):
        raise AnalysisError("response is not a JSON object")

    score = _clamp(_number(data.get("score"), "score"), -1.0, 1.0)
    confidence = _clamp(_number(data.get("confidence"), "confidence"), 0.0, 1.0)

    label = str(data.get("label") or "neutral").strip().lower()
    if label not in SENTIMENT_LABELS:
        logger.warning("Unknown sentiment label from model", label=label)
        label = "neutral"

    raw_flags = data.get("flags") or []
    if not isinstance(raw_flags, list):
        raise AnalysisError("flags is not a list")

    flags = []
    for raw in raw_flags:
        if not isinstance(raw, dict):
            raise AnalysisError("flag is not an object")
        try:
            flags.append(CrisisFlag(
                type=raw.get("type"),
                severity=str(raw.get("severity", "")).strip().lower(),
                content=raw.get("content"),
            ))
        except ValidationError as e:
            raise AnalysisError(f"invalid flag: {e.error_count()} errors") from e

    return SentimentAnalysis(
        score=score,
        label=label,
        confidence=confidence,
        flags=flags,
    )


def keyword_fallback(transcript: str, crisis_keywords: List[str]) -> SentimentAnalysis:
    """Case-insensitive keyword scan used when the model is unavailable"""
    lower_transcript = transcript.lower()

    flags = [
        CrisisFlag(
            type=keyword,
            severity="high",
            content=f'Keyword "{keyword}" detected in transcript',
        )
        for keyword in crisis_keywords
        if keyword.strip() and keyword.lower() in lower_transcript
    ]

    if flags:
        return SentimentAnalysis(
            score=FALLBACK_CRISIS_SCORE,
            label="crisis",
            confidence=FALLBACK_CONFIDENCE,
            flags=flags,
        )

    return SentimentAnalysis(
        score=0.0,
        label="neutral",
        confidence=FALLBACK_CONFIDENCE,
        flags=[],
    )


class SentimentAnalyzer:
    """
    Classifies transcripts through an LLM.

    `llm` is anything with the provider `generate` signature: an LLMAdapter
    in the application, a scripted provider in tests.
    """

    def __init__(self, llm, timeout: float = 30.0):
        self.llm = llm
        self.timeout = timeout

    async def _ask(self, system_prompt: str, user_content: str, json_mode: bool) -> Optional[str]:
        response = await asyncio.wait_for(
            self.llm.generate(
                system_prompt=system_prompt,
                messages=[LLMMessage(role="user", content=user_content)],
                temperature=0.2,
                json_mode=json_mode,
            ),
            timeout=self.timeout,
        )
        return response.content

    async def analyze(self, transcript: str, crisis_keywords: List[str]) -> SentimentAnalysis:
        """Analyze a transcript. Never raises; failures use the keyword fallback."""
        try:
            content = await self._ask(
                ANALYSIS_PROMPT.format(keywords=", ".join(crisis_keywords)),
                f"Analyze this mental health conversation transcript:\n\n{transcript}",
                json_mode=True,
            )
            analysis = parse_analysis_payload(content)
        except asyncio.TimeoutError:
            logger.warning(
                "Sentiment analysis timed out, using keyword fallback",
                timeout=self.timeout,
            )
            return keyword_fallback(transcript, crisis_keywords)
        except Exception as e:
            logger.warning(
                "Sentiment analysis failed, using keyword fallback",
                error=str(e),
                error_type=type(e).__name__,
            )
            return keyword_fallback(transcript, crisis_keywords)

        logger.info(
            "Sentiment analysis complete",
            label=analysis.label,
            score=analysis.score,
            flag_count=len(analysis.flags),
        )
        return analysis

    async def summarize(self, transcript: str) -> str:
        """Short clinical summary of a call"""
        try:
            content = await self._ask(
                SUMMARY_PROMPT,
                f"Summarize this mental health call transcript:\n\n{transcript}",
                json_mode=False,
            )
        except Exception as e:
            logger.error("Failed to generate call summary", error=str(e))
            return SUMMARY_FAILED

        return content or SUMMARY_EMPTY
