"""Tests for transcript sentiment and crisis analysis"""

import pytest

from calltriage.errors import AnalysisError
from calltriage.services.analyzer import (
    keyword_fallback,
    parse_analysis_payload,
    SUMMARY_FAILED,
    SUMMARY_EMPTY,
)


KEYWORDS = ["suicidal", "harm", "hopeless", "end it all"]


@pytest.mark.asyncio
async def test_analyze_uses_model_answer(analyzer, llm):
    """Model answer is parsed and the keywords reach the prompt"""
    llm.responses.append({
        "score": -0.4,
        "label": "distress",
        "confidence": 0.9,
        "flags": [
            {"type": "hopelessness", "severity": "Medium", "content": "nothing gets better"},
        ],
    })

    analysis = await analyzer.analyze("Nothing gets better for me.", KEYWORDS)

    assert analysis.label == "distress"
    assert analysis.score == -0.4
    assert analysis.confidence == 0.9
    assert len(analysis.flags) == 1
    assert analysis.flags[0].severity == "medium"

    request = llm.requests[0]
    assert request["json_mode"] is True
    assert "suicidal, harm, hopeless, end it all" in request["system_prompt"]
    assert "Nothing gets better for me." in request["messages"][0].content


@pytest.mark.asyncio
async def test_analyze_clamps_out_of_range_values(analyzer, llm):
    llm.responses.append({"score": -3.5, "label": "crisis", "confidence": 7})

    analysis = await analyzer.analyze("I can't go on", KEYWORDS)

    assert analysis.score == -1.0
    assert analysis.confidence == 1.0
    assert analysis.flags == []


@pytest.mark.asyncio
async def test_analyze_defaults_missing_fields(analyzer, llm):
    llm.responses.append({})

    analysis = await analyzer.analyze("Just checking in about my appointment.", KEYWORDS)

    assert analysis.label == "neutral"
    assert analysis.score == 0.0
    assert analysis.confidence == 0.0
    assert analysis.flags == []


@pytest.mark.asyncio
async def test_unreachable_model_with_keyword_falls_back_to_crisis(analyzer):
    """Keyword in the transcript still raises a high-severity crisis flag"""
    analysis = await analyzer.analyze("I feel HOPELESS and want to End It All", KEYWORDS)

    assert analysis.label == "crisis"
    assert analysis.score == -0.8
    assert analysis.confidence == 0.5
    assert [flag.type for flag in analysis.flags] == ["hopeless", "end it all"]
    assert all(flag.severity == "high" for flag in analysis.flags)
    assert analysis.flags[0].content == 'Keyword "hopeless" detected in transcript'


@pytest.mark.asyncio
async def test_unreachable_model_without_keyword_falls_back_to_neutral(analyzer):
    analysis = await analyzer.analyze("Had a good week, sleeping better.", KEYWORDS)

    assert analysis.label == "neutral"
    assert analysis.score == 0.0
    assert analysis.confidence == 0.5
    assert analysis.flags == []


@pytest.mark.asyncio
async def test_malformed_answer_falls_back(analyzer, llm):
    llm.responses.append("I think the caller sounds sad.")

    analysis = await analyzer.analyze("I have thoughts of self harm", KEYWORDS)

    assert analysis.label == "crisis"
    assert analysis.flags[0].type == "harm"


@pytest.mark.asyncio
async def test_invalid_flag_severity_falls_back(analyzer, llm):
    llm.responses.append({
        "score": -0.9,
        "label": "crisis",
        "confidence": 0.8,
        "flags": [{"type": "suicidal", "severity": "extreme", "content": "..."}],
    })

    analysis = await analyzer.analyze("I have been suicidal", KEYWORDS)

    assert analysis.confidence == 0.5
    assert analysis.flags[0].severity == "high"


@pytest.mark.asyncio
async def test_slow_model_times_out_to_fallback(analyzer, llm):
    llm.delay = 5.0
    llm.responses.append({"score": 0.8, "label": "positive", "confidence": 0.9})

    analysis = await analyzer.analyze("Everything feels hopeless", KEYWORDS)

    assert analysis.label == "crisis"
    assert analysis.score == -0.8


def test_parse_unknown_label_becomes_neutral():
    analysis = parse_analysis_payload('{"score": 0.1, "label": "Negative", "confidence": 0.6}')

    assert analysis.label == "neutral"
    assert analysis.score == 0.1


def test_parse_label_is_case_insensitive():
    analysis = parse_analysis_payload('{"score": -0.9, "label": "CRISIS", "confidence": 0.95}')

    assert analysis.label == "crisis"


@pytest.mark.parametrize("content", [
    None,
    "",
    "[1, 2, 3]",
    '{"score": "very bad"}',
    '{"score": true}',
    '{"flags": "suicidal"}',
    '{"flags": [{"severity": "high", "content": "x"}]}',
])
def test_parse_rejects_malformed_payloads(content):
    with pytest.raises(AnalysisError):
        parse_analysis_payload(content)


def test_keyword_fallback_ignores_blank_keywords():
    analysis = keyword_fallback("A calm conversation", ["", "  "])

    assert analysis.label == "neutral"
    assert analysis.flags == []


def test_keyword_fallback_with_no_keywords():
    analysis = keyword_fallback("I feel hopeless", [])

    assert analysis.label == "neutral"
    assert analysis.score == 0.0


@pytest.mark.asyncio
async def test_summarize_returns_model_text(analyzer, llm):
    llm.responses.append("Patient reported improved sleep; no risk indicators.")

    summary = await analyzer.summarize("Patient: I'm sleeping better.")

    assert summary == "Patient reported improved sleep; no risk indicators."
    assert llm.requests[0]["json_mode"] is False


@pytest.mark.asyncio
async def test_summarize_failure_message(analyzer):
    assert await analyzer.summarize("Patient: hello") == SUMMARY_FAILED


@pytest.mark.asyncio
async def test_summarize_empty_answer(analyzer, llm):
    llm.responses.append("")

    assert await analyzer.summarize("Patient: hello") == SUMMARY_EMPTY
