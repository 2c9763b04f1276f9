"""Call log API endpoints"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from calltriage.dependencies import get_store, get_analyzer
from calltriage.schemas.call import CallWithDetails, CallUpdate, CallSummaryResponse
from calltriage.services.analyzer import SentimentAnalyzer
from calltriage.services.postcall import format_score
from calltriage.store.base import RecordStore

router = APIRouter()


@router.get("", response_model=List[CallWithDetails])
async def list_calls(store: RecordStore = Depends(get_store)):
    """List calls with patient, bot, flags and lookups, newest first"""
    return await store.list_calls_with_details()


@router.get("/{call_id}", response_model=CallWithDetails)
async def get_call(call_id: str, store: RecordStore = Depends(get_store)):
    """Get call details"""
    call = await store.get_call_with_details(call_id)

    if not call:
        raise HTTPException(status_code=404, detail="Call not found")

    return call


@router.put("/{call_id}", response_model=CallWithDetails)
async def update_call(
    call_id: str,
    call_data: CallUpdate,
    store: RecordStore = Depends(get_store),
):
    """Manual review update, e.g. status "follow-up" """
    updates = call_data.model_dump(exclude_unset=True, exclude_none=True)
    if updates.get("sentiment_score") is not None:
        updates["sentiment_score"] = format_score(updates["sentiment_score"])

    call = await store.update_call(call_id, updates)

    if not call:
        raise HTTPException(status_code=404, detail="Call not found")

    return await store.get_call_with_details(call_id)


@router.get("/{call_id}/summary", response_model=CallSummaryResponse)
async def get_call_summary(
    call_id: str,
    store: RecordStore = Depends(get_store),
    analyzer: SentimentAnalyzer = Depends(get_analyzer),
):
    """Generate a clinical summary of the call transcript"""
    call = await store.get_call(call_id)

    if not call:
        raise HTTPException(status_code=404, detail="Call not found")

    if not call.transcript:
        raise HTTPException(status_code=400, detail="Transcript is required")

    summary = await analyzer.summarize(call.transcript)

    return CallSummaryResponse(call_id=call.id, summary=summary)
