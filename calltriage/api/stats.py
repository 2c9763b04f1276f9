"""Dashboard statistics endpoint"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from calltriage.dependencies import get_store
from calltriage.schemas.call import StatsResponse
from calltriage.store.base import RecordStore

router = APIRouter()

# Placeholder until bot latency is reported by OpenMic
AVG_RESPONSE_TIME = "1.2s"


@router.get("", response_model=StatsResponse)
async def get_stats(store: RecordStore = Depends(get_store)):
    """Get dashboard headline numbers"""
    calls = await store.list_calls_with_details()
    bots = await store.list_bots()

    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)

    today_calls = [call for call in calls if call.timestamp >= today]

    crisis_flags = sum(
        1 for call in calls for flag in call.flags if flag.severity == "high"
    )

    avg_duration = (
        sum(call.duration or 0 for call in calls) / len(calls) if calls else 0
    )

    return StatsResponse(
        active_calls=len(today_calls),
        crisis_flags=crisis_flags,
        avg_response_time=AVG_RESPONSE_TIME,
        active_bots=sum(1 for bot in bots if bot.is_active),
        avg_duration=round(avg_duration),
    )
