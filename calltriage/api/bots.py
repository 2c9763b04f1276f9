"""Bot management API endpoints"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
import structlog

from calltriage.dependencies import get_store, get_openmic
from calltriage.errors import OpenMicError
from calltriage.models import Bot
from calltriage.schemas.bot import BotCreate, BotUpdate, BotDeleteResponse
from calltriage.services.openmic import OpenMicClient
from calltriage.store.base import RecordStore

router = APIRouter()
logger = structlog.get_logger()

# Fields mirrored on the OpenMic side
PLATFORM_FIELDS = ("name", "personality", "greeting")


@router.get("", response_model=List[Bot])
async def list_bots(store: RecordStore = Depends(get_store)):
    """List all bots"""
    return await store.list_bots()


@router.get("/{bot_id}", response_model=Bot)
async def get_bot(bot_id: str, store: RecordStore = Depends(get_store)):
    """Get bot details"""
    bot = await store.get_bot(bot_id)

    if not bot:
        raise HTTPException(status_code=404, detail="Bot not found")

    return bot


@router.post("", response_model=Bot, status_code=status.HTTP_201_CREATED)
async def create_bot(
    bot_data: BotCreate,
    store: RecordStore = Depends(get_store),
    openmic: OpenMicClient = Depends(get_openmic),
):
    """Register the bot on OpenMic, then store it locally with the OpenMic id"""
    platform_bot = await openmic.create_bot(
        name=bot_data.name,
        personality=bot_data.personality,
        greeting=bot_data.greeting or "",
    )

    bot = await store.create_bot({
        **bot_data.model_dump(),
        "external_bot_id": platform_bot.id,
    })

    logger.info("Bot created", bot_id=bot.id, external_bot_id=bot.external_bot_id)
    return bot


@router.put("/{bot_id}", response_model=Bot)
async def update_bot(
    bot_id: str,
    bot_data: BotUpdate,
    store: RecordStore = Depends(get_store),
    openmic: OpenMicClient = Depends(get_openmic),
):
    """Partially update a bot (toggle active, edit fields)"""
    updates = bot_data.model_dump(exclude_unset=True, exclude_none=True)

    bot = await store.update_bot(bot_id, updates)

    if not bot:
        raise HTTPException(status_code=404, detail="Bot not found")

    platform_updates = {
        field: value for field, value in updates.items()
        if field in PLATFORM_FIELDS
    }
    if bot.external_bot_id and platform_updates:
        try:
            await openmic.update_bot(bot.external_bot_id, **platform_updates)
        except OpenMicError as e:
            logger.warning(
                "Failed to sync bot update to OpenMic",
                bot_id=bot_id,
                external_bot_id=bot.external_bot_id,
                error=str(e),
            )

    return bot


@router.delete("/{bot_id}", response_model=BotDeleteResponse)
async def delete_bot(
    bot_id: str,
    store: RecordStore = Depends(get_store),
    openmic: OpenMicClient = Depends(get_openmic),
):
    """Delete a bot; the local record goes even if OpenMic refuses"""
    bot = await store.get_bot(bot_id)

    if not bot:
        raise HTTPException(status_code=404, detail="Bot not found")

    if bot.external_bot_id:
        try:
            await openmic.delete_bot(bot.external_bot_id)
        except OpenMicError as e:
            logger.error(
                "Failed to delete from OpenMic",
                bot_id=bot_id,
                external_bot_id=bot.external_bot_id,
                error=str(e),
            )

    deleted = await store.delete_bot(bot_id)

    if not deleted:
        raise HTTPException(status_code=404, detail="Bot not found")

    logger.info("Bot deleted", bot_id=bot_id)
    return BotDeleteResponse(message="Bot deleted successfully")
