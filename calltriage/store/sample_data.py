"""
Demo patients and bot so the dashboard has something to show
"""

import structlog

from calltriage.store.base import RecordStore

logger = structlog.get_logger()


SAMPLE_PATIENTS = [
    {
        "id": "P123",
        "name": "John Doe",
        "last_appointment": "2025-08-12",
        "last_topic": "anxiety management",
        "risk_level": "high",
    },
    {
        "id": "P456",
        "name": "Sarah Miller",
        "last_appointment": "2025-09-10",
        "last_topic": "depression support",
        "risk_level": "low",
    },
]

SAMPLE_BOT = {
    "name": "Mental Wellness Assistant v2.1",
    "external_bot_id": "bot_123456",
    "personality": ["empathetic", "calm", "non-judgmental"],
    "greeting": (
        "Hello, thank you for calling. This is your Mental Wellness Assistant. "
        "To protect your privacy, this call is not being recorded for human review. "
        "Please provide your unique Patient ID to get started."
    ),
    "crisis_keywords": ["suicidal", "harm", "hopeless", "end it all"],
    "is_active": True,
}


async def seed_sample_data(store: RecordStore) -> None:
    """Seed demo data, skipping anything that already exists"""
    for fields in SAMPLE_PATIENTS:
        if await store.get_patient(fields["id"]):
            continue
        patient = await store.create_patient(fields)
        logger.info("Seeded patient", patient_id=patient.id)

    if await store.get_bot_by_external_id(SAMPLE_BOT["external_bot_id"]):
        return

    bot = await store.create_bot(SAMPLE_BOT)
    logger.info("Seeded bot", bot_id=bot.id, name=bot.name)
