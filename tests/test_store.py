"""Tests for the in-memory record store"""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from calltriage.errors import ConflictError, NotFoundError
from calltriage.store import seed_sample_data


@pytest.mark.asyncio
async def test_generated_ids_are_unique(store):
    first = await store.create_bot({"name": "Bot A"})
    second = await store.create_bot({"name": "Bot B", "id": "chosen-by-caller"})

    assert first.id != second.id
    assert second.id != "chosen-by-caller"


@pytest.mark.asyncio
async def test_patient_keeps_caller_id_and_rejects_duplicates(store, test_patient):
    assert (await store.get_patient("P123")).name == "John Doe"

    with pytest.raises(ConflictError):
        await store.create_patient({"id": "P123", "name": "Someone Else"})


@pytest.mark.asyncio
async def test_patient_risk_level_defaults_to_low(store):
    patient = await store.create_patient({"id": "P789", "name": "Alex Kim"})

    assert patient.risk_level == "low"
    assert patient.last_appointment is None


@pytest.mark.asyncio
async def test_patient_risk_level_cannot_be_null(store):
    with pytest.raises(ValidationError):
        await store.create_patient({"id": "P790", "name": "Alex Kim", "risk_level": None})

    assert await store.get_patient("P790") is None


@pytest.mark.asyncio
async def test_update_bot_merges_only_supplied_fields(store, test_bot):
    updated = await store.update_bot(test_bot.id, {"is_active": False})

    assert updated.is_active is False
    assert updated.name == test_bot.name
    assert updated.crisis_keywords == test_bot.crisis_keywords
    assert updated.created_at == test_bot.created_at


@pytest.mark.asyncio
async def test_update_cannot_change_id(store, test_bot):
    updated = await store.update_bot(test_bot.id, {"id": "other", "name": "Renamed"})

    assert updated.id == test_bot.id
    assert updated.name == "Renamed"


@pytest.mark.asyncio
async def test_update_missing_bot_returns_none(store):
    assert await store.update_bot("missing", {"name": "x"}) is None


@pytest.mark.asyncio
async def test_returned_records_are_copies(store, test_bot):
    bot = await store.get_bot(test_bot.id)
    bot.crisis_keywords.append("tampered")

    assert "tampered" not in (await store.get_bot(test_bot.id)).crisis_keywords


@pytest.mark.asyncio
async def test_delete_bot(store, test_bot):
    assert await store.delete_bot(test_bot.id) is True
    assert await store.delete_bot(test_bot.id) is False
    assert await store.get_bot(test_bot.id) is None


@pytest.mark.asyncio
async def test_call_with_details_joins_everything(store, test_patient, test_bot):
    call, flags = await store.create_call_with_flags(
        {
            "patient_id": test_patient.id,
            "bot_id": test_bot.id,
            "external_call_id": "om-call-1",
            "transcript": "I feel hopeless",
            "sentiment_score": "-0.8",
            "sentiment_label": "crisis",
            "status": "crisis",
        },
        [
            {"flag_type": "hopeless", "severity": "high", "content": "I feel hopeless"},
            {"flag_type": "hopeless", "severity": "high", "content": "I feel hopeless"},
        ],
    )
    await store.create_api_call({
        "call_id": "om-call-1",
        "endpoint": "/api/getPatientInfo",
        "request_data": {"patientId": test_patient.id},
    })
    await store.create_api_call({"call_id": "unrelated", "endpoint": "/api/getPatientInfo"})

    details = await store.get_call_with_details(call.id)

    assert details.patient.id == test_patient.id
    assert details.bot.id == test_bot.id
    # duplicates are kept, in order
    assert [flag.id for flag in details.flags] == [flag.id for flag in flags]
    assert len(details.api_calls) == 1
    assert details.api_calls[0].endpoint == "/api/getPatientInfo"


@pytest.mark.asyncio
async def test_call_with_details_tolerates_deleted_references(store, test_bot):
    call = await store.create_call({
        "patient_id": "P-gone",
        "bot_id": test_bot.id,
        "transcript": "hello",
    })
    await store.delete_bot(test_bot.id)

    details = await store.get_call_with_details(call.id)

    assert details.id == call.id
    assert details.patient is None
    assert details.bot is None
    assert details.flags == []
    assert details.api_calls == []


@pytest.mark.asyncio
async def test_get_call_with_details_missing(store):
    assert await store.get_call_with_details("missing") is None


@pytest.mark.asyncio
async def test_list_calls_with_details_newest_first(store):
    older = await store.create_call({"transcript": "first"})
    newer = await store.create_call({"transcript": "second"})
    store.calls[older.id] = store.calls[older.id].model_copy(
        update={"timestamp": newer.timestamp - timedelta(minutes=5)}
    )

    calls = await store.list_calls_with_details()

    assert [call.id for call in calls] == [newer.id, older.id]


@pytest.mark.asyncio
async def test_update_call_cannot_change_timestamp(store):
    call = await store.create_call({"transcript": "hello"})

    updated = await store.update_call(call.id, {"status": "follow-up", "timestamp": None})

    assert updated.status == "follow-up"
    assert updated.timestamp == call.timestamp


@pytest.mark.asyncio
async def test_delete_call_leaves_flags(store):
    call, flags = await store.create_call_with_flags(
        {"transcript": "harm"},
        [{"flag_type": "harm", "severity": "high", "content": "harm"}],
    )

    assert await store.delete_call(call.id) is True
    assert await store.get_call(call.id) is None
    assert len(await store.list_flags_by_call(call.id)) == 1


@pytest.mark.asyncio
async def test_call_with_flags_is_all_or_nothing(store):
    with pytest.raises(ValidationError):
        await store.create_call_with_flags(
            {"transcript": "hello", "sentiment_label": "crisis"},
            [
                {"flag_type": "harm", "severity": "high", "content": "ok"},
                {"flag_type": "harm", "severity": "catastrophic", "content": "bad"},
            ],
        )

    assert store.calls == {}
    assert store.call_flags == {}


@pytest.mark.asyncio
async def test_sentiment_score_outside_range_is_rejected(store):
    with pytest.raises(ValidationError):
        await store.create_call({"sentiment_score": "-1.5"})


@pytest.mark.asyncio
async def test_call_flag_requires_existing_call(store):
    with pytest.raises(NotFoundError):
        await store.create_call_flag({"call_id": "missing", "flag_type": "harm"})


@pytest.mark.asyncio
async def test_calls_by_patient(store, test_patient):
    mine = await store.create_call({"patient_id": test_patient.id})
    await store.create_call({"patient_id": "P456"})

    calls = await store.list_calls_by_patient(test_patient.id)

    assert [call.id for call in calls] == [mine.id]


@pytest.mark.asyncio
async def test_seed_sample_data_is_idempotent(store):
    await seed_sample_data(store)
    await seed_sample_data(store)

    patients = await store.list_patients()
    bots = await store.list_bots()

    assert sorted(patient.id for patient in patients) == ["P123", "P456"]
    assert len(bots) == 1
    assert bots[0].external_bot_id == "bot_123456"
    assert "end it all" in bots[0].crisis_keywords
