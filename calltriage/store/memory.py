"""In-memory record store"""

from typing import Any, Dict, List, Optional, Tuple, TypeVar
import structlog

from calltriage.errors import ConflictError, NotFoundError
from calltriage.models import Patient, Bot, Call, CallFlag, ApiCall
from calltriage.models.base import CamelModel, new_id
from calltriage.schemas.call import CallWithDetails
from calltriage.store.base import RecordStore

logger = structlog.get_logger()

RecordT = TypeVar("RecordT", bound=CamelModel)

# Fields a partial update may never overwrite
IMMUTABLE_FIELDS = ("id", "created_at", "timestamp")


def _copy(record: RecordT) -> RecordT:
    return record.model_copy(deep=True)


def _merge(record: RecordT, updates: Dict[str, Any]) -> RecordT:
    """Overwrite only the supplied fields and re-validate the result"""
    data = record.model_dump()
    for field, value in updates.items():
        if field not in IMMUTABLE_FIELDS:
            data[field] = value
    return type(record).model_validate(data)


class MemoryStore(RecordStore):
    """
    Dict-backed store for single-process deployments.

    No method awaits while mutating, so every operation (including
    create_call_with_flags) completes without interleaving on the
    event loop. Records are handed out as copies.
    """

    def __init__(self):
        self.patients: Dict[str, Patient] = {}
        self.bots: Dict[str, Bot] = {}
        self.calls: Dict[str, Call] = {}
        self.call_flags: Dict[str, CallFlag] = {}
        self.api_calls: Dict[str, ApiCall] = {}

    # Patients

    async def get_patient(self, patient_id: str) -> Optional[Patient]:
        patient = self.patients.get(patient_id)
        return _copy(patient) if patient else None

    async def create_patient(self, fields: Dict[str, Any]) -> Patient:
        patient = Patient.model_validate(fields)
        if patient.id in self.patients:
            raise ConflictError(f"Patient {patient.id} already exists")
        self.patients[patient.id] = patient
        return _copy(patient)

    async def list_patients(self) -> List[Patient]:
        return [_copy(patient) for patient in self.patients.values()]

    # Bots

    async def get_bot(self, bot_id: str) -> Optional[Bot]:
        bot = self.bots.get(bot_id)
        return _copy(bot) if bot else None

    async def get_bot_by_external_id(self, external_bot_id: str) -> Optional[Bot]:
        for bot in self.bots.values():
            if bot.external_bot_id == external_bot_id:
                return _copy(bot)
        return None

    async def create_bot(self, fields: Dict[str, Any]) -> Bot:
        bot = Bot.model_validate({**fields, "id": new_id()})
        self.bots[bot.id] = bot
        return _copy(bot)

    async def update_bot(self, bot_id: str, updates: Dict[str, Any]) -> Optional[Bot]:
        bot = self.bots.get(bot_id)
        if not bot:
            return None
        updated = _merge(bot, updates)
        self.bots[bot_id] = updated
        return _copy(updated)

    async def delete_bot(self, bot_id: str) -> bool:
        return self.bots.pop(bot_id, None) is not None

    async def list_bots(self) -> List[Bot]:
        return [_copy(bot) for bot in self.bots.values()]

    # Calls

    async def get_call(self, call_id: str) -> Optional[Call]:
        call = self.calls.get(call_id)
        return _copy(call) if call else None

    async def create_call(self, fields: Dict[str, Any]) -> Call:
        call = Call.model_validate({**fields, "id": new_id()})
        self.calls[call.id] = call
        return _copy(call)

    async def update_call(self, call_id: str, updates: Dict[str, Any]) -> Optional[Call]:
        call = self.calls.get(call_id)
        if not call:
            return None
        updated = _merge(call, updates)
        self.calls[call_id] = updated
        return _copy(updated)

    async def delete_call(self, call_id: str) -> bool:
        return self.calls.pop(call_id, None) is not None

    async def list_calls_by_patient(self, patient_id: str) -> List[Call]:
        calls = [
            _copy(call) for call in self.calls.values()
            if call.patient_id == patient_id
        ]
        return sorted(calls, key=lambda call: call.timestamp, reverse=True)

    def _details(self, call: Call) -> CallWithDetails:
        patient = self.patients.get(call.patient_id) if call.patient_id else None
        bot = self.bots.get(call.bot_id) if call.bot_id else None

        flags = [flag for flag in self.call_flags.values() if flag.call_id == call.id]

        # In-call lookups are logged under either our id or the OpenMic call id
        call_refs = {call.id}
        if call.external_call_id:
            call_refs.add(call.external_call_id)
        api_calls = [
            api_call for api_call in self.api_calls.values()
            if api_call.call_id in call_refs
        ]

        return CallWithDetails.model_validate({
            **call.model_dump(),
            "patient": patient.model_dump() if patient else None,
            "bot": bot.model_dump() if bot else None,
            "flags": [flag.model_dump() for flag in flags],
            "api_calls": [api_call.model_dump() for api_call in api_calls],
        })

    async def get_call_with_details(self, call_id: str) -> Optional[CallWithDetails]:
        call = self.calls.get(call_id)
        if not call:
            return None
        return self._details(call)

    async def list_calls_with_details(self) -> List[CallWithDetails]:
        details = [self._details(call) for call in self.calls.values()]
        return sorted(details, key=lambda call: call.timestamp, reverse=True)

    async def create_call_with_flags(
        self,
        call_fields: Dict[str, Any],
        flag_fields: List[Dict[str, Any]],
    ) -> Tuple[Call, List[CallFlag]]:
        # Validate everything before writing so a bad flag leaves no call behind
        call = Call.model_validate({**call_fields, "id": new_id()})
        flags = [
            CallFlag.model_validate({**fields, "id": new_id(), "call_id": call.id})
            for fields in flag_fields
        ]

        self.calls[call.id] = call
        for flag in flags:
            self.call_flags[flag.id] = flag

        logger.debug("Stored call with flags", call_id=call.id, flag_count=len(flags))
        return _copy(call), [_copy(flag) for flag in flags]

    # Call flags

    async def create_call_flag(self, fields: Dict[str, Any]) -> CallFlag:
        flag = CallFlag.model_validate({**fields, "id": new_id()})
        if flag.call_id not in self.calls:
            raise NotFoundError("Call")
        self.call_flags[flag.id] = flag
        return _copy(flag)

    async def list_flags_by_call(self, call_id: str) -> List[CallFlag]:
        return [
            _copy(flag) for flag in self.call_flags.values()
            if flag.call_id == call_id
        ]

    # API calls

    async def create_api_call(self, fields: Dict[str, Any]) -> ApiCall:
        api_call = ApiCall.model_validate({**fields, "id": new_id()})
        self.api_calls[api_call.id] = api_call
        return _copy(api_call)

    async def list_api_calls_by_call(self, call_id: str) -> List[ApiCall]:
        return [
            _copy(api_call) for api_call in self.api_calls.values()
            if api_call.call_id == call_id
        ]
