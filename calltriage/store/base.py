"""Record store interface"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from calltriage.models import Patient, Bot, Call, CallFlag, ApiCall
from calltriage.schemas.call import CallWithDetails


class RecordStore(ABC):
    """
    Persistence capability used by the API and the post-call pipeline.

    Joins never fail on dangling references: a call whose patient or bot
    no longer exists is returned with that field left empty. Deletes do
    not cascade to flags or API call records.
    """

    # Patients

    @abstractmethod
    async def get_patient(self, patient_id: str) -> Optional[Patient]:
        pass

    @abstractmethod
    async def create_patient(self, fields: Dict[str, Any]) -> Patient:
        """Create a patient under its caller-supplied id"""
        pass

    @abstractmethod
    async def list_patients(self) -> List[Patient]:
        pass

    # Bots

    @abstractmethod
    async def get_bot(self, bot_id: str) -> Optional[Bot]:
        pass

    @abstractmethod
    async def get_bot_by_external_id(self, external_bot_id: str) -> Optional[Bot]:
        pass

    @abstractmethod
    async def create_bot(self, fields: Dict[str, Any]) -> Bot:
        pass

    @abstractmethod
    async def update_bot(self, bot_id: str, updates: Dict[str, Any]) -> Optional[Bot]:
        """Merge supplied fields into the bot; None if it does not exist"""
        pass

    @abstractmethod
    async def delete_bot(self, bot_id: str) -> bool:
        pass

    @abstractmethod
    async def list_bots(self) -> List[Bot]:
        pass

    # Calls

    @abstractmethod
    async def get_call(self, call_id: str) -> Optional[Call]:
        pass

    @abstractmethod
    async def create_call(self, fields: Dict[str, Any]) -> Call:
        pass

    @abstractmethod
    async def update_call(self, call_id: str, updates: Dict[str, Any]) -> Optional[Call]:
        pass

    @abstractmethod
    async def delete_call(self, call_id: str) -> bool:
        pass

    @abstractmethod
    async def list_calls_by_patient(self, patient_id: str) -> List[Call]:
        pass

    @abstractmethod
    async def get_call_with_details(self, call_id: str) -> Optional[CallWithDetails]:
        pass

    @abstractmethod
    async def list_calls_with_details(self) -> List[CallWithDetails]:
        """All calls joined with their details, newest first"""
        pass

    @abstractmethod
    async def create_call_with_flags(
        self,
        call_fields: Dict[str, Any],
        flag_fields: List[Dict[str, Any]],
    ) -> Tuple[Call, List[CallFlag]]:
        """
        Create a call and its flags as one unit.
        Either the call and every flag are stored, or nothing is.
        """
        pass

    # Call flags

    @abstractmethod
    async def create_call_flag(self, fields: Dict[str, Any]) -> CallFlag:
        pass

    @abstractmethod
    async def list_flags_by_call(self, call_id: str) -> List[CallFlag]:
        pass

    # API calls

    @abstractmethod
    async def create_api_call(self, fields: Dict[str, Any]) -> ApiCall:
        pass

    @abstractmethod
    async def list_api_calls_by_call(self, call_id: str) -> List[ApiCall]:
        pass
