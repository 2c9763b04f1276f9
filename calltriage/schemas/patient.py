"""Patient and in-call lookup schemas"""

from typing import Optional, List
from pydantic import Field

from calltriage.models.base import CamelModel, RiskLevel


class PatientCreate(CamelModel):
    """Create patient request"""
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    last_appointment: Optional[str] = None
    last_topic: Optional[str] = None
    risk_level: RiskLevel = "low"


class PrecallRequest(CamelModel):
    """OpenMic pre-call webhook payload"""
    patient_id: Optional[str] = None


class PrecallResponse(CamelModel):
    """Patient context handed to the bot before the call starts"""
    patient_id: str
    name: str
    last_appointment: Optional[str]
    last_topic: Optional[str]


class PatientInfoRequest(CamelModel):
    """In-call getPatientInfo function payload"""
    patient_id: Optional[str] = None
    call_id: Optional[str] = None


class Resource(CamelModel):
    """Support resource offered to the patient during a call"""
    type: str  # article, hotline
    title: str
    link: Optional[str] = None
    phone: Optional[str] = None


class PatientInfoResponse(CamelModel):
    patient_id: str
    name: str
    resources: List[Resource]
