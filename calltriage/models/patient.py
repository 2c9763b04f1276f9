"""Patient model"""

from datetime import datetime
from typing import Optional
from pydantic import Field

from calltriage.models.base import CamelModel, RiskLevel, utcnow


class Patient(CamelModel):
    """Clinic patient, keyed by the clinic-assigned identifier (e.g. MRN)"""
    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    last_appointment: Optional[str] = None  # date string, e.g. 2025-08-12
    last_topic: Optional[str] = None
    risk_level: RiskLevel = "low"
    created_at: datetime = Field(default_factory=utcnow)
