"""Patient API endpoints"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from calltriage.dependencies import get_store
from calltriage.models import Patient, Call
from calltriage.schemas.patient import PatientCreate
from calltriage.store.base import RecordStore

router = APIRouter()


@router.get("", response_model=List[Patient])
async def list_patients(store: RecordStore = Depends(get_store)):
    """List all patients"""
    return await store.list_patients()


@router.post("", response_model=Patient, status_code=status.HTTP_201_CREATED)
async def create_patient(
    patient_data: PatientCreate,
    store: RecordStore = Depends(get_store),
):
    """Create a patient under its clinic-assigned id"""
    return await store.create_patient(patient_data.model_dump())


@router.get("/{patient_id}", response_model=Patient)
async def get_patient(patient_id: str, store: RecordStore = Depends(get_store)):
    """Get patient details"""
    patient = await store.get_patient(patient_id)

    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")

    return patient


@router.get("/{patient_id}/calls", response_model=List[Call])
async def list_patient_calls(patient_id: str, store: RecordStore = Depends(get_store)):
    """Call history of one patient, newest first"""
    patient = await store.get_patient(patient_id)

    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")

    return await store.list_calls_by_patient(patient_id)
