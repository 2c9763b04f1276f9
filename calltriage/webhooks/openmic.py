"""OpenMic webhook handlers"""

from fastapi import APIRouter, Depends, HTTPException
import structlog

from calltriage.dependencies import get_store, get_pipeline
from calltriage.schemas.patient import (
    PrecallRequest,
    PrecallResponse,
    PatientInfoRequest,
    PatientInfoResponse,
    Resource,
)
from calltriage.schemas.call import PostCallRequest, PostCallResponse
from calltriage.services.postcall import PostCallPipeline
from calltriage.store.base import RecordStore

router = APIRouter()
logger = structlog.get_logger()

PATIENT_RESOURCES = [
    Resource(
        type="article",
        title="Coping with Anxiety",
        link="https://www.nimh.nih.gov/health/topics/anxiety-disorders",
    ),
    Resource(
        type="hotline",
        title="24x7 Crisis Hotline",
        phone="+1-800-273-8255",
    ),
]


@router.post("/precall", response_model=PrecallResponse)
async def handle_precall(
    request: PrecallRequest,
    store: RecordStore = Depends(get_store),
):
    """
    Handle the pre-call webhook from OpenMic.
    Returns the patient context the bot opens the call with.
    """
    if not request.patient_id:
        raise HTTPException(status_code=400, detail="Patient ID is required")

    patient = await store.get_patient(request.patient_id)

    if not patient:
        logger.warning("Pre-call for unknown patient", patient_id=request.patient_id)
        raise HTTPException(status_code=404, detail="Patient not found")

    logger.info("Pre-call context served", patient_id=patient.id)

    return PrecallResponse(
        patient_id=patient.id,
        name=patient.name,
        last_appointment=patient.last_appointment,
        last_topic=patient.last_topic,
    )


@router.post(
    "/getPatientInfo",
    response_model=PatientInfoResponse,
    response_model_exclude_none=True,
)
async def handle_get_patient_info(
    request: PatientInfoRequest,
    store: RecordStore = Depends(get_store),
):
    """In-call function: patient lookup plus support resources"""
    if not request.patient_id:
        raise HTTPException(status_code=400, detail="Patient ID is required")

    patient = await store.get_patient(request.patient_id)

    if not patient:
        raise HTTPException(status_code=404, detail="Patient not found")

    if request.call_id:
        await store.create_api_call({
            "call_id": request.call_id,
            "endpoint": "/api/getPatientInfo",
            "request_data": {"patientId": request.patient_id},
            "response_data": {"patient": patient.model_dump(mode="json", by_alias=True)},
        })

    logger.info("Patient info served", patient_id=patient.id, call_id=request.call_id)

    return PatientInfoResponse(
        patient_id=patient.id,
        name=patient.name,
        resources=PATIENT_RESOURCES,
    )


@router.post("/postcall", response_model=PostCallResponse)
async def handle_postcall(
    request: PostCallRequest,
    pipeline: PostCallPipeline = Depends(get_pipeline),
):
    """Handle the post-call webhook: analyze the transcript and store the call"""
    logger.info(
        "Post-call received",
        external_call_id=request.call_id,
        patient_id=request.patient_id,
        bot_id=request.bot_id,
    )

    return await pipeline.process_call(request)
