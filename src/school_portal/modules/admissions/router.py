"""
Admission Public Router

Endpoints used by the public PPDB page: the active period, registration
submission (multipart form with four documents) and the status check.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.core.database import get_db
from school_portal.core.rate_limit import REGISTRATION_SUBMIT_LIMIT, rate_limit
from school_portal.core.storage import LocalObjectStorage, get_storage
from school_portal.modules.admissions import service
from school_portal.modules.admissions.helpers import DOCUMENT_RULES
from school_portal.modules.admissions.schemas import (
    ActiveAdmissionResponse,
    AdmissionPeriodResponse,
    RegistrationStatusResponse,
    RegistrationSubmitResponse,
)
from school_portal.modules.shared import PortalServiceError, raise_http_error
from school_portal.modules.shared.uploads import read_upload

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/active", response_model=ActiveAdmissionResponse)
async def get_active_admission(db: AsyncSession = Depends(get_db)) -> ActiveAdmissionResponse:
    """
    The active admission period and whether registration is open today.

    Raises:
        HTTPException 404: No active period
    """
    try:
        period, window, remaining = await service.get_active_admission(db)
    except PortalServiceError as e:
        raise_http_error(e)

    return ActiveAdmissionResponse(
        period=AdmissionPeriodResponse.model_validate(period),
        window_state=window.state,
        is_open=window.is_open,
        message=window.message,
        remaining_quota=remaining,
    )


@router.post(
    "/registrations",
    response_model=RegistrationSubmitResponse,
    status_code=status.HTTP_201_CREATED,
)
@rate_limit(*REGISTRATION_SUBMIT_LIMIT)
async def submit_registration(
    request: Request,
    student_name: str = Form(""),
    student_email: str = Form(""),
    student_phone: str = Form(""),
    parent_name: str = Form(""),
    parent_phone: str = Form(""),
    parent_email: str = Form(""),
    birth_date: str = Form(""),
    birth_place: str = Form(""),
    gender: str = Form(""),
    address: str = Form(""),
    previous_school: str = Form(""),
    chosen_skill_id: str = Form(""),
    ktp: UploadFile | None = File(None),
    kk: UploadFile | None = File(None),
    ijazah: UploadFile | None = File(None),
    foto: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    storage: LocalObjectStorage = Depends(get_storage),
) -> RegistrationSubmitResponse:
    """
    Submit a PPDB registration.

    Documents: ktp, kk and ijazah (.jpg, .jpeg, .png, .pdf) and foto
    (.jpg, .jpeg, .png), 5 MB each.

    Raises:
        HTTPException 409: Registration closed or quota full
        HTTPException 422: Invalid fields or documents (per-field `errors`)
        HTTPException 429: Too many submissions from this address
        HTTPException 502: Documents could not be stored
    """
    form = {
        "student_name": student_name,
        "student_email": student_email,
        "student_phone": student_phone,
        "parent_name": parent_name,
        "parent_phone": parent_phone,
        "parent_email": parent_email,
        "birth_date": birth_date,
        "birth_place": birth_place,
        "gender": gender,
        "address": address,
        "previous_school": previous_school,
        "chosen_skill_id": chosen_skill_id,
    }
    files = {"ktp": ktp, "kk": kk, "ijazah": ijazah, "foto": foto}
    documents = {key: await read_upload(files[key], DOCUMENT_RULES[key]) for key in files}

    try:
        registration, period = await service.submit_registration(db, storage, form, documents)
    except PortalServiceError as e:
        raise_http_error(e)

    return RegistrationSubmitResponse(
        registration_number=registration.registration_number,
        status=registration.status,
        academic_year=period.academic_year,
    )


@router.get("/registrations/{registration_number}", response_model=RegistrationStatusResponse)
async def get_registration_status(
    registration_number: str,
    email: str = Query(..., min_length=3, max_length=255),
    db: AsyncSession = Depends(get_db),
) -> RegistrationStatusResponse:
    """
    Registration status for applicants.

    The email must be the student's or parent's email from the registration.
    """
    try:
        registration = await service.get_registration_status(db, registration_number, email)
    except PortalServiceError as e:
        raise_http_error(e)

    return RegistrationStatusResponse(
        registration_number=registration.registration_number,
        student_name=registration.student_name,
        status=registration.status,
        notes=registration.notes,
        academic_year=registration.period.academic_year,
        skill_name=registration.skill.name if registration.skill else None,
        announcement_date=registration.period.announcement_date,
        submitted_at=registration.created_at,
    )
