"""Form router - FastAPI endpoints for forms and submissions"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_owner
from ...database import get_db
from ...models import User
from ...realtime import ConnectionManager, get_broadcaster
from ..automation.dispatcher import AutomationDispatcher
from ..automation.triggers import get_automation_dispatcher
from ..bookings.schemas import BookingTypeResponse
from .schemas import (
    BookingTypeLink,
    FormCreate,
    FormRequestCreate,
    FormResponse,
    FormSubmissionListResponse,
    FormSubmissionResponse,
    FormSubmitRequest,
    FormUpdate,
    OverdueCheckResponse,
)
from .service import FormService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/forms", tags=["Forms"])


def get_form_service(
    db: Session = Depends(get_db),
    dispatcher: AutomationDispatcher = Depends(get_automation_dispatcher),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
) -> FormService:
    """Dependency injection for FormService"""
    return FormService(db, dispatcher, broadcaster)


# ============================================================================
# SUBMISSIONS (declared before /{form_id})
# ============================================================================


@router.get("/submissions", response_model=FormSubmissionListResponse)
async def get_submissions(
    status: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: FormService = Depends(get_form_service),
):
    submissions, total = service.get_submissions(current_user, status, page, limit)
    return FormSubmissionListResponse(
        data=[FormSubmissionResponse.from_submission(s) for s in submissions],
        total=total,
        page=page,
        limit=limit,
    )


@router.post("/submissions", response_model=FormSubmissionResponse, status_code=201)
async def request_form(
    data: FormRequestCreate,
    current_user: User = Depends(get_current_user),
    service: FormService = Depends(get_form_service),
):
    """Send a form to a contact"""
    return FormSubmissionResponse.from_submission(await service.request_form(data, current_user))


@router.post("/submissions/check-overdue", response_model=OverdueCheckResponse)
async def check_overdue(
    current_user: User = Depends(require_owner),
    service: FormService = Depends(get_form_service),
):
    overdue = await service.check_overdue(current_user)
    return OverdueCheckResponse(count=len(overdue), submissionIds=[s.id for s in overdue])


@router.get("/submissions/{submission_id}", response_model=FormSubmissionResponse)
async def get_submission(
    submission_id: str,
    service: FormService = Depends(get_form_service),
):
    """Public endpoint backing the fill-in page; carries the form fields"""
    return FormSubmissionResponse.from_submission(service.get_submission(submission_id))


@router.post("/submissions/{submission_id}/submit", response_model=FormSubmissionResponse)
async def submit_form(
    submission_id: str,
    data: FormSubmitRequest,
    service: FormService = Depends(get_form_service),
):
    """Public endpoint used by the link sent to the contact"""
    return FormSubmissionResponse.from_submission(await service.submit(submission_id, data))


# ============================================================================
# FORMS
# ============================================================================


@router.get("", response_model=list[FormResponse])
async def get_forms(
    current_user: User = Depends(get_current_user),
    service: FormService = Depends(get_form_service),
):
    return [FormResponse.from_form(f) for f in service.get_forms(current_user)]


@router.post("", response_model=FormResponse, status_code=201)
async def create_form(
    data: FormCreate,
    current_user: User = Depends(require_owner),
    service: FormService = Depends(get_form_service),
):
    return FormResponse.from_form(service.create_form(data, current_user))


@router.get("/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: str,
    current_user: User = Depends(get_current_user),
    service: FormService = Depends(get_form_service),
):
    return FormResponse.from_form(service.get_form(form_id, current_user))


@router.put("/{form_id}", response_model=FormResponse)
async def update_form(
    form_id: str,
    data: FormUpdate,
    current_user: User = Depends(require_owner),
    service: FormService = Depends(get_form_service),
):
    return FormResponse.from_form(service.update_form(form_id, data, current_user))


@router.delete("/{form_id}")
async def delete_form(
    form_id: str,
    current_user: User = Depends(require_owner),
    service: FormService = Depends(get_form_service),
):
    return service.delete_form(form_id, current_user)


@router.post("/{form_id}/booking-types/{booking_type_id}", response_model=BookingTypeResponse)
async def link_form_to_booking_type(
    form_id: str,
    booking_type_id: str,
    data: Optional[BookingTypeLink] = None,
    current_user: User = Depends(require_owner),
    service: FormService = Depends(get_form_service),
):
    booking_type = service.link_booking_type(form_id, booking_type_id, data or BookingTypeLink(), current_user)
    return BookingTypeResponse.from_booking_type(booking_type)
