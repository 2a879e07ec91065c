"""Form service - Forms, submission requests and overdue tracking"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import FORM_DUE_DAYS
from ...models import BookingType, Form, FormSubmission, User, Workspace
from ...realtime import ConnectionManager
from ..automation.dispatcher import AutomationDispatcher
from ..automation.triggers import trigger_form_overdue, trigger_form_pending
from ..bookings.repository import BookingRepository
from ..contacts.repository import ContactRepository
from .repository import FormRepository
from .schemas import (
    BookingTypeLink,
    FormCreate,
    FormRequestCreate,
    FormSubmissionResponse,
    FormSubmitRequest,
    FormUpdate,
)

logger = logging.getLogger(__name__)


class FormService:
    """Service layer for form business logic"""

    def __init__(self, db: Session, dispatcher: AutomationDispatcher, broadcaster: ConnectionManager):
        self.db = db
        self.dispatcher = dispatcher
        self.broadcaster = broadcaster
        self.repo = FormRepository()

    # ========================================================================
    # FORMS
    # ========================================================================

    def get_forms(self, user: User) -> list[Form]:
        return self.repo.get_forms(self.db, user.workspace_id)

    def get_form(self, form_id: str, user: User) -> Form:
        form = self.repo.get_form(self.db, form_id, user.workspace_id)
        if not form:
            raise HTTPException(status_code=404, detail="Form not found")
        return form

    def create_form(self, data: FormCreate, user: User) -> Form:
        form = self.repo.create_form(
            self.db,
            user.workspace_id,
            name=data.name,
            description=data.description,
            fields=data.fields,
            is_active=True,
        )
        logger.info(f"Form created: {form.id}")
        return form

    def update_form(self, form_id: str, data: FormUpdate, user: User) -> Form:
        form = self.get_form(form_id, user)
        return self.repo.update_form(
            self.db,
            form,
            name=data.name,
            description=data.description,
            fields=data.fields,
            is_active=data.isActive,
        )

    def delete_form(self, form_id: str, user: User) -> dict:
        """Soft delete so past submissions keep their form"""
        form = self.get_form(form_id, user)
        form.is_active = False
        self.db.commit()
        return {"message": "Form deleted successfully"}

    def link_booking_type(self, form_id: str, booking_type_id: str, data: BookingTypeLink, user: User) -> BookingType:
        """
        Make the form the follow-up of a booking type. Unlinking only clears
        the booking type's form when it is this one.
        """
        form = self.get_form(form_id, user)
        booking_type = BookingRepository.get_booking_type(self.db, booking_type_id, user.workspace_id)
        if not booking_type:
            raise HTTPException(status_code=404, detail="Booking type not found")

        if data.sendAfterBooking:
            booking_type.send_form_id = form.id
        elif booking_type.send_form_id == form.id:
            booking_type.send_form_id = None
        self.db.commit()
        self.db.refresh(booking_type)
        logger.info(f"Form {form.id} linked to booking type {booking_type.id}: {data.sendAfterBooking}")
        return booking_type

    # ========================================================================
    # SUBMISSIONS
    # ========================================================================

    def get_submission(self, submission_id: str) -> FormSubmission:
        """Public lookup; the submission id is the link sent to the contact"""
        submission = self.repo.get_submission(self.db, submission_id)
        if not submission:
            raise HTTPException(status_code=404, detail="Form submission not found")
        return submission

    def get_submissions(
        self, user: User, status: Optional[str] = None, page: int = 1, limit: int = 20
    ) -> tuple[list[FormSubmission], int]:
        return self.repo.search_submissions(self.db, user.workspace_id, status, (page - 1) * limit, limit)

    async def request_form(self, data: FormRequestCreate, user: User) -> FormSubmission:
        """Open a PENDING submission for a contact and fire FORM_PENDING"""
        form = self.get_form(data.formId, user)
        contact = ContactRepository.get_contact(self.db, data.contactId, user.workspace_id)
        if not contact:
            raise HTTPException(status_code=404, detail="Contact not found")

        due_days = FORM_DUE_DAYS if data.dueDays is None else data.dueDays
        submission = self.repo.create_submission(
            self.db,
            user.workspace_id,
            form_id=form.id,
            contact_id=contact.id,
            due_date=datetime.utcnow() + timedelta(days=due_days),
        )
        logger.info(f"Form {form.id} requested from contact {contact.id}")

        workspace = self.db.get(Workspace, user.workspace_id)
        await trigger_form_pending(self.dispatcher, submission, contact, workspace)
        return submission

    async def submit(self, submission_id: str, data: FormSubmitRequest) -> FormSubmission:
        """Public completion of a requested form"""
        submission = self.repo.get_submission(self.db, submission_id)
        if not submission:
            raise HTTPException(status_code=404, detail="Form submission not found")
        if submission.status == "COMPLETED":
            raise HTTPException(status_code=400, detail="Form has already been submitted")

        submission.data = data.data
        submission.status = "COMPLETED"
        submission.submitted_at = datetime.utcnow()
        self.db.commit()
        self.db.refresh(submission)

        await self.broadcaster.emit_to_workspace(
            submission.workspace_id,
            "form:completed",
            FormSubmissionResponse.from_submission(submission).model_dump(),
        )
        logger.info(f"Form submitted: {submission.id}")
        return submission

    async def check_overdue(self, user: User, now: Optional[datetime] = None) -> list[FormSubmission]:
        """Mark past-due PENDING submissions OVERDUE and fire FORM_OVERDUE for each"""
        now = now or datetime.utcnow()
        overdue = self.repo.find_overdue_submissions(self.db, now, user.workspace_id)
        if not overdue:
            return []

        for submission in overdue:
            submission.status = "OVERDUE"
        self.db.commit()
        logger.info(f"Marked {len(overdue)} form submission(s) overdue in workspace {user.workspace_id}")

        workspace = self.db.get(Workspace, user.workspace_id)
        for submission in overdue:
            await trigger_form_overdue(self.dispatcher, submission, submission.contact, workspace)
        return overdue
