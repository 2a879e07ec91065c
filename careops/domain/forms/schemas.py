"""Form domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from ...models import Form, FormSubmission


class FormCreate(BaseModel):
    name: str
    description: Optional[str] = None
    fields: list[dict[str, Any]] = []

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Form name is required")
        return v.strip()


class FormUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    fields: Optional[list[dict[str, Any]]] = None
    isActive: Optional[bool] = None


class FormResponse(BaseModel):
    id: str
    workspaceId: str
    name: str
    description: Optional[str] = None
    fields: list[dict[str, Any]]
    isActive: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_form(cls, form: Form) -> "FormResponse":
        return cls(
            id=form.id,
            workspaceId=form.workspace_id,
            name=form.name,
            description=form.description,
            fields=form.fields or [],
            isActive=form.is_active,
            createdAt=form.created_at,
        )


class FormRequestCreate(BaseModel):
    """Ask a contact to fill in a form"""

    formId: str
    contactId: str
    dueDays: Optional[int] = None

    @field_validator("dueDays")
    @classmethod
    def validate_due_days(cls, v):
        if v is not None and v < 0:
            raise ValueError("dueDays cannot be negative")
        return v


class FormSubmitRequest(BaseModel):
    data: dict[str, Any]

    @field_validator("data")
    @classmethod
    def validate_data(cls, v):
        if not v:
            raise ValueError("Form data is required")
        return v


class FormSubmissionResponse(BaseModel):
    id: str
    workspaceId: str
    formId: str
    formName: Optional[str] = None
    formFields: Optional[list[Any]] = None
    contactId: Optional[str] = None
    bookingId: Optional[str] = None
    data: Optional[dict[str, Any]] = None
    status: str
    dueDate: Optional[datetime] = None
    submittedAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_submission(cls, submission: FormSubmission) -> "FormSubmissionResponse":
        return cls(
            id=submission.id,
            workspaceId=submission.workspace_id,
            formId=submission.form_id,
            formName=submission.form.name if submission.form else None,
            formFields=submission.form.fields if submission.form else None,
            contactId=submission.contact_id,
            bookingId=submission.booking_id,
            data=submission.data,
            status=submission.status,
            dueDate=submission.due_date,
            submittedAt=submission.submitted_at,
            createdAt=submission.created_at,
        )


class FormSubmissionListResponse(BaseModel):
    data: list[FormSubmissionResponse]
    total: int
    page: int
    limit: int


class OverdueCheckResponse(BaseModel):
    count: int
    submissionIds: list[str]


class BookingTypeLink(BaseModel):
    """Send this form after every booking of the type, or stop doing so"""

    sendAfterBooking: bool = True
