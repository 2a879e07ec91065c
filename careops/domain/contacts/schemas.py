"""Contact domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import Contact

CONTACT_STATUSES = ("NEW", "CONTACTED", "QUALIFIED", "CONVERTED", "LOST")


def _validate_email(v):
    if v is not None and "@" not in v:
        raise ValueError("Invalid email address")
    return v.strip().lower() if v else v


class PublicContactCreate(BaseModel):
    """Schema for the public contact form"""

    workspaceId: str
    email: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    message: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _validate_email(v)


class ContactCreate(BaseModel):
    """Schema for a contact added from the dashboard"""

    email: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _validate_email(v)


class ContactUpdate(BaseModel):
    email: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _validate_email(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in CONTACT_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(CONTACT_STATUSES)}")
        return v


class ContactResponse(BaseModel):
    """Schema for contact response"""

    id: str
    workspaceId: str
    email: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    source: Optional[str] = None
    status: str
    createdAt: Optional[datetime] = None

    @classmethod
    def from_contact(cls, contact: Contact) -> "ContactResponse":
        return cls(
            id=contact.id,
            workspaceId=contact.workspace_id,
            email=contact.email,
            firstName=contact.first_name,
            lastName=contact.last_name,
            phone=contact.phone,
            source=contact.source,
            status=contact.status,
            createdAt=contact.created_at,
        )


class ContactListResponse(BaseModel):
    data: list[ContactResponse]
    total: int
    page: int
    limit: int
