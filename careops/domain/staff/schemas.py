"""Staff domain schemas - Pydantic models for team management"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from ...models import User

# Granted to every new invite; owners adjust them afterwards
DEFAULT_STAFF_PERMISSIONS = {
    "canAccessInbox": True,
    "canManageBookings": True,
    "canViewForms": True,
    "canManageForms": False,
    "canViewInventory": True,
    "canManageInventory": False,
    "canManageContacts": True,
}

STAFF_STATUSES = ("ACTIVE", "INACTIVE", "PENDING")


class StaffInvite(BaseModel):
    email: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    permissions: Optional[dict[str, bool]] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v.strip().lower()


class StaffUpdate(BaseModel):
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    status: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v is not None and v not in STAFF_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(STAFF_STATUSES)}")
        return v


class StaffPermissionsUpdate(BaseModel):
    """Flags to merge into the member's existing permissions"""

    permissions: dict[str, bool]


class StaffResponse(BaseModel):
    id: str
    workspaceId: str
    email: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    role: str
    status: str
    permissions: dict[str, Any] = {}
    createdAt: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "StaffResponse":
        return cls(
            id=user.id,
            workspaceId=user.workspace_id,
            email=user.email,
            firstName=user.first_name,
            lastName=user.last_name,
            role=user.role,
            status=user.status,
            permissions=user.permissions or {},
            createdAt=user.created_at,
        )
