"""Workspace and account schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from ...models import User, Workspace


class RegisterRequest(BaseModel):
    """Business owner sign-up: creates the workspace and its first user"""

    email: str
    password: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    businessName: str
    contactEmail: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    @field_validator("businessName")
    @classmethod
    def validate_business_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Business name is required")
        return v.strip()


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class WorkspaceUpdate(BaseModel):
    businessName: Optional[str] = None
    contactEmail: Optional[str] = None


class WorkspaceResponse(BaseModel):
    id: str
    businessName: str
    contactEmail: Optional[str] = None
    status: str
    contactFormSetup: bool
    inventorySetup: bool
    staffSetup: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_workspace(cls, workspace: Workspace) -> "WorkspaceResponse":
        return cls(
            id=workspace.id,
            businessName=workspace.business_name,
            contactEmail=workspace.contact_email,
            status=workspace.status,
            contactFormSetup=workspace.contact_form_setup,
            inventorySetup=workspace.inventory_setup,
            staffSetup=workspace.staff_setup,
            createdAt=workspace.created_at,
        )


class UserResponse(BaseModel):
    id: str
    email: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    role: str
    status: str
    permissions: dict[str, Any] = {}
    workspace: Optional[WorkspaceResponse] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            firstName=user.first_name,
            lastName=user.last_name,
            role=user.role,
            status=user.status,
            permissions=user.permissions or {},
            workspace=WorkspaceResponse.from_workspace(user.workspace) if user.workspace else None,
        )


class AuthResponse(BaseModel):
    user: UserResponse
    token: str
