"""Workspace service - Registration, login and workspace lifecycle"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import BookingType, User, Workspace
from ...security_utils import generate_user_token, hash_password_bcrypt, verify_password_bcrypt
from ..automation.defaults import create_default_automation_rules
from .schemas import LoginRequest, RegisterRequest, WorkspaceUpdate

logger = logging.getLogger(__name__)


class WorkspaceService:
    """Service layer for accounts and workspaces"""

    def __init__(self, db: Session):
        self.db = db

    def register(self, data: RegisterRequest) -> tuple[User, str]:
        """Create a SETUP workspace with its OWNER and seed the starter automations"""
        if self.db.query(User).filter(User.email == data.email).first():
            raise HTTPException(status_code=409, detail="User with this email already exists")

        workspace = Workspace(
            business_name=data.businessName,
            contact_email=data.contactEmail,
            status="SETUP",
        )
        self.db.add(workspace)
        self.db.flush()

        user = User(
            workspace_id=workspace.id,
            email=data.email,
            password_hash=hash_password_bcrypt(data.password),
            first_name=data.firstName,
            last_name=data.lastName,
            role="OWNER",
            status="ACTIVE",
            permissions={},
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        create_default_automation_rules(self.db, workspace.id)

        logger.info(f"New user registered: {user.email} (workspace {workspace.id})")
        return user, generate_user_token(user.id)

    def login(self, data: LoginRequest) -> tuple[User, str]:
        user = self.db.query(User).filter(User.email == data.email).first()
        if not user or not verify_password_bcrypt(data.password, user.password_hash):
            raise HTTPException(status_code=401, detail="Invalid email or password")
        if user.status != "ACTIVE":
            raise HTTPException(status_code=401, detail="Your account is not active")

        logger.info(f"User logged in: {user.email}")
        return user, generate_user_token(user.id)

    def get_workspace(self, user: User) -> Workspace:
        workspace = self.db.get(Workspace, user.workspace_id)
        if not workspace:
            raise HTTPException(status_code=404, detail="Workspace not found")
        return workspace

    def update_workspace(self, data: WorkspaceUpdate, user: User) -> Workspace:
        workspace = self.get_workspace(user)
        if data.businessName is not None:
            workspace.business_name = data.businessName
        if data.contactEmail is not None:
            workspace.contact_email = data.contactEmail
        self.db.commit()
        self.db.refresh(workspace)
        return workspace

    def activate(self, user: User) -> Workspace:
        """Go live once the workspace can receive leads and bookings"""
        workspace = self.get_workspace(user)

        if not workspace.contact_email:
            raise HTTPException(status_code=400, detail="A contact email must be configured")

        has_booking_type = (
            self.db.query(BookingType)
            .filter(BookingType.workspace_id == workspace.id, BookingType.is_active.is_(True))
            .first()
        )
        if not has_booking_type:
            raise HTTPException(status_code=400, detail="At least one booking type must be created")

        workspace.status = "ACTIVE"
        self.db.commit()
        self.db.refresh(workspace)
        logger.info(f"Workspace activated: {workspace.id}")
        return workspace
