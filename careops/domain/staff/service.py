"""Staff service - Owner-managed team accounts and their permission flags"""

import logging
import secrets

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import User, Workspace
from ...security_utils import hash_password_bcrypt
from ..automation.executors import EmailSender
from .repository import StaffRepository
from .schemas import DEFAULT_STAFF_PERMISSIONS, StaffInvite, StaffPermissionsUpdate, StaffUpdate

logger = logging.getLogger(__name__)


def generate_temporary_password() -> str:
    return secrets.token_urlsafe(12)


class StaffService:
    """Service layer for staff management"""

    def __init__(self, db: Session, email_sender: EmailSender):
        self.db = db
        self.email_sender = email_sender
        self.repo = StaffRepository()

    def get_staff_member(self, staff_id: str, owner: User) -> User:
        member = self.repo.get_staff(self.db, staff_id, owner.workspace_id)
        if not member:
            raise HTTPException(status_code=404, detail="Staff member not found")
        return member

    def list_staff(self, owner: User) -> list[User]:
        return self.repo.list_staff(self.db, owner.workspace_id)

    async def invite(self, data: StaffInvite, owner: User) -> User:
        """
        Create a PENDING staff account with a temporary password and email it.

        The member cannot sign in until the owner activates the account.
        Delivery failures are logged; the account is kept.
        """
        if self.repo.get_user_by_email(self.db, data.email):
            raise HTTPException(status_code=409, detail="User with this email already exists")

        temp_password = generate_temporary_password()
        member = self.repo.create_staff(
            self.db,
            owner.workspace_id,
            email=data.email,
            password_hash=hash_password_bcrypt(temp_password),
            first_name=data.firstName,
            last_name=data.lastName,
            status="PENDING",
            permissions={**DEFAULT_STAFF_PERMISSIONS, **(data.permissions or {})},
        )

        workspace = self.db.get(Workspace, owner.workspace_id)
        workspace.staff_setup = True
        self.db.commit()
        logger.info(f"Staff invited: {member.email} (workspace {workspace.id})")

        try:
            await self.email_sender(
                to=member.email,
                subject=f"You've been invited to join {workspace.business_name}",
                html=f"""
                  <h1>Welcome to {workspace.business_name}!</h1>
                  <p>You've been invited to join the team.</p>
                  <p>Your temporary login credentials:</p>
                  <p>Email: {member.email}<br>Password: {temp_password}</p>
                  <p>Please change your password after your first login.</p>
                """,
            )
        except Exception as e:
            logger.error(f"Failed to send staff invitation to {member.email}: {e}")

        return member

    def update(self, staff_id: str, data: StaffUpdate, owner: User) -> User:
        member = self.get_staff_member(staff_id, owner)
        return self.repo.update_staff(
            self.db,
            member,
            first_name=data.firstName,
            last_name=data.lastName,
            status=data.status,
        )

    def update_permissions(self, staff_id: str, data: StaffPermissionsUpdate, owner: User) -> User:
        member = self.get_staff_member(staff_id, owner)
        # Reassigned so the JSON column is flagged dirty
        member.permissions = {**(member.permissions or {}), **data.permissions}
        self.db.commit()
        self.db.refresh(member)
        logger.info(f"Staff permissions updated: {member.id}")
        return member

    def set_status(self, staff_id: str, status: str, owner: User) -> User:
        member = self.get_staff_member(staff_id, owner)
        member = self.repo.update_staff(self.db, member, status=status)
        logger.info(f"Staff {member.id} -> {status}")
        return member

    def remove(self, staff_id: str, owner: User) -> dict:
        member = self.get_staff_member(staff_id, owner)
        self.repo.delete_staff(self.db, member)
        logger.info(f"Staff removed: {staff_id}")
        return {"message": "Staff member removed successfully"}

    async def reset_password(self, staff_id: str, owner: User) -> dict:
        """Issue a new temporary password; the account goes back to PENDING"""
        member = self.get_staff_member(staff_id, owner)
        new_password = generate_temporary_password()
        self.repo.update_staff(
            self.db, member, password_hash=hash_password_bcrypt(new_password), status="PENDING"
        )

        try:
            await self.email_sender(
                to=member.email,
                subject="Your password has been reset",
                html=f"""
                  <h1>Password Reset</h1>
                  <p>Your password has been reset by the workspace owner.</p>
                  <p>Your new temporary password:</p>
                  <p>{new_password}</p>
                """,
            )
        except Exception as e:
            logger.error(f"Failed to send password reset to {member.email}: {e}")

        logger.info(f"Password reset for staff: {member.id}")
        return {"message": "Password reset successfully. New password sent to staff email."}
