"""Staff repository - Database operations for workspace staff accounts"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import User


class StaffRepository:
    """Repository for staff database operations"""

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def get_staff(db: Session, staff_id: str, workspace_id: str) -> Optional[User]:
        """A STAFF member of the workspace; owners are never returned"""
        return (
            db.query(User)
            .filter(User.id == staff_id, User.workspace_id == workspace_id, User.role == "STAFF")
            .first()
        )

    @staticmethod
    def list_staff(db: Session, workspace_id: str) -> list[User]:
        return (
            db.query(User)
            .filter(User.workspace_id == workspace_id, User.role == "STAFF")
            .order_by(User.created_at.desc())
            .all()
        )

    @staticmethod
    def create_staff(db: Session, workspace_id: str, **data) -> User:
        user = User(workspace_id=workspace_id, role="STAFF", **data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_staff(db: Session, user: User, **updates) -> User:
        for key, value in updates.items():
            if value is not None and hasattr(user, key):
                setattr(user, key, value)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_staff(db: Session, user: User) -> None:
        db.delete(user)
        db.commit()
