"""Contact repository - Database operations for contacts"""

from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...models import Contact


class ContactRepository:
    """Repository for contact database operations"""

    @staticmethod
    def get_contact(db: Session, contact_id: str, workspace_id: str) -> Optional[Contact]:
        return (
            db.query(Contact)
            .filter(Contact.id == contact_id, Contact.workspace_id == workspace_id)
            .first()
        )

    @staticmethod
    def get_contact_by_email(db: Session, email: str, workspace_id: str) -> Optional[Contact]:
        return (
            db.query(Contact)
            .filter(Contact.email == email, Contact.workspace_id == workspace_id)
            .first()
        )

    @staticmethod
    def search_contacts(
        db: Session,
        workspace_id: str,
        status: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Contact], int]:
        """Filter contacts by status and a name/email substring, newest first"""
        query = db.query(Contact).filter(Contact.workspace_id == workspace_id)

        if status:
            query = query.filter(Contact.status == status)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Contact.first_name.ilike(pattern),
                    Contact.last_name.ilike(pattern),
                    Contact.email.ilike(pattern),
                )
            )

        total = query.count()
        contacts = query.order_by(Contact.created_at.desc()).offset(skip).limit(limit).all()
        return contacts, total

    @staticmethod
    def create_contact(db: Session, workspace_id: str, **contact_data) -> Contact:
        contact = Contact(workspace_id=workspace_id, **contact_data)
        db.add(contact)
        db.commit()
        db.refresh(contact)
        return contact

    @staticmethod
    def update_contact(db: Session, contact: Contact, **updates) -> Contact:
        """Update a contact with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(contact, key):
                setattr(contact, key, value)

        db.commit()
        db.refresh(contact)
        return contact
