"""Contact service - Business logic for contacts and the public contact form"""

import logging
from typing import Optional

from fastapi import BackgroundTasks, HTTPException
from sqlalchemy.orm import Session

from ...models import Contact, User, Workspace
from ...realtime import ConnectionManager
from ..automation.dispatcher import AutomationDispatcher
from ..automation.triggers import trigger_new_contact
from ..conversations.repository import ConversationRepository
from .repository import ContactRepository
from .schemas import ContactCreate, ContactResponse, ContactUpdate, PublicContactCreate

logger = logging.getLogger(__name__)


class ContactService:
    """Service layer for contact business logic"""

    def __init__(self, db: Session, dispatcher: AutomationDispatcher, broadcaster: ConnectionManager):
        self.db = db
        self.dispatcher = dispatcher
        self.broadcaster = broadcaster
        self.repo = ContactRepository()

    def get_contacts(
        self,
        user: User,
        status: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Contact], int]:
        return self.repo.search_contacts(
            self.db, user.workspace_id, status, search, (page - 1) * limit, limit
        )

    def get_contact(self, contact_id: str, user: User) -> Contact:
        contact = self.repo.get_contact(self.db, contact_id, user.workspace_id)
        if not contact:
            raise HTTPException(status_code=404, detail="Contact not found")
        return contact

    async def create_public_contact(
        self, data: PublicContactCreate, background_tasks: Optional[BackgroundTasks] = None
    ) -> Contact:
        """
        Capture a lead from the public contact form.

        An existing contact with the same email is refreshed instead of
        duplicated; NEW_CONTACT fires either way.
        """
        workspace = self.db.get(Workspace, data.workspaceId)
        if not workspace or workspace.status != "ACTIVE":
            raise HTTPException(status_code=400, detail="Workspace is not active")

        contact = self.repo.get_contact_by_email(self.db, data.email, workspace.id)
        if contact:
            contact = self.repo.update_contact(
                self.db,
                contact,
                first_name=data.firstName,
                last_name=data.lastName,
                phone=data.phone,
            )
        else:
            contact = self.repo.create_contact(
                self.db,
                workspace.id,
                email=data.email,
                first_name=data.firstName,
                last_name=data.lastName,
                phone=data.phone,
                source="CONTACT_FORM",
                status="NEW",
            )

        workspace.contact_form_setup = True
        self.db.commit()

        self._record_inquiry(workspace, contact, data.message)

        await trigger_new_contact(
            self.dispatcher, contact, workspace, background_tasks=background_tasks
        )
        await self.broadcaster.emit_to_workspace(
            workspace.id, "contact:created", ContactResponse.from_contact(contact).model_dump()
        )
        logger.info(f"Contact created: {contact.id}")
        return contact

    def _record_inquiry(self, workspace: Workspace, contact: Contact, message: Optional[str]) -> None:
        """Put the inquiry on the contact's OPEN conversation, opening one if needed"""
        conversation = ConversationRepository.find_open_conversation(self.db, workspace.id, contact.id)
        if not conversation:
            conversation = ConversationRepository.create_conversation(
                self.db, workspace.id, contact.id, "New Inquiry"
            )
            logger.info(f"Conversation opened: {conversation.id} for contact {contact.id}")

        if message:
            ConversationRepository.add_message(
                self.db,
                conversation,
                channel="EMAIL",
                direction="INBOUND",
                body=message,
                sender=contact.email,
                recipient=workspace.contact_email,
            )

    def create_contact(self, data: ContactCreate, user: User) -> Contact:
        """Add a contact from the dashboard; no automation fires"""
        contact = self.repo.create_contact(
            self.db,
            user.workspace_id,
            email=data.email,
            first_name=data.firstName,
            last_name=data.lastName,
            phone=data.phone,
            source="MANUAL",
            status="NEW",
        )
        workspace = self.db.get(Workspace, user.workspace_id)
        if workspace:
            workspace.contact_form_setup = True
            self.db.commit()
        return contact

    def update_contact(self, contact_id: str, data: ContactUpdate, user: User) -> Contact:
        contact = self.get_contact(contact_id, user)
        return self.repo.update_contact(
            self.db,
            contact,
            email=data.email,
            first_name=data.firstName,
            last_name=data.lastName,
            phone=data.phone,
            status=data.status,
        )
