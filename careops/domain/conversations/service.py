"""Conversation service - Inbox threads per contact and the messages in them"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Conversation, Message, User, Workspace
from ...realtime import ConnectionManager
from ..automation.executors import EmailSender
from .repository import ConversationRepository
from .schemas import ConversationStatusUpdate, MessageCreate, MessageResponse

logger = logging.getLogger(__name__)


class ConversationService:
    """Service layer for the inbox"""

    def __init__(self, db: Session, email_sender: EmailSender, broadcaster: ConnectionManager):
        self.db = db
        self.email_sender = email_sender
        self.broadcaster = broadcaster
        self.repo = ConversationRepository()

    def get_conversations(
        self, user: User, status: Optional[str] = None, page: int = 1, limit: int = 20
    ) -> tuple[list[Conversation], int]:
        return self.repo.search_conversations(self.db, user.workspace_id, status, (page - 1) * limit, limit)

    def get_conversation(self, conversation_id: str, user: User) -> Conversation:
        conversation = self.repo.get_conversation(self.db, conversation_id, user.workspace_id)
        if not conversation:
            raise HTTPException(status_code=404, detail="Conversation not found")
        return conversation

    async def send_message(self, conversation_id: str, data: MessageCreate, user: User) -> Message:
        """
        Add a message to a conversation. Outbound email is also delivered to
        the contact; a failed delivery is logged and the message is kept.
        """
        conversation = self.get_conversation(conversation_id, user)
        contact = conversation.contact
        workspace = self.db.get(Workspace, user.workspace_id)
        outbound = data.direction == "OUTBOUND"

        message = self.repo.add_message(
            self.db,
            conversation,
            channel=data.channel,
            direction=data.direction,
            subject=data.subject,
            body=data.body,
            sender=workspace.contact_email if outbound else contact.email,
            recipient=contact.email if outbound else workspace.contact_email,
            is_automated=False,
            is_read=outbound,
        )

        if outbound and data.channel == "EMAIL" and contact.email:
            try:
                await self.email_sender(
                    to=contact.email,
                    subject=data.subject or f"Message from {workspace.business_name}",
                    html=f"<p>{data.body}</p>",
                )
            except Exception as e:
                logger.error(f"Failed to deliver message {message.id} to {contact.email}: {e}")

        await self.broadcaster.emit_to_workspace(
            user.workspace_id,
            "new-message",
            {"conversationId": conversation.id, "message": MessageResponse.from_message(message).model_dump()},
        )
        logger.info(f"Message sent in conversation {conversation.id}")
        return message

    async def update_status(
        self, conversation_id: str, data: ConversationStatusUpdate, user: User
    ) -> Conversation:
        conversation = self.get_conversation(conversation_id, user)
        conversation.status = data.status
        self.db.commit()
        self.db.refresh(conversation)

        await self.broadcaster.emit_to_workspace(
            user.workspace_id,
            "conversation-updated",
            {"conversationId": conversation.id, "status": conversation.status},
        )
        logger.info(f"Conversation {conversation.id} -> {data.status}")
        return conversation

    def mark_read(self, conversation_id: str, user: User) -> Conversation:
        """Flag every inbound message of the conversation as read"""
        conversation = self.get_conversation(conversation_id, user)
        for message in conversation.messages:
            if message.direction == "INBOUND":
                message.is_read = True
        self.db.commit()
        self.db.refresh(conversation)
        return conversation
