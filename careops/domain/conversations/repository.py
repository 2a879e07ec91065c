"""Conversation repository - Database operations for conversations and messages"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Conversation, Message


class ConversationRepository:
    """Repository for conversation database operations"""

    @staticmethod
    def get_conversation(db: Session, conversation_id: str, workspace_id: str) -> Optional[Conversation]:
        return (
            db.query(Conversation)
            .options(joinedload(Conversation.contact))
            .filter(Conversation.id == conversation_id, Conversation.workspace_id == workspace_id)
            .first()
        )

    @staticmethod
    def find_open_conversation(db: Session, workspace_id: str, contact_id: str) -> Optional[Conversation]:
        return (
            db.query(Conversation)
            .filter(
                Conversation.workspace_id == workspace_id,
                Conversation.contact_id == contact_id,
                Conversation.status == "OPEN",
            )
            .first()
        )

    @staticmethod
    def search_conversations(
        db: Session,
        workspace_id: str,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Conversation], int]:
        """Conversations of a workspace, most recent activity first"""
        query = db.query(Conversation).filter(Conversation.workspace_id == workspace_id)
        if status:
            query = query.filter(Conversation.status == status)

        total = query.count()
        conversations = (
            query.options(joinedload(Conversation.contact))
            .order_by(Conversation.last_message_at.desc(), Conversation.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return conversations, total

    @staticmethod
    def create_conversation(db: Session, workspace_id: str, contact_id: str, subject: Optional[str]) -> Conversation:
        conversation = Conversation(
            workspace_id=workspace_id, contact_id=contact_id, subject=subject, status="OPEN"
        )
        db.add(conversation)
        db.commit()
        db.refresh(conversation)
        return conversation

    @staticmethod
    def add_message(db: Session, conversation: Conversation, **message_data) -> Message:
        """Append a message and bump the conversation's last activity"""
        message = Message(conversation_id=conversation.id, **message_data)
        db.add(message)
        conversation.last_message_at = datetime.utcnow()
        db.commit()
        db.refresh(message)
        return message
