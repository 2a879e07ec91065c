"""Conversation domain schemas - Pydantic models for the inbox"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import Conversation, Message
from ..contacts.schemas import ContactResponse

CONVERSATION_STATUSES = ("OPEN", "PENDING", "CLOSED")
MESSAGE_CHANNELS = ("EMAIL", "SMS", "CHAT")
MESSAGE_DIRECTIONS = ("INBOUND", "OUTBOUND")


class MessageCreate(BaseModel):
    body: str
    channel: str = "EMAIL"
    direction: str = "OUTBOUND"
    subject: Optional[str] = None

    @field_validator("body")
    @classmethod
    def validate_body(cls, v):
        if not v or not v.strip():
            raise ValueError("Message body is required")
        return v

    @field_validator("channel")
    @classmethod
    def validate_channel(cls, v):
        if v not in MESSAGE_CHANNELS:
            raise ValueError(f"Channel must be one of: {', '.join(MESSAGE_CHANNELS)}")
        return v

    @field_validator("direction")
    @classmethod
    def validate_direction(cls, v):
        if v not in MESSAGE_DIRECTIONS:
            raise ValueError(f"Direction must be one of: {', '.join(MESSAGE_DIRECTIONS)}")
        return v


class ConversationStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v not in CONVERSATION_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(CONVERSATION_STATUSES)}")
        return v


class MessageResponse(BaseModel):
    id: str
    conversationId: str
    channel: str
    direction: str
    subject: Optional[str] = None
    body: str
    sender: Optional[str] = None
    recipient: Optional[str] = None
    isAutomated: bool
    isRead: bool
    createdAt: Optional[datetime] = None

    @classmethod
    def from_message(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            conversationId=message.conversation_id,
            channel=message.channel,
            direction=message.direction,
            subject=message.subject,
            body=message.body,
            sender=message.sender,
            recipient=message.recipient,
            isAutomated=message.is_automated,
            isRead=message.is_read,
            createdAt=message.created_at,
        )


class ConversationResponse(BaseModel):
    id: str
    workspaceId: str
    contactId: str
    contact: Optional[ContactResponse] = None
    subject: Optional[str] = None
    status: str
    lastMessageAt: Optional[datetime] = None
    messages: list[MessageResponse] = []
    createdAt: Optional[datetime] = None

    @classmethod
    def from_conversation(cls, conversation: Conversation) -> "ConversationResponse":
        return cls(
            id=conversation.id,
            workspaceId=conversation.workspace_id,
            contactId=conversation.contact_id,
            contact=ContactResponse.from_contact(conversation.contact) if conversation.contact else None,
            subject=conversation.subject,
            status=conversation.status,
            lastMessageAt=conversation.last_message_at,
            messages=[MessageResponse.from_message(m) for m in conversation.messages],
            createdAt=conversation.created_at,
        )


class ConversationListResponse(BaseModel):
    data: list[ConversationResponse]
    total: int
    page: int
    limit: int
