"""Conversation router - FastAPI endpoints for the inbox"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_permission
from ...database import get_db
from ...email_service import get_email_sender
from ...models import User
from ...realtime import ConnectionManager, get_broadcaster
from .schemas import (
    CONVERSATION_STATUSES,
    ConversationListResponse,
    ConversationResponse,
    ConversationStatusUpdate,
    MessageCreate,
    MessageResponse,
)
from .service import ConversationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversations", tags=["Conversations"])

can_access_inbox = require_permission("canAccessInbox")


def get_conversation_service(
    db: Session = Depends(get_db),
    email_sender=Depends(get_email_sender),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
) -> ConversationService:
    """Dependency injection for ConversationService"""
    return ConversationService(db, email_sender, broadcaster)


@router.get("", response_model=ConversationListResponse)
async def get_conversations(
    status: Optional[str] = Query(None, pattern=f"^({'|'.join(CONVERSATION_STATUSES)})$"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(can_access_inbox),
    service: ConversationService = Depends(get_conversation_service),
):
    conversations, total = service.get_conversations(current_user, status, page, limit)
    return ConversationListResponse(
        data=[ConversationResponse.from_conversation(c) for c in conversations],
        total=total,
        page=page,
        limit=limit,
    )


@router.get("/{conversation_id}", response_model=ConversationResponse)
async def get_conversation(
    conversation_id: str,
    current_user: User = Depends(can_access_inbox),
    service: ConversationService = Depends(get_conversation_service),
):
    return ConversationResponse.from_conversation(service.get_conversation(conversation_id, current_user))


@router.post("/{conversation_id}/messages", response_model=MessageResponse, status_code=201)
async def send_message(
    conversation_id: str,
    data: MessageCreate,
    current_user: User = Depends(can_access_inbox),
    service: ConversationService = Depends(get_conversation_service),
):
    return MessageResponse.from_message(await service.send_message(conversation_id, data, current_user))


@router.put("/{conversation_id}/status", response_model=ConversationResponse)
async def update_conversation_status(
    conversation_id: str,
    data: ConversationStatusUpdate,
    current_user: User = Depends(can_access_inbox),
    service: ConversationService = Depends(get_conversation_service),
):
    return ConversationResponse.from_conversation(
        await service.update_status(conversation_id, data, current_user)
    )


@router.put("/{conversation_id}/read", response_model=ConversationResponse)
async def mark_conversation_read(
    conversation_id: str,
    current_user: User = Depends(can_access_inbox),
    service: ConversationService = Depends(get_conversation_service),
):
    return ConversationResponse.from_conversation(service.mark_read(conversation_id, current_user))
