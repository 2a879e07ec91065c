"""Contact router - FastAPI endpoints for contacts"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...realtime import ConnectionManager, get_broadcaster
from ..automation.dispatcher import AutomationDispatcher
from ..automation.triggers import get_automation_dispatcher
from .schemas import (
    ContactCreate,
    ContactListResponse,
    ContactResponse,
    ContactUpdate,
    PublicContactCreate,
)
from .service import ContactService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["Contacts"])


def get_contact_service(
    db: Session = Depends(get_db),
    dispatcher: AutomationDispatcher = Depends(get_automation_dispatcher),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
) -> ContactService:
    """Dependency injection for ContactService"""
    return ContactService(db, dispatcher, broadcaster)


# ============================================================================
# PUBLIC ENDPOINTS (no authentication)
# ============================================================================


@router.post("/public", response_model=ContactResponse, status_code=201)
async def create_public_contact(
    data: PublicContactCreate,
    background_tasks: BackgroundTasks,
    service: ContactService = Depends(get_contact_service),
):
    """Contact form submission; automations run after the response is sent"""
    contact = await service.create_public_contact(data, background_tasks)
    return ContactResponse.from_contact(contact)


# ============================================================================
# DASHBOARD ENDPOINTS
# ============================================================================


@router.get("", response_model=ContactListResponse)
async def get_contacts(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    contacts, total = service.get_contacts(current_user, status, search, page, limit)
    return ContactListResponse(
        data=[ContactResponse.from_contact(c) for c in contacts],
        total=total,
        page=page,
        limit=limit,
    )


@router.post("", response_model=ContactResponse, status_code=201)
async def create_contact(
    data: ContactCreate,
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    return ContactResponse.from_contact(service.create_contact(data, current_user))


@router.get("/{contact_id}", response_model=ContactResponse)
async def get_contact(
    contact_id: str,
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    return ContactResponse.from_contact(service.get_contact(contact_id, current_user))


@router.put("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: str,
    data: ContactUpdate,
    current_user: User = Depends(get_current_user),
    service: ContactService = Depends(get_contact_service),
):
    return ContactResponse.from_contact(service.update_contact(contact_id, data, current_user))
