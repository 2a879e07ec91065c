"""Staff router - Owner-only endpoints for managing the team"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_owner
from ...database import get_db
from ...email_service import get_email_sender
from ...models import User
from .schemas import StaffInvite, StaffPermissionsUpdate, StaffResponse, StaffUpdate
from .service import StaffService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/staff", tags=["Staff"])


def get_staff_service(
    db: Session = Depends(get_db),
    email_sender=Depends(get_email_sender),
) -> StaffService:
    """Dependency injection for StaffService"""
    return StaffService(db, email_sender)


@router.post("/invite", response_model=StaffResponse, status_code=201)
async def invite_staff(
    data: StaffInvite,
    current_user: User = Depends(require_owner),
    service: StaffService = Depends(get_staff_service),
):
    return StaffResponse.from_user(await service.invite(data, current_user))


@router.get("", response_model=list[StaffResponse])
async def list_staff(
    current_user: User = Depends(require_owner),
    service: StaffService = Depends(get_staff_service),
):
    return [StaffResponse.from_user(u) for u in service.list_staff(current_user)]


@router.get("/{staff_id}", response_model=StaffResponse)
async def get_staff_member(
    staff_id: str,
    current_user: User = Depends(require_owner),
    service: StaffService = Depends(get_staff_service),
):
    return StaffResponse.from_user(service.get_staff_member(staff_id, current_user))


@router.put("/{staff_id}", response_model=StaffResponse)
async def update_staff_member(
    staff_id: str,
    data: StaffUpdate,
    current_user: User = Depends(require_owner),
    service: StaffService = Depends(get_staff_service),
):
    return StaffResponse.from_user(service.update(staff_id, data, current_user))


@router.put("/{staff_id}/permissions", response_model=StaffResponse)
async def update_staff_permissions(
    staff_id: str,
    data: StaffPermissionsUpdate,
    current_user: User = Depends(require_owner),
    service: StaffService = Depends(get_staff_service),
):
    return StaffResponse.from_user(service.update_permissions(staff_id, data, current_user))


@router.put("/{staff_id}/activate", response_model=StaffResponse)
async def activate_staff_member(
    staff_id: str,
    current_user: User = Depends(require_owner),
    service: StaffService = Depends(get_staff_service),
):
    return StaffResponse.from_user(service.set_status(staff_id, "ACTIVE", current_user))


@router.put("/{staff_id}/deactivate", response_model=StaffResponse)
async def deactivate_staff_member(
    staff_id: str,
    current_user: User = Depends(require_owner),
    service: StaffService = Depends(get_staff_service),
):
    return StaffResponse.from_user(service.set_status(staff_id, "INACTIVE", current_user))


@router.delete("/{staff_id}")
async def remove_staff_member(
    staff_id: str,
    current_user: User = Depends(require_owner),
    service: StaffService = Depends(get_staff_service),
):
    return service.remove(staff_id, current_user)


@router.post("/{staff_id}/reset-password")
async def reset_staff_password(
    staff_id: str,
    current_user: User = Depends(require_owner),
    service: StaffService = Depends(get_staff_service),
):
    return await service.reset_password(staff_id, current_user)
