"""Booking router - FastAPI endpoints for booking types and bookings"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_owner, require_permission
from ...database import get_db
from ...models import User
from ...realtime import ConnectionManager, get_broadcaster
from ..automation.dispatcher import AutomationDispatcher
from ..automation.triggers import get_automation_dispatcher
from .schemas import (
    AvailabilityCreate,
    AvailabilityResponse,
    AvailableSlotsResponse,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
    BookingTypeCreate,
    BookingTypeResponse,
    BookingTypeUpdate,
    PublicBookingCreate,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(
    db: Session = Depends(get_db),
    dispatcher: AutomationDispatcher = Depends(get_automation_dispatcher),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db, dispatcher, broadcaster)


# ============================================================================
# BOOKING TYPES
# ============================================================================


@router.get("/types", response_model=list[BookingTypeResponse])
async def get_booking_types(
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return [BookingTypeResponse.from_booking_type(t) for t in service.get_booking_types(current_user)]


@router.post("/types", response_model=BookingTypeResponse, status_code=201)
async def create_booking_type(
    data: BookingTypeCreate,
    current_user: User = Depends(require_owner),
    service: BookingService = Depends(get_booking_service),
):
    return BookingTypeResponse.from_booking_type(service.create_booking_type(data, current_user))


@router.get("/types/{booking_type_id}", response_model=BookingTypeResponse)
async def get_booking_type(
    booking_type_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return BookingTypeResponse.from_booking_type(service.get_booking_type(booking_type_id, current_user))


@router.put("/types/{booking_type_id}", response_model=BookingTypeResponse)
async def update_booking_type(
    booking_type_id: str,
    data: BookingTypeUpdate,
    current_user: User = Depends(require_owner),
    service: BookingService = Depends(get_booking_service),
):
    return BookingTypeResponse.from_booking_type(
        service.update_booking_type(booking_type_id, data, current_user)
    )


@router.delete("/types/{booking_type_id}")
async def delete_booking_type(
    booking_type_id: str,
    current_user: User = Depends(require_owner),
    service: BookingService = Depends(get_booking_service),
):
    return service.delete_booking_type(booking_type_id, current_user)


# ============================================================================
# AVAILABILITY
# ============================================================================


@router.post("/types/{booking_type_id}/availability", response_model=AvailabilityResponse, status_code=201)
async def add_availability(
    booking_type_id: str,
    data: AvailabilityCreate,
    current_user: User = Depends(require_owner),
    service: BookingService = Depends(get_booking_service),
):
    return AvailabilityResponse.from_availability(service.add_availability(booking_type_id, data, current_user))


@router.get("/types/{booking_type_id}/availability", response_model=list[AvailabilityResponse])
async def get_availability(
    booking_type_id: str,
    service: BookingService = Depends(get_booking_service),
):
    """Public: shown on the booking page"""
    return [AvailabilityResponse.from_availability(a) for a in service.get_availability(booking_type_id)]


@router.get("/types/{booking_type_id}/available-slots", response_model=AvailableSlotsResponse)
async def get_available_slots(
    booking_type_id: str,
    day: date = Query(..., alias="date"),
    service: BookingService = Depends(get_booking_service),
):
    """Public: open start times for one day"""
    return service.get_available_slots(booking_type_id, day)


@router.delete("/availability/{availability_id}")
async def delete_availability(
    availability_id: str,
    current_user: User = Depends(require_owner),
    service: BookingService = Depends(get_booking_service),
):
    return service.delete_availability(availability_id, current_user)


# ============================================================================
# BOOKINGS
# ============================================================================


@router.post("/public", response_model=BookingResponse, status_code=201)
async def create_public_booking(
    data: PublicBookingCreate,
    background_tasks: BackgroundTasks,
    service: BookingService = Depends(get_booking_service),
):
    """Public booking page; confirmation automations run after the response"""
    booking = await service.create_public_booking(data, background_tasks)
    return BookingResponse.from_booking(booking)


@router.get("", response_model=BookingListResponse)
async def get_bookings(
    status: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    bookings, total = service.get_bookings(current_user, status, page, limit)
    return BookingListResponse(
        data=[BookingResponse.from_booking(b) for b in bookings], total=total, page=page, limit=limit
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_booking(service.get_booking(booking_id, current_user))


@router.put("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: str,
    data: BookingStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_booking(await service.update_status(booking_id, data, current_user))


@router.delete("/{booking_id}", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    current_user: User = Depends(require_permission("canManageBookings")),
    service: BookingService = Depends(get_booking_service),
):
    return BookingResponse.from_booking(await service.cancel(booking_id, current_user))
