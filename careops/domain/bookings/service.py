"""Booking service - Business logic for booking types and the public booking page"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import BackgroundTasks, HTTPException
from sqlalchemy.orm import Session

from ...config import FORM_DUE_DAYS
from ...models import Availability, Booking, BookingType, User, Workspace
from ...realtime import ConnectionManager
from ..automation.dispatcher import AutomationDispatcher
from ..automation.triggers import trigger_booking_created, trigger_form_pending
from ..contacts.repository import ContactRepository
from ..forms.repository import FormRepository
from .repository import BookingRepository
from .schemas import (
    DAYS_OF_WEEK,
    AvailabilityCreate,
    AvailableSlot,
    AvailableSlotsResponse,
    BookingResponse,
    BookingStatusUpdate,
    BookingTypeCreate,
    BookingTypeUpdate,
    PublicBookingCreate,
    time_to_minutes,
)

logger = logging.getLogger(__name__)


class BookingService:
    """Service layer for booking business logic"""

    def __init__(self, db: Session, dispatcher: AutomationDispatcher, broadcaster: ConnectionManager):
        self.db = db
        self.dispatcher = dispatcher
        self.broadcaster = broadcaster
        self.repo = BookingRepository()

    # ========================================================================
    # BOOKING TYPES
    # ========================================================================

    def _check_form(self, form_id: Optional[str], workspace_id: str) -> None:
        if form_id and not FormRepository.get_form(self.db, form_id, workspace_id):
            raise HTTPException(status_code=404, detail="Form not found")

    def get_booking_types(self, user: User) -> list[BookingType]:
        return self.repo.get_booking_types(self.db, user.workspace_id)

    def get_booking_type(self, booking_type_id: str, user: User) -> BookingType:
        booking_type = self.repo.get_booking_type(self.db, booking_type_id, user.workspace_id)
        if not booking_type:
            raise HTTPException(status_code=404, detail="Booking type not found")
        return booking_type

    def create_booking_type(self, data: BookingTypeCreate, user: User) -> BookingType:
        self._check_form(data.sendFormId, user.workspace_id)
        booking_type = self.repo.create_booking_type(
            self.db,
            user.workspace_id,
            name=data.name,
            description=data.description,
            duration=data.duration,
            location=data.location,
            send_form_id=data.sendFormId,
        )
        logger.info(f"Booking type created: {booking_type.id}")
        return booking_type

    def update_booking_type(self, booking_type_id: str, data: BookingTypeUpdate, user: User) -> BookingType:
        booking_type = self.get_booking_type(booking_type_id, user)
        self._check_form(data.sendFormId, user.workspace_id)
        return self.repo.update_booking_type(
            self.db,
            booking_type,
            name=data.name,
            description=data.description,
            duration=data.duration,
            location=data.location,
            is_active=data.isActive,
            send_form_id=data.sendFormId,
        )

    def delete_booking_type(self, booking_type_id: str, user: User) -> dict:
        """Soft delete: existing bookings keep their type"""
        booking_type = self.get_booking_type(booking_type_id, user)
        booking_type.is_active = False
        self.db.commit()
        return {"message": "Booking type deleted successfully"}

    # ========================================================================
    # BOOKINGS
    # ========================================================================

    async def create_public_booking(
        self, data: PublicBookingCreate, background_tasks: Optional[BackgroundTasks] = None
    ) -> Booking:
        """
        Book a slot from the public booking page.

        Finds or creates the customer contact, fires BOOKING_CREATED and, when
        the booking type has a follow-up form, opens a PENDING submission and
        fires FORM_PENDING for it.
        """
        booking_type = self.repo.get_booking_type(self.db, data.bookingTypeId, data.workspaceId)
        if not booking_type or not booking_type.is_active:
            raise HTTPException(status_code=404, detail="Booking type not found or inactive")

        workspace = self.db.get(Workspace, data.workspaceId)
        if not workspace or workspace.status != "ACTIVE":
            raise HTTPException(status_code=400, detail="Workspace is not active")

        if self.repo.find_conflicting_booking(
            self.db, booking_type.id, data.scheduledAt, booking_type.duration
        ):
            raise HTTPException(status_code=409, detail="This time slot is no longer available")

        contact = ContactRepository.get_contact_by_email(self.db, data.customerEmail, workspace.id)
        if not contact:
            first_name, _, last_name = data.customerName.partition(" ")
            contact = ContactRepository.create_contact(
                self.db,
                workspace.id,
                email=data.customerEmail,
                first_name=first_name,
                last_name=last_name.strip(),
                phone=data.customerPhone,
                source="BOOKING_FORM",
                status="NEW",
            )

        booking = self.repo.create_booking(
            self.db,
            workspace.id,
            booking_type_id=booking_type.id,
            contact_id=contact.id,
            scheduled_at=data.scheduledAt,
            duration=booking_type.duration,
            customer_name=data.customerName,
            customer_email=data.customerEmail,
            customer_phone=data.customerPhone,
            notes=data.notes,
            status="PENDING",
        )
        logger.info(f"Booking created: {booking.id}")

        await trigger_booking_created(
            self.dispatcher, booking, workspace, background_tasks=background_tasks
        )

        if booking_type.send_form_id:
            submission = FormRepository.create_submission(
                self.db,
                workspace.id,
                form_id=booking_type.send_form_id,
                contact_id=contact.id,
                booking_id=booking.id,
                due_date=datetime.utcnow() + timedelta(days=FORM_DUE_DAYS),
            )
            logger.info(f"Form {booking_type.send_form_id} requested for booking {booking.id}")
            await trigger_form_pending(
                self.dispatcher, submission, contact, workspace, background_tasks=background_tasks
            )

        await self.broadcaster.emit_to_workspace(
            workspace.id, "booking:created", BookingResponse.from_booking(booking).model_dump()
        )
        return booking

    def get_bookings(
        self, user: User, status: Optional[str] = None, page: int = 1, limit: int = 20
    ) -> tuple[list[Booking], int]:
        return self.repo.search_bookings(self.db, user.workspace_id, status, (page - 1) * limit, limit)

    def get_booking(self, booking_id: str, user: User) -> Booking:
        booking = self.repo.get_booking(self.db, booking_id, user.workspace_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    async def update_status(self, booking_id: str, data: BookingStatusUpdate, user: User) -> Booking:
        booking = self.get_booking(booking_id, user)
        booking.status = data.status
        self.db.commit()
        self.db.refresh(booking)

        await self.broadcaster.emit_to_workspace(
            user.workspace_id, "booking:updated", BookingResponse.from_booking(booking).model_dump()
        )
        logger.info(f"Booking status updated: {booking.id} -> {data.status}")
        return booking

    async def cancel(self, booking_id: str, user: User) -> Booking:
        """Cancel a booking; its slot becomes bookable again"""
        booking = self.get_booking(booking_id, user)
        booking.status = "CANCELLED"
        self.db.commit()
        self.db.refresh(booking)

        await self.broadcaster.emit_to_workspace(
            user.workspace_id, "booking:cancelled", BookingResponse.from_booking(booking).model_dump()
        )
        logger.info(f"Booking cancelled: {booking.id}")
        return booking

    # ========================================================================
    # AVAILABILITY
    # ========================================================================

    def _get_public_booking_type(self, booking_type_id: str) -> BookingType:
        booking_type = self.repo.get_booking_type(self.db, booking_type_id)
        if not booking_type or not booking_type.is_active:
            raise HTTPException(status_code=404, detail="Booking type not found")
        return booking_type

    def add_availability(self, booking_type_id: str, data: AvailabilityCreate, user: User) -> Availability:
        booking_type = self.get_booking_type(booking_type_id, user)
        availability = self.repo.add_availability(
            self.db,
            booking_type.id,
            day_of_week=data.dayOfWeek,
            start_time=data.startTime,
            end_time=data.endTime,
            is_active=True,
        )
        logger.info(f"Availability added to booking type {booking_type.id}: {data.dayOfWeek} {data.startTime}-{data.endTime}")
        return availability

    def get_availability(self, booking_type_id: str) -> list[Availability]:
        """Active weekly windows, Monday first"""
        booking_type = self._get_public_booking_type(booking_type_id)
        windows = self.repo.get_availability(self.db, booking_type.id)
        return sorted(windows, key=lambda w: (DAYS_OF_WEEK.index(w.day_of_week), w.start_time))

    def delete_availability(self, availability_id: str, user: User) -> dict:
        """Soft delete the window"""
        availability = self.repo.get_availability_window(self.db, availability_id, user.workspace_id)
        if not availability:
            raise HTTPException(status_code=404, detail="Availability not found")
        availability.is_active = False
        self.db.commit()
        return {"message": "Availability deleted successfully"}

    def get_available_slots(
        self, booking_type_id: str, day: date, now: Optional[datetime] = None
    ) -> AvailableSlotsResponse:
        """
        Bookable start times on one day.

        Slots step by the booking type's duration through each window of that
        weekday. Slots already in the past, or overlapping a PENDING or
        CONFIRMED booking of the same type, are left out.
        """
        booking_type = self._get_public_booking_type(booking_type_id)
        weekday = DAYS_OF_WEEK[day.weekday()]
        windows = self.repo.get_availability(self.db, booking_type.id, weekday)
        if not windows:
            return AvailableSlotsResponse(date=day.isoformat(), slots=[], message="No availability for this day")

        now = now or datetime.utcnow()
        day_start = datetime(day.year, day.month, day.day)
        duration = timedelta(minutes=booking_type.duration)
        taken = [
            (b.scheduled_at, b.scheduled_at + timedelta(minutes=b.duration))
            for b in self.repo.get_occupying_bookings(
                self.db, booking_type.id, day_start, day_start + timedelta(days=1)
            )
        ]

        slots = []
        for window in windows:
            current = time_to_minutes(window.start_time)
            end = time_to_minutes(window.end_time)
            while current + booking_type.duration <= end:
                slot_start = day_start + timedelta(minutes=current)
                slot_end = slot_start + duration
                current += booking_type.duration
                if slot_start < now:
                    continue
                if any(slot_start < busy_end and slot_end > busy_start for busy_start, busy_end in taken):
                    continue
                slots.append(AvailableSlot(time=slot_start.strftime("%H:%M"), dateTime=slot_start))

        return AvailableSlotsResponse(date=day.isoformat(), slots=slots)
