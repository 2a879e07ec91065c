"""Booking repository - Database operations for booking types and bookings"""

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Availability, Booking, BookingType

# Statuses that still hold their time slot
OCCUPYING_STATUSES = ("PENDING", "CONFIRMED")


class BookingRepository:
    """Repository for booking database operations"""

    # ------------------------------------------------------------------
    # Booking types
    # ------------------------------------------------------------------

    @staticmethod
    def get_booking_types(db: Session, workspace_id: str, include_inactive: bool = False) -> list[BookingType]:
        query = db.query(BookingType).filter(BookingType.workspace_id == workspace_id)
        if not include_inactive:
            query = query.filter(BookingType.is_active.is_(True))
        return query.order_by(BookingType.created_at.desc()).all()

    @staticmethod
    def get_booking_type(db: Session, booking_type_id: str, workspace_id: Optional[str] = None) -> Optional[BookingType]:
        query = db.query(BookingType).filter(BookingType.id == booking_type_id)
        if workspace_id:
            query = query.filter(BookingType.workspace_id == workspace_id)
        return query.first()

    @staticmethod
    def create_booking_type(db: Session, workspace_id: str, **data) -> BookingType:
        booking_type = BookingType(workspace_id=workspace_id, **data)
        db.add(booking_type)
        db.commit()
        db.refresh(booking_type)
        return booking_type

    @staticmethod
    def update_booking_type(db: Session, booking_type: BookingType, **updates) -> BookingType:
        for key, value in updates.items():
            if value is not None and hasattr(booking_type, key):
                setattr(booking_type, key, value)
        db.commit()
        db.refresh(booking_type)
        return booking_type

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    @staticmethod
    def find_conflicting_booking(
        db: Session, booking_type_id: str, start: datetime, duration_minutes: int
    ) -> Optional[Booking]:
        """First PENDING/CONFIRMED booking of the type overlapping [start, start + duration)"""
        end = start + timedelta(minutes=duration_minutes)
        candidates = (
            db.query(Booking)
            .filter(
                Booking.booking_type_id == booking_type_id,
                Booking.status.in_(OCCUPYING_STATUSES),
                Booking.scheduled_at < end,
            )
            .all()
        )
        for booking in candidates:
            if booking.scheduled_at + timedelta(minutes=booking.duration) > start:
                return booking
        return None

    @staticmethod
    def create_booking(db: Session, workspace_id: str, **data) -> Booking:
        booking = Booking(workspace_id=workspace_id, **data)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def get_booking(db: Session, booking_id: str, workspace_id: str) -> Optional[Booking]:
        return (
            db.query(Booking)
            .options(joinedload(Booking.booking_type))
            .filter(Booking.id == booking_id, Booking.workspace_id == workspace_id)
            .first()
        )

    @staticmethod
    def search_bookings(
        db: Session,
        workspace_id: str,
        status: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Booking], int]:
        """Bookings of a workspace, latest appointment first"""
        query = db.query(Booking).filter(Booking.workspace_id == workspace_id)
        if status:
            query = query.filter(Booking.status == status)

        total = query.count()
        bookings = (
            query.options(joinedload(Booking.booking_type))
            .order_by(Booking.scheduled_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return bookings, total

    @staticmethod
    def get_occupying_bookings(db: Session, booking_type_id: str, start: datetime, end: datetime) -> list[Booking]:
        """PENDING/CONFIRMED bookings of the type starting within [start, end)"""
        return (
            db.query(Booking)
            .filter(
                Booking.booking_type_id == booking_type_id,
                Booking.status.in_(OCCUPYING_STATUSES),
                Booking.scheduled_at >= start,
                Booking.scheduled_at < end,
            )
            .all()
        )

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    @staticmethod
    def add_availability(db: Session, booking_type_id: str, **data) -> Availability:
        availability = Availability(booking_type_id=booking_type_id, **data)
        db.add(availability)
        db.commit()
        db.refresh(availability)
        return availability

    @staticmethod
    def get_availability(db: Session, booking_type_id: str, day_of_week: Optional[str] = None) -> list[Availability]:
        query = db.query(Availability).filter(
            Availability.booking_type_id == booking_type_id, Availability.is_active.is_(True)
        )
        if day_of_week:
            query = query.filter(Availability.day_of_week == day_of_week)
        return query.order_by(Availability.start_time.asc()).all()

    @staticmethod
    def get_availability_window(db: Session, availability_id: str, workspace_id: str) -> Optional[Availability]:
        return (
            db.query(Availability)
            .join(BookingType)
            .filter(Availability.id == availability_id, BookingType.workspace_id == workspace_id)
            .first()
        )
