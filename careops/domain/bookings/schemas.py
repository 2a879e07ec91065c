"""Booking domain schemas - Pydantic models for validation"""

import re
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from ...models import Availability, Booking, BookingType

BOOKING_STATUSES = ("PENDING", "CONFIRMED", "CANCELLED", "COMPLETED", "NO_SHOW")


class BookingTypeCreate(BaseModel):
    """Schema for creating a bookable service"""

    name: str
    description: Optional[str] = None
    duration: int = 30
    location: Optional[str] = None
    sendFormId: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Booking type name is required")
        return v.strip()

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        if v <= 0:
            raise ValueError("Duration must be a positive number of minutes")
        return v


class BookingTypeUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    location: Optional[str] = None
    isActive: Optional[bool] = None
    sendFormId: Optional[str] = None


class BookingTypeResponse(BaseModel):
    id: str
    workspaceId: str
    name: str
    description: Optional[str] = None
    duration: int
    location: Optional[str] = None
    isActive: bool
    sendFormId: Optional[str] = None

    @classmethod
    def from_booking_type(cls, booking_type: BookingType) -> "BookingTypeResponse":
        return cls(
            id=booking_type.id,
            workspaceId=booking_type.workspace_id,
            name=booking_type.name,
            description=booking_type.description,
            duration=booking_type.duration,
            location=booking_type.location,
            isActive=booking_type.is_active,
            sendFormId=booking_type.send_form_id,
        )


class PublicBookingCreate(BaseModel):
    """Schema for the public booking page"""

    workspaceId: str
    bookingTypeId: str
    scheduledAt: datetime
    customerName: str
    customerEmail: str
    customerPhone: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("customerName")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Customer name is required")
        return v.strip()

    @field_validator("customerEmail")
    @classmethod
    def validate_email(cls, v):
        if "@" not in v:
            raise ValueError("Invalid email address")
        return v.strip().lower()

    @field_validator("scheduledAt")
    @classmethod
    def strip_timezone(cls, v):
        # Stored as naive UTC
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class BookingStatusUpdate(BaseModel):
    status: str

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        if v not in BOOKING_STATUSES:
            raise ValueError(f"Status must be one of: {', '.join(BOOKING_STATUSES)}")
        return v


class BookingResponse(BaseModel):
    """Schema for booking response"""

    id: str
    workspaceId: str
    bookingTypeId: str
    contactId: Optional[str] = None
    serviceName: Optional[str] = None
    scheduledAt: datetime
    duration: int
    customerName: str
    customerEmail: str
    customerPhone: Optional[str] = None
    notes: Optional[str] = None
    status: str
    createdAt: Optional[datetime] = None

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingResponse":
        return cls(
            id=booking.id,
            workspaceId=booking.workspace_id,
            bookingTypeId=booking.booking_type_id,
            contactId=booking.contact_id,
            serviceName=booking.booking_type.name if booking.booking_type else None,
            scheduledAt=booking.scheduled_at,
            duration=booking.duration,
            customerName=booking.customer_name,
            customerEmail=booking.customer_email,
            customerPhone=booking.customer_phone,
            notes=booking.notes,
            status=booking.status,
            createdAt=booking.created_at,
        )


class BookingListResponse(BaseModel):
    data: list[BookingResponse]
    total: int
    page: int
    limit: int


# ============================================================================
# AVAILABILITY
# ============================================================================

DAYS_OF_WEEK = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def time_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class AvailabilityCreate(BaseModel):
    """A weekly window, e.g. MONDAY 09:00-17:00"""

    dayOfWeek: str
    startTime: str
    endTime: str

    @field_validator("dayOfWeek")
    @classmethod
    def validate_day(cls, v):
        v = v.upper()
        if v not in DAYS_OF_WEEK:
            raise ValueError(f"dayOfWeek must be one of: {', '.join(DAYS_OF_WEEK)}")
        return v

    @field_validator("startTime", "endTime")
    @classmethod
    def validate_time(cls, v):
        if not TIME_PATTERN.match(v):
            raise ValueError("Time must use the HH:MM 24-hour format")
        return v

    @model_validator(mode="after")
    def validate_window(self):
        if time_to_minutes(self.startTime) >= time_to_minutes(self.endTime):
            raise ValueError("Start time must be before end time")
        return self


class AvailabilityResponse(BaseModel):
    id: str
    bookingTypeId: str
    dayOfWeek: str
    startTime: str
    endTime: str
    isActive: bool

    @classmethod
    def from_availability(cls, availability: Availability) -> "AvailabilityResponse":
        return cls(
            id=availability.id,
            bookingTypeId=availability.booking_type_id,
            dayOfWeek=availability.day_of_week,
            startTime=availability.start_time,
            endTime=availability.end_time,
            isActive=availability.is_active,
        )


class AvailableSlot(BaseModel):
    time: str
    dateTime: datetime


class AvailableSlotsResponse(BaseModel):
    date: str
    slots: list[AvailableSlot]
    message: Optional[str] = None
