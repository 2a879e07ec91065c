"""Event context handed from trigger emission sites to the dispatcher"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class EventContext:
    """
    Per-dispatch bag of domain data. Domain objects are carried as plain
    snapshots so a dispatch can outlive the request session that built it.
    """

    workspace_id: str
    contact: Optional[dict[str, Any]] = None
    booking: Optional[dict[str, Any]] = None
    form_submission: Optional[dict[str, Any]] = None
    inventory_item: Optional[dict[str, Any]] = None
    contact_id: Optional[str] = None
    booking_id: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None


def contact_snapshot(contact) -> Optional[dict[str, Any]]:
    if contact is None:
        return None
    return {
        "id": contact.id,
        "first_name": contact.first_name,
        "last_name": contact.last_name,
        "email": contact.email,
        "phone": contact.phone,
        "status": contact.status,
    }


def booking_snapshot(booking) -> dict[str, Any]:
    booking_type = booking.booking_type
    return {
        "id": booking.id,
        "scheduled_at": booking.scheduled_at,
        "duration": booking.duration,
        "service_name": booking_type.name if booking_type else None,
        "customer_name": booking.customer_name,
        "customer_email": booking.customer_email,
        "status": booking.status,
    }


def form_submission_snapshot(submission) -> dict[str, Any]:
    form = submission.form
    return {
        "id": submission.id,
        "form_id": submission.form_id,
        "form_name": form.name if form else None,
        "status": submission.status,
        "due_date": submission.due_date,
    }


def inventory_item_snapshot(item) -> dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "quantity": item.quantity,
        "unit": item.unit,
        "low_stock_threshold": item.low_stock_threshold,
    }
