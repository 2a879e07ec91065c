from __future__ import annotations

from datetime import date, datetime

from conftest import auth_headers, make_user, make_workspace

from careops.domain.bookings.service import BookingService
from careops.models import Availability, Booking, BookingType

THURSDAY = "2030-01-10"


def _booking_type(db, workspace, duration=60) -> BookingType:
    booking_type = BookingType(workspace_id=workspace.id, name="Deep Clean", duration=duration, is_active=True)
    db.add(booking_type)
    db.commit()
    return booking_type


def _window(client, owner, booking_type, day="THURSDAY", start="09:00", end="12:00"):
    return client.post(
        f"/bookings/types/{booking_type.id}/availability",
        headers=auth_headers(owner),
        json={"dayOfWeek": day, "startTime": start, "endTime": end},
    )


def _book(db, workspace, booking_type, at, status="PENDING", duration=60) -> Booking:
    booking = Booking(
        workspace_id=workspace.id, booking_type_id=booking_type.id, scheduled_at=at, duration=duration,
        customer_name="Ana", customer_email="ana@example.com", status=status,
    )
    db.add(booking)
    db.commit()
    return booking


def test_availability_windows_are_validated_and_listed(client, db) -> None:
    workspace = make_workspace(db)
    owner = make_user(db, workspace)
    booking_type = _booking_type(db, workspace)

    assert _window(client, owner, booking_type, start="12:00", end="09:00").status_code == 422
    assert _window(client, owner, booking_type, start="9am").status_code == 422
    assert _window(client, owner, booking_type, day="FUNDAY").status_code == 422

    assert _window(client, owner, booking_type, day="friday").status_code == 201
    assert _window(client, owner, booking_type, start="13:00", end="17:00").status_code == 201
    assert _window(client, owner, booking_type, day="MONDAY").status_code == 201

    # Public listing, Monday first then by start time
    listing = client.get(f"/bookings/types/{booking_type.id}/availability").json()
    assert [(w["dayOfWeek"], w["startTime"]) for w in listing] == [
        ("MONDAY", "09:00"),
        ("THURSDAY", "13:00"),
        ("FRIDAY", "09:00"),
    ]


def test_staff_cannot_edit_availability(client, db) -> None:
    workspace = make_workspace(db)
    staff = make_user(db, workspace, role="STAFF", permissions={"canManageBookings": True})
    booking_type = _booking_type(db, workspace)

    assert _window(client, staff, booking_type).status_code == 403


def test_deleted_window_stops_producing_slots(client, db) -> None:
    workspace = make_workspace(db)
    owner = make_user(db, workspace)
    other_owner = make_user(db, make_workspace(db, business_name="Other"))
    booking_type = _booking_type(db, workspace)
    window = _window(client, owner, booking_type).json()

    assert client.delete(f"/bookings/availability/{window['id']}", headers=auth_headers(other_owner)).status_code == 404
    assert client.delete(f"/bookings/availability/{window['id']}", headers=auth_headers(owner)).status_code == 200

    slots = client.get(f"/bookings/types/{booking_type.id}/available-slots?date={THURSDAY}").json()
    assert slots == {"date": THURSDAY, "slots": [], "message": "No availability for this day"}


def test_slots_skip_taken_times(client, db) -> None:
    workspace = make_workspace(db)
    owner = make_user(db, workspace)
    booking_type = _booking_type(db, workspace)
    _window(client, owner, booking_type, start="09:00", end="12:30")
    _book(db, workspace, booking_type, datetime(2030, 1, 10, 10, 30))
    _book(db, workspace, booking_type, datetime(2030, 1, 10, 9, 0), status="CANCELLED")

    response = client.get(f"/bookings/types/{booking_type.id}/available-slots?date={THURSDAY}")

    assert response.status_code == 200
    body = response.json()
    assert body["date"] == THURSDAY
    # 10:00 and 11:00 overlap the 10:30 booking; 12:00 would run past the window
    assert [s["time"] for s in body["slots"]] == ["09:00"]
    assert body["slots"][0]["dateTime"] == "2030-01-10T09:00:00"


def test_slots_in_the_past_are_hidden(db) -> None:
    workspace = make_workspace(db)
    booking_type = _booking_type(db, workspace, duration=30)
    db.add(Availability(booking_type_id=booking_type.id, day_of_week="THURSDAY", start_time="09:00", end_time="11:00"))
    db.commit()
    service = BookingService(db, dispatcher=None, broadcaster=None)

    slots = service.get_available_slots(booking_type.id, date(2030, 1, 10), now=datetime(2030, 1, 10, 9, 45))

    assert [s.time for s in slots.slots] == ["10:00", "10:30"]


def test_slots_for_unknown_or_inactive_type_are_404(client, db) -> None:
    workspace = make_workspace(db)
    booking_type = _booking_type(db, workspace)
    booking_type.is_active = False
    db.commit()

    assert client.get(f"/bookings/types/{booking_type.id}/available-slots?date={THURSDAY}").status_code == 404
    assert client.get(f"/bookings/types/missing/available-slots?date={THURSDAY}").status_code == 404
    assert client.get(f"/bookings/types/{booking_type.id}/available-slots?date=soon").status_code == 422


def test_cancel_frees_the_slot(client, db, broadcaster) -> None:
    workspace = make_workspace(db)
    owner = make_user(db, workspace)
    booking_type = _booking_type(db, workspace)
    _window(client, owner, booking_type, start="09:00", end="10:00")
    booking = _book(db, workspace, booking_type, datetime(2030, 1, 10, 9, 0))
    slots_url = f"/bookings/types/{booking_type.id}/available-slots?date={THURSDAY}"
    assert client.get(slots_url).json()["slots"] == []

    response = client.delete(f"/bookings/{booking.id}", headers=auth_headers(owner))

    assert response.status_code == 200
    assert response.json()["status"] == "CANCELLED"
    assert broadcaster.names(workspace.id)[-1] == "booking:cancelled"
    assert [s["time"] for s in client.get(slots_url).json()["slots"]] == ["09:00"]


def test_cancel_needs_booking_permission(client, db) -> None:
    workspace = make_workspace(db)
    booking_type = _booking_type(db, workspace)
    booking = _book(db, workspace, booking_type, datetime(2030, 1, 10, 9, 0))
    viewer = make_user(db, workspace, role="STAFF", permissions={"canManageBookings": False})
    manager = make_user(db, workspace, role="STAFF", email="m@acme.test", permissions={"canManageBookings": True})
    outsider = make_user(db, make_workspace(db, business_name="Other"))

    assert client.delete(f"/bookings/{booking.id}", headers=auth_headers(viewer)).status_code == 403
    assert client.delete(f"/bookings/{booking.id}", headers=auth_headers(outsider)).status_code == 404
    assert client.delete(f"/bookings/{booking.id}", headers=auth_headers(manager)).status_code == 200
