from __future__ import annotations

from conftest import auth_headers, make_contact, make_user, make_workspace

from careops.models import BookingType, FormSubmission


def _form(client, owner, name="Intake"):
    response = client.post(
        "/forms", headers=auth_headers(owner), json={"name": name, "fields": [{"name": "allergies", "type": "text"}]}
    )
    assert response.status_code == 201
    return response.json()


def _booking_type(db, workspace) -> BookingType:
    booking_type = BookingType(workspace_id=workspace.id, name="Deep Clean", duration=60)
    db.add(booking_type)
    db.commit()
    return booking_type


def test_link_and_unlink_form_to_booking_type(client, db) -> None:
    workspace = make_workspace(db)
    owner = make_user(db, workspace)
    intake = _form(client, owner)
    survey = _form(client, owner, "Survey")
    booking_type = _booking_type(db, workspace)
    url = f"/forms/{intake['id']}/booking-types/{booking_type.id}"

    linked = client.post(url, headers=auth_headers(owner))
    assert linked.status_code == 200
    assert linked.json()["sendFormId"] == intake["id"]

    # Unlinking a different form leaves the current one in place
    other = client.post(
        f"/forms/{survey['id']}/booking-types/{booking_type.id}",
        headers=auth_headers(owner),
        json={"sendAfterBooking": False},
    )
    assert other.json()["sendFormId"] == intake["id"]

    unlinked = client.post(url, headers=auth_headers(owner), json={"sendAfterBooking": False})
    assert unlinked.json()["sendFormId"] is None


def test_link_is_owner_only_and_workspace_scoped(client, db) -> None:
    workspace = make_workspace(db)
    owner = make_user(db, workspace)
    staff = make_user(db, workspace, role="STAFF", permissions={"canManageForms": True})
    form = _form(client, owner)
    foreign_type = _booking_type(db, make_workspace(db, business_name="Other"))
    own_type = _booking_type(db, workspace)

    assert client.post(f"/forms/{form['id']}/booking-types/{own_type.id}", headers=auth_headers(staff)).status_code == 403
    assert client.post(f"/forms/{form['id']}/booking-types/{foreign_type.id}", headers=auth_headers(owner)).status_code == 404
    assert client.post(f"/forms/missing/booking-types/{own_type.id}", headers=auth_headers(owner)).status_code == 404


def test_get_submission_by_id_is_public(client, db) -> None:
    workspace = make_workspace(db)
    owner = make_user(db, workspace)
    contact = make_contact(db, workspace)
    form = _form(client, owner)
    requested = client.post(
        "/forms/submissions", headers=auth_headers(owner), json={"formId": form["id"], "contactId": contact.id}
    ).json()

    response = client.get(f"/forms/submissions/{requested['id']}")

    assert response.status_code == 200
    body = response.json()
    assert (body["status"], body["formName"], body["contactId"]) == ("PENDING", "Intake", contact.id)
    assert body["formFields"] == [{"name": "allergies", "type": "text"}]
    assert client.get("/forms/submissions/missing").status_code == 404
    assert db.query(FormSubmission).count() == 1
