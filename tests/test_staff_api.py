from __future__ import annotations

import re

from conftest import auth_headers, make_user, make_workspace

from careops.models import User, Workspace

ITEM = {"name": "Gloves", "quantity": 10, "lowStockThreshold": 5}


def _invite(client, owner, email="sam@acme.test", **extra):
    return client.post("/staff/invite", headers=auth_headers(owner), json={"email": email, "firstName": "Sam", **extra})


def _temporary_password(email: dict) -> str:
    return re.search(r"Password: (\S+)</p>", email["html"]).group(1)


def test_invite_activate_then_permission_gated_write(client, db, email_sender) -> None:
    workspace = make_workspace(db, business_name="Acme")
    owner = make_user(db, workspace)

    response = _invite(client, owner, email="Sam@Acme.test")
    assert response.status_code == 201
    invited = response.json()
    assert (invited["email"], invited["role"], invited["status"]) == ("sam@acme.test", "STAFF", "PENDING")
    assert invited["permissions"]["canAccessInbox"] is True
    assert invited["permissions"]["canManageInventory"] is False

    assert email_sender.sent[0]["to"] == "sam@acme.test"
    assert email_sender.sent[0]["subject"] == "You've been invited to join Acme"
    password = _temporary_password(email_sender.sent[0])

    # Pending accounts cannot sign in or call the API yet
    login = {"email": "sam@acme.test", "password": password}
    assert client.post("/auth/login", json=login).status_code == 401
    staff = db.get(User, invited["id"])
    assert client.get("/inventory", headers=auth_headers(staff)).status_code == 401

    activated = client.put(f"/staff/{invited['id']}/activate", headers=auth_headers(owner))
    assert activated.json()["status"] == "ACTIVE"
    assert client.post("/auth/login", json=login).status_code == 200

    assert client.post("/inventory", headers=auth_headers(staff), json=ITEM).status_code == 403

    granted = client.put(
        f"/staff/{invited['id']}/permissions",
        headers=auth_headers(owner),
        json={"permissions": {"canManageInventory": True}},
    )
    assert granted.json()["permissions"]["canManageInventory"] is True
    # Merged, not replaced
    assert granted.json()["permissions"]["canAccessInbox"] is True

    assert client.post("/inventory", headers=auth_headers(staff), json=ITEM).status_code == 201

    db.expire_all()
    assert db.get(Workspace, workspace.id).staff_setup is True


def test_invite_accepts_permission_overrides(client, db) -> None:
    owner = make_user(db, make_workspace(db))

    invited = _invite(client, owner, permissions={"canManageForms": True}).json()

    assert invited["permissions"]["canManageForms"] is True
    assert invited["permissions"]["canViewForms"] is True


def test_duplicate_email_conflicts(client, db) -> None:
    owner = make_user(db, make_workspace(db))

    assert _invite(client, owner).status_code == 201
    assert _invite(client, owner).status_code == 409
    assert _invite(client, owner, email=owner.email).status_code == 409


def test_failed_invitation_email_keeps_the_account(client, db, email_sender) -> None:
    owner = make_user(db, make_workspace(db))
    email_sender.fail_for.add("sam@acme.test")

    response = _invite(client, owner)

    assert response.status_code == 201
    assert db.query(User).filter(User.email == "sam@acme.test").count() == 1


def test_staff_cannot_manage_staff(client, db) -> None:
    workspace = make_workspace(db)
    staff = make_user(db, workspace, role="STAFF", permissions={"canManageInventory": True})

    assert _invite(client, staff).status_code == 403
    assert client.get("/staff", headers=auth_headers(staff)).status_code == 403


def test_list_update_deactivate_and_remove(client, db) -> None:
    workspace = make_workspace(db)
    owner = make_user(db, workspace)
    first = _invite(client, owner, email="a@acme.test").json()
    second = _invite(client, owner, email="b@acme.test").json()

    listing = client.get("/staff", headers=auth_headers(owner)).json()
    # Owners are not listed
    assert {m["id"] for m in listing} == {first["id"], second["id"]}

    updated = client.put(f"/staff/{first['id']}", headers=auth_headers(owner), json={"lastName": "Stone"})
    assert updated.json()["lastName"] == "Stone"
    assert updated.json()["firstName"] == "Sam"
    assert client.put(f"/staff/{first['id']}", headers=auth_headers(owner), json={"status": "ON_LEAVE"}).status_code == 422

    client.put(f"/staff/{first['id']}/activate", headers=auth_headers(owner))
    deactivated = client.put(f"/staff/{first['id']}/deactivate", headers=auth_headers(owner))
    assert deactivated.json()["status"] == "INACTIVE"

    assert client.delete(f"/staff/{second['id']}", headers=auth_headers(owner)).status_code == 200
    assert client.get(f"/staff/{second['id']}", headers=auth_headers(owner)).status_code == 404
    assert db.query(User).filter(User.email == "b@acme.test").count() == 0


def test_reset_password_sends_new_credentials_and_requires_reactivation(client, db, email_sender) -> None:
    owner = make_user(db, make_workspace(db))
    member = _invite(client, owner).json()
    client.put(f"/staff/{member['id']}/activate", headers=auth_headers(owner))
    old_password = _temporary_password(email_sender.sent[0])

    response = client.post(f"/staff/{member['id']}/reset-password", headers=auth_headers(owner))

    assert response.status_code == 200
    reset_email = email_sender.sent[-1]
    assert reset_email["subject"] == "Your password has been reset"
    new_password = re.search(r"<p>(\S+)</p>\s*$", reset_email["html"]).group(1)
    assert new_password != old_password
    assert client.get(f"/staff/{member['id']}", headers=auth_headers(owner)).json()["status"] == "PENDING"

    client.put(f"/staff/{member['id']}/activate", headers=auth_headers(owner))
    assert client.post("/auth/login", json={"email": "sam@acme.test", "password": old_password}).status_code == 401
    assert client.post("/auth/login", json={"email": "sam@acme.test", "password": new_password}).status_code == 200


def test_owner_only_sees_own_workspace_staff(client, db) -> None:
    mine = make_user(db, make_workspace(db))
    theirs = make_user(db, make_workspace(db, business_name="Theirs"))
    foreign = _invite(client, theirs, email="x@theirs.test").json()

    assert client.get("/staff", headers=auth_headers(mine)).json() == []
    assert client.get(f"/staff/{foreign['id']}", headers=auth_headers(mine)).status_code == 404
    assert client.put(f"/staff/{foreign['id']}/activate", headers=auth_headers(mine)).status_code == 404
    assert client.delete(f"/staff/{foreign['id']}", headers=auth_headers(mine)).status_code == 404
    # The other owner's own account is not a staff record either
    assert client.get(f"/staff/{theirs.id}", headers=auth_headers(mine)).status_code == 404
