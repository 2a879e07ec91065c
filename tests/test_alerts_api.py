from __future__ import annotations

from conftest import auth_headers, make_user, make_workspace

from careops.models import Alert


def _create(client, user, **overrides):
    payload = {"type": "SYSTEM", "priority": "LOW", "title": "Check", "message": "Something happened"}
    payload.update(overrides)
    response = client.post("/alerts", headers=auth_headers(user), json=payload)
    assert response.status_code == 201
    return response.json()


def test_create_list_and_summary(client, db, broadcaster) -> None:
    workspace = make_workspace(db)
    user = make_user(db, workspace, role="STAFF")

    _create(client, user, priority="CRITICAL")
    _create(client, user, type="INVENTORY_LOW", priority="HIGH")
    low = _create(client, user)
    client.put(f"/alerts/{low['id']}/resolve", headers=auth_headers(user))

    listing = client.get("/alerts", headers=auth_headers(user)).json()
    assert listing["total"] == 3
    # Active alerts come first, most severe on top
    assert [a["priority"] for a in listing["data"]] == ["CRITICAL", "HIGH", "LOW"]
    assert listing["data"][-1]["status"] == "RESOLVED"

    filtered = client.get("/alerts?type=INVENTORY_LOW", headers=auth_headers(user)).json()
    assert filtered["total"] == 1

    summary = client.get("/alerts/summary", headers=auth_headers(user)).json()
    assert summary["total"] == 3
    assert summary["byStatus"] == {"active": 2, "acknowledged": 0, "resolved": 1}
    assert summary["byPriority"] == {"critical": 1, "high": 1, "medium": 0, "low": 0}

    assert broadcaster.names(workspace.id) == [
        "alert:created",
        "alert:created",
        "alert:created",
        "alert:resolved",
    ]


def test_invalid_filter_is_rejected(client, db) -> None:
    user = make_user(db, make_workspace(db))
    assert client.get("/alerts?status=SNOOZED", headers=auth_headers(user)).status_code == 422


def test_acknowledge_only_active_alerts(client, db) -> None:
    user = make_user(db, make_workspace(db))
    alert = _create(client, user)

    first = client.put(f"/alerts/{alert['id']}/acknowledge", headers=auth_headers(user))
    assert first.status_code == 200
    assert first.json()["status"] == "ACKNOWLEDGED"
    assert first.json()["acknowledgedBy"] == user.id

    second = client.put(f"/alerts/{alert['id']}/acknowledge", headers=auth_headers(user))
    assert second.status_code == 400


def test_resolving_an_active_alert_also_acknowledges_it(client, db) -> None:
    user = make_user(db, make_workspace(db))
    alert = _create(client, user)

    resolved = client.put(f"/alerts/{alert['id']}/resolve", headers=auth_headers(user)).json()

    assert resolved["status"] == "RESOLVED"
    assert resolved["resolvedAt"] is not None
    assert resolved["acknowledgedAt"] is not None
    assert resolved["acknowledgedBy"] == user.id


def test_bulk_acknowledge_and_resolve(client, db, broadcaster) -> None:
    workspace = make_workspace(db)
    user = make_user(db, workspace)
    ids = [_create(client, user)["id"] for _ in range(3)]
    client.put(f"/alerts/{ids[0]}/acknowledge", headers=auth_headers(user))

    acked = client.put("/alerts/bulk/acknowledge", headers=auth_headers(user), json={"alertIds": ids})
    assert acked.json()["count"] == 2

    resolved = client.put("/alerts/bulk/resolve", headers=auth_headers(user), json={"alertIds": ids[:2]})
    assert resolved.json()["count"] == 2

    db.expire_all()
    statuses = {a.id: a.status for a in db.query(Alert).all()}
    assert statuses == {ids[0]: "RESOLVED", ids[1]: "RESOLVED", ids[2]: "ACKNOWLEDGED"}
    assert "alerts:bulk-acknowledged" in broadcaster.names()
    assert "alerts:bulk-resolved" in broadcaster.names()


def test_bulk_rejects_foreign_or_missing_ids(client, db) -> None:
    mine = make_user(db, make_workspace(db))
    theirs = make_user(db, make_workspace(db, business_name="Theirs"))
    own_alert = _create(client, mine)["id"]
    foreign_alert = _create(client, theirs)["id"]

    response = client.put(
        "/alerts/bulk/acknowledge", headers=auth_headers(mine), json={"alertIds": [own_alert, foreign_alert]}
    )
    assert response.status_code == 400

    empty = client.put("/alerts/bulk/resolve", headers=auth_headers(mine), json={"alertIds": []})
    assert empty.status_code == 422

    db.expire_all()
    assert db.get(Alert, own_alert).status == "ACTIVE"


def test_delete_alert(client, db, broadcaster) -> None:
    workspace = make_workspace(db)
    user = make_user(db, workspace)
    alert = _create(client, user)

    assert client.delete(f"/alerts/{alert['id']}", headers=auth_headers(user)).status_code == 200
    assert client.get(f"/alerts/{alert['id']}", headers=auth_headers(user)).status_code == 404
    assert broadcaster.events[-1] == (workspace.id, "alert:deleted", {"id": alert["id"]})


def test_alerts_are_workspace_scoped(client, db) -> None:
    mine = make_user(db, make_workspace(db))
    theirs = make_user(db, make_workspace(db, business_name="Theirs"))
    foreign = _create(client, theirs)

    assert client.get("/alerts", headers=auth_headers(mine)).json()["total"] == 0
    assert client.get(f"/alerts/{foreign['id']}", headers=auth_headers(mine)).status_code == 404
    assert client.put(f"/alerts/{foreign['id']}/resolve", headers=auth_headers(mine)).status_code == 404
