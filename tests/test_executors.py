from __future__ import annotations

import pytest
from conftest import make_contact, make_rule, make_workspace
from pydantic import ValidationError

from careops.domain.automation.context import EventContext
from careops.domain.automation.executors import ActionExecutors
from careops.models import Alert, Contact


@pytest.fixture()
def executors(db, email_sender, broadcaster) -> ActionExecutors:
    return ActionExecutors(db, email_sender, broadcaster)


@pytest.mark.asyncio
async def test_create_alert_copies_config_and_context(db, executors, broadcaster) -> None:
    workspace = make_workspace(db, "w1")
    rule = make_rule(
        db,
        workspace,
        "INVENTORY_LOW",
        "CREATE_ALERT",
        {"alertType": "INVENTORY_LOW", "priority": "HIGH", "title": "Low Inventory Alert", "message": "X"},
    )
    context = EventContext(workspace_id="w1", entity_type="inventory_item", entity_id="i1")

    await executors.execute(rule, context)

    alert = db.query(Alert).one()
    assert alert.status == "ACTIVE"
    assert alert.priority == "HIGH"
    assert alert.entity_id == "i1"
    assert alert.entity_type == "inventory_item"
    assert alert.type == "INVENTORY_LOW"
    assert alert.title == "Low Inventory Alert"
    assert alert.message == "X"

    assert len(broadcaster.events) == 1
    workspace_id, event, payload = broadcaster.events[0]
    assert (workspace_id, event) == ("w1", "alert:created")
    assert payload["id"] == alert.id


@pytest.mark.asyncio
async def test_create_alert_priority_defaults_to_medium(db, executors) -> None:
    workspace = make_workspace(db)
    rule = make_rule(
        db, workspace, "FORM_OVERDUE", "CREATE_ALERT",
        {"alertType": "FORM_OVERDUE", "title": "Form Overdue", "message": "late"},
    )

    alert = await executors.execute(rule, EventContext(workspace_id=workspace.id))

    assert alert.priority == "MEDIUM"


@pytest.mark.asyncio
async def test_send_email_substitutes_subject_and_body(db, executors, email_sender) -> None:
    workspace = make_workspace(db, business_name="Acme")
    rule = make_rule(
        db, workspace, "NEW_CONTACT", "SEND_EMAIL",
        {"subject": "Welcome to {{businessName}}", "template": "Hi {{firstName}}, welcome to {{businessName}}!"},
    )
    context = EventContext(workspace_id=workspace.id, contact={"first_name": "Ana", "email": "ana@example.com"})

    await executors.execute(rule, context)

    assert email_sender.sent == [
        {"to": "ana@example.com", "subject": "Welcome to Acme", "html": "Hi Ana, welcome to Acme!"}
    ]


@pytest.mark.asyncio
async def test_send_email_without_recipient_skips(db, executors, email_sender) -> None:
    workspace = make_workspace(db)
    rule = make_rule(db, workspace, "NEW_CONTACT", "SEND_EMAIL", {"subject": "s", "template": "t"})

    result = await executors.execute(rule, EventContext(workspace_id=workspace.id, contact={"first_name": "Ana"}))

    assert result is None
    assert email_sender.sent == []


@pytest.mark.asyncio
async def test_send_email_sender_failure_propagates(db, executors, email_sender) -> None:
    workspace = make_workspace(db)
    email_sender.fail_for.add("ana@example.com")
    rule = make_rule(db, workspace, "NEW_CONTACT", "SEND_EMAIL", {"subject": "s", "template": "t"})

    with pytest.raises(RuntimeError):
        await executors.execute(rule, EventContext(workspace_id=workspace.id, contact={"email": "ana@example.com"}))


@pytest.mark.asyncio
async def test_update_status_sets_contact_status(db, executors) -> None:
    workspace = make_workspace(db)
    make_contact(db, workspace, "c1")
    rule = make_rule(db, workspace, "NEW_CONTACT", "UPDATE_STATUS", {"entityType": "contact", "status": "CONTACTED"})

    await executors.execute(rule, EventContext(workspace_id=workspace.id, contact_id="c1"))

    db.expire_all()
    assert db.get(Contact, "c1").status == "CONTACTED"


@pytest.mark.asyncio
async def test_update_status_without_contact_id_is_a_no_op(db, executors) -> None:
    workspace = make_workspace(db)
    make_contact(db, workspace, "c1")
    rule = make_rule(db, workspace, "NEW_CONTACT", "UPDATE_STATUS", {"entityType": "contact", "status": "CONTACTED"})

    result = await executors.execute(rule, EventContext(workspace_id=workspace.id))

    assert result is None
    db.expire_all()
    assert db.get(Contact, "c1").status == "NEW"


@pytest.mark.asyncio
async def test_update_status_ignores_other_entity_types(db, executors) -> None:
    workspace = make_workspace(db)
    make_contact(db, workspace, "c1")
    rule = make_rule(db, workspace, "BOOKING_CREATED", "UPDATE_STATUS", {"entityType": "booking", "status": "CONFIRMED"})

    result = await executors.execute(rule, EventContext(workspace_id=workspace.id, contact_id="c1"))

    assert result is None
    db.expire_all()
    assert db.get(Contact, "c1").status == "NEW"


@pytest.mark.asyncio
async def test_update_status_never_crosses_workspaces(db, executors) -> None:
    home = make_workspace(db)
    elsewhere = make_workspace(db, business_name="Elsewhere")
    make_contact(db, elsewhere, "c9")
    rule = make_rule(db, home, "NEW_CONTACT", "UPDATE_STATUS", {"entityType": "contact", "status": "LOST"})

    await executors.execute(rule, EventContext(workspace_id=home.id, contact_id="c9"))

    db.expire_all()
    assert db.get(Contact, "c9").status == "NEW"


@pytest.mark.asyncio
async def test_send_sms_is_recognised_and_inert(db, executors, email_sender, broadcaster) -> None:
    workspace = make_workspace(db)
    rule = make_rule(db, workspace, "BOOKING_CREATED", "SEND_SMS", {"message": "See you soon"})

    result = await executors.execute(rule, EventContext(workspace_id=workspace.id))

    assert result is None
    assert email_sender.sent == []
    assert broadcaster.events == []


@pytest.mark.asyncio
async def test_invalid_config_raises_validation_error(db, executors) -> None:
    workspace = make_workspace(db)
    rule = make_rule(db, workspace, "INVENTORY_LOW", "CREATE_ALERT", {"priority": "HIGH"})

    with pytest.raises(ValidationError):
        await executors.execute(rule, EventContext(workspace_id=workspace.id))


@pytest.mark.asyncio
async def test_stored_rule_with_unknown_contact_status_never_writes_it(db, executors) -> None:
    workspace = make_workspace(db)
    make_contact(db, workspace, "c1")
    rule = make_rule(db, workspace, "NEW_CONTACT", "UPDATE_STATUS", {"entityType": "contact", "status": "BOGUS_STATUS"})

    with pytest.raises(ValidationError):
        await executors.execute(rule, EventContext(workspace_id=workspace.id, contact_id="c1"))

    db.expire_all()
    assert db.get(Contact, "c1").status == "NEW"
