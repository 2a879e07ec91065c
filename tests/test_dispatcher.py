from __future__ import annotations

from datetime import datetime

import pytest
from conftest import make_contact, make_rule, make_workspace

from careops.domain.automation.context import EventContext
from careops.models import Alert, AutomationRule

WELCOME = {"subject": "Welcome to {{businessName}}", "template": "Hi {{firstName}}"}


def _contact_context(workspace, contact) -> EventContext:
    return EventContext(
        workspace_id=workspace.id,
        contact={"id": contact.id, "first_name": contact.first_name, "email": contact.email},
        contact_id=contact.id,
        entity_type="contact",
        entity_id=contact.id,
    )


@pytest.mark.asyncio
async def test_dispatch_runs_only_matching_workspace_and_trigger(db, dispatcher, email_sender) -> None:
    acme = make_workspace(db, business_name="Acme")
    other = make_workspace(db, business_name="Other")
    contact = make_contact(db, acme)

    matching = make_rule(db, acme, "NEW_CONTACT", "SEND_EMAIL", WELCOME)
    wrong_trigger = make_rule(db, acme, "BOOKING_CREATED", "SEND_EMAIL", WELCOME)
    wrong_workspace = make_rule(db, other, "NEW_CONTACT", "SEND_EMAIL", WELCOME)

    await dispatcher.dispatch("NEW_CONTACT", _contact_context(acme, contact))

    assert len(email_sender.sent) == 1
    assert email_sender.sent[0]["subject"] == "Welcome to Acme"
    db.expire_all()
    assert matching.execution_count == 1
    assert wrong_trigger.execution_count == 0
    assert wrong_workspace.execution_count == 0


@pytest.mark.asyncio
async def test_inactive_rule_is_never_executed(db, dispatcher, email_sender) -> None:
    acme = make_workspace(db)
    contact = make_contact(db, acme)
    rule = make_rule(db, acme, "NEW_CONTACT", "SEND_EMAIL", WELCOME, is_active=False)

    await dispatcher.dispatch("NEW_CONTACT", _contact_context(acme, contact))

    assert email_sender.sent == []
    db.expire_all()
    assert rule.execution_count == 0
    assert rule.last_executed_at is None


@pytest.mark.asyncio
async def test_successful_run_stamps_counters(db, dispatcher) -> None:
    acme = make_workspace(db)
    contact = make_contact(db, acme)
    rule = make_rule(db, acme, "NEW_CONTACT", "SEND_EMAIL", WELCOME)
    rule.execution_count = 4
    db.commit()

    before = datetime.utcnow()
    await dispatcher.dispatch("NEW_CONTACT", _contact_context(acme, contact))

    db.expire_all()
    assert rule.execution_count == 5
    assert rule.last_executed_at >= before


@pytest.mark.asyncio
async def test_failing_rule_does_not_block_the_rest(db, dispatcher, email_sender) -> None:
    acme = make_workspace(db)
    contact = make_contact(db, acme, email="bounce@example.com")
    email_sender.fail_for.add("bounce@example.com")

    failing = make_rule(db, acme, "NEW_CONTACT", "SEND_EMAIL", WELCOME, name="failing")
    alerting = make_rule(
        db,
        acme,
        "NEW_CONTACT",
        "CREATE_ALERT",
        {"alertType": "SYSTEM", "priority": "LOW", "title": "New lead", "message": "m"},
        name="alerting",
    )

    await dispatcher.dispatch("NEW_CONTACT", _contact_context(acme, contact))

    db.expire_all()
    assert failing.execution_count == 0
    assert alerting.execution_count == 1
    assert db.query(Alert).filter(Alert.workspace_id == acme.id).count() == 1


@pytest.mark.asyncio
async def test_malformed_config_is_isolated_per_rule(db, dispatcher, email_sender) -> None:
    acme = make_workspace(db)
    contact = make_contact(db, acme)
    broken = make_rule(db, acme, "NEW_CONTACT", "SEND_EMAIL", {"subject": "no template"})
    healthy = make_rule(db, acme, "NEW_CONTACT", "SEND_EMAIL", WELCOME)

    await dispatcher.dispatch("NEW_CONTACT", _contact_context(acme, contact))

    db.expire_all()
    assert broken.execution_count == 0
    assert healthy.execution_count == 1
    assert len(email_sender.sent) == 1
    assert "undefined" not in email_sender.sent[0]["html"]


@pytest.mark.asyncio
async def test_unknown_action_is_skipped_but_counted(db, dispatcher) -> None:
    acme = make_workspace(db)
    rule = make_rule(db, acme, "NEW_CONTACT", "SEND_CARRIER_PIGEON", {})

    await dispatcher.dispatch("NEW_CONTACT", EventContext(workspace_id=acme.id))

    db.expire_all()
    assert rule.execution_count == 1


@pytest.mark.asyncio
async def test_missing_recipient_is_not_a_failure(db, dispatcher, email_sender) -> None:
    acme = make_workspace(db)
    rule = make_rule(db, acme, "INVENTORY_LOW", "SEND_EMAIL", WELCOME)

    await dispatcher.dispatch("INVENTORY_LOW", EventContext(workspace_id=acme.id))

    assert email_sender.sent == []
    db.expire_all()
    assert rule.execution_count == 1


@pytest.mark.asyncio
async def test_dispatch_with_no_rules_is_a_no_op(db, dispatcher, email_sender, broadcaster) -> None:
    acme = make_workspace(db)

    await dispatcher.dispatch("FORM_OVERDUE", EventContext(workspace_id=acme.id))

    assert email_sender.sent == []
    assert broadcaster.events == []


@pytest.mark.asyncio
async def test_unknown_trigger_name_is_logged_not_raised(db, dispatcher, email_sender) -> None:
    acme = make_workspace(db)
    contact = make_contact(db, acme)
    rule = make_rule(db, acme, "NEW_CONTACT", "SEND_EMAIL", WELCOME)

    await dispatcher.dispatch("NOT_A_TRIGGER", _contact_context(acme, contact))

    assert email_sender.sent == []
    db.expire_all()
    assert rule.execution_count == 0


@pytest.mark.asyncio
async def test_dispatch_detached_uses_its_own_session(db, dispatcher, session_factory, email_sender) -> None:
    acme = make_workspace(db)
    contact = make_contact(db, acme)
    rule = make_rule(db, acme, "NEW_CONTACT", "SEND_EMAIL", WELCOME)
    rule_id = rule.id
    context = _contact_context(acme, contact)
    db.close()

    await dispatcher.dispatch_detached("NEW_CONTACT", context)

    assert len(email_sender.sent) == 1
    check = session_factory()
    try:
        assert check.get(AutomationRule, rule_id).execution_count == 1
    finally:
        check.close()
