from __future__ import annotations

import pytest
from conftest import make_workspace

from careops import email_service
from careops.models import InventoryItem


def _item(db, workspace, **fields) -> InventoryItem:
    item = InventoryItem(
        workspace_id=workspace.id, name="Gloves", quantity=2, unit="BOX", low_stock_threshold=5, **fields
    )
    db.add(item)
    db.commit()
    return item


@pytest.mark.asyncio
async def test_inventory_alert_goes_to_the_vendor(db, email_sender) -> None:
    workspace = make_workspace(db, business_name="Acme")
    item = _item(db, workspace, vendor_name="GloveCo", vendor_email="orders@gloveco.test", vendor_phone="555-0100")

    await email_service.send_inventory_alert(item, workspace, sender=email_sender)

    assert len(email_sender.sent) == 1
    email = email_sender.sent[0]
    assert email["to"] == "orders@gloveco.test"
    assert email["subject"] == "Low Inventory Alert: Gloves"
    assert "2 BOX" in email["html"]
    assert "GloveCo" in email["html"]
    assert "555-0100" in email["html"]
    assert "Acme Team" in email["html"]


@pytest.mark.asyncio
async def test_inventory_alert_falls_back_to_workspace_inbox(db, email_sender) -> None:
    workspace = make_workspace(db, contact_email="hello@acme.test")
    item = _item(db, workspace)

    await email_service.send_inventory_alert(item, workspace, sender=email_sender)

    assert [e["to"] for e in email_sender.sent] == ["hello@acme.test"]
    assert "Vendor:" not in email_sender.sent[0]["html"]


@pytest.mark.asyncio
async def test_inventory_alert_without_any_recipient_sends_nothing(db, email_sender) -> None:
    workspace = make_workspace(db, contact_email=None)
    item = _item(db, workspace)

    assert await email_service.send_inventory_alert(item, workspace, sender=email_sender) is None
    assert email_sender.sent == []


@pytest.mark.asyncio
async def test_inventory_alert_defaults_to_send_email(db, monkeypatch, email_sender) -> None:
    workspace = make_workspace(db)
    item = _item(db, workspace, vendor_email="orders@gloveco.test")
    monkeypatch.setattr(email_service, "send_email", email_sender)

    result = await email_service.send_inventory_alert(item, workspace)

    assert result == {"id": "email-1"}
    assert email_sender.sent[0]["to"] == "orders@gloveco.test"


@pytest.mark.asyncio
async def test_send_email_refuses_without_api_key(monkeypatch) -> None:
    monkeypatch.setattr(email_service, "RESEND_API_KEY", "")

    with pytest.raises(Exception, match="not configured"):
        await email_service.send_email("a@example.com", "Hi", "<p>Hi</p>")
