"""Pytest configuration and fixtures."""

from __future__ import annotations

import os

# Settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from careops.database import Base, get_db
from careops.domain.automation.dispatcher import AutomationDispatcher
from careops.domain.automation.triggers import get_automation_dispatcher
from careops.email_service import get_email_sender
from careops.main import app
from careops.models import AutomationRule, Contact, User, Workspace
from careops.realtime import get_broadcaster
from careops.security_utils import generate_user_token


class FakeEmailSender:
    """Records sends; set fail_for to make delivery to an address raise"""

    def __init__(self) -> None:
        self.sent: list[dict] = []
        self.fail_for: set[str] = set()

    async def __call__(self, to, subject, html, from_address=None):
        if to in self.fail_for:
            raise RuntimeError(f"delivery to {to} failed")
        self.sent.append({"to": to, "subject": subject, "html": html})
        return {"id": f"email-{len(self.sent)}"}


class FakeBroadcaster:
    def __init__(self) -> None:
        self.events: list[tuple[str, str, dict]] = []

    async def emit_to_workspace(self, workspace_id: str, event: str, payload) -> int:
        self.events.append((workspace_id, event, payload))
        return 1

    def names(self, workspace_id: str | None = None) -> list[str]:
        return [e for ws, e, _ in self.events if workspace_id is None or ws == workspace_id]


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory) -> Session:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture()
def broadcaster() -> FakeBroadcaster:
    return FakeBroadcaster()


@pytest.fixture()
def dispatcher(db, email_sender, broadcaster, session_factory) -> AutomationDispatcher:
    return AutomationDispatcher(db, email_sender, broadcaster, session_factory)


@pytest.fixture()
def client(session_factory, email_sender, broadcaster):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    def override_dispatcher(db: Session = Depends(get_db)) -> AutomationDispatcher:
        return AutomationDispatcher(db, email_sender, broadcaster, session_factory)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    app.dependency_overrides[get_automation_dispatcher] = override_dispatcher
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ----------------------------------------------------------------------------
# Builders
# ----------------------------------------------------------------------------


def make_workspace(db, workspace_id: str | None = None, *, business_name="Acme", status="ACTIVE",
                   contact_email="owner@acme.test") -> Workspace:
    workspace = Workspace(business_name=business_name, status=status, contact_email=contact_email)
    if workspace_id:
        workspace.id = workspace_id
    db.add(workspace)
    db.commit()
    return workspace


def make_user(db, workspace: Workspace, *, role="OWNER", email=None, permissions=None) -> User:
    user = User(
        workspace_id=workspace.id,
        email=email or f"{role.lower()}-{workspace.id[:8]}@acme.test",
        password_hash="not-a-real-hash",
        role=role,
        status="ACTIVE",
        permissions=permissions or {},
    )
    db.add(user)
    db.commit()
    return user


def make_contact(db, workspace: Workspace, contact_id: str | None = None, **fields) -> Contact:
    fields.setdefault("email", "ana@example.com")
    fields.setdefault("first_name", "Ana")
    contact = Contact(workspace_id=workspace.id, **fields)
    if contact_id:
        contact.id = contact_id
    db.add(contact)
    db.commit()
    return contact


def make_rule(db, workspace: Workspace, trigger: str, action: str, config: dict, *,
              is_active=True, name="Rule") -> AutomationRule:
    rule = AutomationRule(
        workspace_id=workspace.id,
        name=name,
        trigger=trigger,
        action=action,
        config=config,
        conditions={},
        is_active=is_active,
    )
    db.add(rule)
    db.commit()
    return rule


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {generate_user_token(user.id)}"}
