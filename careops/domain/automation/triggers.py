"""
Trigger emission sites.

Each function packages one domain object plus its workspace into an
EventContext and hands it to the dispatcher. Callers pick the delivery mode
explicitly: without background_tasks the dispatch is awaited before the
caller continues; with background_tasks it is deferred until after the HTTP
response and runs on its own session.
"""

import logging
from typing import Optional

from fastapi import BackgroundTasks, Depends
from sqlalchemy.orm import Session

from ...database import SessionLocal, get_db
from ...email_service import get_email_sender
from ...models import AutomationTrigger
from ...realtime import ConnectionManager, get_broadcaster
from .context import (
    EventContext,
    booking_snapshot,
    contact_snapshot,
    form_submission_snapshot,
    inventory_item_snapshot,
)
from .dispatcher import AutomationDispatcher

logger = logging.getLogger(__name__)


def get_automation_dispatcher(
    db: Session = Depends(get_db),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
    email_sender=Depends(get_email_sender),
) -> AutomationDispatcher:
    """Dependency injection for the dispatcher"""
    return AutomationDispatcher(
        db,
        email_sender=email_sender,
        broadcaster=broadcaster,
        session_factory=SessionLocal,
    )


async def emit(
    dispatcher: AutomationDispatcher,
    trigger: AutomationTrigger,
    context: EventContext,
    background_tasks: Optional[BackgroundTasks] = None,
) -> None:
    if background_tasks is not None:
        logger.debug(f"Deferring {trigger.value} dispatch for workspace {context.workspace_id}")
        background_tasks.add_task(dispatcher.dispatch_detached, trigger, context)
        return
    await dispatcher.dispatch(trigger, context)


async def trigger_new_contact(dispatcher, contact, workspace, *, background_tasks=None) -> None:
    await emit(
        dispatcher,
        AutomationTrigger.NEW_CONTACT,
        EventContext(
            workspace_id=workspace.id,
            contact=contact_snapshot(contact),
            contact_id=contact.id,
            entity_type="contact",
            entity_id=contact.id,
        ),
        background_tasks,
    )


async def trigger_booking_created(dispatcher, booking, workspace, *, background_tasks=None) -> None:
    await emit(
        dispatcher,
        AutomationTrigger.BOOKING_CREATED,
        EventContext(
            workspace_id=workspace.id,
            booking=booking_snapshot(booking),
            contact=contact_snapshot(booking.contact),
            contact_id=booking.contact_id,
            booking_id=booking.id,
            entity_type="booking",
            entity_id=booking.id,
        ),
        background_tasks,
    )


async def trigger_form_pending(dispatcher, submission, contact, workspace, *, background_tasks=None) -> None:
    await emit(
        dispatcher,
        AutomationTrigger.FORM_PENDING,
        EventContext(
            workspace_id=workspace.id,
            form_submission=form_submission_snapshot(submission),
            contact=contact_snapshot(contact),
            contact_id=contact.id if contact else None,
            entity_type="form_submission",
            entity_id=submission.id,
        ),
        background_tasks,
    )


async def trigger_form_overdue(dispatcher, submission, contact, workspace, *, background_tasks=None) -> None:
    await emit(
        dispatcher,
        AutomationTrigger.FORM_OVERDUE,
        EventContext(
            workspace_id=workspace.id,
            form_submission=form_submission_snapshot(submission),
            contact=contact_snapshot(contact),
            contact_id=contact.id if contact else None,
            entity_type="form_submission",
            entity_id=submission.id,
        ),
        background_tasks,
    )


async def trigger_inventory_low(dispatcher, item, workspace, *, background_tasks=None) -> None:
    await emit(
        dispatcher,
        AutomationTrigger.INVENTORY_LOW,
        EventContext(
            workspace_id=workspace.id,
            inventory_item=inventory_item_snapshot(item),
            entity_type="inventory_item",
            entity_id=item.id,
        ),
        background_tasks,
    )
