"""
Action executors for automation rules.

One handler per AutomationAction; the table in ActionExecutors maps the
rule's action tag to its handler. Each handler performs a single side effect.
"""

import logging
from typing import Any, Awaitable, Callable, Optional, Protocol

from sqlalchemy.orm import Session

from ...models import (
    Alert,
    AlertStatus,
    AutomationAction,
    AutomationRule,
    Contact,
    Workspace,
)
from ..alerts.repository import AlertRepository
from ..alerts.schemas import AlertResponse
from .context import EventContext
from .schemas import AlertConfig, EmailConfig, SmsConfig, StatusConfig, parse_rule_config
from .templating import build_placeholder_values, substitute

logger = logging.getLogger(__name__)

# send_email(to=..., subject=..., html=...) -> awaitable
EmailSender = Callable[..., Awaitable[Any]]


class Broadcaster(Protocol):
    async def emit_to_workspace(self, workspace_id: str, event: str, payload: Any) -> Any: ...


class ActionExecutors:
    """Runs the side effect selected by a rule's action"""

    def __init__(self, db: Session, email_sender: EmailSender, broadcaster: Broadcaster):
        self.db = db
        self.email_sender = email_sender
        self.broadcaster = broadcaster
        self._handlers = {
            AutomationAction.SEND_EMAIL: self.send_email,
            AutomationAction.SEND_SMS: self.send_sms,
            AutomationAction.CREATE_ALERT: self.create_alert,
            AutomationAction.UPDATE_STATUS: self.update_status,
        }

    async def execute(self, rule: AutomationRule, context: EventContext) -> Any:
        """Validate the rule's config for its action and run the handler"""
        try:
            action = AutomationAction(rule.action)
        except ValueError:
            logger.warning(f"Unknown automation action: {rule.action}")
            return None

        config = parse_rule_config(action, rule.config)
        return await self._handlers[action](rule, config, context)

    async def send_email(self, rule: AutomationRule, config: EmailConfig, context: EventContext) -> None:
        recipient = (context.contact or {}).get("email")
        if not recipient:
            logger.warning(f"No email recipient found for automation rule: {rule.id}")
            return

        workspace = self.db.get(Workspace, context.workspace_id)
        values = build_placeholder_values(context, workspace.business_name if workspace else None)

        await self.email_sender(
            to=recipient,
            subject=substitute(config.subject, values),
            html=substitute(config.template, values),
        )
        logger.info(f"Automated email sent to {recipient} (rule {rule.id})")

    async def send_sms(self, rule: AutomationRule, config: SmsConfig, context: EventContext) -> None:
        # No SMS provider is wired in; the rule still counts as executed
        logger.info(f"SMS automation triggered for rule {rule.id} (not yet implemented)")

    async def create_alert(
        self, rule: AutomationRule, config: AlertConfig, context: EventContext
    ) -> Alert:
        alert = AlertRepository.create_alert(
            self.db,
            context.workspace_id,
            type=config.alertType,
            priority=config.priority.value,
            status=AlertStatus.ACTIVE.value,
            title=config.title,
            message=config.message,
            entity_type=context.entity_type,
            entity_id=context.entity_id,
        )

        await self.broadcaster.emit_to_workspace(
            context.workspace_id, "alert:created", AlertResponse.from_alert(alert).model_dump()
        )
        logger.info(f"Alert created: {alert.title} (rule {rule.id})")
        return alert

    async def update_status(
        self, rule: AutomationRule, config: StatusConfig, context: EventContext
    ) -> Optional[Contact]:
        if config.entityType != "contact" or not context.contact_id:
            logger.debug(
                f"Status update skipped for rule {rule.id}: entityType={config.entityType}, "
                f"contactId={context.contact_id}"
            )
            return None

        contact = (
            self.db.query(Contact)
            .filter(Contact.id == context.contact_id, Contact.workspace_id == context.workspace_id)
            .first()
        )
        if not contact:
            logger.debug(f"Contact {context.contact_id} not found for status update (rule {rule.id})")
            return None

        contact.status = config.status
        self.db.commit()
        logger.info(f"Status updated for contact {contact.id}: {config.status}")
        return contact
