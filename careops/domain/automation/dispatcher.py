"""
Trigger dispatcher: runs every active rule a workspace has for a trigger.

Rules run one after another in load order. A failing rule is logged and the
loop moves on; nothing is reported back to the caller.
"""

import logging
from typing import Callable, Union

from sqlalchemy.orm import Session

from ...models import AutomationTrigger
from .context import EventContext
from .executors import ActionExecutors, Broadcaster, EmailSender
from .repository import AutomationRuleRepository

logger = logging.getLogger(__name__)


class AutomationDispatcher:
    """Matches rules to a trigger and executes them with injected collaborators"""

    def __init__(
        self,
        db: Session,
        email_sender: EmailSender,
        broadcaster: Broadcaster,
        session_factory: Callable[[], Session],
    ):
        self.db = db
        self.email_sender = email_sender
        self.broadcaster = broadcaster
        self.session_factory = session_factory
        self.repo = AutomationRuleRepository()
        self.executors = ActionExecutors(db, email_sender, broadcaster)

    async def dispatch(self, trigger: Union[AutomationTrigger, str], context: EventContext) -> None:
        try:
            trigger = AutomationTrigger(trigger)
        except ValueError:
            logger.error(f"Unknown automation trigger: {trigger}")
            return

        try:
            rules = self.repo.find_active_rules(self.db, context.workspace_id, trigger)
        except Exception as e:
            logger.error(f"Error loading automation rules for {trigger.value}: {e}")
            self.db.rollback()
            return

        logger.info(f"Found {len(rules)} automation rules for trigger: {trigger.value}")

        for rule in rules:
            rule_id = rule.id
            try:
                await self.executors.execute(rule, context)
                self.repo.record_execution(self.db, rule)
            except Exception as e:
                self.db.rollback()
                logger.error(f"Error executing automation rule {rule_id}: {e}")

    async def dispatch_detached(self, trigger: Union[AutomationTrigger, str], context: EventContext) -> None:
        """Dispatch on a fresh session; used when the request session is already gone"""
        db = self.session_factory()
        try:
            dispatcher = AutomationDispatcher(db, self.email_sender, self.broadcaster, self.session_factory)
            await dispatcher.dispatch(trigger, context)
        finally:
            db.close()
