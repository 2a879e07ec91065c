"""Automation service - Business logic for managing automation rules"""

import logging

from fastapi import HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from ...models import AutomationAction, AutomationRule, User
from .defaults import AUTOMATION_TEMPLATES, TEMPLATE_RULES
from .repository import AutomationRuleRepository
from .schemas import (
    AutomationRuleCreate,
    AutomationRuleUpdate,
    AutomationTemplateResponse,
    parse_rule_config,
)

logger = logging.getLogger(__name__)


class AutomationService:
    """Service layer for automation rule CRUD"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AutomationRuleRepository()

    def get_rules(self, user: User) -> list[AutomationRule]:
        return self.repo.get_rules(self.db, user.workspace_id)

    def get_rule(self, rule_id: str, user: User) -> AutomationRule:
        rule = self.repo.get_rule(self.db, rule_id, user.workspace_id)
        if not rule:
            raise HTTPException(status_code=404, detail="Automation rule not found")
        return rule

    def create_rule(self, data: AutomationRuleCreate, user: User) -> AutomationRule:
        rule = self.repo.create_rule(
            self.db,
            user.workspace_id,
            name=data.name,
            description=data.description,
            trigger=data.trigger.value,
            action=data.action.value,
            config=data.config,
            conditions=data.conditions or {},
            is_active=True,
        )
        logger.info(f"Automation rule created: {rule.id}")
        return rule

    def update_rule(self, rule_id: str, data: AutomationRuleUpdate, user: User) -> AutomationRule:
        rule = self.get_rule(rule_id, user)

        # Config must stay valid for whichever action the rule ends up with
        action = data.action or AutomationAction(rule.action)
        config = data.config if data.config is not None else rule.config
        if data.action is not None or data.config is not None:
            try:
                parse_rule_config(action, config)
            except ValidationError as e:
                raise HTTPException(
                    status_code=400, detail=f"Invalid config for {action.value}: {e.errors()}"
                ) from e

        updates = {
            "name": data.name,
            "description": data.description,
            "trigger": data.trigger.value if data.trigger else None,
            "action": data.action.value if data.action else None,
            "config": data.config,
            "conditions": data.conditions,
            "is_active": data.isActive,
        }
        rule = self.repo.update_rule(self.db, rule, **updates)
        logger.info(f"Automation rule updated: {rule.id}")
        return rule

    def toggle_rule(self, rule_id: str, user: User) -> AutomationRule:
        rule = self.get_rule(rule_id, user)
        rule.is_active = not rule.is_active
        self.db.commit()
        self.db.refresh(rule)
        logger.info(
            f"Automation rule {'activated' if rule.is_active else 'deactivated'}: {rule.id}"
        )
        return rule

    def delete_rule(self, rule_id: str, user: User) -> dict:
        rule = self.get_rule(rule_id, user)
        self.repo.delete_rule(self.db, rule)
        logger.info(f"Automation rule deleted: {rule_id}")
        return {"message": "Automation rule deleted successfully"}

    @staticmethod
    def get_templates() -> list[AutomationTemplateResponse]:
        return [AutomationTemplateResponse(**template) for template in AUTOMATION_TEMPLATES]

    def create_from_template(self, template_id: str, config: dict | None, user: User) -> AutomationRule:
        template = TEMPLATE_RULES.get(template_id)
        if not template:
            raise HTTPException(status_code=404, detail="Template not found")

        rule_config = config or dict(template["config"])
        try:
            parse_rule_config(template["action"], rule_config)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=f"Invalid config: {e.errors()}") from e

        rule = self.repo.create_rule(
            self.db,
            user.workspace_id,
            name=template["name"],
            description=f"Created from template: {template_id}",
            trigger=template["trigger"].value,
            action=template["action"].value,
            config=rule_config,
            conditions={},
            is_active=True,
        )
        logger.info(f"Automation rule created from template: {template_id}")
        return rule
