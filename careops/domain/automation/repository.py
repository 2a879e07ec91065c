"""Automation rule repository - Database operations for automation rules"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import AutomationRule, AutomationTrigger


class AutomationRuleRepository:
    """Repository for automation rule database operations"""

    @staticmethod
    def get_rules(db: Session, workspace_id: str) -> list[AutomationRule]:
        """Get all rules of a workspace, newest first"""
        return (
            db.query(AutomationRule)
            .filter(AutomationRule.workspace_id == workspace_id)
            .order_by(AutomationRule.created_at.desc())
            .all()
        )

    @staticmethod
    def get_rule(db: Session, rule_id: str, workspace_id: str) -> Optional[AutomationRule]:
        """Get a rule by ID, scoped to its workspace"""
        return (
            db.query(AutomationRule)
            .filter(AutomationRule.id == rule_id, AutomationRule.workspace_id == workspace_id)
            .first()
        )

    @staticmethod
    def find_active_rules(
        db: Session, workspace_id: str, trigger: AutomationTrigger
    ) -> list[AutomationRule]:
        """Active rules of one workspace subscribed to one trigger, in load order"""
        return (
            db.query(AutomationRule)
            .filter(
                AutomationRule.workspace_id == workspace_id,
                AutomationRule.trigger == AutomationTrigger(trigger).value,
                AutomationRule.is_active.is_(True),
            )
            .all()
        )

    @staticmethod
    def create_rule(db: Session, workspace_id: str, **rule_data) -> AutomationRule:
        """Create a new rule"""
        rule = AutomationRule(workspace_id=workspace_id, **rule_data)
        db.add(rule)
        db.commit()
        db.refresh(rule)
        return rule

    @staticmethod
    def create_many(db: Session, rules: list[dict]) -> list[AutomationRule]:
        """Bulk insert prepared rule rows"""
        created = [AutomationRule(**data) for data in rules]
        db.add_all(created)
        db.commit()
        return created

    @staticmethod
    def update_rule(db: Session, rule: AutomationRule, **updates) -> AutomationRule:
        """Update a rule with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(rule, key):
                setattr(rule, key, value)

        db.commit()
        db.refresh(rule)
        return rule

    @staticmethod
    def delete_rule(db: Session, rule: AutomationRule) -> None:
        """Delete a rule"""
        db.delete(rule)
        db.commit()

    @staticmethod
    def record_execution(db: Session, rule: AutomationRule) -> AutomationRule:
        """
        Stamp a successful run. Plain read-then-write: two concurrent
        dispatches of the same rule may both read the same count.
        """
        rule.last_executed_at = datetime.utcnow()
        rule.execution_count = (rule.execution_count or 0) + 1
        db.commit()
        return rule
