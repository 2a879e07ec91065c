"""Automation domain schemas - Pydantic models for rules and per-action config"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from ...models import AlertPriority, AutomationAction, AutomationRule, AutomationTrigger
from ..contacts.schemas import CONTACT_STATUSES

# ============================================================================
# PER-ACTION CONFIG SHAPES
# ============================================================================


class EmailConfig(BaseModel):
    """SEND_EMAIL: subject and HTML body, both may carry {{placeholders}}"""

    model_config = ConfigDict(extra="allow")

    subject: str
    template: str


class SmsConfig(BaseModel):
    """SEND_SMS: accepted and stored, not delivered yet"""

    model_config = ConfigDict(extra="allow")

    message: Optional[str] = None


class AlertConfig(BaseModel):
    """CREATE_ALERT: fields copied onto the created alert"""

    model_config = ConfigDict(extra="allow")

    alertType: str
    priority: AlertPriority = AlertPriority.MEDIUM
    title: str
    message: str


class StatusConfig(BaseModel):
    """UPDATE_STATUS: only entityType 'contact' has an effect"""

    model_config = ConfigDict(extra="allow")

    entityType: str
    status: str

    @model_validator(mode="after")
    def validate_contact_status(self):
        if self.entityType == "contact" and self.status not in CONTACT_STATUSES:
            raise ValueError(f"Contact status must be one of: {', '.join(CONTACT_STATUSES)}")
        return self


CONFIG_MODELS: dict[AutomationAction, type[BaseModel]] = {
    AutomationAction.SEND_EMAIL: EmailConfig,
    AutomationAction.SEND_SMS: SmsConfig,
    AutomationAction.CREATE_ALERT: AlertConfig,
    AutomationAction.UPDATE_STATUS: StatusConfig,
}


def parse_rule_config(action: AutomationAction, config: Optional[dict]) -> BaseModel:
    """Validate a raw config blob against the shape its action expects"""
    return CONFIG_MODELS[AutomationAction(action)].model_validate(config or {})


# ============================================================================
# RULE CRUD
# ============================================================================


class AutomationRuleCreate(BaseModel):
    """Schema for creating an automation rule"""

    name: str
    description: Optional[str] = None
    trigger: AutomationTrigger
    action: AutomationAction
    config: dict[str, Any]
    conditions: Optional[dict[str, Any]] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Rule name is required")
        return v.strip()

    @model_validator(mode="after")
    def validate_config_for_action(self):
        parse_rule_config(self.action, self.config)
        return self


class AutomationRuleUpdate(BaseModel):
    """Schema for updating a rule; config is revalidated by the service"""

    name: Optional[str] = None
    description: Optional[str] = None
    trigger: Optional[AutomationTrigger] = None
    action: Optional[AutomationAction] = None
    config: Optional[dict[str, Any]] = None
    conditions: Optional[dict[str, Any]] = None
    isActive: Optional[bool] = None


class AutomationRuleResponse(BaseModel):
    """Schema for automation rule response"""

    id: str
    workspaceId: str
    name: str
    description: Optional[str] = None
    trigger: str
    action: str
    config: dict[str, Any]
    conditions: dict[str, Any]
    isActive: bool
    executionCount: int
    lastExecutedAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_rule(cls, rule: AutomationRule) -> "AutomationRuleResponse":
        return cls(
            id=rule.id,
            workspaceId=rule.workspace_id,
            name=rule.name,
            description=rule.description,
            trigger=rule.trigger,
            action=rule.action,
            config=rule.config or {},
            conditions=rule.conditions or {},
            isActive=rule.is_active,
            executionCount=rule.execution_count or 0,
            lastExecutedAt=rule.last_executed_at,
            createdAt=rule.created_at,
        )


class AutomationTemplateResponse(BaseModel):
    """Catalogue entry shown in the dashboard's template picker"""

    id: str
    name: str
    description: str
    trigger: AutomationTrigger
    action: AutomationAction
    config: dict[str, Any]


class CreateFromTemplateRequest(BaseModel):
    """Optional config override when instantiating a template"""

    config: Optional[dict[str, Any]] = None
