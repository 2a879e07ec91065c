"""Automation router - FastAPI endpoints for automation rules"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_owner
from ...database import get_db
from ...models import User
from .schemas import (
    AutomationRuleCreate,
    AutomationRuleResponse,
    AutomationRuleUpdate,
    AutomationTemplateResponse,
    CreateFromTemplateRequest,
)
from .service import AutomationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/automation", tags=["Automation"])


def get_automation_service(db: Session = Depends(get_db)) -> AutomationService:
    """Dependency injection for AutomationService"""
    return AutomationService(db)


# ============================================================================
# TEMPLATES
# ============================================================================


@router.get("/templates/list", response_model=list[AutomationTemplateResponse])
async def list_templates(current_user: User = Depends(get_current_user)):
    """Catalogue of prebuilt rules shown in the dashboard"""
    return AutomationService.get_templates()


@router.post("/templates/{template_id}", response_model=AutomationRuleResponse, status_code=201)
async def create_from_template(
    template_id: str,
    data: CreateFromTemplateRequest | None = None,
    current_user: User = Depends(require_owner),
    service: AutomationService = Depends(get_automation_service),
):
    """Instantiate a rule from a catalogue template"""
    rule = service.create_from_template(template_id, data.config if data else None, current_user)
    return AutomationRuleResponse.from_rule(rule)


# ============================================================================
# RULE CRUD
# ============================================================================


@router.get("", response_model=list[AutomationRuleResponse])
async def get_rules(
    current_user: User = Depends(get_current_user),
    service: AutomationService = Depends(get_automation_service),
):
    """Get all automation rules for the workspace, newest first"""
    return [AutomationRuleResponse.from_rule(r) for r in service.get_rules(current_user)]


@router.get("/{rule_id}", response_model=AutomationRuleResponse)
async def get_rule(
    rule_id: str,
    current_user: User = Depends(get_current_user),
    service: AutomationService = Depends(get_automation_service),
):
    return AutomationRuleResponse.from_rule(service.get_rule(rule_id, current_user))


@router.post("", response_model=AutomationRuleResponse, status_code=201)
async def create_rule(
    data: AutomationRuleCreate,
    current_user: User = Depends(require_owner),
    service: AutomationService = Depends(get_automation_service),
):
    """Create a new automation rule (owner only)"""
    return AutomationRuleResponse.from_rule(service.create_rule(data, current_user))


@router.put("/{rule_id}", response_model=AutomationRuleResponse)
async def update_rule(
    rule_id: str,
    data: AutomationRuleUpdate,
    current_user: User = Depends(require_owner),
    service: AutomationService = Depends(get_automation_service),
):
    return AutomationRuleResponse.from_rule(service.update_rule(rule_id, data, current_user))


@router.put("/{rule_id}/toggle", response_model=AutomationRuleResponse)
async def toggle_rule(
    rule_id: str,
    current_user: User = Depends(require_owner),
    service: AutomationService = Depends(get_automation_service),
):
    """Flip a rule between active and inactive"""
    return AutomationRuleResponse.from_rule(service.toggle_rule(rule_id, current_user))


@router.delete("/{rule_id}")
async def delete_rule(
    rule_id: str,
    current_user: User = Depends(require_owner),
    service: AutomationService = Depends(get_automation_service),
):
    return service.delete_rule(rule_id, current_user)
