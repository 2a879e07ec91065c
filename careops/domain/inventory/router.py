"""Inventory router - FastAPI endpoints for stock items"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_permission
from ...database import get_db
from ...models import User
from ...realtime import ConnectionManager, get_broadcaster
from ..automation.dispatcher import AutomationDispatcher
from ..automation.triggers import get_automation_dispatcher
from .schemas import (
    InventoryAdjustment,
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryListResponse,
    QuantityUpdate,
)
from .service import InventoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["Inventory"])

can_manage_inventory = require_permission("canManageInventory")


def get_inventory_service(
    db: Session = Depends(get_db),
    dispatcher: AutomationDispatcher = Depends(get_automation_dispatcher),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
) -> InventoryService:
    """Dependency injection for InventoryService"""
    return InventoryService(db, dispatcher, broadcaster)


@router.get("", response_model=InventoryListResponse)
async def get_inventory_items(
    lowStock: bool = Query(False),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: InventoryService = Depends(get_inventory_service),
):
    items, total = service.get_items(current_user, lowStock, page, limit)
    return InventoryListResponse(
        data=[InventoryItemResponse.from_item(i) for i in items], total=total, page=page, limit=limit
    )


@router.post("", response_model=InventoryItemResponse, status_code=201)
async def create_inventory_item(
    data: InventoryItemCreate,
    current_user: User = Depends(can_manage_inventory),
    service: InventoryService = Depends(get_inventory_service),
):
    """Create an item; starting at or below threshold fires INVENTORY_LOW"""
    return InventoryItemResponse.from_item(await service.create_item(data, current_user))


@router.get("/{item_id}", response_model=InventoryItemResponse)
async def get_inventory_item(
    item_id: str,
    current_user: User = Depends(get_current_user),
    service: InventoryService = Depends(get_inventory_service),
):
    return InventoryItemResponse.from_item(service.get_item(item_id, current_user))


@router.put("/{item_id}/quantity", response_model=InventoryItemResponse)
async def update_quantity(
    item_id: str,
    data: QuantityUpdate,
    current_user: User = Depends(can_manage_inventory),
    service: InventoryService = Depends(get_inventory_service),
):
    return InventoryItemResponse.from_item(await service.update_quantity(item_id, data, current_user))


@router.post("/{item_id}/adjust", response_model=InventoryItemResponse)
async def adjust_inventory(
    item_id: str,
    data: InventoryAdjustment,
    current_user: User = Depends(can_manage_inventory),
    service: InventoryService = Depends(get_inventory_service),
):
    return InventoryItemResponse.from_item(await service.adjust(item_id, data, current_user))
