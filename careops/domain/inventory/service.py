"""Inventory service - Stock levels, usage log and low-stock automation"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...email_service import send_inventory_alert
from ...models import InventoryItem, User, Workspace
from ...realtime import ConnectionManager
from ..automation.dispatcher import AutomationDispatcher
from ..automation.triggers import trigger_inventory_low
from .repository import InventoryRepository
from .schemas import (
    InventoryAdjustment,
    InventoryItemCreate,
    InventoryItemResponse,
    QuantityUpdate,
)

logger = logging.getLogger(__name__)


def crossed_low_stock(previous_quantity: int, item: InventoryItem) -> bool:
    """True only on the transition from above the threshold to at-or-below it"""
    threshold = item.low_stock_threshold
    return previous_quantity > threshold and item.quantity <= threshold


class InventoryService:
    """Service layer for inventory business logic"""

    def __init__(self, db: Session, dispatcher: AutomationDispatcher, broadcaster: ConnectionManager):
        self.db = db
        self.dispatcher = dispatcher
        self.broadcaster = broadcaster
        self.repo = InventoryRepository()

    def get_items(
        self, user: User, low_stock: bool = False, page: int = 1, limit: int = 20
    ) -> tuple[list[InventoryItem], int]:
        return self.repo.search_items(self.db, user.workspace_id, low_stock, (page - 1) * limit, limit)

    def get_item(self, item_id: str, user: User) -> InventoryItem:
        item = self.repo.get_item(self.db, item_id, user.workspace_id)
        if not item:
            raise HTTPException(status_code=404, detail="Inventory item not found")
        return item

    async def create_item(self, data: InventoryItemCreate, user: User) -> InventoryItem:
        item = self.repo.create_item(
            self.db,
            user.workspace_id,
            name=data.name,
            description=data.description,
            sku=data.sku,
            quantity=data.quantity,
            unit=data.unit,
            low_stock_threshold=data.lowStockThreshold,
            vendor_name=data.vendorName,
            vendor_email=data.vendorEmail,
            vendor_phone=data.vendorPhone,
            is_active=True,
        )

        workspace = self.db.get(Workspace, user.workspace_id)
        workspace.inventory_setup = True
        self.db.commit()
        logger.info(f"Inventory item created: {item.id}")

        if item.quantity <= item.low_stock_threshold:
            await trigger_inventory_low(self.dispatcher, item, workspace)
        return item

    async def _after_change(self, previous_quantity: int, item: InventoryItem, event: str) -> None:
        workspace = self.db.get(Workspace, item.workspace_id)

        if crossed_low_stock(previous_quantity, item):
            logger.info(f"Inventory item {item.id} dropped to {item.quantity} (threshold {item.low_stock_threshold})")
            await trigger_inventory_low(self.dispatcher, item, workspace)
            try:
                await send_inventory_alert(item, workspace, sender=self.dispatcher.email_sender)
            except Exception as e:
                logger.error(f"Inventory alert email failed for item {item.id}: {e}")

        await self.broadcaster.emit_to_workspace(
            workspace.id, event, InventoryItemResponse.from_item(item).model_dump()
        )

    async def update_quantity(self, item_id: str, data: QuantityUpdate, user: User) -> InventoryItem:
        """Set an exact quantity; the usage log records the difference"""
        item = self.get_item(item_id, user)
        previous = item.quantity
        item = self.repo.set_quantity(
            self.db,
            item,
            data.quantity,
            reason=data.reason or "Manual set adjustment",
            booking_id=data.bookingId,
            created_by=user.id,
        )
        await self._after_change(previous, item, "inventory:updated")
        return item

    async def adjust(self, item_id: str, data: InventoryAdjustment, user: User) -> InventoryItem:
        item = self.get_item(item_id, user)
        previous = item.quantity
        new_quantity = previous + data.adjustment
        if new_quantity < 0:
            raise HTTPException(status_code=400, detail="Cannot reduce inventory below zero")

        item = self.repo.set_quantity(
            self.db, item, new_quantity, reason=data.reason, created_by=user.id
        )
        await self._after_change(previous, item, "inventory:adjusted")
        return item
