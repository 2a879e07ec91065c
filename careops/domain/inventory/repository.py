"""Inventory repository - Database operations for stock items and usage log"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import InventoryItem, InventoryUsage


class InventoryRepository:
    """Repository for inventory database operations"""

    @staticmethod
    def get_item(db: Session, item_id: str, workspace_id: str) -> Optional[InventoryItem]:
        return (
            db.query(InventoryItem)
            .filter(InventoryItem.id == item_id, InventoryItem.workspace_id == workspace_id)
            .first()
        )

    @staticmethod
    def search_items(
        db: Session,
        workspace_id: str,
        low_stock: bool = False,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[InventoryItem], int]:
        """Active items by name; the low-stock view lists the emptiest first"""
        query = db.query(InventoryItem).filter(
            InventoryItem.workspace_id == workspace_id, InventoryItem.is_active.is_(True)
        )
        if low_stock:
            query = query.filter(InventoryItem.quantity <= InventoryItem.low_stock_threshold)
            order = InventoryItem.quantity.asc()
        else:
            order = InventoryItem.name.asc()

        total = query.count()
        items = query.order_by(order).offset(skip).limit(limit).all()
        return items, total

    @staticmethod
    def create_item(db: Session, workspace_id: str, **data) -> InventoryItem:
        item = InventoryItem(workspace_id=workspace_id, **data)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def set_quantity(
        db: Session,
        item: InventoryItem,
        quantity: int,
        reason: Optional[str] = None,
        booking_id: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> InventoryItem:
        """Write the new level and log the signed delta in one commit"""
        delta = quantity - item.quantity
        item.quantity = quantity
        db.add(
            InventoryUsage(
                inventory_item_id=item.id,
                quantity=delta,
                reason=reason,
                booking_id=booking_id,
                created_by=created_by,
            )
        )
        db.commit()
        db.refresh(item)
        return item
