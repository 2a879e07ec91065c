"""Inventory domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import InventoryItem


class InventoryItemCreate(BaseModel):
    name: str
    description: Optional[str] = None
    sku: Optional[str] = None
    quantity: int = 0
    unit: str = "PIECE"
    lowStockThreshold: int = 0
    vendorName: Optional[str] = None
    vendorEmail: Optional[str] = None
    vendorPhone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Item name is required")
        return v.strip()

    @field_validator("quantity", "lowStockThreshold")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Quantities cannot be negative")
        return v


class QuantityUpdate(BaseModel):
    """Set an exact stock level"""

    quantity: int
    reason: Optional[str] = None
    bookingId: Optional[str] = None

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v):
        if v < 0:
            raise ValueError("Quantity cannot be negative")
        return v


class InventoryAdjustment(BaseModel):
    """Relative change: positive restocks, negative consumes"""

    adjustment: int
    reason: Optional[str] = None

    @field_validator("adjustment")
    @classmethod
    def validate_adjustment(cls, v):
        if v == 0:
            raise ValueError("Adjustment value is required")
        return v


class InventoryItemResponse(BaseModel):
    id: str
    workspaceId: str
    name: str
    description: Optional[str] = None
    sku: Optional[str] = None
    quantity: int
    unit: str
    lowStockThreshold: int
    isLowStock: bool
    vendorName: Optional[str] = None
    vendorEmail: Optional[str] = None
    vendorPhone: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_item(cls, item: InventoryItem) -> "InventoryItemResponse":
        return cls(
            id=item.id,
            workspaceId=item.workspace_id,
            name=item.name,
            description=item.description,
            sku=item.sku,
            quantity=item.quantity,
            unit=item.unit,
            lowStockThreshold=item.low_stock_threshold,
            isLowStock=item.quantity <= item.low_stock_threshold,
            vendorName=item.vendor_name,
            vendorEmail=item.vendor_email,
            vendorPhone=item.vendor_phone,
            createdAt=item.created_at,
        )


class InventoryListResponse(BaseModel):
    data: list[InventoryItemResponse]
    total: int
    page: int
    limit: int
