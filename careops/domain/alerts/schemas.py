"""Alert domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import Alert, AlertPriority, AlertType


class AlertCreate(BaseModel):
    """Schema for a manually created alert"""

    type: AlertType
    priority: AlertPriority = AlertPriority.MEDIUM
    title: str
    message: str
    entityType: Optional[str] = None
    entityId: Optional[str] = None
    actionUrl: Optional[str] = None

    @field_validator("title", "message")
    @classmethod
    def validate_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Alert title and message are required")
        return v


class BulkAlertRequest(BaseModel):
    """Schema for bulk acknowledge/resolve"""

    alertIds: list[str]

    @field_validator("alertIds")
    @classmethod
    def validate_ids(cls, v):
        if not v:
            raise ValueError("Alert IDs array is required")
        return v


class AlertResponse(BaseModel):
    """Schema for alert response"""

    id: str
    workspaceId: str
    type: str
    priority: str
    status: str
    title: str
    message: str
    entityType: Optional[str] = None
    entityId: Optional[str] = None
    actionUrl: Optional[str] = None
    acknowledgedAt: Optional[datetime] = None
    acknowledgedBy: Optional[str] = None
    resolvedAt: Optional[datetime] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_alert(cls, alert: Alert) -> "AlertResponse":
        return cls(
            id=alert.id,
            workspaceId=alert.workspace_id,
            type=alert.type,
            priority=alert.priority,
            status=alert.status,
            title=alert.title,
            message=alert.message,
            entityType=alert.entity_type,
            entityId=alert.entity_id,
            actionUrl=alert.action_url,
            acknowledgedAt=alert.acknowledged_at,
            acknowledgedBy=alert.acknowledged_by,
            resolvedAt=alert.resolved_at,
            createdAt=alert.created_at,
        )


class AlertListResponse(BaseModel):
    data: list[AlertResponse]
    total: int
    page: int
    limit: int


class AlertSummary(BaseModel):
    byStatus: dict[str, int]
    byPriority: dict[str, int]
    total: int
