"""Alert service - Business logic for the operational alert inbox"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Alert, AlertPriority, AlertStatus, User
from ...realtime import ConnectionManager
from .repository import AlertRepository
from .schemas import AlertCreate, AlertResponse, AlertSummary

logger = logging.getLogger(__name__)


class AlertService:
    """Service layer for alerts; every mutation is pushed to the workspace room"""

    def __init__(self, db: Session, broadcaster: ConnectionManager):
        self.db = db
        self.broadcaster = broadcaster
        self.repo = AlertRepository()

    async def _emit(self, workspace_id: str, event: str, alert: Alert) -> None:
        await self.broadcaster.emit_to_workspace(
            workspace_id, event, AlertResponse.from_alert(alert).model_dump()
        )

    def get_alerts(
        self,
        user: User,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        alert_type: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Alert], int]:
        skip = (page - 1) * limit
        return self.repo.search_alerts(
            self.db, user.workspace_id, status, priority, alert_type, skip, limit
        )

    def get_summary(self, user: User) -> AlertSummary:
        by_status = self.repo.count_by_status(self.db, user.workspace_id)
        by_priority = self.repo.count_active_by_priority(self.db, user.workspace_id)
        return AlertSummary(
            byStatus={s.value.lower(): by_status.get(s.value, 0) for s in AlertStatus},
            byPriority={
                p.value.lower(): by_priority.get(p.value, 0) for p in reversed(list(AlertPriority))
            },
            total=sum(by_status.get(s.value, 0) for s in AlertStatus),
        )

    def get_alert(self, alert_id: str, user: User) -> Alert:
        alert = self.repo.get_alert(self.db, alert_id, user.workspace_id)
        if not alert:
            raise HTTPException(status_code=404, detail="Alert not found")
        return alert

    async def create_alert(self, data: AlertCreate, user: User) -> Alert:
        alert = self.repo.create_alert(
            self.db,
            user.workspace_id,
            type=data.type.value,
            priority=data.priority.value,
            status=AlertStatus.ACTIVE.value,
            title=data.title,
            message=data.message,
            entity_type=data.entityType,
            entity_id=data.entityId,
            action_url=data.actionUrl,
        )
        await self._emit(user.workspace_id, "alert:created", alert)
        logger.info(f"Alert created: {alert.id}")
        return alert

    async def acknowledge_alert(self, alert_id: str, user: User) -> Alert:
        alert = self.get_alert(alert_id, user)
        if alert.status != AlertStatus.ACTIVE.value:
            raise HTTPException(status_code=400, detail="Only active alerts can be acknowledged")

        alert.status = AlertStatus.ACKNOWLEDGED.value
        alert.acknowledged_at = datetime.utcnow()
        alert.acknowledged_by = user.id
        alert = self.repo.save(self.db, alert)

        await self._emit(user.workspace_id, "alert:acknowledged", alert)
        logger.info(f"Alert acknowledged: {alert.id} by user {user.id}")
        return alert

    async def resolve_alert(self, alert_id: str, user: User) -> Alert:
        alert = self.get_alert(alert_id, user)
        now = datetime.utcnow()

        # Resolving straight from ACTIVE also counts as acknowledging it
        if alert.status == AlertStatus.ACTIVE.value:
            alert.acknowledged_at = now
            alert.acknowledged_by = user.id
        alert.status = AlertStatus.RESOLVED.value
        alert.resolved_at = now
        alert = self.repo.save(self.db, alert)

        await self._emit(user.workspace_id, "alert:resolved", alert)
        logger.info(f"Alert resolved: {alert.id} by user {user.id}")
        return alert

    async def delete_alert(self, alert_id: str, user: User) -> dict:
        alert = self.get_alert(alert_id, user)
        self.repo.delete_alert(self.db, alert)
        await self.broadcaster.emit_to_workspace(user.workspace_id, "alert:deleted", {"id": alert_id})
        return {"message": "Alert deleted successfully"}

    def _load_bulk(self, alert_ids: list[str], user: User) -> list[Alert]:
        alerts = self.repo.get_alerts_by_ids(self.db, alert_ids, user.workspace_id)
        if len(alerts) != len(set(alert_ids)):
            raise HTTPException(status_code=400, detail="Some alerts not found or unauthorized")
        return alerts

    async def bulk_acknowledge(self, alert_ids: list[str], user: User) -> dict:
        now = datetime.utcnow()
        count = 0
        for alert in self._load_bulk(alert_ids, user):
            if alert.status == AlertStatus.ACTIVE.value:
                alert.status = AlertStatus.ACKNOWLEDGED.value
                alert.acknowledged_at = now
                alert.acknowledged_by = user.id
                count += 1
        self.db.commit()

        await self.broadcaster.emit_to_workspace(
            user.workspace_id, "alerts:bulk-acknowledged", {"count": count, "alertIds": alert_ids}
        )
        return {"message": f"{count} alert(s) acknowledged", "count": count}

    async def bulk_resolve(self, alert_ids: list[str], user: User) -> dict:
        now = datetime.utcnow()
        count = 0
        for alert in self._load_bulk(alert_ids, user):
            if alert.status != AlertStatus.RESOLVED.value:
                alert.status = AlertStatus.RESOLVED.value
                alert.resolved_at = now
                count += 1
        self.db.commit()

        await self.broadcaster.emit_to_workspace(
            user.workspace_id, "alerts:bulk-resolved", {"count": count, "alertIds": alert_ids}
        )
        return {"message": f"{count} alert(s) resolved", "count": count}
