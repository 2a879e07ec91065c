"""Alert repository - Database operations for alerts"""

from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from ...models import Alert, AlertStatus


class AlertRepository:
    """Repository for alert database operations"""

    @staticmethod
    def create_alert(db: Session, workspace_id: str, **alert_data) -> Alert:
        """Persist a new alert"""
        alert = Alert(workspace_id=workspace_id, **alert_data)
        db.add(alert)
        db.commit()
        db.refresh(alert)
        return alert

    @staticmethod
    def get_alert(db: Session, alert_id: str, workspace_id: str) -> Optional[Alert]:
        """Get an alert by ID, scoped to its workspace"""
        return (
            db.query(Alert)
            .filter(Alert.id == alert_id, Alert.workspace_id == workspace_id)
            .first()
        )

    @staticmethod
    def get_alerts_by_ids(db: Session, alert_ids: list[str], workspace_id: str) -> list[Alert]:
        return (
            db.query(Alert)
            .filter(Alert.id.in_(alert_ids), Alert.workspace_id == workspace_id)
            .all()
        )

    @staticmethod
    def search_alerts(
        db: Session,
        workspace_id: str,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        alert_type: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Alert], int]:
        """Filter alerts: active first, then most severe, then newest"""
        query = db.query(Alert).filter(Alert.workspace_id == workspace_id)

        if status:
            query = query.filter(Alert.status == status)
        if priority:
            query = query.filter(Alert.priority == priority)
        if alert_type:
            query = query.filter(Alert.type == alert_type)

        total = query.count()

        status_rank = case(
            {"ACTIVE": 0, "ACKNOWLEDGED": 1, "RESOLVED": 2}, value=Alert.status, else_=3
        )
        priority_rank = case(
            {"CRITICAL": 0, "HIGH": 1, "MEDIUM": 2, "LOW": 3}, value=Alert.priority, else_=4
        )
        alerts = (
            query.order_by(status_rank, priority_rank, Alert.created_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return alerts, total

    @staticmethod
    def count_by_status(db: Session, workspace_id: str) -> dict[str, int]:
        rows = (
            db.query(Alert.status, func.count(Alert.id))
            .filter(Alert.workspace_id == workspace_id)
            .group_by(Alert.status)
            .all()
        )
        return {status: count for status, count in rows}

    @staticmethod
    def count_active_by_priority(db: Session, workspace_id: str) -> dict[str, int]:
        rows = (
            db.query(Alert.priority, func.count(Alert.id))
            .filter(Alert.workspace_id == workspace_id, Alert.status == AlertStatus.ACTIVE.value)
            .group_by(Alert.priority)
            .all()
        )
        return {priority: count for priority, count in rows}

    @staticmethod
    def save(db: Session, alert: Alert) -> Alert:
        db.commit()
        db.refresh(alert)
        return alert

    @staticmethod
    def delete_alert(db: Session, alert: Alert) -> None:
        db.delete(alert)
        db.commit()
