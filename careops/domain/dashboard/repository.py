"""Dashboard repository - Aggregate queries across a workspace"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Alert, Booking, Contact, Conversation, FormSubmission, InventoryItem, Message

# Statuses of bookings that are still going to happen
UPCOMING_STATUSES = ("PENDING", "CONFIRMED")


class DashboardRepository:
    """Read-only counts for the overview"""

    @staticmethod
    def count_bookings(
        db: Session,
        workspace_id: str,
        statuses: tuple[str, ...],
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> int:
        query = db.query(Booking).filter(Booking.workspace_id == workspace_id, Booking.status.in_(statuses))
        if start is not None:
            query = query.filter(Booking.scheduled_at >= start)
        if end is not None:
            query = query.filter(Booking.scheduled_at < end)
        return query.count()

    @staticmethod
    def count_contacts(db: Session, workspace_id: str, since: Optional[datetime] = None) -> int:
        query = db.query(Contact).filter(Contact.workspace_id == workspace_id)
        if since is not None:
            query = query.filter(Contact.created_at >= since)
        return query.count()

    @staticmethod
    def count_open_conversations(db: Session, workspace_id: str, unanswered_only: bool = False) -> int:
        query = db.query(Conversation).filter(
            Conversation.workspace_id == workspace_id, Conversation.status == "OPEN"
        )
        if unanswered_only:
            query = query.filter(
                Conversation.messages.any((Message.direction == "INBOUND") & (Message.is_read.is_(False)))
            )
        return query.count()

    @staticmethod
    def count_submissions(db: Session, workspace_id: str, status: str) -> int:
        return (
            db.query(FormSubmission)
            .filter(FormSubmission.workspace_id == workspace_id, FormSubmission.status == status)
            .count()
        )

    @staticmethod
    def low_stock_query(db: Session, workspace_id: str):
        return (
            db.query(InventoryItem)
            .filter(
                InventoryItem.workspace_id == workspace_id,
                InventoryItem.is_active.is_(True),
                InventoryItem.quantity <= InventoryItem.low_stock_threshold,
            )
            .order_by(InventoryItem.quantity.asc())
        )

    @staticmethod
    def count_active_alerts(db: Session, workspace_id: str, priority: Optional[str] = None) -> int:
        query = db.query(Alert).filter(Alert.workspace_id == workspace_id, Alert.status == "ACTIVE")
        if priority:
            query = query.filter(Alert.priority == priority)
        return query.count()

    @staticmethod
    def recent_active_alerts(db: Session, workspace_id: str, limit: int) -> list[Alert]:
        return (
            db.query(Alert)
            .filter(Alert.workspace_id == workspace_id, Alert.status == "ACTIVE")
            .order_by(Alert.created_at.desc())
            .limit(limit)
            .all()
        )
