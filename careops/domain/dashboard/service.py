"""Dashboard service - Builds the workspace overview"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...models import User
from ..alerts.schemas import AlertResponse
from ..inventory.schemas import InventoryItemResponse
from .repository import UPCOMING_STATUSES, DashboardRepository
from .schemas import AlertStats, BookingStats, DashboardOverview, FormStats, InventoryStats, LeadStats

logger = logging.getLogger(__name__)

LOW_STOCK_PREVIEW = 5
RECENT_ALERTS = 10


class DashboardService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = DashboardRepository()

    def get_overview(self, user: User, now: Optional[datetime] = None) -> DashboardOverview:
        """
        Snapshot of one workspace. Days are UTC calendar days, matching how
        booking times are stored. The low-stock count covers every item; the
        list is a preview of the lowest ones.
        """
        workspace_id = user.workspace_id
        now = now or datetime.utcnow()
        today = datetime(now.year, now.month, now.day)

        bookings = BookingStats(
            today=self.repo.count_bookings(
                self.db, workspace_id, UPCOMING_STATUSES, today, today + timedelta(days=1)
            ),
            upcoming=self.repo.count_bookings(
                self.db, workspace_id, UPCOMING_STATUSES, today, today + timedelta(days=7)
            ),
            completed=self.repo.count_bookings(self.db, workspace_id, ("COMPLETED",)),
            noShow=self.repo.count_bookings(self.db, workspace_id, ("NO_SHOW",)),
        )

        leads = LeadStats(
            new=self.repo.count_contacts(self.db, workspace_id, since=now - timedelta(days=7)),
            total=self.repo.count_contacts(self.db, workspace_id),
            activeConversations=self.repo.count_open_conversations(self.db, workspace_id),
            unansweredMessages=self.repo.count_open_conversations(self.db, workspace_id, unanswered_only=True),
        )

        forms = FormStats(
            pending=self.repo.count_submissions(self.db, workspace_id, "PENDING"),
            overdue=self.repo.count_submissions(self.db, workspace_id, "OVERDUE"),
            completed=self.repo.count_submissions(self.db, workspace_id, "COMPLETED"),
        )

        low_stock = self.repo.low_stock_query(self.db, workspace_id)
        inventory = InventoryStats(
            lowStockItems=[InventoryItemResponse.from_item(i) for i in low_stock.limit(LOW_STOCK_PREVIEW).all()],
            lowStockCount=low_stock.count(),
        )

        alerts = AlertStats(
            active=self.repo.count_active_alerts(self.db, workspace_id),
            critical=self.repo.count_active_alerts(self.db, workspace_id, priority="CRITICAL"),
            recent=[
                AlertResponse.from_alert(a)
                for a in self.repo.recent_active_alerts(self.db, workspace_id, RECENT_ALERTS)
            ],
        )

        logger.debug(f"Dashboard overview built for workspace {workspace_id}")
        return DashboardOverview(bookings=bookings, leads=leads, forms=forms, inventory=inventory, alerts=alerts)
