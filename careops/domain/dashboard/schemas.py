"""Dashboard schemas - The overview payload shown on the home screen"""

from pydantic import BaseModel

from ..alerts.schemas import AlertResponse
from ..inventory.schemas import InventoryItemResponse


class BookingStats(BaseModel):
    today: int
    upcoming: int
    completed: int
    noShow: int


class LeadStats(BaseModel):
    new: int
    total: int
    activeConversations: int
    unansweredMessages: int


class FormStats(BaseModel):
    pending: int
    overdue: int
    completed: int


class InventoryStats(BaseModel):
    lowStockItems: list[InventoryItemResponse]
    lowStockCount: int


class AlertStats(BaseModel):
    active: int
    critical: int
    recent: list[AlertResponse]


class DashboardOverview(BaseModel):
    bookings: BookingStats
    leads: LeadStats
    forms: FormStats
    inventory: InventoryStats
    alerts: AlertStats
