"""Alert router - FastAPI endpoints for alerts"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import AlertPriority, AlertStatus, AlertType, User
from ...realtime import ConnectionManager, get_broadcaster
from .schemas import AlertCreate, AlertListResponse, AlertResponse, AlertSummary, BulkAlertRequest
from .service import AlertService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alerts", tags=["Alerts"])


def get_alert_service(
    db: Session = Depends(get_db),
    broadcaster: ConnectionManager = Depends(get_broadcaster),
) -> AlertService:
    """Dependency injection for AlertService"""
    return AlertService(db, broadcaster)


@router.get("", response_model=AlertListResponse)
async def get_alerts(
    status: Optional[AlertStatus] = Query(None),
    priority: Optional[AlertPriority] = Query(None),
    type: Optional[AlertType] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    service: AlertService = Depends(get_alert_service),
):
    """List alerts: active first, then most severe, then newest"""
    alerts, total = service.get_alerts(
        current_user,
        status.value if status else None,
        priority.value if priority else None,
        type.value if type else None,
        page,
        limit,
    )
    return AlertListResponse(
        data=[AlertResponse.from_alert(a) for a in alerts], total=total, page=page, limit=limit
    )


@router.get("/summary", response_model=AlertSummary)
async def get_alerts_summary(
    current_user: User = Depends(get_current_user),
    service: AlertService = Depends(get_alert_service),
):
    return service.get_summary(current_user)


# Bulk routes are declared before /{alert_id} so the literal path wins
@router.put("/bulk/acknowledge")
async def bulk_acknowledge(
    data: BulkAlertRequest,
    current_user: User = Depends(get_current_user),
    service: AlertService = Depends(get_alert_service),
):
    return await service.bulk_acknowledge(data.alertIds, current_user)


@router.put("/bulk/resolve")
async def bulk_resolve(
    data: BulkAlertRequest,
    current_user: User = Depends(get_current_user),
    service: AlertService = Depends(get_alert_service),
):
    return await service.bulk_resolve(data.alertIds, current_user)


@router.get("/{alert_id}", response_model=AlertResponse)
async def get_alert(
    alert_id: str,
    current_user: User = Depends(get_current_user),
    service: AlertService = Depends(get_alert_service),
):
    return AlertResponse.from_alert(service.get_alert(alert_id, current_user))


@router.post("", response_model=AlertResponse, status_code=201)
async def create_alert(
    data: AlertCreate,
    current_user: User = Depends(get_current_user),
    service: AlertService = Depends(get_alert_service),
):
    """Create a manual alert"""
    return AlertResponse.from_alert(await service.create_alert(data, current_user))


@router.put("/{alert_id}/acknowledge", response_model=AlertResponse)
async def acknowledge_alert(
    alert_id: str,
    current_user: User = Depends(get_current_user),
    service: AlertService = Depends(get_alert_service),
):
    return AlertResponse.from_alert(await service.acknowledge_alert(alert_id, current_user))


@router.put("/{alert_id}/resolve", response_model=AlertResponse)
async def resolve_alert(
    alert_id: str,
    current_user: User = Depends(get_current_user),
    service: AlertService = Depends(get_alert_service),
):
    return AlertResponse.from_alert(await service.resolve_alert(alert_id, current_user))


@router.delete("/{alert_id}")
async def delete_alert(
    alert_id: str,
    current_user: User = Depends(get_current_user),
    service: AlertService = Depends(get_alert_service),
):
    return await service.delete_alert(alert_id, current_user)
