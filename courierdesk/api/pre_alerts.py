"""
Pre-alerts API endpoints (staff review).
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.core.security import Principal, require_staff
from courierdesk.database import get_db
from courierdesk.schemas.pre_alert import (
    PreAlertDecisionRequest,
    PreAlertResponse,
    PreAlertListResponse,
)
from courierdesk.services import pre_alert_service

router = APIRouter(prefix="/pre-alerts", tags=["Pre-alerts"])


@router.get(
    "",
    response_model=PreAlertListResponse,
    summary="List pre-alerts",
    description="Filter by status (submitted, approved, rejected). Newest first.",
)
async def list_pre_alerts(
    status_filter: Optional[str] = Query(None, alias="status"),
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> PreAlertListResponse:
    pre_alerts = await pre_alert_service.list_pre_alerts(db, status=status_filter)
    return PreAlertListResponse(
        pre_alerts=[PreAlertResponse.model_validate(p) for p in pre_alerts],
    )


@router.post(
    "/{pre_alert_id}/decision",
    response_model=PreAlertResponse,
    summary="Approve or reject a pre-alert",
    description="Only submitted pre-alerts can be decided; a second decision returns 409.",
)
async def decide_pre_alert(
    pre_alert_id: UUID,
    request: PreAlertDecisionRequest,
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> PreAlertResponse:
    pre_alert = await pre_alert_service.decide_pre_alert(
        db, pre_alert_id, request.status, request.note, actor=principal.actor
    )
    return PreAlertResponse.model_validate(pre_alert)
