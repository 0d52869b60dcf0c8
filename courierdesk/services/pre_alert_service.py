"""
Pre-alert service.
Customers announce incoming parcels; staff approve or reject them, and
intake links a matching pre-alert to the received package.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.core.errors import ConflictError, NotFoundError, RequestValidationFailed
from courierdesk.database import utcnow
from courierdesk.models import Package, PreAlert, PreAlertStatus
from courierdesk.schemas.pre_alert import PreAlertCreateRequest

logger = logging.getLogger(__name__)


async def submit_pre_alert(
    db: AsyncSession,
    user_code: str,
    data: PreAlertCreateRequest,
) -> PreAlert:
    pre_alert = PreAlert(
        user_code=user_code,
        tracking_number=data.tracking_number,
        carrier=data.carrier,
        origin=data.origin,
        expected_date=data.expected_date,
        notes=data.notes,
    )
    db.add(pre_alert)
    await db.commit()
    logger.info("Pre-alert %s submitted by %s", pre_alert.tracking_number, user_code)
    return pre_alert


async def list_customer_pre_alerts(db: AsyncSession, user_code: str) -> List[PreAlert]:
    result = await db.execute(
        select(PreAlert)
        .where(PreAlert.user_code == user_code)
        .order_by(PreAlert.created_at.desc())
    )
    return list(result.scalars().all())


async def list_pre_alerts(
    db: AsyncSession,
    status: Optional[str] = None,
    limit: int = 200,
) -> List[PreAlert]:
    """
    Staff view of pre-alerts, newest first.
    
    Raises:
        RequestValidationFailed: status is not a pre-alert status
    """
    query = select(PreAlert)
    if status:
        try:
            query = query.where(PreAlert.status == PreAlertStatus(status.strip().lower()))
        except ValueError:
            raise RequestValidationFailed(f"Unknown pre-alert status '{status}'")
    result = await db.execute(query.order_by(PreAlert.created_at.desc()).limit(limit))
    return list(result.scalars().all())


async def decide_pre_alert(
    db: AsyncSession,
    pre_alert_id: UUID,
    status: str,
    note: Optional[str],
    actor: str,
) -> PreAlert:
    """
    Approve or reject a submitted pre-alert.
    
    Raises:
        NotFoundError: no such pre-alert
        ConflictError: the pre-alert was already decided
    """
    result = await db.execute(select(PreAlert).where(PreAlert.id == pre_alert_id))
    pre_alert = result.scalar_one_or_none()
    if not pre_alert:
        raise NotFoundError(f"Pre-alert {pre_alert_id} not found")
    if pre_alert.status != PreAlertStatus.SUBMITTED:
        raise ConflictError(f"Pre-alert is already {pre_alert.status.value}")
    
    pre_alert.status = PreAlertStatus(status)
    pre_alert.decision_note = note
    pre_alert.decided_by = actor
    pre_alert.decided_at = utcnow()
    await db.commit()
    logger.info("Pre-alert %s %s by %s", pre_alert.id, pre_alert.status.value, actor)
    return pre_alert


async def link_pre_alert(db: AsyncSession, package: Package) -> Optional[PreAlert]:
    """
    Attach the newest open pre-alert for the package's tracking number and
    customer. Rejected and already-linked pre-alerts are skipped. The caller commits.
    """
    result = await db.execute(
        select(PreAlert)
        .where(
            func.upper(PreAlert.tracking_number) == package.tracking_number.upper(),
            PreAlert.user_code == package.user_code,
            PreAlert.status != PreAlertStatus.REJECTED,
            PreAlert.package_id.is_(None),
        )
        .order_by(PreAlert.created_at.desc())
        .limit(1)
    )
    pre_alert = result.scalar_one_or_none()
    if pre_alert:
        pre_alert.package_id = package.id
        await db.flush()
        logger.info("Linked pre-alert %s to package %s", pre_alert.id, package.tracking_number)
    return pre_alert
