"""
Public tracking endpoint.
Exposes status and history only; no financial or personal fields.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.database import get_db
from courierdesk.schemas.package import TrackingLookupResponse
from courierdesk.services import package_service

router = APIRouter(prefix="/tracking", tags=["Tracking"])


@router.get(
    "/{tracking_number}",
    response_model=TrackingLookupResponse,
    summary="Track a package",
)
async def track_package(
    tracking_number: str,
    db: AsyncSession = Depends(get_db),
) -> TrackingLookupResponse:
    return await package_service.get_tracking_history(db, tracking_number)
