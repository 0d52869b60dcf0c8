"""
Tracking numbers API endpoint.
Handles GET /api/v1/tracking-numbers/new for staff generating a candidate number.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.core.security import Principal, require_staff
from courierdesk.database import get_db
from courierdesk.schemas.package import TrackingNumberResponse
from courierdesk.services.tracking import generate_tracking_number, is_tracking_number_available

router = APIRouter(prefix="/tracking-numbers", tags=["Tracking Numbers"])


@router.get(
    "/new",
    response_model=TrackingNumberResponse,
    summary="Generate a tracking number",
    description=(
        "Returns a candidate tracking number and whether it is currently free. "
        "Nothing is reserved; if intake later reports a conflict, generate again."
    ),
)
async def new_tracking_number(
    prefix: Optional[str] = Query(None, min_length=1, max_length=10, pattern="^[A-Za-z0-9]+$"),
    short: bool = Query(False),
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> TrackingNumberResponse:
    tracking_number = generate_tracking_number(prefix=prefix, short=short)
    available = await is_tracking_number_available(db, tracking_number)
    return TrackingNumberResponse(tracking_number=tracking_number, available=available)
