"""
Customer-facing API endpoints.
Every route is scoped to the user code carried by the caller's API key.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.core.security import Principal, require_customer
from courierdesk.database import get_db
from courierdesk.schemas.billing import PaymentRequest, PaymentResponse, PaymentRecordedResponse
from courierdesk.schemas.message import MessageListResponse, MessageResponse
from courierdesk.schemas.package import PackageListResponse, PackageResponse
from courierdesk.schemas.pre_alert import (
    PreAlertCreateRequest,
    PreAlertResponse,
    PreAlertListResponse,
)
from courierdesk.services import billing, notifications, package_service, pre_alert_service
from courierdesk.services.package_service import PackageFilters

router = APIRouter(prefix="/customer", tags=["Customer"])


@router.get(
    "/packages",
    response_model=PackageListResponse,
    summary="List my packages",
)
async def list_my_packages(
    q: Optional[str] = Query(None),
    status_filter: Optional[str] = Query(None, alias="status"),
    page: int = Query(1),
    per_page: Optional[int] = Query(None),
    principal: Principal = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
) -> PackageListResponse:
    filters = PackageFilters(
        q=q,
        status=status_filter,
        user_code=principal.user_code,
        page=page,
        per_page=per_page,
    )
    return await package_service.list_packages(db, filters)


@router.get(
    "/packages/{tracking_number}",
    response_model=PackageResponse,
    summary="Get one of my packages",
)
async def get_my_package(
    tracking_number: str,
    principal: Principal = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
) -> PackageResponse:
    package = await package_service.get_package_by_tracking(
        db, tracking_number, user_code=principal.user_code
    )
    return package_service.to_response(package)


@router.post(
    "/packages/{tracking_number}/payments",
    response_model=PaymentRecordedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Pay for one of my packages",
    description="Records an online payment; card capture happens outside this service.",
)
async def pay_for_my_package(
    tracking_number: str,
    request: PaymentRequest,
    principal: Principal = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
) -> PaymentRecordedResponse:
    package = await package_service.get_package_by_tracking(
        db, tracking_number, user_code=principal.user_code
    )
    payment = await billing.record_payment(
        db,
        package,
        request.amount_jmd,
        method="online",
        reference=request.reference,
        actor=principal.actor,
    )
    return PaymentRecordedResponse(
        payment=PaymentResponse.model_validate(payment),
        package=package_service.to_response(package),
    )


@router.get(
    "/pre-alerts",
    response_model=PreAlertListResponse,
    summary="List my pre-alerts",
)
async def list_my_pre_alerts(
    principal: Principal = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
) -> PreAlertListResponse:
    pre_alerts = await pre_alert_service.list_customer_pre_alerts(db, principal.user_code)
    return PreAlertListResponse(
        pre_alerts=[PreAlertResponse.model_validate(p) for p in pre_alerts],
    )


@router.post(
    "/pre-alerts",
    response_model=PreAlertResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a pre-alert",
)
async def submit_pre_alert(
    request: PreAlertCreateRequest,
    principal: Principal = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
) -> PreAlertResponse:
    pre_alert = await pre_alert_service.submit_pre_alert(db, principal.user_code, request)
    return PreAlertResponse.model_validate(pre_alert)


@router.get(
    "/messages",
    response_model=MessageListResponse,
    summary="My inbox",
)
async def list_my_messages(
    principal: Principal = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
) -> MessageListResponse:
    messages = await notifications.list_messages(db, principal.user_code)
    unread = await notifications.count_unread(db, principal.user_code)
    return MessageListResponse(
        messages=[MessageResponse.model_validate(m) for m in messages],
        unread_count=unread,
    )


@router.post(
    "/messages/read",
    summary="Mark all my messages as read",
)
async def mark_my_messages_read(
    principal: Principal = Depends(require_customer),
    db: AsyncSession = Depends(get_db),
) -> dict:
    marked = await notifications.mark_all_read(db, principal.user_code)
    return {"ok": True, "marked": marked}
