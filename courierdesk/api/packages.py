"""
Packages API endpoints (staff).
Intake, listing, updates, soft delete and payments.
"""

from datetime import date
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.core.errors import NotFoundError
from courierdesk.core.security import Principal, require_staff
from courierdesk.database import get_db
from courierdesk.schemas.billing import (
    PaymentRequest,
    PaymentResponse,
    PaymentRecordedResponse,
    PaymentListResponse,
    InvoiceResponse,
)
from courierdesk.schemas.package import (
    PackageCreateRequest,
    PackageUpdateRequest,
    PackageResponse,
    PackageListResponse,
    PackageUpdateResponse,
    PackageDeleteResponse,
    PackageStatsResponse,
)
from courierdesk.services import billing
from courierdesk.services import package_service
from courierdesk.services.package_service import PackageFilters

router = APIRouter(prefix="/packages", tags=["Packages"])


@router.post(
    "",
    response_model=PackageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Receive a package",
    description="Records a package at the warehouse. Fails with 409 if the tracking number is taken.",
)
async def create_package(
    request: PackageCreateRequest,
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> PackageResponse:
    package = await package_service.create_package(db, request, actor=principal.actor)
    return package_service.to_response(package)


@router.get(
    "",
    response_model=PackageListResponse,
    summary="List packages",
    description="Search and filter packages. Returned packages are hidden unless a status filter selects them.",
)
async def list_packages(
    q: Optional[str] = Query(None, description="Free-text search"),
    status_filter: Optional[str] = Query(None, alias="status"),
    statuses: Optional[str] = Query(None, description="Comma-separated statuses"),
    user_code: Optional[str] = Query(None),
    service_mode: Optional[str] = Query(None),
    payment_status: Optional[str] = Query(None),
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    page: int = Query(1),
    per_page: Optional[int] = Query(None),
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> PackageListResponse:
    filters = PackageFilters(
        q=q,
        status=status_filter,
        statuses=statuses,
        user_code=user_code,
        service_mode=service_mode,
        payment_status=payment_status,
        date_from=date_from,
        date_to=date_to,
        page=page,
        per_page=per_page,
    )
    return await package_service.list_packages(db, filters)


@router.get(
    "/stats",
    response_model=PackageStatsResponse,
    summary="Package dashboard counters",
)
async def get_package_stats(
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> PackageStatsResponse:
    return await package_service.package_stats(db)


@router.get(
    "/{package_id}",
    response_model=PackageResponse,
    summary="Get a package",
    description="Soft-deleted packages are still returned, with status 'returned'.",
)
async def get_package(
    package_id: UUID,
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> PackageResponse:
    package = await package_service.get_package(db, package_id)
    return package_service.to_response(package)


@router.patch(
    "/{package_id}",
    response_model=PackageUpdateResponse,
    summary="Update a package",
    description="Partial update; only fields that differ from the stored values are written.",
)
async def update_package(
    package_id: UUID,
    request: PackageUpdateRequest,
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> PackageUpdateResponse:
    package, changed_fields = await package_service.update_package(
        db, package_id, request.changes(), actor=principal.actor
    )
    return PackageUpdateResponse(
        id=package.id,
        tracking_number=package.tracking_number,
        changed_fields=changed_fields,
        message="Package updated" if changed_fields else "No changes detected",
        package=package_service.to_response(package),
    )


@router.delete(
    "/{package_id}",
    response_model=PackageDeleteResponse,
    summary="Soft delete a package",
    description="Marks the package returned and records the reason. Repeating the call is harmless.",
)
async def delete_package(
    package_id: UUID,
    reason: Optional[str] = Query(None, max_length=500),
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> PackageDeleteResponse:
    package, already_deleted = await package_service.delete_package(
        db, package_id, reason, actor=principal.actor
    )
    return PackageDeleteResponse(
        id=package.id,
        tracking_number=package.tracking_number,
        status=package.status,
        already_deleted=already_deleted,
        message="Package was already returned" if already_deleted else "Package marked as returned",
    )


@router.get(
    "/{package_id}/payments",
    response_model=PaymentListResponse,
    summary="List payments for a package",
)
async def list_package_payments(
    package_id: UUID,
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> PaymentListResponse:
    package = await package_service.get_package(db, package_id)
    payments = await billing.list_payments(db, package.id)
    return PaymentListResponse(
        payments=[PaymentResponse.model_validate(p) for p in payments],
        total_paid_jmd=sum(p.amount_jmd for p in payments),
    )


@router.post(
    "/{package_id}/payments",
    response_model=PaymentRecordedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a payment",
)
async def record_package_payment(
    package_id: UUID,
    request: PaymentRequest,
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> PaymentRecordedResponse:
    package = await package_service.get_package(db, package_id)
    payment = await billing.record_payment(
        db,
        package,
        request.amount_jmd,
        method=request.method,
        reference=request.reference,
        actor=principal.actor,
    )
    return PaymentRecordedResponse(
        payment=PaymentResponse.model_validate(payment),
        package=package_service.to_response(package),
    )


@router.get(
    "/{package_id}/invoice",
    response_model=InvoiceResponse,
    summary="Get the invoice issued at intake",
)
async def get_package_invoice(
    package_id: UUID,
    principal: Principal = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
) -> InvoiceResponse:
    package = await package_service.get_package(db, package_id)
    invoice = await billing.get_invoice_for_package(db, package.id)
    if not invoice:
        raise NotFoundError(f"No invoice for package {package.tracking_number}")
    return InvoiceResponse.model_validate(invoice)
