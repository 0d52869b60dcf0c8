"""
Package record service.
Create, list, update and soft-delete packages; costs are attached at response time.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.config import get_settings
from courierdesk.core.errors import ConflictError, NotFoundError, RequestValidationFailed
from courierdesk.database import utcnow
from courierdesk.models import (
    Package, PackageEvent, PackageStatus, TERMINAL_STATUS,
    ServiceMode, PaymentStatus,
)
from courierdesk.schemas.package import (
    PackageCreateRequest,
    PackageResponse,
    PackageCostsResponse,
    PackageListResponse,
    PackageStatsResponse,
    TrackingEvent,
    TrackingLookupResponse,
)
from courierdesk.services.billing import create_billing_invoice, payment_status_for, sync_invoice_payments
from courierdesk.services.customer_service import escape_like, find_customer
from courierdesk.services.fees import compute_package_costs, to_naive_utc
from courierdesk.services.field_mapping import normalize_status
from courierdesk.services.notifications import notify_package_received, notify_status_change
from courierdesk.services.pre_alert_service import link_pre_alert
from courierdesk.services.side_effects import run_best_effort
from courierdesk.services.tracking import is_tracking_number_available, normalize_tracking_number

logger = logging.getLogger(__name__)

# Fields staff may change through an update
UPDATABLE_FIELDS = (
    "status", "status_reason",
    "weight", "weight_unit", "length", "width", "height", "dimension_unit",
    "description", "shipper", "item_value_usd",
    "service_mode", "current_location", "warehouse_location", "mailbox_number",
    "date_received", "delivery_fee_jmd", "additional_fees",
    "amount_paid_jmd", "payment_status", "customs_required", "customs_status",
    "receiver_name", "receiver_phone", "receiver_email", "receiver_address",
)

# Columns that may be changed but never cleared
NON_NULLABLE_FIELDS = {
    "status", "weight", "weight_unit", "dimension_unit", "item_value_usd",
    "service_mode", "delivery_fee_jmd", "additional_fees", "amount_paid_jmd",
    "payment_status", "customs_required", "customs_status",
}

SEARCH_COLUMNS = (
    Package.tracking_number,
    Package.description,
    Package.shipper,
    Package.user_code,
    Package.mailbox_number,
    Package.receiver_name,
    Package.receiver_phone,
)


@dataclass
class PackageFilters:
    """Query parameters accepted by the package listing."""
    q: Optional[str] = None
    status: Optional[str] = None
    statuses: Optional[str] = None
    user_code: Optional[str] = None
    service_mode: Optional[str] = None
    payment_status: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    page: int = 1
    per_page: Optional[int] = None


def to_response(package: Package, now: Optional[datetime] = None) -> PackageResponse:
    """Serialize a package with its costs computed as of now."""
    response = PackageResponse.model_validate(package)
    costs = compute_package_costs(package, now=now)
    response.costs = PackageCostsResponse(**costs.as_dict())
    return response


def _parse_status(value: str) -> PackageStatus:
    try:
        return PackageStatus(normalize_status(value))
    except ValueError:
        raise RequestValidationFailed(f"Unknown status '{value}'")


def _parse_enum(enum_cls, value: str, name: str):
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        raise RequestValidationFailed(f"Unknown {name} '{value}'")


def _clamp_page(page: Optional[int], per_page: Optional[int]) -> Tuple[int, int]:
    settings = get_settings()
    page = max(1, page or 1)
    if not per_page:
        per_page = settings.default_page_size
    per_page = min(max(1, per_page), settings.max_page_size)
    return page, per_page


def _listing_conditions(filters: PackageFilters) -> list:
    conditions = []

    if filters.q and filters.q.strip():
        pattern = f"%{escape_like(filters.q.strip())}%"
        conditions.append(or_(*[
            column.ilike(pattern, escape="\\") for column in SEARCH_COLUMNS
        ]))

    # Returned packages only appear when a status filter asks for them
    if filters.statuses:
        wanted = [
            _parse_status(part) for part in filters.statuses.split(",") if part.strip()
        ]
        if wanted:
            conditions.append(Package.status.in_(wanted))
    elif filters.status:
        conditions.append(Package.status == _parse_status(filters.status))
    else:
        conditions.append(Package.status != TERMINAL_STATUS)

    if filters.user_code:
        conditions.append(Package.user_code == filters.user_code)
    if filters.service_mode:
        conditions.append(
            Package.service_mode == _parse_enum(ServiceMode, filters.service_mode, "service mode")
        )
    if filters.payment_status:
        conditions.append(
            Package.payment_status == _parse_enum(PaymentStatus, filters.payment_status, "payment status")
        )
    if filters.date_from:
        conditions.append(Package.created_at >= datetime.combine(filters.date_from, time.min))
    if filters.date_to:
        # inclusive of the whole end day
        end = datetime.combine(filters.date_to + timedelta(days=1), time.min)
        conditions.append(Package.created_at < end)

    return conditions


async def get_package(db: AsyncSession, package_id: UUID) -> Package:
    """Fetch a package by id, including soft-deleted ones."""
    result = await db.execute(select(Package).where(Package.id == package_id))
    package = result.scalar_one_or_none()
    if not package:
        raise NotFoundError(f"Package {package_id} not found")
    return package


async def get_package_by_tracking(
    db: AsyncSession,
    tracking_number: str,
    user_code: Optional[str] = None,
) -> Package:
    """
    Fetch a package by tracking number (case-insensitive).

    When user_code is given, packages of other customers are reported as not found.
    """
    query = select(Package).where(
        func.upper(Package.tracking_number) == normalize_tracking_number(tracking_number)
    )
    if user_code is not None:
        query = query.where(Package.user_code == user_code)
    result = await db.execute(query)
    package = result.scalar_one_or_none()
    if not package:
        raise NotFoundError(f"Package {tracking_number} not found")
    return package


async def create_package(
    db: AsyncSession,
    data: PackageCreateRequest,
    actor: str,
    now: Optional[datetime] = None,
) -> Package:
    """
    Receive a package at the warehouse.

    Args:
        db: Database session
        data: Validated intake payload
        actor: Who is recording the intake (for the history event)
        now: Clock override

    Returns:
        The committed Package

    Raises:
        RequestValidationFailed: tracking number or customer code is blank
        NotFoundError: the customer code is unknown
        ConflictError: the tracking number is already in use
    """
    now = now or utcnow()
    tracking_number = normalize_tracking_number(data.tracking_number)
    user_code = data.user_code.strip()
    if not tracking_number or not user_code:
        raise RequestValidationFailed("tracking_number and user_code are required")

    customer = await find_customer(db, user_code)
    if not customer:
        raise NotFoundError(f"Customer {user_code} not found")

    if not await is_tracking_number_available(db, tracking_number):
        raise ConflictError(
            f"Tracking number {tracking_number} is already in use; generate a new one"
        )

    fields = data.model_dump(exclude={"tracking_number", "user_code", "additional_fees"})
    fields["date_received"] = to_naive_utc(fields.get("date_received")) or now
    fields["mailbox_number"] = fields.get("mailbox_number") or customer.user_code
    fields["receiver_name"] = fields.get("receiver_name") or customer.full_name or None
    fields["receiver_phone"] = fields.get("receiver_phone") or customer.phone
    fields["receiver_email"] = fields.get("receiver_email") or customer.email
    fields["receiver_address"] = fields.get("receiver_address") or customer.address_street

    package_id = uuid.uuid4()
    package = Package(
        id=package_id,
        tracking_number=tracking_number,
        customer_id=customer.id,
        user_code=customer.user_code,
        additional_fees=[fee.model_dump() for fee in data.additional_fees],
        payment_status=PaymentStatus.PENDING,
        amount_paid_jmd=0.0,
        **fields,
    )
    db.add(package)
    db.add(PackageEvent(
        package_id=package_id,
        status=package.status,
        note="Package received at warehouse",
        actor=actor,
    ))

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.warning("Tracking number %s lost a concurrent insert", tracking_number)
        raise ConflictError(
            f"Tracking number {tracking_number} is already in use; generate a new one"
        )

    logger.info("Received package %s for %s", tracking_number, customer.user_code)

    await run_best_effort(db, "billing invoice", create_billing_invoice, package, now=now, refresh=(package,))
    await run_best_effort(db, "intake message", notify_package_received, package, refresh=(package,))
    await run_best_effort(db, "pre-alert link", link_pre_alert, package, refresh=(package,))

    return package


async def list_packages(
    db: AsyncSession,
    filters: PackageFilters,
    now: Optional[datetime] = None,
) -> PackageListResponse:
    """Filtered, paginated package listing with per-status counts."""
    page, per_page = _clamp_page(filters.page, filters.per_page)
    conditions = _listing_conditions(filters)

    total_result = await db.execute(
        select(func.count(Package.id)).where(*conditions)
    )
    total_count = total_result.scalar_one()

    counts_result = await db.execute(
        select(Package.status, func.count(Package.id))
        .where(*conditions)
        .group_by(Package.status)
    )
    status_counts = {status.value: count for status, count in counts_result.all()}

    result = await db.execute(
        select(Package)
        .where(*conditions)
        .order_by(Package.created_at.desc(), Package.tracking_number)
        .offset((page - 1) * per_page)
        .limit(per_page)
    )
    packages = result.scalars().all()

    return PackageListResponse(
        packages=[to_response(pkg, now=now) for pkg in packages],
        total_count=total_count,
        status_counts=status_counts,
        page=page,
        per_page=per_page,
    )


async def update_package(
    db: AsyncSession,
    package_id: UUID,
    changes: Dict[str, Any],
    actor: str,
) -> Tuple[Package, List[str]]:
    """
    Apply a partial update, writing only fields whose value actually differs.

    Returns:
        (package, changed_fields); changed_fields is empty for a no-op

    Raises:
        NotFoundError: no such package
        RequestValidationFailed: a required column was cleared, or status set to returned
        ConflictError: the package is returned and a status change was requested
    """
    package = await get_package(db, package_id)

    changed: Dict[str, Any] = {}
    for field, value in changes.items():
        if field not in UPDATABLE_FIELDS:
            continue
        if value is None and field in NON_NULLABLE_FIELDS:
            raise RequestValidationFailed(f"{field} cannot be cleared")
        if field == "date_received":
            value = to_naive_utc(value)
        if getattr(package, field) != value:
            changed[field] = value

    if not changed:
        return package, []

    previous_status = package.status
    if "status" in changed:
        if previous_status == TERMINAL_STATUS:
            raise ConflictError("Package has been returned; its status can no longer change")
        if changed["status"] == TERMINAL_STATUS:
            raise RequestValidationFailed("Use delete to mark a package as returned")

    for field, value in changed.items():
        setattr(package, field, value)

    if "amount_paid_jmd" in changed and "payment_status" not in changes:
        derived = payment_status_for(compute_package_costs(package))
        if derived != package.payment_status:
            package.payment_status = derived
            changed["payment_status"] = derived

    if "amount_paid_jmd" in changed:
        await sync_invoice_payments(db, package)

    if "status" in changed:
        db.add(PackageEvent(
            package_id=package.id,
            status=package.status,
            note=changes.get("status_reason") or (
                f"Status changed from {previous_status.value} to {package.status.value}"
            ),
            actor=actor,
        ))

    await db.commit()
    logger.info("Updated package %s: %s", package.tracking_number, ", ".join(changed))

    if "status" in changed:
        await run_best_effort(
            db, "status message", notify_status_change, package, previous_status,
            refresh=(package,),
        )

    return package, list(changed)


async def delete_package(
    db: AsyncSession,
    package_id: UUID,
    reason: Optional[str],
    actor: str,
) -> Tuple[Package, bool]:
    """
    Soft delete: mark the package returned and keep the row.

    Returns:
        (package, already_deleted)
    """
    package = await get_package(db, package_id)
    if package.status == TERMINAL_STATUS:
        return package, True

    reason = (reason or "").strip() or "Deleted by staff"
    package.status = TERMINAL_STATUS
    package.status_reason = reason
    db.add(PackageEvent(
        package_id=package.id,
        status=TERMINAL_STATUS,
        note=reason,
        actor=actor,
    ))
    await db.commit()
    logger.info("Package %s marked returned by %s", package.tracking_number, actor)
    return package, False


async def get_tracking_history(db: AsyncSession, tracking_number: str) -> TrackingLookupResponse:
    """Public view of a package: status and history only."""
    package = await get_package_by_tracking(db, tracking_number)
    events_result = await db.execute(
        select(PackageEvent)
        .where(PackageEvent.package_id == package.id)
        .order_by(PackageEvent.created_at)
    )
    history = [
        TrackingEvent(status=event.status, note=event.note, timestamp=event.created_at)
        for event in events_result.scalars().all()
    ]
    return TrackingLookupResponse(
        tracking_number=package.tracking_number,
        status=package.status,
        weight=package.weight,
        weight_unit=package.weight_unit,
        description=package.description,
        current_location=package.current_location,
        updated_at=package.updated_at,
        history=history,
    )


async def package_stats(db: AsyncSession, now: Optional[datetime] = None) -> PackageStatsResponse:
    """Dashboard counters and the outstanding balance across active packages."""
    now = now or utcnow()
    today_start = datetime.combine(now.date(), time.min)
    month_start = today_start.replace(day=1)
    week_start = now - timedelta(days=7)

    counts_result = await db.execute(
        select(Package.status, func.count(Package.id)).group_by(Package.status)
    )
    status_counts = {status.value: count for status, count in counts_result.all()}
    total = sum(status_counts.values())
    active = total - status_counts.get(TERMINAL_STATUS.value, 0)

    async def _received_since(start: datetime) -> int:
        result = await db.execute(
            select(func.count(Package.id)).where(Package.created_at >= start)
        )
        return result.scalar_one()

    active_result = await db.execute(
        select(Package).where(Package.status != TERMINAL_STATUS)
    )
    outstanding = sum(
        compute_package_costs(pkg, now=now).outstanding_balance_jmd
        for pkg in active_result.scalars().all()
    )

    return PackageStatsResponse(
        total_packages=total,
        active_packages=active,
        status_counts=status_counts,
        received_today=await _received_since(today_start),
        received_last_7_days=await _received_since(week_start),
        received_this_month=await _received_since(month_start),
        outstanding_balance_jmd=round(outstanding, 2),
    )
