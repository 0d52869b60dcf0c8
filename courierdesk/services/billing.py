"""
Billing service.
Issues the intake invoice for a package and applies payments to its balance.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from courierdesk.config import get_settings
from courierdesk.core.errors import RequestValidationFailed
from courierdesk.database import utcnow
from courierdesk.models import (
    BillingInvoice, InvoiceStatus,
    Package, PaymentStatus, Payment,
)
from courierdesk.services.fees import PackageCosts, as_number, compute_package_costs

logger = logging.getLogger(__name__)


def invoice_number_for(tracking_number: str) -> str:
    return f"INV-{tracking_number}"


def build_invoice_items(costs: PackageCosts, additional_fees: Optional[list] = None) -> list:
    """Invoice lines from a cost breakdown; zero-value lines are left out."""
    items = [{
        "description": f"Shipping ({costs.weight_lb:.2f} lb)",
        "amount_jmd": costs.shipping_cost_jmd,
    }]
    if costs.storage_fee_jmd > 0:
        items.append({
            "description": f"Storage ({costs.days_in_storage} days)",
            "amount_jmd": costs.storage_fee_jmd,
        })
    if costs.delivery_fee_jmd > 0:
        items.append({"description": "Delivery", "amount_jmd": costs.delivery_fee_jmd})
    for fee in additional_fees or []:
        amount = as_number(fee.get("amount")) if isinstance(fee, dict) else 0.0
        if amount > 0:
            items.append({
                "description": (fee.get("label") or "Additional fee"),
                "amount_jmd": amount,
            })
    return items


def payment_status_for(costs: PackageCosts) -> PaymentStatus:
    if costs.amount_paid_jmd <= 0:
        return PaymentStatus.PENDING
    if costs.outstanding_balance_jmd <= 0:
        return PaymentStatus.PAID
    return PaymentStatus.PARTIALLY_PAID


def invoice_status_for(total_jmd: float, paid_jmd: float) -> InvoiceStatus:
    if paid_jmd <= 0:
        return InvoiceStatus.UNPAID
    if paid_jmd >= total_jmd:
        return InvoiceStatus.PAID
    return InvoiceStatus.PARTIALLY_PAID


async def get_invoice_for_package(db: AsyncSession, package_id: UUID) -> Optional[BillingInvoice]:
    result = await db.execute(
        select(BillingInvoice).where(BillingInvoice.package_id == package_id)
    )
    return result.scalar_one_or_none()


async def create_billing_invoice(
    db: AsyncSession,
    package: Package,
    now: Optional[datetime] = None,
) -> BillingInvoice:
    """
    Issue the invoice for a newly received package. The caller commits.
    
    An existing invoice for the package is returned unchanged.
    """
    existing = await get_invoice_for_package(db, package.id)
    if existing:
        return existing
    
    settings = get_settings()
    issued_at = now or utcnow()
    costs = compute_package_costs(package, now=issued_at)
    paid = costs.amount_paid_jmd
    
    invoice = BillingInvoice(
        invoice_number=invoice_number_for(package.tracking_number),
        package_id=package.id,
        user_code=package.user_code,
        currency="JMD",
        items=build_invoice_items(costs, package.additional_fees),
        total_jmd=costs.total_cost_jmd,
        amount_paid_jmd=paid,
        balance_due_jmd=max(0.0, costs.total_cost_jmd - paid),
        status=invoice_status_for(costs.total_cost_jmd, paid),
        issued_at=issued_at,
        due_at=issued_at + timedelta(days=settings.invoice_due_days),
    )
    db.add(invoice)
    await db.flush()
    logger.info("Issued invoice %s for %s JMD", invoice.invoice_number, invoice.total_jmd)
    return invoice


async def sync_invoice_payments(db: AsyncSession, package: Package) -> Optional[BillingInvoice]:
    """Mirror the package's amount paid onto its invoice, if it has one. Does not commit."""
    invoice = await get_invoice_for_package(db, package.id)
    if invoice:
        invoice.amount_paid_jmd = as_number(package.amount_paid_jmd)
        invoice.balance_due_jmd = max(0.0, invoice.total_jmd - invoice.amount_paid_jmd)
        invoice.status = invoice_status_for(invoice.total_jmd, invoice.amount_paid_jmd)
    return invoice


async def record_payment(
    db: AsyncSession,
    package: Package,
    amount_jmd: float,
    method: str = "cash",
    reference: Optional[str] = None,
    actor: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Payment:
    """
    Apply a payment to a package and its invoice, then commit.
    
    Raises:
        RequestValidationFailed: amount is not a positive number
    """
    amount = as_number(amount_jmd)
    if amount <= 0:
        raise RequestValidationFailed("Payment amount must be greater than zero")
    
    package.amount_paid_jmd = as_number(package.amount_paid_jmd) + amount
    costs = compute_package_costs(package, now=now)
    package.payment_status = payment_status_for(costs)
    
    payment = Payment(
        package_id=package.id,
        amount_jmd=amount,
        method=method,
        reference=reference,
        recorded_by=actor,
    )
    db.add(payment)
    
    await sync_invoice_payments(db, package)
    await db.commit()
    logger.info(
        "Recorded %.2f JMD payment on %s (%s)",
        amount, package.tracking_number, package.payment_status.value,
    )
    return payment


async def list_payments(db: AsyncSession, package_id: UUID) -> List[Payment]:
    result = await db.execute(
        select(Payment)
        .where(Payment.package_id == package_id)
        .order_by(Payment.created_at)
    )
    return list(result.scalars().all())
