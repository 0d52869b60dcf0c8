"""
Billing database models.
BillingInvoice is issued once per package at intake; Payment records money received.
"""

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Float, DateTime, ForeignKey, Enum, JSON
from sqlalchemy.orm import Mapped, mapped_column

from courierdesk.database import Base, GUID, utcnow, enum_values


class InvoiceStatus(str, enum.Enum):
    """Settlement state of an invoice."""
    UNPAID = "unpaid"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


class BillingInvoice(Base):
    """Invoice generated for a package at intake."""
    __tablename__ = "billing_invoices"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
    )
    invoice_number: Mapped[str] = mapped_column(
        String(80),
        unique=True,
        nullable=False,
        index=True,
    )
    package_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("packages.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    user_code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="JMD")
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    total_jmd: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    amount_paid_jmd: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    balance_due_jmd: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[InvoiceStatus] = mapped_column(
        Enum(InvoiceStatus, values_callable=enum_values),
        nullable=False,
        default=InvoiceStatus.UNPAID,
    )
    issued_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    due_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def __repr__(self) -> str:
        return f"<BillingInvoice(invoice_number={self.invoice_number}, status={self.status})>"


class Payment(Base):
    """A payment applied to a package balance."""
    __tablename__ = "payments"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
    )
    package_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("packages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount_jmd: Mapped[float] = mapped_column(Float, nullable=False)
    method: Mapped[str] = mapped_column(String(30), nullable=False, default="cash")
    reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    recorded_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Payment(package_id={self.package_id}, amount_jmd={self.amount_jmd})>"
