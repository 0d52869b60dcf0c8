"""
PreAlert database model.
A customer's notice of an incoming shipment, awaiting staff approval.
"""

import enum
import uuid
from datetime import datetime, date
from typing import Optional

from sqlalchemy import String, Text, Date, DateTime, ForeignKey, Enum
from sqlalchemy.orm import Mapped, mapped_column

from courierdesk.database import Base, GUID, utcnow, enum_values


class PreAlertStatus(str, enum.Enum):
    """Review state of a pre-alert."""
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class PreAlert(Base):
    """Pre-alert submitted by a customer before the parcel reaches the warehouse."""
    __tablename__ = "pre_alerts"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    tracking_number: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    carrier: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    origin: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    expected_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[PreAlertStatus] = mapped_column(
        Enum(PreAlertStatus, values_callable=enum_values),
        nullable=False,
        default=PreAlertStatus.SUBMITTED,
    )
    decision_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    decided_by: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    decided_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    package_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        GUID(),
        ForeignKey("packages.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<PreAlert(id={self.id}, tracking_number={self.tracking_number}, status={self.status})>"
