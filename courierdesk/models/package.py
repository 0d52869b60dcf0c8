"""
Package database models.
Package holds the stored attributes a parcel is billed from; PackageEvent is its status history.
Derived costs (shipping, storage, totals, balance) are never stored here.
"""

import enum
import uuid
from datetime import datetime
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import String, Float, Text, DateTime, ForeignKey, Enum, JSON, Boolean, Index, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from courierdesk.database import Base, GUID, utcnow, enum_values

if TYPE_CHECKING:
    from courierdesk.models.customer import Customer


class PackageStatus(str, enum.Enum):
    """Lifecycle labels for a package."""
    RECEIVED = "received"
    IN_PROCESSING = "in_processing"
    READY_TO_SHIP = "ready_to_ship"
    SHIPPED = "shipped"
    IN_TRANSIT = "in_transit"
    CUSTOMS_PENDING = "customs_pending"
    READY_FOR_DELIVERY = "ready_for_delivery"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    UNKNOWN = "unknown"
    RETURNED = "returned"


# Soft-deleted packages carry this label and never leave it
TERMINAL_STATUS = PackageStatus.RETURNED


class WeightUnit(str, enum.Enum):
    """Unit the stored weight is expressed in."""
    KG = "kg"
    LB = "lb"


class ServiceMode(str, enum.Enum):
    """How the package travels."""
    AIR = "air"
    OCEAN = "ocean"
    LOCAL = "local"


class PaymentStatus(str, enum.Enum):
    """Payment state of a package."""
    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"


class CustomsStatus(str, enum.Enum):
    """Customs clearance state."""
    NOT_REQUIRED = "not_required"
    PENDING = "pending"
    CLEARED = "cleared"


class Package(Base):
    """
    Package model representing a parcel from intake to delivery.
    tracking_number is stored upper-cased and carries unique indexes on the
    value and on upper(value); those indexes, not the pre-insert lookup, are
    what reject duplicates.
    """
    __tablename__ = "packages"
    
    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
    )
    tracking_number: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )
    customer_id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    user_code: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    mailbox_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    
    # Physical attributes
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    weight_unit: Mapped[WeightUnit] = mapped_column(
        Enum(WeightUnit, values_callable=enum_values),
        nullable=False,
        default=WeightUnit.KG,
    )
    length: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    width: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    height: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    dimension_unit: Mapped[str] = mapped_column(String(10), nullable=False, default="cm")
    
    # Contents
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    shipper: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    item_value_usd: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    
    # Parties
    sender_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    sender_country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    receiver_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    receiver_phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    receiver_email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    receiver_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    
    # Handling
    service_mode: Mapped[ServiceMode] = mapped_column(
        Enum(ServiceMode, values_callable=enum_values),
        nullable=False,
        default=ServiceMode.AIR,
    )
    current_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    warehouse_location: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    customs_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    customs_status: Mapped[CustomsStatus] = mapped_column(
        Enum(CustomsStatus, values_callable=enum_values),
        nullable=False,
        default=CustomsStatus.NOT_REQUIRED,
    )
    
    # Lifecycle
    status: Mapped[PackageStatus] = mapped_column(
        Enum(PackageStatus, values_callable=enum_values),
        nullable=False,
        default=PackageStatus.RECEIVED,
        index=True,
    )
    status_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    
    # Financial inputs (costs are derived on read)
    delivery_fee_jmd: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    additional_fees: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    amount_paid_jmd: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    payment_status: Mapped[PaymentStatus] = mapped_column(
        Enum(PaymentStatus, values_callable=enum_values),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    
    # Timestamps
    date_received: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        onupdate=utcnow,
    )
    
    # Relationships
    customer: Mapped["Customer"] = relationship("Customer", back_populates="packages")
    events: Mapped[List["PackageEvent"]] = relationship(
        "PackageEvent",
        back_populates="package",
        cascade="all, delete-orphan",
        order_by="PackageEvent.created_at",
    )
    
    @property
    def is_deleted(self) -> bool:
        """Soft-deleted packages are those in the terminal status."""
        return self.status == TERMINAL_STATUS
    
    def __repr__(self) -> str:
        return f"<Package(id={self.id}, tracking_number={self.tracking_number})>"


# Tracking numbers are unique regardless of case, matching how they are looked up
Index(
    "uq_packages_tracking_number_upper",
    func.upper(Package.tracking_number),
    unique=True,
)


class PackageEvent(Base):
    """
    Status history entry for a package.
    Written on intake, status changes and soft delete.
    """
    __tablename__ = "package_events"
    
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
    status: Mapped[PackageStatus] = mapped_column(
        Enum(PackageStatus, values_callable=enum_values),
        nullable=False,
    )
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    actor: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
    )
    
    # Relationships
    package: Mapped["Package"] = relationship("Package", back_populates="events")
    
    def __repr__(self) -> str:
        return f"<PackageEvent(package_id={self.package_id}, status={self.status})>"
