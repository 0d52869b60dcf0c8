"""
ApiKey database model.
Callers authenticate with a secret whose SHA-256 hash is stored here with its role.
"""

import enum
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, DateTime, Boolean, Enum
from sqlalchemy.orm import Mapped, mapped_column

from courierdesk.database import Base, GUID, utcnow, enum_values


class Role(str, enum.Enum):
    """Capability sets a caller can hold."""
    ADMIN = "admin"
    WAREHOUSE_STAFF = "warehouse_staff"
    CUSTOMER_SUPPORT = "customer_support"
    CUSTOMER = "customer"


STAFF_ROLES = (Role.ADMIN, Role.WAREHOUSE_STAFF, Role.CUSTOMER_SUPPORT)


class ApiKey(Base):
    """API key record. The plaintext secret is never stored."""
    __tablename__ = "api_keys"

    id: Mapped[uuid.UUID] = mapped_column(
        GUID(),
        primary_key=True,
        default=uuid.uuid4,
    )
    key_prefix: Mapped[str] = mapped_column(String(16), nullable=False)
    key_hash: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
    )
    role: Mapped[Role] = mapped_column(
        Enum(Role, values_callable=enum_values),
        nullable=False,
    )
    # Set for customer keys; scopes every customer endpoint to this code
    user_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    label: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<ApiKey(prefix={self.key_prefix}, role={self.role})>"
