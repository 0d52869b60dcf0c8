"""
Pydantic schemas for package API.
Request bodies pass through the legacy field translation before validation.
"""

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from courierdesk.models.package import (
    PackageStatus,
    WeightUnit,
    ServiceMode,
    PaymentStatus,
    CustomsStatus,
)
from courierdesk.services.field_mapping import upgrade_payload
from courierdesk.services.tracking import normalize_tracking_number


class AdditionalFee(BaseModel):
    """A one-off charge added to a package by staff."""
    label: Optional[str] = Field(None, max_length=100)
    amount: float = Field(0.0, ge=0, description="Amount in JMD")


class _LegacyAwareRequest(BaseModel):
    """Base for inbound package payloads; upgrades legacy field names first."""
    
    @model_validator(mode="before")
    @classmethod
    def upgrade_legacy_fields(cls, data):
        return upgrade_payload(data)


class PackageCreateRequest(_LegacyAwareRequest):
    """Request schema for POST /api/v1/packages (staff intake)."""
    tracking_number: str = Field(..., min_length=3, max_length=50)
    user_code: str = Field(..., min_length=1, max_length=50, description="Customer code")
    weight: float = Field(0.0, ge=0)
    weight_unit: WeightUnit = WeightUnit.KG
    length: Optional[float] = Field(None, ge=0)
    width: Optional[float] = Field(None, ge=0)
    height: Optional[float] = Field(None, ge=0)
    dimension_unit: str = Field("cm", max_length=10)
    description: Optional[str] = Field(None, max_length=2000)
    shipper: Optional[str] = Field(None, max_length=255)
    item_value_usd: float = Field(0.0, ge=0)
    service_mode: ServiceMode = ServiceMode.AIR
    current_location: Optional[str] = Field(None, max_length=255)
    warehouse_location: Optional[str] = Field(None, max_length=255)
    mailbox_number: Optional[str] = Field(None, max_length=50)
    status: PackageStatus = PackageStatus.RECEIVED
    date_received: Optional[datetime] = None
    delivery_fee_jmd: float = Field(0.0, ge=0)
    additional_fees: List[AdditionalFee] = Field(default_factory=list)
    customs_required: bool = False
    customs_status: CustomsStatus = CustomsStatus.NOT_REQUIRED
    sender_name: Optional[str] = Field(None, max_length=255)
    sender_country: Optional[str] = Field(None, max_length=100)
    receiver_name: Optional[str] = Field(None, max_length=255)
    receiver_phone: Optional[str] = Field(None, max_length=30)
    receiver_email: Optional[str] = Field(None, max_length=255)
    receiver_address: Optional[str] = None
    
    @field_validator("tracking_number", mode="before")
    @classmethod
    def normalize_tracking(cls, v):
        return normalize_tracking_number(v) if isinstance(v, str) else v
    
    @field_validator("user_code", mode="before")
    @classmethod
    def strip_user_code(cls, v):
        return v.strip() if isinstance(v, str) else v
    
    @field_validator("status")
    @classmethod
    def reject_terminal_status(cls, v: PackageStatus) -> PackageStatus:
        if v == PackageStatus.RETURNED:
            raise ValueError("a package cannot be created as returned")
        return v
    
    model_config = {
        "json_schema_extra": {
            "example": {
                "tracking_number": "TAS-000001",
                "user_code": "CUST001",
                "weight": 2.5,
                "weight_unit": "lb",
                "shipper": "Amazon",
                "description": "Shoes",
                "item_value_usd": 45.0,
            }
        }
    }


class PackageUpdateRequest(_LegacyAwareRequest):
    """
    Request schema for PATCH /api/v1/packages/{id}.
    Only fields present in the body are considered; unchanged values are not written.
    """
    status: Optional[PackageStatus] = None
    status_reason: Optional[str] = None
    weight: Optional[float] = Field(None, ge=0)
    weight_unit: Optional[WeightUnit] = None
    length: Optional[float] = Field(None, ge=0)
    width: Optional[float] = Field(None, ge=0)
    height: Optional[float] = Field(None, ge=0)
    dimension_unit: Optional[str] = Field(None, max_length=10)
    description: Optional[str] = Field(None, max_length=2000)
    shipper: Optional[str] = Field(None, max_length=255)
    item_value_usd: Optional[float] = Field(None, ge=0)
    service_mode: Optional[ServiceMode] = None
    current_location: Optional[str] = Field(None, max_length=255)
    warehouse_location: Optional[str] = Field(None, max_length=255)
    mailbox_number: Optional[str] = Field(None, max_length=50)
    date_received: Optional[datetime] = None
    delivery_fee_jmd: Optional[float] = Field(None, ge=0)
    additional_fees: Optional[List[AdditionalFee]] = None
    amount_paid_jmd: Optional[float] = Field(None, ge=0)
    payment_status: Optional[PaymentStatus] = None
    customs_required: Optional[bool] = None
    customs_status: Optional[CustomsStatus] = None
    receiver_name: Optional[str] = Field(None, max_length=255)
    receiver_phone: Optional[str] = Field(None, max_length=30)
    receiver_email: Optional[str] = Field(None, max_length=255)
    receiver_address: Optional[str] = None
    
    def changes(self) -> dict:
        """Fields the caller actually sent, as plain values."""
        return self.model_dump(exclude_unset=True, mode="python")


class PackageCostsResponse(BaseModel):
    """Derived cost figures, computed at response time."""
    weight_lb: float
    days_in_storage: int
    shipping_cost_jmd: float
    storage_fee_jmd: float
    delivery_fee_jmd: float
    additional_fees_total_jmd: float
    total_cost_jmd: float
    amount_paid_jmd: float
    outstanding_balance_jmd: float
    customs_duty_usd: float


class PackageResponse(BaseModel):
    """Package as returned to staff, with computed costs."""
    id: UUID
    tracking_number: str
    user_code: str
    mailbox_number: Optional[str] = None
    weight: float
    weight_unit: WeightUnit
    length: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    dimension_unit: str
    description: Optional[str] = None
    shipper: Optional[str] = None
    item_value_usd: float
    service_mode: ServiceMode
    current_location: Optional[str] = None
    warehouse_location: Optional[str] = None
    customs_required: bool
    customs_status: CustomsStatus
    status: PackageStatus
    status_reason: Optional[str] = None
    payment_status: PaymentStatus
    delivery_fee_jmd: float
    additional_fees: List[AdditionalFee] = Field(default_factory=list)
    amount_paid_jmd: float
    sender_name: Optional[str] = None
    sender_country: Optional[str] = None
    receiver_name: Optional[str] = None
    receiver_phone: Optional[str] = None
    receiver_email: Optional[str] = None
    receiver_address: Optional[str] = None
    date_received: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    costs: Optional[PackageCostsResponse] = None
    
    model_config = {"from_attributes": True}


class PackageListResponse(BaseModel):
    """Response for GET /api/v1/packages."""
    packages: List[PackageResponse]
    total_count: int
    status_counts: Dict[str, int] = Field(default_factory=dict)
    page: int
    per_page: int


class PackageUpdateResponse(BaseModel):
    """Response for PATCH /api/v1/packages/{id}."""
    ok: bool = True
    id: UUID
    tracking_number: str
    changed_fields: List[str] = Field(default_factory=list)
    message: str
    package: PackageResponse


class PackageDeleteResponse(BaseModel):
    """Response for DELETE /api/v1/packages/{id} (soft delete)."""
    ok: bool = True
    id: UUID
    tracking_number: str
    status: PackageStatus
    already_deleted: bool = False
    message: str


class PackageStatsResponse(BaseModel):
    """Response for GET /api/v1/packages/stats."""
    total_packages: int
    active_packages: int
    status_counts: Dict[str, int] = Field(default_factory=dict)
    received_today: int
    received_last_7_days: int
    received_this_month: int
    outstanding_balance_jmd: float


class TrackingNumberResponse(BaseModel):
    """Response for GET /api/v1/tracking-numbers/new."""
    tracking_number: str
    available: bool


class TrackingEvent(BaseModel):
    """A single status history entry."""
    status: PackageStatus
    note: Optional[str] = None
    timestamp: datetime


class TrackingLookupResponse(BaseModel):
    """Public tracking lookup; carries no financial or personal data."""
    tracking_number: str
    status: PackageStatus
    weight: float
    weight_unit: WeightUnit
    description: Optional[str] = None
    current_location: Optional[str] = None
    updated_at: datetime
    history: List[TrackingEvent] = Field(default_factory=list)
