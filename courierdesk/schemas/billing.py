"""
Pydantic schemas for billing API.
Payments and invoices.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from courierdesk.models.billing import InvoiceStatus
from courierdesk.schemas.package import PackageResponse


class PaymentRequest(BaseModel):
    """Request schema for recording a payment against a package."""
    amount_jmd: float = Field(..., gt=0, description="Amount paid in JMD")
    method: str = Field("cash", pattern="^(cash|card|bank_transfer|online)$")
    reference: Optional[str] = Field(None, max_length=100)


class PaymentResponse(BaseModel):
    """A recorded payment."""
    id: UUID
    package_id: UUID
    amount_jmd: float
    method: str
    reference: Optional[str] = None
    recorded_by: Optional[str] = None
    created_at: datetime
    
    model_config = {"from_attributes": True}


class PaymentRecordedResponse(BaseModel):
    """Response after a payment is applied."""
    payment: PaymentResponse
    package: PackageResponse
    message: str = "Payment recorded"


class PaymentListResponse(BaseModel):
    """Payments for one package, oldest first."""
    payments: List[PaymentResponse]
    total_paid_jmd: float


class InvoiceResponse(BaseModel):
    """Billing invoice issued for a package."""
    id: UUID
    invoice_number: str
    package_id: UUID
    user_code: str
    currency: str
    items: list
    total_jmd: float
    amount_paid_jmd: float
    balance_due_jmd: float
    status: InvoiceStatus
    issued_at: datetime
    due_at: Optional[datetime] = None
    
    model_config = {"from_attributes": True}
