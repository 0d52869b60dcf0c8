"""
Pydantic schemas for pre-alert API.
"""

from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from courierdesk.models.pre_alert import PreAlertStatus
from courierdesk.services.tracking import normalize_tracking_number


class PreAlertCreateRequest(BaseModel):
    """Request schema for POST /api/v1/customer/pre-alerts."""
    tracking_number: str = Field(..., min_length=3, max_length=50)
    carrier: Optional[str] = Field(None, max_length=100)
    origin: Optional[str] = Field(None, max_length=255)
    expected_date: date = Field(..., description="Expected arrival date")
    notes: Optional[str] = Field(None, max_length=1000)
    
    @field_validator("tracking_number", mode="before")
    @classmethod
    def normalize_tracking(cls, v):
        return normalize_tracking_number(v) if isinstance(v, str) else v


class PreAlertResponse(BaseModel):
    """Pre-alert record."""
    id: UUID
    user_code: str
    tracking_number: str
    carrier: Optional[str] = None
    origin: Optional[str] = None
    expected_date: date
    notes: Optional[str] = None
    status: PreAlertStatus
    decision_note: Optional[str] = None
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None
    package_id: Optional[UUID] = None
    created_at: datetime
    
    model_config = {"from_attributes": True}


class PreAlertListResponse(BaseModel):
    """List of pre-alerts, newest first."""
    pre_alerts: List[PreAlertResponse]


class PreAlertDecisionRequest(BaseModel):
    """Request schema for POST /api/v1/pre-alerts/{id}/decision."""
    status: str = Field(..., description="approved or rejected")
    note: Optional[str] = Field(None, max_length=1000)
    
    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        allowed = {"approved", "rejected"}
        if v.lower() not in allowed:
            raise ValueError(f"status must be one of: {allowed}")
        return v.lower()
