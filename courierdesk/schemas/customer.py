"""
Pydantic schemas for customer API.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class CustomerCreateRequest(BaseModel):
    """Request schema for POST /api/v1/customers."""
    user_code: str = Field(..., min_length=1, max_length=50)
    first_name: str = Field("", max_length=100)
    last_name: str = Field("", max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    address_street: Optional[str] = Field(None, max_length=255)
    address_city: Optional[str] = Field(None, max_length=100)
    address_country: Optional[str] = Field(None, max_length=100)
    
    @field_validator("user_code", mode="before")
    @classmethod
    def strip_user_code(cls, v):
        return v.strip() if isinstance(v, str) else v


class CustomerResponse(BaseModel):
    """Customer record."""
    id: UUID
    user_code: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address_street: Optional[str] = None
    address_city: Optional[str] = None
    address_country: Optional[str] = None
    created_at: datetime
    
    model_config = {"from_attributes": True}


class CustomerListResponse(BaseModel):
    """Response for GET /api/v1/customers."""
    customers: List[CustomerResponse]
    total_count: int
