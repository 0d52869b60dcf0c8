"""
Pydantic schemas for API key management.
"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from courierdesk.models.api_key import Role


class ApiKeyCreateRequest(BaseModel):
    """Request schema for POST /api/v1/api-keys."""
    role: Role
    user_code: Optional[str] = Field(None, max_length=50)
    label: Optional[str] = Field(None, max_length=100)
    
    @model_validator(mode="after")
    def customer_keys_need_user_code(self):
        if self.role == Role.CUSTOMER and not self.user_code:
            raise ValueError("customer keys require a user_code")
        return self


class ApiKeyCreatedResponse(BaseModel):
    """The plaintext key is only ever returned here."""
    id: UUID
    key: str
    key_prefix: str
    role: Role
    user_code: Optional[str] = None
    label: Optional[str] = None
