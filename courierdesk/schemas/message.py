"""
Pydantic schemas for customer messages.
"""

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """A notification in the customer's inbox."""
    id: UUID
    subject: str
    body: str
    sender: str
    read: bool
    created_at: datetime
    
    model_config = {"from_attributes": True}


class MessageListResponse(BaseModel):
    """Customer inbox, newest first."""
    messages: List[MessageResponse]
    unread_count: int
