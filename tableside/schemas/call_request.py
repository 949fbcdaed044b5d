"""Call request schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field

from tableside.models.call_request import CallRequestType, CallRequestStatus


class CallRequestCreate(BaseModel):
    """Create call request (from the table's QR menu)"""
    table_id: UUID
    table_name: str = Field(min_length=1)
    customer_name: str = Field(min_length=1, max_length=100)
    type: CallRequestType


class CallRequestResponse(BaseModel):
    """Call request response"""
    id: UUID
    table_id: UUID
    table_name: str
    customer_name: str
    type: CallRequestType
    status: CallRequestStatus
    claimed_by: Optional[UUID]
    claimed_at: Optional[datetime]
    created_at: datetime
    completed_at: Optional[datetime]
    completed_by: Optional[UUID]

    class Config:
        from_attributes = True


class CallRequestListResponse(BaseModel):
    items: List[CallRequestResponse]
    total: int
