"""Customer schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, EmailStr

from tableside.schemas.order import OrderResponse


class CustomerUpsert(BaseModel):
    """Register a visit for a customer email"""
    email: EmailStr
    email_consent: Optional[bool] = None


class CustomerResponse(BaseModel):
    """Customer response"""
    id: UUID
    email: str
    email_consent: bool
    visit_count: int
    total_spent_cents: int
    last_visit_at: Optional[datetime]
    created_at: datetime
    order_count: Optional[int] = None

    class Config:
        from_attributes = True


class CustomerDetailResponse(CustomerResponse):
    """Customer with recent orders"""
    orders: List[OrderResponse] = []


class CustomerListResponse(BaseModel):
    """Paginated customer list"""
    items: List[CustomerResponse]
    total: int
    page: int
    limit: int
    total_pages: int
