"""Order schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator

from tableside.models.order import OrderStatus, OrderSource


class SelectedOption(BaseModel):
    """A chosen customization option"""
    name: str
    price_cents: Optional[int] = Field(default=None, ge=0)


class OrderItemCustomization(BaseModel):
    """Customization selections for one order item"""
    customization_id: str
    name: Optional[str] = None
    type: Optional[str] = None
    selected_options: List[SelectedOption]


class OrderItemCreate(BaseModel):
    """Create order item"""
    menu_item_id: UUID
    menu_item_name: str
    quantity: int = Field(gt=0)
    base_price_cents: int = Field(ge=0)
    customizations: List[OrderItemCustomization] = []
    customer_notes: Optional[str] = Field(default=None, max_length=500)
    item_total_cents: int = Field(ge=0)


class OrderCreate(BaseModel):
    """Create order request (customer QR menu or staff entry)"""
    table_id: UUID
    table_name: str = Field(min_length=1)
    customer_name: str = Field(min_length=1, max_length=100)
    customer_email: Optional[EmailStr] = None
    items: List[OrderItemCreate] = Field(min_length=1)
    total_cents: int = Field(ge=0)
    order_source: OrderSource = OrderSource.CUSTOMER


class OrderStatusUpdate(BaseModel):
    """Update order status request"""
    status: OrderStatus
    queue_position: Optional[int] = None

    @field_validator("status")
    @classmethod
    def status_not_pending(cls, value: OrderStatus) -> OrderStatus:
        if value == OrderStatus.PENDING:
            raise ValueError("pending is only valid as the initial status")
        return value


class OrderItemsAdd(BaseModel):
    """Append items to an existing order"""
    items: List[OrderItemCreate] = Field(min_length=1)
    additional_cents: int = Field(ge=0)


class OrderItemResponse(BaseModel):
    """Order item in response"""
    id: UUID
    menu_item_id: UUID
    menu_item_name: str
    quantity: int
    base_price_cents: int
    customizations: List[OrderItemCustomization]
    customer_notes: Optional[str]
    item_total_cents: int

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    """Order response"""
    id: UUID
    table_id: UUID
    table_name: str
    customer_name: str
    customer_email: Optional[str]
    customer_id: Optional[UUID]
    status: OrderStatus
    queue_position: Optional[int]
    total_cents: int
    order_source: OrderSource
    claimed_by: Optional[UUID]
    claimed_at: Optional[datetime]
    created_at: datetime
    confirmed_at: Optional[datetime]
    ready_at: Optional[datetime]
    completed_at: Optional[datetime]
    updated_at: datetime
    items: List[OrderItemResponse] = []

    class Config:
        from_attributes = True


class OrderListResponse(BaseModel):
    """Order list"""
    items: List[OrderResponse]
    total: int
