"""Pydantic schemas for request/response validation"""

from tableside.schemas.auth import (
    Token,
    TokenPayload,
    RefreshRequest,
    UserCreate,
    UserUpdate,
    UserResponse,
)
from tableside.schemas.menu import (
    MenuItemCreate,
    MenuItemUpdate,
    MenuItemResponse,
    CustomizationCreate,
    CustomizationUpdate,
    CustomizationResponse,
)
from tableside.schemas.table import (
    TableCreate,
    TableUpdate,
    TableResponse,
    TableListResponse,
    TableOccupant,
)
from tableside.schemas.order import (
    OrderCreate,
    OrderItemCreate,
    OrderStatusUpdate,
    OrderItemsAdd,
    OrderResponse,
    OrderListResponse,
)
from tableside.schemas.call_request import (
    CallRequestCreate,
    CallRequestResponse,
    CallRequestListResponse,
)
from tableside.schemas.customer import (
    CustomerUpsert,
    CustomerResponse,
    CustomerDetailResponse,
    CustomerListResponse,
)
from tableside.schemas.settings import SettingsUpdate, SettingsResponse

__all__ = [
    "Token",
    "TokenPayload",
    "RefreshRequest",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "MenuItemCreate",
    "MenuItemUpdate",
    "MenuItemResponse",
    "CustomizationCreate",
    "CustomizationUpdate",
    "CustomizationResponse",
    "TableCreate",
    "TableUpdate",
    "TableResponse",
    "TableListResponse",
    "TableOccupant",
    "OrderCreate",
    "OrderItemCreate",
    "OrderStatusUpdate",
    "OrderItemsAdd",
    "OrderResponse",
    "OrderListResponse",
    "CallRequestCreate",
    "CallRequestResponse",
    "CallRequestListResponse",
    "CustomerUpsert",
    "CustomerResponse",
    "CustomerDetailResponse",
    "CustomerListResponse",
    "SettingsUpdate",
    "SettingsResponse",
]
