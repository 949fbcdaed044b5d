"""Database models"""

from tableside.models.user import User, UserRole
from tableside.models.menu import MenuItem, Customization
from tableside.models.table import Table, TableStatus
from tableside.models.customer import Customer
from tableside.models.order import Order, OrderItem, OrderStatus, OrderSource
from tableside.models.call_request import CallRequest, CallRequestType, CallRequestStatus
from tableside.models.settings import RestaurantSettings

__all__ = [
    "User",
    "UserRole",
    "MenuItem",
    "Customization",
    "Table",
    "TableStatus",
    "Customer",
    "Order",
    "OrderItem",
    "OrderStatus",
    "OrderSource",
    "CallRequest",
    "CallRequestType",
    "CallRequestStatus",
    "RestaurantSettings",
]
