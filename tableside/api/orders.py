"""Order management API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from tableside.database import get_db
from tableside.models.order import OrderStatus
from tableside.models.user import User, UserRole
from tableside.schemas.order import (
    OrderCreate,
    OrderStatusUpdate,
    OrderItemsAdd,
    OrderResponse,
    OrderListResponse,
)
from tableside.services.notifier import ConnectionManager, get_notifier
from tableside.services.orders import OrderLifecycleManager
from tableside.api.auth import require_role

router = APIRouter()

any_staff = require_role(UserRole.WAITER, UserRole.CHEF)
floor_staff = require_role(UserRole.WAITER)


def parse_statuses(raw: Optional[str]) -> List[OrderStatus]:
    """Parse a comma separated status filter such as ``pending,confirmed``"""
    if not raw:
        return []
    statuses = []
    for value in raw.split(","):
        value = value.strip()
        if not value:
            continue
        try:
            statuses.append(OrderStatus(value))
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid order status: {value}")
    return statuses


def get_order_manager(
    db: AsyncSession = Depends(get_db),
    notifier: ConnectionManager = Depends(get_notifier),
) -> OrderLifecycleManager:
    return OrderLifecycleManager(db, notifier=notifier)


@router.post("", response_model=OrderResponse, status_code=201)
async def create_order(
    order_data: OrderCreate,
    orders: OrderLifecycleManager = Depends(get_order_manager),
):
    """Submit an order from the customer menu or staff entry"""
    return await orders.submit_order(order_data)


@router.get("", response_model=OrderListResponse)
async def list_orders(
    status: Optional[str] = Query(None, description="Comma separated statuses"),
    table_id: Optional[UUID] = None,
    current_user: User = Depends(any_staff),
    orders: OrderLifecycleManager = Depends(get_order_manager),
):
    """List orders, newest first"""
    items = await orders.list_orders(statuses=parse_statuses(status), table_id=table_id)
    return OrderListResponse(items=items, total=len(items))


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    orders: OrderLifecycleManager = Depends(get_order_manager),
):
    """Get order details"""
    return await orders.get_order(order_id)


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    update_data: OrderStatusUpdate,
    current_user: User = Depends(any_staff),
    orders: OrderLifecycleManager = Depends(get_order_manager),
):
    """Move an order to a new status"""
    return await orders.update_status(
        order_id, update_data.status, queue_position=update_data.queue_position
    )


@router.post("/{order_id}/items", response_model=OrderResponse)
async def add_order_items(
    order_id: UUID,
    items_data: OrderItemsAdd,
    orders: OrderLifecycleManager = Depends(get_order_manager),
):
    """Append items to an existing order"""
    return await orders.add_items(order_id, items_data.items, items_data.additional_cents)


@router.post("/{order_id}/claim", response_model=OrderResponse)
async def claim_order(
    order_id: UUID,
    current_user: User = Depends(floor_staff),
    orders: OrderLifecycleManager = Depends(get_order_manager),
):
    """Claim an order for the current staff member"""
    return await orders.claim(order_id, current_user.id)


@router.post("/{order_id}/release", response_model=OrderResponse)
async def release_order(
    order_id: UUID,
    current_user: User = Depends(floor_staff),
    orders: OrderLifecycleManager = Depends(get_order_manager),
):
    """Release an order's claim, whoever holds it"""
    return await orders.release(order_id)
