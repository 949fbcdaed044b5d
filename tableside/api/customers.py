"""Customer API endpoints"""

from math import ceil
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from tableside.database import get_db
from tableside.models.customer import Customer
from tableside.models.order import Order
from tableside.models.user import User
from tableside.schemas.customer import (
    CustomerUpsert,
    CustomerResponse,
    CustomerDetailResponse,
    CustomerListResponse,
)
from tableside.schemas.order import OrderResponse
from tableside.services.customers import CustomerSpendAggregator
from tableside.api.auth import require_permission

router = APIRouter()

SORT_COLUMNS = {
    "email": Customer.email,
    "visit_count": Customer.visit_count,
    "total_spent_cents": Customer.total_spent_cents,
    "last_visit_at": Customer.last_visit_at,
    "created_at": Customer.created_at,
}

RECENT_ORDERS_LIMIT = 10

view_customers = require_permission("view_customers")


@router.post("", response_model=CustomerResponse)
async def record_customer_visit(
    visit: CustomerUpsert,
    db: AsyncSession = Depends(get_db),
):
    """Register a customer or count a repeat visit"""
    return await CustomerSpendAggregator(db).record_visit(visit.email, visit.email_consent)


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    search: Optional[str] = None,
    sort_by: str = Query("last_visit_at"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(view_customers),
    db: AsyncSession = Depends(get_db),
):
    """List customers with their order counts"""
    if sort_by not in SORT_COLUMNS:
        raise HTTPException(status_code=400, detail=f"Cannot sort by {sort_by}")

    order_counts = (
        select(Order.customer_id, func.count(Order.id).label("order_count"))
        .group_by(Order.customer_id)
        .subquery()
    )

    query = select(Customer, func.coalesce(order_counts.c.order_count, 0)).outerjoin(
        order_counts, order_counts.c.customer_id == Customer.id
    )
    count_query = select(func.count(Customer.id))

    if search:
        pattern = f"%{search}%"
        query = query.where(Customer.email.ilike(pattern))
        count_query = count_query.where(Customer.email.ilike(pattern))

    # Get total
    total_result = await db.execute(count_query)
    total = total_result.scalar()

    column = SORT_COLUMNS[sort_by]
    query = query.order_by(column.asc() if sort_order == "asc" else column.desc())
    query = query.offset((page - 1) * limit).limit(limit)

    result = await db.execute(query)
    items = []
    for customer, order_count in result.all():
        response = CustomerResponse.model_validate(customer)
        response.order_count = order_count
        items.append(response)

    return CustomerListResponse(
        items=items,
        total=total,
        page=page,
        limit=limit,
        total_pages=ceil(total / limit) if total else 0,
    )


@router.get("/{customer_id}", response_model=CustomerDetailResponse)
async def get_customer(
    customer_id: UUID,
    current_user: User = Depends(view_customers),
    db: AsyncSession = Depends(get_db),
):
    """Get a customer with their most recent orders"""
    result = await db.execute(select(Customer).where(Customer.id == customer_id))
    customer = result.scalar_one_or_none()

    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")

    count_result = await db.execute(
        select(func.count(Order.id)).where(Order.customer_id == customer_id)
    )
    orders_result = await db.execute(
        select(Order)
        .where(Order.customer_id == customer_id)
        .options(selectinload(Order.items))
        .order_by(Order.created_at.desc())
        .limit(RECENT_ORDERS_LIMIT)
    )

    return CustomerDetailResponse(
        **CustomerResponse.model_validate(customer).model_dump(exclude={"order_count"}),
        order_count=count_result.scalar(),
        orders=[OrderResponse.model_validate(o) for o in orders_result.scalars().all()],
    )
