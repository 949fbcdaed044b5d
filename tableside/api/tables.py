"""Table management API endpoints"""

import uuid
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.database import get_db
from tableside.models.call_request import CallRequest
from tableside.models.order import Order
from tableside.models.table import Table, TableStatus
from tableside.models.user import User, UserRole
from tableside.schemas.table import (
    TableCreate,
    TableUpdate,
    TableOccupant,
    TableResponse,
    TableListResponse,
)
from tableside.services.notifier import ConnectionManager, get_notifier, TABLE_UPDATED
from tableside.services.tables import (
    TableOccupancyTracker,
    build_table_url,
    get_customer_menu_base_url,
    serialize_table,
)
from tableside.api.auth import require_role

router = APIRouter()
logger = structlog.get_logger()


@router.get("", response_model=TableListResponse)
async def list_tables(
    status: Optional[TableStatus] = None,
    db: AsyncSession = Depends(get_db),
):
    """List tables ordered by name"""
    query = select(Table)
    if status:
        query = query.where(Table.status == status.value)
    query = query.order_by(Table.name)

    result = await db.execute(query)
    tables = result.scalars().all()
    return TableListResponse(items=tables, total=len(tables))


@router.post("/regenerate-locators", response_model=TableListResponse)
async def regenerate_locators(
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Rebuild every table's QR URL from the current customer menu base URL"""
    base_url = await get_customer_menu_base_url(db)

    result = await db.execute(select(Table).order_by(Table.name))
    tables = result.scalars().all()
    for table in tables:
        table.qr_code_url = build_table_url(table, base_url)
    await db.commit()

    for table in tables:
        await db.refresh(table)

    logger.info("Table locators regenerated", count=len(tables))
    return TableListResponse(items=tables, total=len(tables))


@router.get("/{table_id}", response_model=TableResponse)
async def get_table(
    table_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get table details"""
    return await TableOccupancyTracker(db).get_table(table_id)


@router.post("", response_model=TableResponse, status_code=201)
async def create_table(
    table_data: TableCreate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Create a table and its QR locator URL"""
    table = Table(
        id=uuid.uuid4(),
        name=table_data.name,
        status=TableStatus.AVAILABLE.value,
        current_occupants=[],
    )
    table.qr_code_url = build_table_url(table, await get_customer_menu_base_url(db))

    db.add(table)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Table name already exists")
    await db.refresh(table)

    logger.info("Table created", table_id=str(table.id), name=table.name)
    return table


@router.put("/{table_id}", response_model=TableResponse)
async def update_table(
    table_id: UUID,
    table_data: TableUpdate,
    current_user: User = Depends(require_role(UserRole.WAITER)),
    db: AsyncSession = Depends(get_db),
    notifier: ConnectionManager = Depends(get_notifier),
):
    """Update a table; staff free tables here once guests leave"""
    table = await TableOccupancyTracker(db).get_table(table_id)

    update_data = table_data.model_dump(exclude_unset=True)

    if "current_occupants" in update_data:
        occupants = table_data.current_occupants
        if isinstance(occupants, TableOccupant):
            occupants = [occupants]
        update_data["current_occupants"] = [o.model_dump() for o in occupants or []]

    if update_data.get("status") is not None:
        update_data["status"] = TableStatus(update_data["status"]).value

    renamed = "name" in update_data and update_data["name"] != table.name
    for field, value in update_data.items():
        setattr(table, field, value)

    if renamed:
        table.qr_code_url = build_table_url(table, await get_customer_menu_base_url(db))

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Table name already exists")
    await db.refresh(table)

    logger.info("Table updated", table_id=str(table_id), fields=sorted(update_data))
    await notifier.broadcast(TABLE_UPDATED, serialize_table(table))
    return table


@router.delete("/{table_id}", status_code=204)
async def delete_table(
    table_id: UUID,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Delete a table that has no orders or call requests"""
    table = await TableOccupancyTracker(db).get_table(table_id)

    for model in (Order, CallRequest):
        result = await db.execute(select(func.count(model.id)).where(model.table_id == table_id))
        if result.scalar():
            raise HTTPException(status_code=409, detail="Table has orders or call requests")

    await db.delete(table)
    await db.commit()

    logger.info("Table deleted", table_id=str(table_id))
