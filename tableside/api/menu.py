"""Menu management API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from tableside.database import get_db
from tableside.models.menu import MenuItem
from tableside.models.user import User, UserRole
from tableside.schemas.menu import MenuItemCreate, MenuItemUpdate, MenuItemResponse
from tableside.api.auth import require_role

router = APIRouter()
logger = structlog.get_logger()


async def load_menu_item(db: AsyncSession, item_id: UUID) -> MenuItem:
    result = await db.execute(
        select(MenuItem)
        .where(MenuItem.id == item_id)
        .options(selectinload(MenuItem.customizations))
        .execution_options(populate_existing=True)
    )
    item = result.scalar_one_or_none()

    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")

    return item


@router.get("", response_model=List[MenuItemResponse])
async def list_menu_items(
    category: Optional[str] = None,
    is_active: Optional[bool] = True,
    popular: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
):
    """List menu items with their customizations"""
    query = select(MenuItem)

    if category:
        query = query.where(MenuItem.category == category)

    if is_active is not None:
        query = query.where(MenuItem.is_active == is_active)

    if popular:
        query = query.where(MenuItem.is_popular.is_(True)).order_by(MenuItem.popular_rank)

    query = query.options(selectinload(MenuItem.customizations))
    query = query.order_by(MenuItem.category, MenuItem.display_order, MenuItem.name)

    result = await db.execute(query)
    return result.scalars().all()


@router.post("", response_model=MenuItemResponse, status_code=201)
async def create_menu_item(
    item_data: MenuItemCreate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Create a new menu item"""
    item = MenuItem(**item_data.model_dump())
    db.add(item)
    await db.commit()

    logger.info("Menu item created", menu_item_id=str(item.id), name=item.name)
    return await load_menu_item(db, item.id)


@router.get("/{item_id}", response_model=MenuItemResponse)
async def get_menu_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """Get a specific menu item"""
    return await load_menu_item(db, item_id)


@router.put("/{item_id}", response_model=MenuItemResponse)
async def update_menu_item(
    item_id: UUID,
    item_data: MenuItemUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Update a menu item"""
    item = await load_menu_item(db, item_id)

    for field, value in item_data.model_dump(exclude_unset=True).items():
        setattr(item, field, value)

    await db.commit()
    return await load_menu_item(db, item_id)


@router.delete("/{item_id}", status_code=204)
async def delete_menu_item(
    item_id: UUID,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Delete a menu item (soft delete)"""
    item = await load_menu_item(db, item_id)

    item.is_active = False
    await db.commit()
    logger.info("Menu item deactivated", menu_item_id=str(item_id))
