"""Menu item customization API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from tableside.database import get_db
from tableside.models.menu import Customization
from tableside.models.user import User, UserRole
from tableside.schemas.menu import (
    CustomizationBase,
    CustomizationCreate,
    CustomizationUpdate,
    CustomizationResponse,
)
from tableside.api.auth import require_role
from tableside.api.menu import load_menu_item

router = APIRouter()


async def load_customization(db: AsyncSession, customization_id: UUID) -> Customization:
    result = await db.execute(
        select(Customization).where(Customization.id == customization_id)
    )
    customization = result.scalar_one_or_none()

    if not customization:
        raise HTTPException(status_code=404, detail="Customization not found")

    return customization


@router.get("", response_model=List[CustomizationResponse])
async def list_customizations(
    menu_item_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
):
    """List customizations, optionally for one menu item"""
    query = select(Customization)
    if menu_item_id:
        query = query.where(Customization.menu_item_id == menu_item_id)
    query = query.order_by(Customization.created_at)

    result = await db.execute(query)
    return result.scalars().all()


@router.post("", response_model=CustomizationResponse, status_code=201)
async def create_customization(
    customization_data: CustomizationCreate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    await load_menu_item(db, customization_data.menu_item_id)

    customization = Customization(**customization_data.model_dump())
    db.add(customization)
    await db.commit()
    await db.refresh(customization)
    return customization


@router.put("/menu-item/{menu_item_id}", response_model=List[CustomizationResponse])
async def replace_menu_item_customizations(
    menu_item_id: UUID,
    customizations: List[CustomizationBase],
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Replace every customization of a menu item"""
    await load_menu_item(db, menu_item_id)

    await db.execute(delete(Customization).where(Customization.menu_item_id == menu_item_id))
    created = []
    for data in customizations:
        customization = Customization(menu_item_id=menu_item_id, **data.model_dump())
        db.add(customization)
        created.append(customization)
    await db.commit()

    for customization in created:
        await db.refresh(customization)
    return created


@router.put("/{customization_id}", response_model=CustomizationResponse)
async def update_customization(
    customization_id: UUID,
    customization_data: CustomizationUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    customization = await load_customization(db, customization_id)

    for field, value in customization_data.model_dump(exclude_unset=True).items():
        setattr(customization, field, value)

    await db.commit()
    await db.refresh(customization)
    return customization


@router.delete("/{customization_id}", status_code=204)
async def delete_customization(
    customization_id: UUID,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    customization = await load_customization(db, customization_id)

    await db.delete(customization)
    await db.commit()
