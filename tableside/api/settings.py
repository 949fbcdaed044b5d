"""Branding settings API endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.database import get_db
from tableside.models.settings import RestaurantSettings, BRANDING_SETTINGS_ID
from tableside.models.user import User, UserRole
from tableside.schemas.settings import SettingsUpdate, SettingsResponse
from tableside.api.auth import require_role

router = APIRouter()
logger = structlog.get_logger()


async def get_or_create_settings(db: AsyncSession) -> RestaurantSettings:
    """Load the branding row, creating it with defaults on first use"""
    result = await db.execute(
        select(RestaurantSettings).where(RestaurantSettings.id == BRANDING_SETTINGS_ID)
    )
    branding = result.scalar_one_or_none()

    if branding is None:
        branding = RestaurantSettings(id=BRANDING_SETTINGS_ID, menu_categories=[])
        db.add(branding)
        await db.commit()
        await db.refresh(branding)

    return branding


@router.get("", response_model=SettingsResponse)
async def get_settings(db: AsyncSession = Depends(get_db)):
    """Get branding settings"""
    return await get_or_create_settings(db)


@router.put("", response_model=SettingsResponse)
async def update_settings(
    settings_data: SettingsUpdate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Update branding settings"""
    branding = await get_or_create_settings(db)

    update_data = settings_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(branding, field, value)

    await db.commit()
    await db.refresh(branding)

    logger.info("Settings updated", user_id=str(current_user.id), fields=sorted(update_data))
    return branding
