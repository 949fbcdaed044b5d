"""Staff user administration endpoints"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.database import get_db
from tableside.models.user import User, UserRole
from tableside.schemas.auth import UserCreate, UserUpdate, UserResponse
from tableside.api.auth import get_current_user, get_password_hash, require_role

router = APIRouter()
logger = structlog.get_logger()

# Fields a non-admin may change on their own account
SELF_UPDATABLE = {"is_online"}


async def load_user(db: AsyncSession, user_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    return user


@router.get("", response_model=List[UserResponse])
async def list_users(
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """List staff users"""
    result = await db.execute(select(User).order_by(User.created_at))
    return result.scalars().all()


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    user_data: UserCreate,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Create a staff user"""
    user = User(
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        full_name=user_data.full_name,
        role=user_data.role,
        permissions=user_data.permissions,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Email already registered")
    await db.refresh(user)

    logger.info("User created", user_id=str(user.id), role=user.role.value)
    return user


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    user_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Update a user; admins may change anything, staff only their own presence"""
    update_data = user_data.model_dump(exclude_unset=True)

    if current_user.role != UserRole.ADMIN:
        if current_user.id != user_id:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        forbidden = set(update_data) - SELF_UPDATABLE
        if forbidden:
            raise HTTPException(
                status_code=403,
                detail="Cannot update fields: " + ", ".join(sorted(forbidden)),
            )

    user = await load_user(db, user_id)

    password = update_data.pop("password", None)
    if password:
        user.hashed_password = get_password_hash(password)

    for field, value in update_data.items():
        setattr(user, field, value)

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise HTTPException(status_code=409, detail="Email already registered")
    await db.refresh(user)
    return user


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: UUID,
    current_user: User = Depends(require_role(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    """Deactivate a staff user"""
    if current_user.id == user_id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")

    user = await load_user(db, user_id)

    user.is_active = False
    user.is_online = False
    user.refresh_token = None
    await db.commit()
    logger.info("User deactivated", user_id=str(user_id))
