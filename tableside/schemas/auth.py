"""Authentication and user schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator

from tableside.models.user import UserRole


class Token(BaseModel):
    """JWT token response"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenPayload(BaseModel):
    """JWT token payload"""
    sub: str  # User ID
    role: str
    exp: datetime


class RefreshRequest(BaseModel):
    """Token refresh request"""
    refresh_token: str


class UserCreate(BaseModel):
    """Create user request"""
    email: EmailStr
    password: str = Field(min_length=8)
    full_name: Optional[str] = None
    role: UserRole = UserRole.WAITER
    permissions: List[str] = []

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, value: str) -> str:
        if len(value.strip()) < 8:
            raise ValueError("Password must contain at least 8 non-whitespace characters")
        return value


class UserUpdate(BaseModel):
    """Update user request; only is_online applies to self-updates by non-admins"""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=8)
    full_name: Optional[str] = None
    role: Optional[UserRole] = None
    permissions: Optional[List[str]] = None
    is_online: Optional[bool] = None

    @field_validator("email", "role", "permissions", "is_online")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class UserResponse(BaseModel):
    """User response"""
    id: UUID
    email: str
    full_name: Optional[str]
    role: UserRole
    permissions: List[str] = []
    is_active: bool
    is_online: bool
    created_at: datetime
    last_login: Optional[datetime]

    class Config:
        from_attributes = True
