"""User model for staff authentication"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Enum, JSON, Uuid
import enum

from tableside.database import Base


class UserRole(str, enum.Enum):
    """Staff roles for RBAC"""
    ADMIN = "admin"
    WAITER = "waiter"
    CHEF = "chef"


class User(Base):
    """Staff users (admins, waiters, kitchen)"""
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Authentication
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Profile
    full_name = Column(String(255))

    # Role and explicit grants, e.g. ["view_customers"]
    role = Column(Enum(UserRole), default=UserRole.WAITER, nullable=False)
    permissions = Column(JSON, default=list)

    # Status
    is_active = Column(Boolean, default=True)
    is_online = Column(Boolean, default=False)

    # Tokens
    refresh_token = Column(String(500))

    # Timestamps
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def has_role(self, *roles: UserRole) -> bool:
        """Admins pass every role check"""
        return self.role == UserRole.ADMIN or self.role in roles

    def has_permission(self, permission: str) -> bool:
        """Check an explicit permission grant; admins hold every permission"""
        if self.role == UserRole.ADMIN:
            return True
        return permission in (self.permissions or [])
