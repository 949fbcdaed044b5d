"""Dining table model"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON, Uuid

from tableside.database import Base


class TableStatus(str, enum.Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"


class Table(Base):
    """Physical table reachable through its QR locator"""
    __tablename__ = "tables"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(50), unique=True, nullable=False)
    qr_code_url = Column(String(1000), nullable=False, default="")
    status = Column(String(20), nullable=False, default=TableStatus.AVAILABLE.value)
    occupied_since = Column(DateTime)

    # [{"name": "Alice", "joined_at": "2024-01-15T18:30:00"}]
    current_occupants = Column(JSON, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
