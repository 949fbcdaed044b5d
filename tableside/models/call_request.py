"""Service call request model"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Index, Uuid, text

from tableside.database import Base


class CallRequestType(str, enum.Enum):
    BILL = "bill"
    NAPKIN = "napkin"
    CLEANING = "cleaning"


class CallRequestStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class CallRequest(Base):
    """A table asking for the bill, napkins or cleaning"""
    __tablename__ = "call_requests"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    table_id = Column(Uuid, ForeignKey("tables.id"), nullable=False)
    table_name = Column(String(50), nullable=False)
    customer_name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=CallRequestStatus.PENDING.value)

    # Claim
    claimed_by = Column(Uuid, ForeignKey("users.id"))
    claimed_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime)
    completed_by = Column(Uuid, ForeignKey("users.id"))

    __table_args__ = (
        # One pending request per (table, type)
        Index(
            "uq_call_requests_pending_table_type",
            "table_id",
            "type",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )
