"""Order models"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Text, Integer, Uuid
from sqlalchemy.orm import relationship

from tableside.database import Base


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    COMPLETED = "completed"


class OrderSource(str, enum.Enum):
    CUSTOMER = "customer"  # submitted from the table's QR menu
    MANUAL = "manual"  # keyed in by staff


class Order(Base):
    """Dine-in orders"""
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    table_id = Column(Uuid, ForeignKey("tables.id"), nullable=False)
    table_name = Column(String(50), nullable=False)

    # Customer information
    customer_name = Column(String(100), nullable=False)
    customer_email = Column(String(255))
    customer_id = Column(Uuid, ForeignKey("customers.id"))

    # Status
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING.value)
    queue_position = Column(Integer)
    order_source = Column(String(20), nullable=False, default=OrderSource.CUSTOMER.value)

    # Pricing
    total_cents = Column(Integer, nullable=False, default=0)

    # Claim (claimed_at is set iff claimed_by is set)
    claimed_by = Column(Uuid, ForeignKey("users.id"))
    claimed_at = Column(DateTime)

    # Lifecycle timestamps; "preparing" has none
    created_at = Column(DateTime, default=datetime.utcnow)
    confirmed_at = Column(DateTime)
    ready_at = Column(DateTime)
    completed_at = Column(DateTime)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.created_at",
    )
    customer = relationship("Customer", back_populates="orders")


class OrderItem(Base):
    """A menu item line on an order"""
    __tablename__ = "order_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id = Column(Uuid, ForeignKey("orders.id"), nullable=False)
    menu_item_id = Column(Uuid, ForeignKey("menu_items.id"), nullable=False)
    menu_item_name = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    base_price_cents = Column(Integer, nullable=False)

    # [{"customization_id": "...", "name": "Size", "type": "size",
    #   "selected_options": [{"name": "Large", "price_cents": 200}]}, ...]
    customizations = Column(JSON, nullable=False, default=list)

    customer_notes = Column(Text)
    item_total_cents = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    order = relationship("Order", back_populates="items")
