"""Menu-related models"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, JSON, Text, Uuid
from sqlalchemy.orm import relationship

from tableside.database import Base


class MenuItem(Base):
    """Menu items"""
    __tablename__ = "menu_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(100), nullable=False)
    description = Column(Text, default="")
    price_cents = Column(Integer, nullable=False)  # Price in cents to avoid float issues
    category = Column(String(100), nullable=False)
    image_url = Column(String(500))
    is_popular = Column(Boolean, default=False)
    popular_rank = Column(Integer)
    display_order = Column(Integer)
    is_active = Column(Boolean, default=True)
    allergens = Column(JSON, default=list)  # ["nuts", "dairy", etc.]
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    customizations = relationship(
        "Customization", back_populates="menu_item", cascade="all, delete-orphan"
    )


class Customization(Base):
    """Customer-selectable options for a menu item (size, extras, ...)"""
    __tablename__ = "customizations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    menu_item_id = Column(Uuid, ForeignKey("menu_items.id"), nullable=False)
    type = Column(String(50), nullable=False)  # size, extras, removal, ...
    name = Column(String(100), nullable=False)
    options = Column(JSON, nullable=False)  # [{"name": "Large", "price_cents": 200, "is_default": false}, ...]
    allow_multiple = Column(Boolean, default=False)
    required = Column(Boolean, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    menu_item = relationship("MenuItem", back_populates="customizations")
