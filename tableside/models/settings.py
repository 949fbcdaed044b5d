"""Restaurant branding settings"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON

from tableside.database import Base

BRANDING_SETTINGS_ID = "branding"


class RestaurantSettings(Base):
    """Single-row branding and customer menu configuration"""
    __tablename__ = "restaurant_settings"

    id = Column(String(50), primary_key=True, default=BRANDING_SETTINGS_ID)

    restaurant_name = Column(String(100), default="Restaurant")
    logo = Column(String(500))
    primary_color = Column(String(7), default="#1F2937")
    secondary_color = Column(String(7), default="#F59E0B")
    accent_color = Column(String(7), default="#10B981")

    # Base URL of the customer menu that table QR codes point at
    customer_menu_base_url = Column(String(500))
    menu_categories = Column(JSON, default=list)

    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
