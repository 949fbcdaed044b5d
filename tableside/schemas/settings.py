"""Branding settings schemas"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class SettingsUpdate(BaseModel):
    """Update branding settings"""
    logo: Optional[str] = None
    primary_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    secondary_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    accent_color: Optional[str] = Field(default=None, pattern=HEX_COLOR)
    restaurant_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    customer_menu_base_url: Optional[str] = None
    menu_categories: Optional[List[str]] = None

    @field_validator(
        "restaurant_name", "primary_color", "secondary_color", "accent_color", "menu_categories"
    )
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("logo")
    @classmethod
    def logo_is_url_or_path(cls, value: Optional[str]) -> Optional[str]:
        if value and not value.startswith(("/", "http://", "https://")):
            raise ValueError("Logo must be a valid URL or path")
        return value

    @field_validator("customer_menu_base_url")
    @classmethod
    def base_url_is_url(cls, value: Optional[str]) -> Optional[str]:
        if value and not value.startswith(("http://", "https://")):
            raise ValueError("Customer menu base URL must be a valid URL")
        return value


class SettingsResponse(BaseModel):
    """Branding settings response"""
    restaurant_name: str
    logo: Optional[str]
    primary_color: str
    secondary_color: str
    accent_color: str
    customer_menu_base_url: Optional[str]
    menu_categories: List[str] = []
    updated_at: datetime

    class Config:
        from_attributes = True
