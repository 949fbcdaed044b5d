"""Menu schemas"""

from datetime import datetime
from typing import Optional, List
from uuid import UUID
from pydantic import BaseModel, Field, field_validator


def _check_image_url(value: Optional[str]) -> Optional[str]:
    if value and not value.startswith(("/", "http://", "https://")):
        raise ValueError("Image URL must be a valid URL or relative path")
    return value


class CustomizationOption(BaseModel):
    """One selectable option of a customization"""
    name: str
    price_cents: int = Field(default=0, ge=0)
    is_default: bool = False


class CustomizationBase(BaseModel):
    type: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=100)
    options: List[CustomizationOption]
    allow_multiple: bool = False
    required: bool = False


class CustomizationCreate(CustomizationBase):
    """Create customization"""
    menu_item_id: UUID


class CustomizationUpdate(BaseModel):
    """Update customization"""
    type: Optional[str] = None
    name: Optional[str] = None
    options: Optional[List[CustomizationOption]] = None
    allow_multiple: Optional[bool] = None
    required: Optional[bool] = None

    @field_validator("type", "name", "options", "allow_multiple", "required")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class CustomizationResponse(BaseModel):
    """Customization response"""
    id: UUID
    menu_item_id: UUID
    type: str
    name: str
    options: List[CustomizationOption]
    allow_multiple: bool
    required: bool

    class Config:
        from_attributes = True


class MenuItemCreate(BaseModel):
    """Create menu item request"""
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=1000)
    price_cents: int = Field(gt=0)
    category: str = Field(min_length=1)
    image_url: Optional[str] = None
    is_popular: bool = False
    popular_rank: Optional[int] = Field(default=None, gt=0)
    display_order: Optional[int] = Field(default=None, ge=0)
    allergens: List[str] = []

    @field_validator("image_url")
    @classmethod
    def image_url_is_url_or_path(cls, value: Optional[str]) -> Optional[str]:
        return _check_image_url(value)


class MenuItemUpdate(BaseModel):
    """Update menu item request"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    price_cents: Optional[int] = Field(default=None, gt=0)
    category: Optional[str] = None
    image_url: Optional[str] = None
    is_popular: Optional[bool] = None
    popular_rank: Optional[int] = None
    display_order: Optional[int] = None
    is_active: Optional[bool] = None
    allergens: Optional[List[str]] = None

    @field_validator("name", "price_cents", "category", "is_active", "is_popular", "allergens")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    @field_validator("image_url")
    @classmethod
    def image_url_is_url_or_path(cls, value: Optional[str]) -> Optional[str]:
        return _check_image_url(value)


class MenuItemResponse(BaseModel):
    """Menu item response"""
    id: UUID
    name: str
    description: Optional[str]
    price_cents: int
    category: str
    image_url: Optional[str]
    is_popular: bool
    popular_rank: Optional[int]
    display_order: Optional[int]
    is_active: bool
    allergens: List[str]
    customizations: List[CustomizationResponse] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
