"""Table schemas"""

from datetime import datetime
from typing import Optional, List, Union
from uuid import UUID
from pydantic import BaseModel, Field, field_validator

from tableside.models.table import TableStatus


class TableOccupant(BaseModel):
    """A party seated at a table"""
    name: str
    joined_at: str


class TableCreate(BaseModel):
    """Create table request"""
    name: str = Field(min_length=1, max_length=50)


class TableUpdate(BaseModel):
    """Update table request; a single occupant object is accepted as a one-entry list"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    status: Optional[TableStatus] = None
    occupied_since: Optional[datetime] = None
    current_occupants: Optional[Union[List[TableOccupant], TableOccupant]] = None

    @field_validator("name", "status")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class TableResponse(BaseModel):
    """Table response"""
    id: UUID
    name: str
    qr_code_url: str
    status: TableStatus
    occupied_since: Optional[datetime]
    current_occupants: List[TableOccupant] = []
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TableListResponse(BaseModel):
    items: List[TableResponse]
    total: int
