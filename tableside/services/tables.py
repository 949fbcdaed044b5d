"""Table occupancy tracking and QR locator URLs"""

from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import quote
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from tableside.config import settings
from tableside.models.settings import RestaurantSettings, BRANDING_SETTINGS_ID
from tableside.models.table import Table, TableStatus
from tableside.schemas.table import TableResponse
from tableside.services.errors import NotFoundError

logger = structlog.get_logger()


class TableOccupancyTracker:
    """Keeps a table's status and occupant list in step with new orders.

    Writes happen inside the caller's transaction; nothing here commits.
    Tables never return to ``available`` on their own, staff do that through
    the table update endpoint.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_table(self, table_id: UUID) -> Table:
        result = await self.db.execute(select(Table).where(Table.id == table_id))
        table = result.scalar_one_or_none()
        if table is None:
            raise NotFoundError("Table not found")
        return table

    async def mark_occupied(self, table_id: UUID, customer_name: str) -> Table:
        """Occupy the table, replacing the occupant list with the ordering customer"""
        table = await self.get_table(table_id)
        now = datetime.utcnow()
        table.status = TableStatus.OCCUPIED.value
        table.occupied_since = now
        table.current_occupants = [{"name": customer_name, "joined_at": now.isoformat()}]
        await self.db.flush()
        logger.info("Table occupied", table_id=str(table_id), customer_name=customer_name)
        return table


async def get_customer_menu_base_url(db: AsyncSession) -> Optional[str]:
    result = await db.execute(
        select(RestaurantSettings.customer_menu_base_url).where(
            RestaurantSettings.id == BRANDING_SETTINGS_ID
        )
    )
    return result.scalar_one_or_none()


def build_table_url(table: Table, base_url: Optional[str] = None) -> str:
    """Customer menu URL encoded into the table's QR code"""
    fallback = f"http://{settings.app_domain}"
    base = ((base_url or "").strip() or fallback).rstrip("/")

    # Local development servers are not served over TLS
    if "localhost" in base or "127.0.0.1" in base:
        base = "http://" + base.split("://", 1)[-1]

    slug = quote(table.name, safe="")
    return f"{base}/table/{slug}?tableId={table.id}"


def serialize_table(table: Table) -> Dict[str, Any]:
    return TableResponse.model_validate(table).model_dump(mode="json")
