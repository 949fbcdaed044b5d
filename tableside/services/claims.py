"""
Claim coordination for orders and call requests.

A claim marks which staff member is handling an entity. Claims are advisory:
they are plain columns, not locks. Claiming is a single conditional UPDATE
(``claimed_by IS NULL OR claimed_by = :staff``) so two staff members racing
for the same entity cannot both win. Releasing clears the claim regardless
of who holds it.
"""

from datetime import datetime
from typing import Any, Callable, Dict, Sequence
from uuid import UUID

from sqlalchemy import select, update, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from tableside.models.order import Order
from tableside.models.call_request import CallRequest
from tableside.schemas.order import OrderResponse
from tableside.schemas.call_request import CallRequestResponse
from tableside.services.errors import NotFoundError, ConflictError, PersistenceFailure
from tableside.services.notifier import ConnectionManager, manager

logger = structlog.get_logger()


class ClaimCoordinator:
    """Claim/release transitions for one claimable model"""

    def __init__(
        self,
        db: AsyncSession,
        model,
        event_prefix: str,
        serializer: Callable[[Any], Dict[str, Any]],
        notifier: ConnectionManager = manager,
        load_options: Sequence = (),
        label: str = "Entity",
    ):
        self.db = db
        self.model = model
        self.event_prefix = event_prefix
        self.serializer = serializer
        self.notifier = notifier
        self.load_options = tuple(load_options)
        self.label = label

    async def load(self, entity_id: UUID):
        """Fetch the entity, overwriting any stale copy in the session"""
        result = await self.db.execute(
            select(self.model)
            .where(self.model.id == entity_id)
            .options(*self.load_options)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def claim(self, entity_id: UUID, staff_id: UUID):
        """Claim for ``staff_id``; reclaiming your own claim refreshes claimed_at"""
        model = self.model
        stmt = (
            update(model)
            .where(
                model.id == entity_id,
                or_(model.claimed_by.is_(None), model.claimed_by == staff_id),
            )
            .values(claimed_by=staff_id, claimed_at=datetime.utcnow())
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                existing = await self.load(entity_id)
                if existing is None:
                    raise NotFoundError(f"{self.label} not found")
                logger.info(
                    "Claim rejected",
                    entity=self.event_prefix,
                    entity_id=str(entity_id),
                    staff_id=str(staff_id),
                    claimed_by=str(existing.claimed_by),
                )
                raise ConflictError(f"{self.label} already claimed by another staff member")
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Claim failed", entity=self.event_prefix, entity_id=str(entity_id), error=str(e))
            raise PersistenceFailure(f"Failed to claim {self.label.lower()}") from e

        entity = await self.load(entity_id)
        logger.info(
            "Claimed",
            entity=self.event_prefix,
            entity_id=str(entity_id),
            staff_id=str(staff_id),
        )
        await self.notifier.broadcast(f"{self.event_prefix}:claimed", self.serializer(entity))
        return entity

    async def release(self, entity_id: UUID):
        """Clear the claim no matter who holds it"""
        stmt = (
            update(self.model)
            .where(self.model.id == entity_id)
            .values(claimed_by=None, claimed_at=None)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                raise NotFoundError(f"{self.label} not found")
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Release failed", entity=self.event_prefix, entity_id=str(entity_id), error=str(e))
            raise PersistenceFailure(f"Failed to release {self.label.lower()}") from e

        entity = await self.load(entity_id)
        logger.info("Released", entity=self.event_prefix, entity_id=str(entity_id))
        await self.notifier.broadcast(f"{self.event_prefix}:released", self.serializer(entity))
        return entity


def serialize_order(order: Order) -> Dict[str, Any]:
    return OrderResponse.model_validate(order).model_dump(mode="json")


def serialize_call_request(request: CallRequest) -> Dict[str, Any]:
    return CallRequestResponse.model_validate(request).model_dump(mode="json")


def order_claims(db: AsyncSession, notifier: ConnectionManager = manager) -> ClaimCoordinator:
    return ClaimCoordinator(
        db,
        Order,
        "order",
        serialize_order,
        notifier=notifier,
        load_options=(selectinload(Order.items),),
        label="Order",
    )


def call_request_claims(db: AsyncSession, notifier: ConnectionManager = manager) -> ClaimCoordinator:
    return ClaimCoordinator(
        db,
        CallRequest,
        "call",
        serialize_call_request,
        notifier=notifier,
        label="Call request",
    )
