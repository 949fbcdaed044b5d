"""
Order lifecycle.

Orders start ``pending`` and move through confirmed, preparing, ready and
completed. Status updates are trusted staff input and are applied as given;
the only rules enforced are that ``pending`` cannot be set again and that
each lifecycle timestamp is stamped once, on first entry into its status.
"""

from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from tableside.models.menu import MenuItem
from tableside.models.order import Order, OrderItem, OrderStatus
from tableside.schemas.order import OrderCreate, OrderItemCreate
from tableside.services.claims import ClaimCoordinator, order_claims, serialize_order
from tableside.services.customers import CustomerSpendAggregator
from tableside.services.errors import (
    ServiceError,
    NotFoundError,
    ValidationFailure,
    PersistenceFailure,
)
from tableside.services.notifier import (
    ConnectionManager,
    manager,
    ORDER_NEW,
    ORDER_UPDATED,
    ORDER_CONFIRMED,
)
from tableside.services.tables import TableOccupancyTracker

logger = structlog.get_logger()


# Status -> timestamp column stamped on first entry; preparing has none
STATUS_TIMESTAMPS = {
    OrderStatus.CONFIRMED: "confirmed_at",
    OrderStatus.READY: "ready_at",
    OrderStatus.COMPLETED: "completed_at",
}


def build_order_item(item: OrderItemCreate) -> OrderItem:
    return OrderItem(
        menu_item_id=item.menu_item_id,
        menu_item_name=item.menu_item_name,
        quantity=item.quantity,
        base_price_cents=item.base_price_cents,
        customizations=[c.model_dump() for c in item.customizations],
        customer_notes=item.customer_notes,
        item_total_cents=item.item_total_cents,
    )


class OrderLifecycleManager:
    """Submission, status progression and item additions for orders"""

    def __init__(
        self,
        db: AsyncSession,
        notifier: ConnectionManager = manager,
        tables: Optional[TableOccupancyTracker] = None,
        customers: Optional[CustomerSpendAggregator] = None,
    ):
        self.db = db
        self.notifier = notifier
        self.tables = tables or TableOccupancyTracker(db)
        self.customers = customers or CustomerSpendAggregator(db)

    @property
    def claims(self) -> ClaimCoordinator:
        return order_claims(self.db, self.notifier)

    async def get_order(self, order_id: UUID) -> Order:
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.items))
            .execution_options(populate_existing=True)
        )
        order = result.scalar_one_or_none()
        if order is None:
            raise NotFoundError("Order not found")
        return order

    async def list_orders(
        self,
        statuses: Optional[List[OrderStatus]] = None,
        table_id: Optional[UUID] = None,
    ) -> List[Order]:
        query = select(Order).options(selectinload(Order.items))
        if statuses:
            query = query.where(Order.status.in_([s.value for s in statuses]))
        if table_id:
            query = query.where(Order.table_id == table_id)
        query = query.order_by(Order.created_at.desc())

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _check_menu_items(self, menu_item_ids: Iterable[UUID]) -> None:
        wanted = set(menu_item_ids)
        result = await self.db.execute(select(MenuItem.id).where(MenuItem.id.in_(wanted)))
        missing = wanted - set(result.scalars().all())
        if missing:
            raise ValidationFailure(
                "Unknown menu item: " + ", ".join(sorted(str(m) for m in missing))
            )

    async def submit_order(self, data: OrderCreate) -> Order:
        """Create a pending order and occupy its table in one transaction"""
        try:
            await self._check_menu_items(item.menu_item_id for item in data.items)
            table = await self.tables.get_table(data.table_id)

            customer_id = None
            if data.customer_email:
                customer = await self.customers.get_by_email(data.customer_email)
                if customer:
                    customer_id = customer.id

            order = Order(
                table_id=table.id,
                table_name=data.table_name,
                customer_name=data.customer_name,
                customer_email=data.customer_email,
                customer_id=customer_id,
                status=OrderStatus.PENDING.value,
                total_cents=data.total_cents,
                order_source=data.order_source.value,
                items=[build_order_item(item) for item in data.items],
            )
            self.db.add(order)
            await self.db.flush()

            await self.tables.mark_occupied(table.id, data.customer_name)
            await self.db.commit()
        except ServiceError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Create order failed", table_id=str(data.table_id), error=str(e))
            raise PersistenceFailure("Failed to create order") from e

        order = await self.get_order(order.id)
        logger.info(
            "Order submitted",
            order_id=str(order.id),
            table_id=str(order.table_id),
            items=len(order.items),
            total_cents=order.total_cents,
            source=order.order_source,
        )
        await self.notifier.broadcast(ORDER_NEW, serialize_order(order))
        return order

    async def update_status(
        self,
        order_id: UUID,
        status: OrderStatus,
        queue_position: Optional[int] = None,
    ) -> Order:
        """Apply a staff status change and its side effects"""
        status = OrderStatus(status)
        if status == OrderStatus.PENDING:
            raise ValidationFailure("pending is only valid as the initial status")

        values = {"status": status.value}
        if queue_position is not None:
            values["queue_position"] = queue_position

        first_entry = False
        try:
            result = await self.db.execute(
                update(Order)
                .where(Order.id == order_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self.db.rollback()
                raise NotFoundError("Order not found")

            stamp = STATUS_TIMESTAMPS.get(status)
            if stamp:
                column = getattr(Order, stamp)
                stamped = await self.db.execute(
                    update(Order)
                    .where(Order.id == order_id, column.is_(None))
                    .values({stamp: datetime.utcnow()})
                    .execution_options(synchronize_session=False)
                )
                first_entry = stamped.rowcount == 1
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Update order status failed", order_id=str(order_id), error=str(e))
            raise PersistenceFailure("Failed to update order status") from e

        order = await self.get_order(order_id)

        # Spend is added once, when the order first reaches completed
        if status == OrderStatus.COMPLETED and first_entry and order.customer_email:
            await self.customers.record_spend(order.customer_email, order.total_cents)
            order = await self.get_order(order_id)

        logger.info(
            "Order status updated",
            order_id=str(order_id),
            status=status.value,
            queue_position=order.queue_position,
        )
        payload = serialize_order(order)
        await self.notifier.broadcast(ORDER_UPDATED, payload)
        if status == OrderStatus.CONFIRMED:
            await self.notifier.broadcast(ORDER_CONFIRMED, payload)
        return order

    async def add_items(
        self,
        order_id: UUID,
        items: List[OrderItemCreate],
        additional_cents: int,
    ) -> Order:
        """Append items; the total grows by the caller's amount, not a recomputation"""
        order = await self.get_order(order_id)

        try:
            await self._check_menu_items(item.menu_item_id for item in items)
            for item in items:
                order_item = build_order_item(item)
                order_item.order_id = order.id
                self.db.add(order_item)

            await self.db.execute(
                update(Order)
                .where(Order.id == order.id)
                .values(total_cents=Order.total_cents + additional_cents)
                .execution_options(synchronize_session=False)
            )
            await self.db.commit()
        except ServiceError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error("Add items to order failed", order_id=str(order_id), error=str(e))
            raise PersistenceFailure("Failed to add items to order") from e

        order = await self.get_order(order_id)
        logger.info(
            "Order items added",
            order_id=str(order_id),
            added=len(items),
            additional_cents=additional_cents,
        )
        await self.notifier.broadcast(ORDER_UPDATED, serialize_order(order))
        return order

    async def claim(self, order_id: UUID, staff_id: UUID) -> Order:
        return await self.claims.claim(order_id, staff_id)

    async def release(self, order_id: UUID) -> Order:
        return await self.claims.release(order_id)
