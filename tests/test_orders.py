"""Order lifecycle service tests"""

import pytest
from sqlalchemy import select, func
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from uuid import uuid4

from tableside.models.order import Order, OrderItem, OrderStatus
from tableside.models.table import Table, TableStatus
from tableside.schemas.order import OrderCreate, OrderItemCreate
from tableside.services.customers import CustomerSpendAggregator
from tableside.services.errors import NotFoundError, ValidationFailure, PersistenceFailure
from tableside.services.orders import OrderLifecycleManager
from tableside.services.tables import TableOccupancyTracker


class FailingTracker(TableOccupancyTracker):
    async def mark_occupied(self, table_id, customer_name):
        raise SQLAlchemyError("table update failed")


class UnavailableSession:
    """Session stand-in whose statements all fail"""

    def __init__(self, db):
        self.db = db

    async def execute(self, *args, **kwargs):
        raise OperationalError("UPDATE customers", {}, Exception("database is locked"))

    async def commit(self):
        await self.db.commit()

    async def rollback(self):
        await self.db.rollback()


async def count(db, model):
    result = await db.execute(select(func.count(model.id)))
    return result.scalar()


@pytest.fixture
def orders(test_db, notifier):
    return OrderLifecycleManager(test_db, notifier=notifier)


@pytest.fixture
async def pending_order(orders, make_order, test_tables, test_menu_items):
    return await orders.submit_order(OrderCreate(**make_order(test_tables[0], test_menu_items[0])))


@pytest.mark.asyncio
async def test_submit_order_occupies_table(make_order, orders, test_db, notifier, test_tables, test_menu_items):
    table_id = test_tables[0].id
    order = await orders.submit_order(
        OrderCreate(**make_order(test_tables[0], test_menu_items[0], quantity=2))
    )

    assert order.status == OrderStatus.PENDING.value
    assert order.total_cents == 2998
    assert len(order.items) == 1
    assert order.items[0].quantity == 2
    assert order.claimed_by is None

    result = await test_db.execute(select(Table).where(Table.id == table_id))
    table = result.scalar_one()
    assert table.status == TableStatus.OCCUPIED.value
    assert table.occupied_since is not None
    assert [o["name"] for o in table.current_occupants] == ["Alice"]

    assert notifier.names() == ["order:new"]
    assert notifier.events[0][1]["id"] == str(order.id)


@pytest.mark.asyncio
async def test_submit_order_unknown_table_persists_nothing(make_order, orders, test_db, notifier, test_tables, test_menu_items):
    payload = make_order(test_tables[0], test_menu_items[0])
    payload["table_id"] = str(uuid4())

    with pytest.raises(NotFoundError):
        await orders.submit_order(OrderCreate(**payload))

    assert await count(test_db, Order) == 0
    assert notifier.events == []


@pytest.mark.asyncio
async def test_submit_order_unknown_menu_item(make_order, orders, test_db, test_tables, test_menu_items):
    payload = make_order(test_tables[0], test_menu_items[0])
    payload["items"][0]["menu_item_id"] = str(uuid4())

    with pytest.raises(ValidationFailure):
        await orders.submit_order(OrderCreate(**payload))

    assert await count(test_db, Order) == 0


@pytest.mark.asyncio
async def test_submit_order_rolls_back_when_table_update_fails(make_order, test_db, notifier, test_tables, test_menu_items):
    table_id = test_tables[0].id
    payload = make_order(test_tables[0], test_menu_items[0])
    orders = OrderLifecycleManager(test_db, notifier=notifier, tables=FailingTracker(test_db))

    with pytest.raises(PersistenceFailure):
        await orders.submit_order(OrderCreate(**payload))

    assert await count(test_db, Order) == 0
    assert await count(test_db, OrderItem) == 0
    assert notifier.events == []

    result = await test_db.execute(select(Table).where(Table.id == table_id))
    assert result.scalar_one().status == TableStatus.AVAILABLE.value


@pytest.mark.asyncio
async def test_confirm_emits_updated_and_confirmed(orders, notifier, pending_order):
    notifier.events.clear()

    order = await orders.update_status(pending_order.id, OrderStatus.CONFIRMED, queue_position=3)

    assert order.status == OrderStatus.CONFIRMED.value
    assert order.queue_position == 3
    assert order.confirmed_at is not None
    assert notifier.names() == ["order:updated", "order:confirmed"]


@pytest.mark.asyncio
async def test_status_timestamps_are_set_once(orders, pending_order):
    order_id = pending_order.id

    confirmed = await orders.update_status(order_id, OrderStatus.CONFIRMED)
    confirmed_at = confirmed.confirmed_at

    preparing = await orders.update_status(order_id, OrderStatus.PREPARING)
    assert preparing.status == OrderStatus.PREPARING.value
    assert preparing.ready_at is None

    ready_at = (await orders.update_status(order_id, OrderStatus.READY)).ready_at
    completed_at = (await orders.update_status(order_id, OrderStatus.COMPLETED)).completed_at

    assert confirmed_at <= ready_at <= completed_at

    # Going back to confirmed keeps the original confirmation time
    again = await orders.update_status(order_id, OrderStatus.CONFIRMED)
    assert again.confirmed_at == confirmed_at
    assert again.ready_at == ready_at
    assert again.completed_at == completed_at


@pytest.mark.asyncio
async def test_preparing_has_no_timestamp(orders, pending_order):
    order = await orders.update_status(pending_order.id, OrderStatus.PREPARING)

    assert not hasattr(Order, "preparing_at")
    assert order.confirmed_at is None
    assert order.ready_at is None
    assert order.completed_at is None


@pytest.mark.asyncio
async def test_pending_cannot_be_set(orders, pending_order):
    with pytest.raises(ValidationFailure):
        await orders.update_status(pending_order.id, OrderStatus.PENDING)


@pytest.mark.asyncio
async def test_update_unknown_order(orders, test_tables):
    with pytest.raises(NotFoundError):
        await orders.update_status(uuid4(), OrderStatus.CONFIRMED)


@pytest.mark.asyncio
async def test_add_items_increments_total(orders, notifier, pending_order, test_menu_items):
    salad = test_menu_items[1]
    extra = OrderItemCreate(
        menu_item_id=salad.id,
        menu_item_name=salad.name,
        quantity=1,
        base_price_cents=salad.price_cents,
        item_total_cents=salad.price_cents,
    )
    notifier.events.clear()

    order = await orders.add_items(pending_order.id, [extra], additional_cents=1099)

    assert order.total_cents == 1499 + 1099
    assert [i.menu_item_name for i in order.items] == ["Margherita Pizza", "Caesar Salad"]
    assert notifier.names() == ["order:updated"]


@pytest.mark.asyncio
async def test_add_items_unknown_order(orders, test_menu_items):
    item = test_menu_items[0]
    extra = OrderItemCreate(
        menu_item_id=item.id,
        menu_item_name=item.name,
        quantity=1,
        base_price_cents=item.price_cents,
        item_total_cents=item.price_cents,
    )

    with pytest.raises(NotFoundError):
        await orders.add_items(uuid4(), [extra], additional_cents=item.price_cents)


@pytest.mark.asyncio
async def test_completion_adds_spend_once(make_order, orders, test_db, test_tables, test_menu_items):
    email = "regular@example.com"
    customers = CustomerSpendAggregator(test_db)
    await customers.record_visit(email)

    salad = test_menu_items[1]
    extra = OrderItemCreate(
        menu_item_id=salad.id,
        menu_item_name=salad.name,
        quantity=1,
        base_price_cents=25,
        item_total_cents=25,
    )
    order = await orders.submit_order(
        OrderCreate(**make_order(test_tables[0], test_menu_items[0], customer_email=email, total_cents=100))
    )
    order_id = order.id
    assert order.customer_id is not None

    await orders.add_items(order_id, [extra], additional_cents=25)
    await orders.update_status(order_id, OrderStatus.COMPLETED)

    customer = await customers.get_by_email(email, refresh=True)
    assert customer.total_spent_cents == 125

    # A retried completion does not count the order twice
    await orders.update_status(order_id, OrderStatus.COMPLETED)
    customer = await customers.get_by_email(email, refresh=True)
    assert customer.total_spent_cents == 125


@pytest.mark.asyncio
async def test_completion_without_customer_record(make_order, orders, test_db, test_tables, test_menu_items):
    order = await orders.submit_order(
        OrderCreate(**make_order(test_tables[0], test_menu_items[0], customer_email="walkin@example.com"))
    )

    completed = await orders.update_status(order.id, OrderStatus.COMPLETED)

    assert completed.status == OrderStatus.COMPLETED.value
    assert completed.customer_id is None


@pytest.mark.asyncio
async def test_list_orders_filters(make_order, orders, test_tables, test_menu_items):
    first = await orders.submit_order(OrderCreate(**make_order(test_tables[0], test_menu_items[0])))
    second = await orders.submit_order(OrderCreate(**make_order(test_tables[1], test_menu_items[1])))
    first_id, second_id, table_id = first.id, second.id, test_tables[1].id
    await orders.update_status(first_id, OrderStatus.CONFIRMED)

    pending = await orders.list_orders(statuses=[OrderStatus.PENDING])
    assert [o.id for o in pending] == [second_id]

    both = await orders.list_orders(statuses=[OrderStatus.PENDING, OrderStatus.CONFIRMED])
    assert {o.id for o in both} == {first_id, second_id}

    by_table = await orders.list_orders(table_id=table_id)
    assert [o.id for o in by_table] == [second_id]


@pytest.mark.asyncio
async def test_spend_failure_does_not_fail_completion(make_order, orders, test_db, notifier, test_tables, test_menu_items):
    email = "regular@example.com"
    customers = CustomerSpendAggregator(test_db)
    await customers.record_visit(email)

    order = await orders.submit_order(
        OrderCreate(**make_order(test_tables[0], test_menu_items[0], customer_email=email))
    )
    order_id = order.id
    notifier.events.clear()

    completing = OrderLifecycleManager(
        test_db, notifier=notifier, customers=CustomerSpendAggregator(UnavailableSession(test_db))
    )
    order = await completing.update_status(order_id, OrderStatus.COMPLETED)

    assert order.status == OrderStatus.COMPLETED.value
    assert order.completed_at is not None
    assert notifier.names() == ["order:updated"]

    customer = await customers.get_by_email(email, refresh=True)
    assert customer.total_spent_cents == 0
