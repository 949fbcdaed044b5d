"""Claim coordination tests for orders and call requests"""

import pytest
from uuid import uuid4

from tableside.models.call_request import CallRequestType
from tableside.schemas.call_request import CallRequestCreate
from tableside.schemas.order import OrderCreate
from tableside.services.call_requests import CallRequestService
from tableside.services.errors import ConflictError, NotFoundError
from tableside.services.orders import OrderLifecycleManager


@pytest.fixture
async def order_id(test_db, notifier, make_order, test_tables, test_menu_items):
    orders = OrderLifecycleManager(test_db, notifier=notifier)
    order = await orders.submit_order(OrderCreate(**make_order(test_tables[0], test_menu_items[0])))
    notifier.events.clear()
    return order.id


@pytest.fixture
async def call_id(test_db, notifier, test_tables):
    calls = CallRequestService(test_db, notifier=notifier)
    request = await calls.create_call_request(
        CallRequestCreate(
            table_id=test_tables[0].id,
            table_name=test_tables[0].name,
            customer_name="Alice",
            type=CallRequestType.BILL,
        )
    )
    notifier.events.clear()
    return request.id


@pytest.fixture
def staff_ids(waiter_user, second_waiter):
    return waiter_user.id, second_waiter.id


@pytest.mark.asyncio
async def test_claim_is_exclusive(test_db, notifier, order_id, staff_ids):
    first, second = staff_ids
    orders = OrderLifecycleManager(test_db, notifier=notifier)

    order = await orders.claim(order_id, first)
    assert order.claimed_by == first
    assert order.claimed_at is not None

    with pytest.raises(ConflictError):
        await orders.claim(order_id, second)

    order = await orders.get_order(order_id)
    assert order.claimed_by == first
    assert notifier.names() == ["order:claimed"]


@pytest.mark.asyncio
async def test_reclaim_by_holder_refreshes_claim(test_db, notifier, order_id, staff_ids):
    first, _ = staff_ids
    orders = OrderLifecycleManager(test_db, notifier=notifier)

    claimed_at = (await orders.claim(order_id, first)).claimed_at
    order = await orders.claim(order_id, first)

    assert order.claimed_by == first
    assert order.claimed_at >= claimed_at
    assert notifier.names() == ["order:claimed", "order:claimed"]


@pytest.mark.asyncio
async def test_release_ignores_holder(test_db, notifier, order_id, staff_ids):
    first, second = staff_ids
    orders = OrderLifecycleManager(test_db, notifier=notifier)
    await orders.claim(order_id, first)

    # Anyone may release, not only the holder
    order = await orders.release(order_id)
    assert order.claimed_by is None
    assert order.claimed_at is None

    order = await orders.claim(order_id, second)
    assert order.claimed_by == second
    assert notifier.names() == ["order:claimed", "order:released", "order:claimed"]


@pytest.mark.asyncio
async def test_release_unclaimed_order(test_db, notifier, order_id):
    order = await OrderLifecycleManager(test_db, notifier=notifier).release(order_id)

    assert order.claimed_by is None
    assert notifier.names() == ["order:released"]


@pytest.mark.asyncio
async def test_claim_unknown_order(test_db, notifier, staff_ids):
    orders = OrderLifecycleManager(test_db, notifier=notifier)

    with pytest.raises(NotFoundError):
        await orders.claim(uuid4(), staff_ids[0])

    with pytest.raises(NotFoundError):
        await orders.release(uuid4())

    assert notifier.events == []


@pytest.mark.asyncio
async def test_call_request_claim_is_exclusive(test_db, notifier, call_id, staff_ids):
    first, second = staff_ids
    calls = CallRequestService(test_db, notifier=notifier)

    request = await calls.claim(call_id, first)
    assert request.claimed_by == first

    with pytest.raises(ConflictError):
        await calls.claim(call_id, second)

    request = await calls.release(call_id)
    assert request.claimed_by is None

    request = await calls.claim(call_id, second)
    assert request.claimed_by == second
    assert notifier.names() == ["call:claimed", "call:released", "call:claimed"]


@pytest.mark.asyncio
async def test_claim_payload_is_full_entity(test_db, notifier, order_id, staff_ids):
    await OrderLifecycleManager(test_db, notifier=notifier).claim(order_id, staff_ids[0])

    event, data = notifier.events[0]
    assert event == "order:claimed"
    assert data["id"] == str(order_id)
    assert data["claimed_by"] == str(staff_ids[0])
    assert len(data["items"]) == 1
