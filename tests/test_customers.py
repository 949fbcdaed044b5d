"""Customer visit and spend tests"""

import pytest

from tableside.services.customers import CustomerSpendAggregator


@pytest.fixture
def customers(test_db):
    return CustomerSpendAggregator(test_db)


@pytest.mark.asyncio
async def test_first_visit_creates_customer(customers):
    customer = await customers.record_visit("new@example.com", email_consent=True)

    assert customer.visit_count == 1
    assert customer.total_spent_cents == 0
    assert customer.email_consent is True
    assert customer.last_visit_at is not None


@pytest.mark.asyncio
async def test_repeat_visit_increments_count(customers):
    await customers.record_visit("back@example.com", email_consent=True)

    customer = await customers.record_visit("back@example.com")
    assert customer.visit_count == 2
    # Consent is left alone when not given
    assert customer.email_consent is True

    customer = await customers.record_visit("back@example.com", email_consent=False)
    assert customer.visit_count == 3
    assert customer.email_consent is False


@pytest.mark.asyncio
async def test_record_spend_accumulates(customers):
    await customers.record_visit("spender@example.com")

    await customers.record_spend("spender@example.com", 1000)
    await customers.record_spend("spender@example.com", 250)

    customer = await customers.get_by_email("spender@example.com", refresh=True)
    assert customer.total_spent_cents == 1250


@pytest.mark.asyncio
async def test_record_spend_without_customer_is_noop(customers):
    await customers.record_spend("nobody@example.com", 500)
    await customers.record_spend(None, 500)

    assert await customers.get_by_email("nobody@example.com") is None
