"""Test configuration and fixtures"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from uuid import uuid4

from tableside.main import app
from tableside.database import Base, get_db
from tableside.models import User, UserRole, MenuItem, Customization, Table, TableStatus
from tableside.api.auth import create_access_token, get_password_hash
from tableside.services.notifier import ConnectionManager, get_notifier


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class RecordingNotifier(ConnectionManager):
    """Notifier that keeps broadcast events instead of sending them"""

    def __init__(self):
        super().__init__()
        self.events = []

    async def broadcast(self, event, data):
        self.events.append((event, data))

    def names(self):
        return [event for event, _ in self.events]


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def notifier():
    return RecordingNotifier()


async def _create_user(db, email, role, permissions=None):
    user = User(
        id=uuid4(),
        email=email,
        hashed_password=get_password_hash("testpass123"),
        full_name=email.split("@")[0].title(),
        role=role,
        permissions=permissions or [],
        is_active=True,
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def admin_user(test_db):
    return await _create_user(test_db, "admin@example.com", UserRole.ADMIN)


@pytest.fixture
async def waiter_user(test_db):
    return await _create_user(test_db, "waiter@example.com", UserRole.WAITER)


@pytest.fixture
async def second_waiter(test_db):
    return await _create_user(test_db, "waiter2@example.com", UserRole.WAITER)


@pytest.fixture
async def chef_user(test_db):
    return await _create_user(test_db, "chef@example.com", UserRole.CHEF)


def _headers(user):
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def admin_headers(admin_user):
    return _headers(admin_user)


@pytest.fixture
def waiter_headers(waiter_user):
    return _headers(waiter_user)


@pytest.fixture
def second_waiter_headers(second_waiter):
    return _headers(second_waiter)


@pytest.fixture
def chef_headers(chef_user):
    return _headers(chef_user)


@pytest.fixture
async def test_tables(test_db):
    """Create two available tables"""
    tables = [
        Table(id=uuid4(), name="T1", status=TableStatus.AVAILABLE.value, current_occupants=[]),
        Table(id=uuid4(), name="Patio 2", status=TableStatus.AVAILABLE.value, current_occupants=[]),
    ]
    for table in tables:
        table.qr_code_url = f"http://localhost:3000/table/{table.name}?tableId={table.id}"
        test_db.add(table)

    await test_db.commit()
    return tables


@pytest.fixture
async def test_menu_items(test_db):
    """Create test menu items"""
    items = [
        MenuItem(
            id=uuid4(),
            name="Margherita Pizza",
            description="Classic tomato and mozzarella",
            price_cents=1499,
            category="Pizza",
            allergens=["dairy"],
        ),
        MenuItem(
            id=uuid4(),
            name="Caesar Salad",
            description="Romaine with caesar dressing",
            price_cents=1099,
            category="Salads",
            allergens=[],
        ),
    ]

    for item in items:
        test_db.add(item)

    test_db.add(
        Customization(
            menu_item_id=items[0].id,
            type="size",
            name="Size",
            options=[
                {"name": "Regular", "price_cents": 0, "is_default": True},
                {"name": "Large", "price_cents": 300, "is_default": False},
            ],
            required=True,
        )
    )

    await test_db.commit()
    return items


def order_payload(table, menu_item, quantity=1, customer_email=None, total_cents=None):
    """Build an order submission body for ``table`` with one line of ``menu_item``"""
    item_total = menu_item.price_cents * quantity
    payload = {
        "table_id": str(table.id),
        "table_name": table.name,
        "customer_name": "Alice",
        "items": [
            {
                "menu_item_id": str(menu_item.id),
                "menu_item_name": menu_item.name,
                "quantity": quantity,
                "base_price_cents": menu_item.price_cents,
                "customizations": [],
                "item_total_cents": item_total,
            }
        ],
        "total_cents": item_total if total_cents is None else total_cents,
    }
    if customer_email:
        payload["customer_email"] = customer_email
    return payload


@pytest.fixture
def make_order():
    return order_payload


@pytest.fixture
async def client(test_db, notifier):
    """Create test client with overridden database and notifier"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
