"""Table locator and occupancy tests"""

import pytest
from uuid import uuid4

from tableside.models.table import Table, TableStatus
from tableside.services.errors import NotFoundError
from tableside.services.tables import TableOccupancyTracker, build_table_url


def make_table(name="T1"):
    return Table(id=uuid4(), name=name)


def test_build_table_url_default_domain():
    table = make_table("Patio 2")

    assert build_table_url(table) == f"http://localhost:3000/table/Patio%202?tableId={table.id}"


def test_build_table_url_strips_trailing_slash():
    table = make_table()

    url = build_table_url(table, "https://menu.example.com/")

    assert url == f"https://menu.example.com/table/T1?tableId={table.id}"


def test_build_table_url_forces_http_on_localhost():
    table = make_table()

    assert build_table_url(table, "https://localhost:5173").startswith("http://localhost:5173/table/")
    assert build_table_url(table, "https://127.0.0.1:8080").startswith("http://127.0.0.1:8080/")


def test_build_table_url_blank_base_falls_back():
    table = make_table()

    assert build_table_url(table, "   ").startswith("http://localhost:3000/table/T1")


def test_build_table_url_escapes_name():
    table = make_table("Bar/1 & 2")

    assert "/table/Bar%2F1%20%26%202?" in build_table_url(table, "https://menu.example.com")


@pytest.mark.asyncio
async def test_mark_occupied_replaces_occupants(test_db, test_tables):
    table_id = test_tables[0].id
    tracker = TableOccupancyTracker(test_db)

    await tracker.mark_occupied(table_id, "Alice")
    table = await tracker.mark_occupied(table_id, "Bob")
    await test_db.commit()

    assert table.status == TableStatus.OCCUPIED.value
    assert [o["name"] for o in table.current_occupants] == ["Bob"]
    assert table.current_occupants[0]["joined_at"]


@pytest.mark.asyncio
async def test_mark_occupied_unknown_table(test_db):
    with pytest.raises(NotFoundError):
        await TableOccupancyTracker(test_db).mark_occupied(uuid4(), "Alice")
