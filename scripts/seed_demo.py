#!/usr/bin/env python3
"""
Seed script to create demo staff, tables, menu and branding data
"""

import asyncio
import uuid

from sqlalchemy import select


STAFF = [
    ("admin@tableside.local", "Demo Admin", "ADMIN", ["view_customers"]),
    ("waiter@tableside.local", "Demo Waiter", "WAITER", []),
    ("chef@tableside.local", "Demo Chef", "CHEF", []),
]

TABLES = ["T1", "T2", "T3", "T4", "Patio 1", "Patio 2"]

MENU = [
    {"name": "Burrata", "description": "Burrata, heirloom tomatoes, basil oil", "price_cents": 1199, "category": "Starters", "allergens": ["dairy"]},
    {"name": "Arancini", "description": "Saffron risotto balls with smoked mozzarella", "price_cents": 899, "category": "Starters", "allergens": ["dairy", "gluten"]},
    {"name": "Margherita", "description": "San Marzano tomato, fior di latte, basil", "price_cents": 1399, "category": "Pizza", "allergens": ["dairy", "gluten"], "is_popular": True, "popular_rank": 1},
    {"name": "Diavola", "description": "Spicy salami, chili honey, mozzarella", "price_cents": 1599, "category": "Pizza", "allergens": ["dairy", "gluten"], "is_popular": True, "popular_rank": 2},
    {"name": "Cacio e Pepe", "description": "Tonnarelli, pecorino, black pepper", "price_cents": 1499, "category": "Pasta", "allergens": ["dairy", "gluten"]},
    {"name": "Rocket Salad", "description": "Rocket, shaved parmesan, lemon dressing", "price_cents": 899, "category": "Salads", "allergens": ["dairy"]},
    {"name": "Panna Cotta", "description": "Vanilla panna cotta, berry compote", "price_cents": 699, "category": "Desserts", "allergens": ["dairy"]},
    {"name": "Sparkling Water", "description": "500ml", "price_cents": 299, "category": "Drinks", "allergens": []},
]

PIZZA_SIZES = [
    {"name": "Regular", "price_cents": 0, "is_default": True},
    {"name": "Large", "price_cents": 400, "is_default": False},
]


async def seed_demo_data():
    """Seed demo data for development"""
    from tableside.database import SessionLocal, init_db
    from tableside.models import User, UserRole, Table, TableStatus, MenuItem, Customization, RestaurantSettings
    from tableside.models.settings import BRANDING_SETTINGS_ID
    from tableside.api.auth import get_password_hash
    from tableside.services.tables import build_table_url

    await init_db()

    async with SessionLocal() as db:
        result = await db.execute(select(User).where(User.email == STAFF[0][0]))
        if result.scalar_one_or_none():
            print("Demo data already exists. Skipping...")
            return

        print("Creating staff users...")
        for email, full_name, role, permissions in STAFF:
            db.add(User(
                email=email,
                hashed_password=get_password_hash("demo1234"),
                full_name=full_name,
                role=UserRole[role],
                permissions=permissions,
            ))

        print("Creating branding settings...")
        db.add(RestaurantSettings(
            id=BRANDING_SETTINGS_ID,
            restaurant_name="Trattoria Demo",
            menu_categories=sorted({item["category"] for item in MENU}),
        ))

        print("Creating tables...")
        for name in TABLES:
            table = Table(id=uuid.uuid4(), name=name, status=TableStatus.AVAILABLE.value, current_occupants=[])
            table.qr_code_url = build_table_url(table)
            db.add(table)

        print("Creating menu items...")
        for display_order, data in enumerate(MENU):
            item = MenuItem(id=uuid.uuid4(), display_order=display_order, **data)
            db.add(item)
            if item.category == "Pizza":
                db.add(Customization(
                    menu_item_id=item.id,
                    type="size",
                    name="Size",
                    options=PIZZA_SIZES,
                    required=True,
                ))

        await db.commit()

        print(f"""
Demo data created:
  Staff:  {", ".join(email for email, *_ in STAFF)} (password: demo1234)
  Tables: {len(TABLES)}
  Menu:   {len(MENU)} items
""")


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
