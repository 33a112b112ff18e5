"""
Database Reset & Seed

Drops and recreates every table, then loads demo accounts (one per role,
shared password) and a starter menu. Used by ``scripts/seed.py`` for local
runs and demos; never called by the application itself.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.core.security import hash_password
from app.database import Base
from app.models import MenuItem, User, UserRole

logger = logging.getLogger(__name__)

SEED_PASSWORD = "password123"

SEED_USERS = [
    ("Alice Student", "alice@student.edu", UserRole.STUDENT),
    ("Mia Student", "mia@student.edu", UserRole.STUDENT),
    ("Charlie Student", "charlie@student.edu", UserRole.STUDENT),
    ("Frank Faculty", "frank@faculty.edu", UserRole.FACULTY),
    ("Grace Faculty", "grace@faculty.edu", UserRole.FACULTY),
    ("Bob Staff", "bob@cafeteria.edu", UserRole.STAFF),
    ("Admin Root", "admin@campus.edu", UserRole.ADMIN),
]

# (name, description, price, category, stock)
SEED_MENU = [
    ("Caesar Salad", "Fresh romaine lettuce, parmesan, croutons, Caesar dressing", "9.00", "Starters", 120),
    ("Bruschetta", "Grilled baguette with diced tomatoes, garlic, basil, and olive oil", "8.00", "Starters", 100),
    ("Mozzarella Sticks", "Fried cheese sticks served with a side of marinara sauce", "9.00", "Starters", 150),
    ("Spring Rolls (4 pcs)", "Crispy rolls filled with vegetables", "7.00", "Starters", 150),
    ("Cream of Mushroom Soup", "Creamy mushroom soup with herbs", "7.00", "Soups", 80),
    ("French Onion Soup", "Caramelized onion broth topped with melted cheese and crouton", "9.00", "Soups", 70),
    ("Tomato Basil Soup", "A classic, smooth tomato soup infused with fresh basil", "6.00", "Soups", 100),
    ("Chicken Noodle Soup", "Homestyle soup with chicken, vegetables, and egg noodles", "8.00", "Soups", 90),
    ("Classic Cheeseburger", "Angus beef patty, cheddar cheese, lettuce, tomato, special sauce", "13.00", "Fast Food", 150),
    ("Crispy Chicken Tenders", "Served with honey mustard and BBQ sauce", "11.00", "Fast Food", 180),
    ("Loaded Nachos", "Corn tortilla chips, cheese, jalapenos, sour cream, salsa", "12.00", "Fast Food", 100),
    ("Fish and Chips", "Battered fried fish fillets with a side of crispy french fries", "16.00", "Fast Food", 100),
    ("Spaghetti Carbonara", "Pasta with bacon, egg yolk sauce, and parmesan cheese", "16.00", "Italian Cuisine", 120),
    ("Margherita Pizza", "Tomato sauce, mozzarella, and fresh basil", "14.00", "Italian Cuisine", 110),
    ("Mushroom Risotto", "Creamy Arborio rice cooked with wild mushrooms and parmesan", "19.00", "Italian Cuisine", 60),
    ("Tiramisu", "Classic Italian dessert with coffee and mascarpone", "9.00", "Desserts", 90),
    ("Chocolate Lava Cake", "Warm chocolate cake with a molten center", "8.00", "Desserts", 80),
    ("Fresh Orange Juice", "Freshly squeezed oranges", "5.00", "Drinks", 200),
    ("Iced Latte", "Espresso over ice with milk", "4.50", "Drinks", 200),
    ("Sparkling Water", "Chilled sparkling mineral water", "2.50", "Drinks", 300),
]


async def reset_database(engine: AsyncEngine) -> None:
    """Drop and recreate all tables."""
    from app import models  # noqa: F401

    logger.warning("Dropping and recreating all tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("✅ Database reset successfully")


async def seed_database(session_maker: async_sessionmaker[AsyncSession]) -> dict[str, int]:
    """
    Insert demo users and the starter menu.

    Returns:
        Row counts per table
    """
    logger.info("🌱 Seeding database...")
    password_hash = hash_password(SEED_PASSWORD)

    async with session_maker() as session:
        session.add_all(
            User(name=name, email=email, password_hash=password_hash, role=role)
            for name, email, role in SEED_USERS
        )
        session.add_all(
            MenuItem(
                name=name,
                description=description,
                price=Decimal(price),
                category=category,
                stock=stock,
                is_available=True,
            )
            for name, description, price, category, stock in SEED_MENU
        )
        await session.commit()

        users = await session.scalar(select(func.count(User.id)))
        menus = await session.scalar(select(func.count(MenuItem.id)))

    logger.info(f"✅ Seeded {users} users and {menus} menu items")
    return {"users": users, "menus": menus}
