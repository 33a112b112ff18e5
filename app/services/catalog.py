"""
Catalog Service

Menu search and maintenance plus the derived views built from order
history: trending dishes, personalized recommendations and the reorder
list. Derived views read the line-item snapshots stored on orders and
resolve them against the current catalog, so deleted dishes drop out.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from collections import Counter
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFound
from app.models import MenuItem, Order, User, load_line_items, snapshot_menu_ids
from app.schemas import MenuItemCreate

logger = logging.getLogger(__name__)

SUGGESTION_LIMIT = 5


class CatalogService:
    """Menu queries and staff maintenance operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # ==========================================================================
    # QUERIES
    # ==========================================================================

    async def search(self, query: Optional[str] = None) -> list[MenuItem]:
        """
        List the menu, optionally filtered by a case-insensitive substring
        of the name or description.
        """
        stmt = select(MenuItem).order_by(MenuItem.id.asc())
        if query:
            needle = query.lower()
            stmt = stmt.where(
                or_(
                    func.lower(MenuItem.name).contains(needle, autoescape=True),
                    func.lower(MenuItem.description).contains(needle, autoescape=True),
                )
            )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get(self, item_id: int) -> MenuItem:
        item = await self.session.get(MenuItem, item_id)
        if item is None:
            raise NotFound("Menu item not found")
        return item

    async def trending(self, limit: int = SUGGESTION_LIMIT) -> list[tuple[MenuItem, int]]:
        """
        Most ordered dishes by raw line-item occurrence across all orders.

        Returns (item, order_count) pairs, highest count first, ties by id.
        Falls back to random dishes (count 0) when there is no order data to
        rank, preferring available ones and topping up from the rest of the
        catalog so a non-empty catalog never yields an empty list.
        """
        counts = await self._occurrences(select(Order.items))
        ranked = await self._rank(counts, limit)
        if ranked:
            return ranked

        logger.debug("No order history for trending; using random dishes")
        fallback = await self._random_items(limit, available=True)
        if len(fallback) < limit:
            fallback += await self._random_items(limit - len(fallback), available=False)
        return [(item, 0) for item in fallback]

    async def recommendations(self, user: User, limit: int = SUGGESTION_LIMIT) -> list[MenuItem]:
        """
        Dishes the user has not tried yet from their favourite category.

        The favourite category is the one appearing most often in the user's
        own line items; ties go to the alphabetically smallest category.
        Without a favourite, or with nothing new in it, returns random
        dishes from the whole catalog.
        """
        counts = await self._occurrences(
            select(Order.items).where(Order.customer_id == user.id)
        )

        favourite = None
        if counts:
            result = await self.session.execute(
                select(MenuItem.id, MenuItem.category).where(MenuItem.id.in_(list(counts)))
            )
            category_counts: Counter[str] = Counter()
            for item_id, category in result.all():
                category_counts[category] += counts[item_id]
            if category_counts:
                favourite = min(category_counts.items(), key=lambda kv: (-kv[1], kv[0]))[0]

        recommendations: list[MenuItem] = []
        if favourite is not None:
            stmt = (
                select(MenuItem)
                .where(MenuItem.category == favourite, MenuItem.id.not_in(list(counts)))
                .order_by(func.random())
                .limit(limit)
            )
            result = await self.session.execute(stmt)
            recommendations = list(result.scalars().all())

        if not recommendations:
            recommendations = await self._random_items(limit)

        return recommendations

    async def reorderable(self, user: User) -> list[MenuItem]:
        """Distinct current dishes that appear in any of the user's orders."""
        counts = await self._occurrences(
            select(Order.items).where(Order.customer_id == user.id)
        )
        if not counts:
            return []

        result = await self.session.execute(
            select(MenuItem).where(MenuItem.id.in_(list(counts))).order_by(MenuItem.id.asc())
        )
        return list(result.scalars().all())

    # ==========================================================================
    # MAINTENANCE (staff/admin)
    # ==========================================================================

    async def create(self, data: MenuItemCreate) -> MenuItem:
        item = MenuItem(**data.model_dump())
        self.session.add(item)
        await self.session.commit()
        await self.session.refresh(item)
        logger.info(f"Menu item #{item.id} created: {item.name}")
        return item

    async def update(self, item_id: int, data: MenuItemCreate) -> MenuItem:
        item = await self.get(item_id)
        for key, value in data.model_dump().items():
            setattr(item, key, value)
        await self.session.commit()
        await self.session.refresh(item)
        logger.info(f"Menu item #{item.id} updated")
        return item

    async def delete(self, item_id: int) -> int:
        """Remove a dish. Order snapshots that reference it are untouched."""
        item = await self.get(item_id)
        await self.session.delete(item)
        await self.session.commit()
        logger.info(f"Menu item #{item_id} deleted")
        return item_id

    # ==========================================================================
    # HELPERS
    # ==========================================================================

    async def _occurrences(self, items_query) -> Counter[int]:
        """Count menu id occurrences over the snapshot lists selected."""
        result = await self.session.execute(items_query)
        counts: Counter[int] = Counter()
        for (raw,) in result.all():
            counts.update(snapshot_menu_ids(load_line_items(raw)))
        return counts

    async def _rank(self, counts: Counter[int], limit: int) -> list[tuple[MenuItem, int]]:
        if not counts:
            return []
        result = await self.session.execute(
            select(MenuItem).where(MenuItem.id.in_(list(counts)))
        )
        items = result.scalars().all()
        ranked = sorted(items, key=lambda item: (-counts[item.id], item.id))
        return [(item, counts[item.id]) for item in ranked[:limit]]

    async def _random_items(self, limit: int, available: Optional[bool] = None) -> list[MenuItem]:
        stmt = select(MenuItem)
        if available is not None:
            stmt = stmt.where(MenuItem.is_available.is_(available))
        result = await self.session.execute(stmt.order_by(func.random()).limit(limit))
        return list(result.scalars().all())
