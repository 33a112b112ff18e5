"""
Statistics Service

Kitchen dashboard aggregates over every order, regardless of status.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import MenuItem, Order, load_line_items, snapshot_menu_ids
from app.schemas import DailySales, StatisticsSummary, TopSellingItem, to_money

logger = logging.getLogger(__name__)

TOP_SELLING_LIMIT = 5
SALES_WINDOW_DAYS = 7


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive timestamps
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class StatisticsService:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def summary(self, today: Optional[date] = None) -> StatisticsSummary:
        """
        Totals, best sellers and revenue per day for the trailing week.

        Args:
            today: Last day of the sales window (defaults to the current UTC date)
        """
        today = today or datetime.now(timezone.utc).date()

        totals = await self.session.execute(
            select(func.count(Order.id), func.sum(Order.final_price))
        )
        total_orders, total_revenue = totals.one()

        return StatisticsSummary(
            total_orders=total_orders or 0,
            total_revenue=to_money(total_revenue),
            top_selling_items=await self._top_selling(),
            daily_sales=await self._daily_sales(today),
        )

    async def _top_selling(self) -> list[TopSellingItem]:
        result = await self.session.execute(select(Order.items))
        counts: dict[int, int] = defaultdict(int)
        for (raw,) in result.all():
            for menu_id in snapshot_menu_ids(load_line_items(raw)):
                counts[menu_id] += 1
        if not counts:
            return []

        result = await self.session.execute(
            select(MenuItem.id, MenuItem.name).where(MenuItem.id.in_(list(counts)))
        )
        ranked = sorted(result.all(), key=lambda row: (-counts[row.id], row.id))
        return [
            TopSellingItem(id=row.id, name=row.name, order_count=counts[row.id])
            for row in ranked[:TOP_SELLING_LIMIT]
        ]

    async def _daily_sales(self, today: date) -> list[DailySales]:
        start_day = today - timedelta(days=SALES_WINDOW_DAYS - 1)
        window_start = datetime.combine(start_day, time.min, tzinfo=timezone.utc)
        window_end = datetime.combine(today + timedelta(days=1), time.min, tzinfo=timezone.utc)

        result = await self.session.execute(
            select(Order.created_at, Order.final_price).where(
                Order.created_at >= window_start,
                Order.created_at < window_end,
            )
        )

        revenue: dict[date, Decimal] = defaultdict(Decimal)
        for created_at, final_price in result.all():
            if created_at is None:
                continue
            day = _as_utc(created_at).date()
            if start_day <= day <= today:
                revenue[day] += to_money(final_price)

        return [
            DailySales(sale_date=day.isoformat(), daily_revenue=revenue[day])
            for day in sorted(revenue)
        ]
