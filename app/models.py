"""
SQLAlchemy Database Models

Cafeteria schema:
- Users with a fixed role (student/faculty/staff/admin)
- Menu items (catalog)
- Orders with an embedded line-item snapshot list

Author: Khalil Bannouri
Version: 1.0.0
"""

import enum
import json
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.sql import func

from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, enum.Enum):
    """Roles known to the system."""
    STUDENT = "student"
    FACULTY = "faculty"
    STAFF = "staff"
    ADMIN = "admin"


# Roles a user may pick for themselves at registration
SELF_SERVICE_ROLES = (UserRole.STUDENT, UserRole.FACULTY)
KITCHEN_ROLES = (UserRole.STAFF, UserRole.ADMIN)
CUSTOMER_ROLES = (UserRole.STUDENT, UserRole.FACULTY)


class OrderStatus(str, enum.Enum):
    """Order status workflow: preparing -> completed (terminal)."""
    PREPARING = "preparing"
    COMPLETED = "completed"


class User(Base):
    """Registered cafeteria user."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    role = Column(Enum(UserRole), default=UserRole.STUDENT, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    def __repr__(self):
        return f"<User #{self.id} - {self.email} - {self.role.value}>"


class MenuItem(Base):
    """
    Catalog entry.

    ``stock`` is advisory only; nothing in the order flow decrements it.
    """
    __tablename__ = "menus"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    image = Column(String(255), nullable=False, default="")
    category = Column(String(100), nullable=False, default="General", index=True)
    stock = Column(Integer, nullable=False, default=100)
    is_available = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<MenuItem #{self.id} - {self.name} - {self.price}>"


class Order(Base):
    """
    Cafeteria order.

    ``items`` holds the JSON-encoded line-item snapshots captured at
    submission; use load_line_items()/dump_line_items() to cross the
    storage boundary. Orders are never deleted.
    """
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    items = Column(Text, nullable=False, default="[]")
    status = Column(
        Enum(OrderStatus),
        default=OrderStatus.PREPARING,
        nullable=False,
        index=True
    )

    # =========================================================================
    # CUSTOMER
    # =========================================================================
    customer_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    customer_name = Column(String(255), nullable=False, default="Guest")

    # =========================================================================
    # PRICING
    # =========================================================================
    original_price = Column(Numeric(10, 2), nullable=False)
    discount_amount = Column(Numeric(10, 2), nullable=False, default=0)
    final_price = Column(Numeric(10, 2), nullable=False)

    # =========================================================================
    # KITCHEN
    # =========================================================================
    is_viewed = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())

    def __repr__(self):
        return f"<Order #{self.id} - {self.customer_name} - {self.status.value}>"


# =============================================================================
# LINE ITEM SNAPSHOTS
# =============================================================================

def dump_line_items(items: Iterable[dict[str, Any]]) -> str:
    """Serialize line-item snapshots for the ``orders.items`` column."""
    return json.dumps(list(items), default=str)


def load_line_items(raw: Optional[str]) -> list[dict[str, Any]]:
    """Deserialize the ``orders.items`` column into a list of snapshots."""
    if not raw:
        return []
    items = json.loads(raw)
    return items if isinstance(items, list) else []


def snapshot_menu_ids(items: Iterable[dict[str, Any]]) -> list[int]:
    """
    Menu ids referenced by snapshots, in order, one entry per occurrence.

    Snapshots without a usable id are skipped.
    """
    ids = []
    for item in items:
        if not isinstance(item, dict):
            continue
        try:
            ids.append(int(item["id"]))
        except (KeyError, TypeError, ValueError):
            continue
    return ids
