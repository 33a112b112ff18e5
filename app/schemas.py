"""
Pydantic Schemas for Request/Response Validation

Every response is wrapped in ApiResponse ({"success": ..., "data": ...}).
Money values are Decimals on the Python side and 2-decimal strings on the
wire.

Author: Khalil Bannouri
Version: 1.0.0
"""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_serializer, field_validator

from app.models import Order, OrderStatus, UserRole, load_line_items

T = TypeVar("T")

CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Quantize a number to 2 decimal places (half-up)."""
    if value is None:
        value = 0
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: f"{to_money(v):.2f}", return_type=str, when_used="json"),
]


# =============================================================================
# ENVELOPES
# =============================================================================

class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope."""
    success: bool = True
    data: T


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


# =============================================================================
# AUTH
# =============================================================================

class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    # Anything other than "student" or "faculty" registers as a student
    role: Optional[Any] = Field(None, examples=["student", "faculty"])


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class ProfileUpdate(BaseModel):
    name: str = ""
    email: str = ""
    phone: Optional[str] = None


class UserResponse(BaseModel):
    """Public view of a user (never includes the credential)."""
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    role: UserRole

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    token: str
    user: UserResponse


# =============================================================================
# MENU
# =============================================================================

class MenuItemCreate(BaseModel):
    """Request schema for creating or replacing a menu item."""
    name: str = Field(..., max_length=255, examples=["Caesar Salad"])
    description: str = Field(default="", examples=["Romaine, parmesan, croutons"])
    price: Decimal = Field(..., ge=0, examples=[9.00])
    image: str = Field(default="", max_length=255)
    category: str = Field(default="General", max_length=100, examples=["Salads"])
    stock: int = Field(default=100, ge=0)
    is_available: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("Price must be a valid number")
        return v

    @field_validator("description", "image", "category", mode="before")
    @classmethod
    def none_to_default(cls, v: Any, info) -> Any:
        if v is None:
            return "General" if info.field_name == "category" else ""
        return v


class MenuItemResponse(BaseModel):
    id: int
    name: str
    description: str
    price: Money
    image: str
    category: str
    stock: int
    is_available: bool

    model_config = ConfigDict(from_attributes=True)


class TrendingItemResponse(MenuItemResponse):
    order_count: int


class DeletedResponse(BaseModel):
    id: int


# =============================================================================
# ORDERS
# =============================================================================

class LineItem(BaseModel):
    """
    A line item as submitted by the client.

    The price is taken as supplied; unknown extra fields are kept in the
    stored snapshot.
    """
    id: Optional[int] = Field(None, examples=[1])
    name: Optional[str] = Field(None, examples=["Caesar Salad"])
    price: Decimal = Field(default=Decimal("0"), examples=[9])

    model_config = ConfigDict(extra="allow")

    @field_validator("price", mode="before")
    @classmethod
    def missing_price_is_zero(cls, v: Any) -> Any:
        return 0 if v is None or v == "" else v

    @field_serializer("price")
    def price_as_number(self, v: Decimal) -> float:
        return float(v)


class OrderCreate(BaseModel):
    """Request schema for submitting a new order."""
    items: List[LineItem] = Field(default_factory=list)


class OrderResponse(BaseModel):
    """Response schema for a single order with its decoded snapshot list."""
    id: int
    items: List[dict[str, Any]]
    status: OrderStatus
    customer_id: Optional[int]
    customer_name: str
    original_price: Money
    discount_amount: Money
    final_price: Money
    is_viewed: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_order(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            items=load_line_items(order.items),
            status=order.status,
            customer_id=order.customer_id,
            customer_name=order.customer_name,
            original_price=to_money(order.original_price),
            discount_amount=to_money(order.discount_amount),
            final_price=to_money(order.final_price),
            is_viewed=bool(order.is_viewed),
            created_at=order.created_at,
        )


class OrderStatusResponse(BaseModel):
    id: int
    status: OrderStatus


# =============================================================================
# STATISTICS
# =============================================================================

class TopSellingItem(BaseModel):
    id: int
    name: str
    order_count: int


class DailySales(BaseModel):
    sale_date: str
    daily_revenue: Money


class StatisticsSummary(BaseModel):
    total_orders: int
    total_revenue: Money
    top_selling_items: List[TopSellingItem]
    daily_sales: List[DailySales]


# =============================================================================
# AI CHAT
# =============================================================================

class ChatRequest(BaseModel):
    message: str = ""


class ChatReply(BaseModel):
    reply: str


# =============================================================================
# HEALTH
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    realtime_subscribers: int
    assistant: str
    timestamp: datetime
