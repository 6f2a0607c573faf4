"""Order records handled by the fulfillment engine.

Orders arrive from checkout already priced; the engine reads items and money
fields but never recomputes them. Monetary values are Decimals fixed at two
places.
"""
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from fulfillment.core.timeutils import now

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        if amount.is_nan():
            raise InvalidOperation
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValueError(f"not a money amount: {value!r}")


class OrderStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    ready = "ready"
    completed = "completed"
    cancelled = "cancelled"


class Modifier(BaseModel):
    name: str
    value: Optional[str] = ""


class OrderItem(BaseModel):
    name: str
    quantity: int = Field(default=1, ge=1)
    price: Optional[Decimal] = None  # per unit
    modifiers: List[Modifier] = Field(default_factory=list)
    special_instructions: Optional[str] = None

    @field_validator("price", mode="before")
    @classmethod
    def _quantize_price(cls, v):
        return None if v is None else to_money(v)

    @property
    def line_total(self) -> Optional[Decimal]:
        if self.price is None:
            return None
        return to_money(self.price * self.quantity)


class StatusChange(BaseModel):
    status: OrderStatus
    timestamp: datetime
    actor: Optional[str] = None  # staff user id when the caller knows it


class Order(BaseModel):
    id: str
    status: OrderStatus = OrderStatus.pending
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    items: List[OrderItem] = Field(default_factory=list)
    subtotal: Decimal = Decimal("0.00")
    tax: Decimal = Decimal("0.00")
    tip: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")
    created_at: datetime = Field(default_factory=now)
    status_history: List[StatusChange] = Field(default_factory=list)
    printed: bool = False

    @field_validator("subtotal", "tax", "tip", "total", mode="before")
    @classmethod
    def _quantize_money(cls, v):
        return to_money(v)
