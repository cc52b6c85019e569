"""Order aggregate.

The Order owns its line items and the price snapshot taken when it was
placed. Status moves PENDING -> CONFIRMED -> SHIPPED -> DELIVERED or to
CANCELLED; the back-office may set any known status.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @staticmethod
    def parse(value: str | None) -> OrderStatus:
        if not value:
            raise ValidationError("Status is required")
        try:
            return OrderStatus(value.upper())
        except ValueError:
            raise ValidationError("Invalid status") from None


@dataclass(frozen=True)
class CustomerInfo:
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class OrderLineItem:
    """Captures the price of a product (or variant) at order time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money
    variant_id: str | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


MAX_LINE_ITEMS = 50


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use ``Order.create()`` for new orders; ``__init__`` stays simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    customer: CustomerInfo
    items: list[OrderLineItem]
    user_id: str | None = None
    status: OrderStatus = OrderStatus.PENDING
    coupon_id: str | None = None
    discount: Money | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer: CustomerInfo,
        items: list[OrderLineItem],
        user_id: str | None = None,
    ) -> Order:
        if not customer.first_name.strip() or not customer.email.strip():
            raise ValidationError("Customer name and email are required")
        if "@" not in customer.email:
            raise ValidationError(f"Invalid email address: {customer.email}")
        if not items:
            raise ValidationError("Order must contain at least one item")
        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")
        return Order(id=None, customer=customer, items=list(items), user_id=user_id)

    # --- Mutations ------------------------------------------------------------

    def apply_coupon(self, coupon_id: str, discount: Money) -> None:
        if self.coupon_id is not None:
            raise ValidationError("A coupon has already been applied to this order")
        self.coupon_id = coupon_id
        self.discount = discount.capped_at(self.subtotal)

    def change_status(self, status: OrderStatus) -> OrderStatus:
        """Set a new status and return the previous one."""
        previous = self.status
        self.status = status
        self.updated_at = datetime.now(timezone.utc)
        return previous

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        result = Money.zero(self.items[0].unit_price.currency)
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def total(self) -> Money:
        if self.discount is None:
            return self.subtotal
        return self.subtotal - self.discount
