"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the application layer and the CLI/HTTP layers
without exposing domain internals. Money is flattened to float, enums
to their string value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from storefront.domain.model.coupon import Coupon
from storefront.domain.model.inventory import InventoryAlert, InventoryLog
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product


# --- Inputs -------------------------------------------------------------------


@dataclass(frozen=True)
class InventoryUpdateSpec:
    """One requested stock change. ``type == "SET"`` makes ``quantity`` absolute."""

    quantity: int | None
    type: str | None
    product_id: str | None = None
    sku: str | None = None
    reason: str | None = None


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for."""

    product_id: str
    quantity: int
    variant_id: str | None = None


# --- Outputs ------------------------------------------------------------------


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    sku: str | None
    price: float
    compare_price: float | None
    inventory: int
    in_stock: bool
    low_stock_threshold: int

    @staticmethod
    def from_domain(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            sku=product.sku,
            price=product.price.to_float(),
            compare_price=product.compare_price.to_float() if product.compare_price else None,
            inventory=product.inventory,
            in_stock=product.in_stock,
            low_stock_threshold=product.low_stock_threshold,
        )


@dataclass(frozen=True)
class InventoryLogDTO:
    id: str
    product_id: str
    variant_id: str | None
    type: str
    quantity: int
    previous_qty: int
    new_qty: int
    reason: str | None
    reference: str | None
    created_by: str | None
    created_at: datetime

    @staticmethod
    def from_domain(log: InventoryLog) -> InventoryLogDTO:
        return InventoryLogDTO(
            id=log.id,
            product_id=log.product_id,
            variant_id=log.variant_id,
            type=log.type.value,
            quantity=log.quantity,
            previous_qty=log.previous_qty,
            new_qty=log.new_qty,
            reason=log.reason,
            reference=log.reference,
            created_by=log.created_by,
            created_at=log.created_at,
        )


@dataclass(frozen=True)
class AlertDTO:
    id: str
    product_id: str
    variant_id: str | None
    type: str
    threshold: int | None
    message: str
    acknowledged: bool
    acknowledged_at: datetime | None
    created_at: datetime

    @staticmethod
    def from_domain(alert: InventoryAlert) -> AlertDTO:
        return AlertDTO(
            id=alert.id,
            product_id=alert.product_id,
            variant_id=alert.variant_id,
            type=alert.type.value,
            threshold=alert.threshold,
            message=alert.message,
            acknowledged=alert.acknowledged,
            acknowledged_at=alert.acknowledged_at,
            created_at=alert.created_at,
        )


@dataclass(frozen=True)
class AdjustmentDTO:
    product: ProductDTO
    log: InventoryLogDTO
    alert: AlertDTO | None


@dataclass(frozen=True)
class BulkErrorDTO:
    product_id: str | None
    sku: str | None
    error: str


@dataclass
class BulkResultDTO:
    success: int = 0
    failed: int = 0
    errors: list[BulkErrorDTO] = field(default_factory=list)


@dataclass(frozen=True)
class AvailabilityDTO:
    product_id: str
    inventory: int
    reserved: int
    available: int


@dataclass(frozen=True)
class Page:
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0


@dataclass(frozen=True)
class CouponDTO:
    id: str
    code: str
    description: str | None
    discount_type: str
    discount_value: float
    min_purchase: float | None
    max_discount: float | None
    usage_limit: int | None
    usage_per_user: int | None
    usage_count: int
    valid_from: datetime
    valid_to: datetime | None
    active: bool

    @staticmethod
    def from_domain(coupon: Coupon) -> CouponDTO:
        return CouponDTO(
            id=coupon.id,
            code=coupon.code,
            description=coupon.description,
            discount_type=coupon.discount_type.value,
            discount_value=float(coupon.discount_value),
            min_purchase=coupon.min_purchase.to_float() if coupon.min_purchase else None,
            max_discount=coupon.max_discount.to_float() if coupon.max_discount else None,
            usage_limit=coupon.usage_limit,
            usage_per_user=coupon.usage_per_user,
            usage_count=coupon.usage_count,
            valid_from=coupon.valid_from,
            valid_to=coupon.valid_to,
            active=coupon.active,
        )


@dataclass(frozen=True)
class CouponValidationDTO:
    valid: bool
    coupon: CouponDTO
    discount: float
    final_total: float


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    variant_id: str | None
    product_name: str
    quantity: int
    unit_price: float
    line_total: float


@dataclass(frozen=True)
class OrderDTO:
    id: int
    status: str
    user_id: str | None
    customer_name: str
    email: str
    items: list[OrderLineItemDTO]
    subtotal: float
    discount: float
    total: float
    coupon_id: str | None
    created_at: datetime

    @staticmethod
    def from_domain(order: Order) -> OrderDTO:
        return OrderDTO(
            id=order.id,  # type: ignore[arg-type]
            status=order.status.value,
            user_id=order.user_id,
            customer_name=order.customer.full_name,
            email=order.customer.email,
            items=[
                OrderLineItemDTO(
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    product_name=item.product_name,
                    quantity=item.quantity.value,
                    unit_price=item.unit_price.to_float(),
                    line_total=item.line_total.to_float(),
                )
                for item in order.items
            ],
            subtotal=order.subtotal.to_float(),
            discount=order.discount.to_float() if order.discount else 0.0,
            total=order.total.to_float(),
            coupon_id=order.coupon_id,
            created_at=order.created_at,
        )
