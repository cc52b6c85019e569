"""Request bodies for the HTTP API.

Field names are snake_case in Python and camelCase on the wire. Fields
the use cases check themselves stay optional here so a missing value
gets the business error message rather than a schema error.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# --- Inventory ----------------------------------------------------------------


class AdjustInventoryRequest(ApiModel):
    product_id: str | None = None
    quantity: int | None = None
    type: str | None = None
    reason: str | None = None


class InventoryUpdateItem(ApiModel):
    product_id: str | None = None
    sku: str | None = None
    quantity: int | None = None
    type: str | None = None
    reason: str | None = None


class BulkUpdateRequest(ApiModel):
    # Left untyped so a non-list reaches the use case and gets its message
    updates: Any = None


class AcknowledgeAlertsRequest(ApiModel):
    alert_ids: Any = None


# --- Coupons ------------------------------------------------------------------


class ValidateCouponRequest(ApiModel):
    code: str | None = None
    user_id: str | None = None
    subtotal: Decimal | None = None


class UseCouponRequest(ApiModel):
    coupon_id: str


class CouponRequest(ApiModel):
    code: str
    discount_type: str
    discount_value: Decimal
    valid_from: datetime
    valid_to: datetime | None = None
    description: str | None = None
    min_purchase: Decimal | None = None
    max_discount: Decimal | None = None
    usage_limit: int | None = None
    usage_per_user: int | None = None
    active: bool = True

    @field_validator("valid_from", "valid_to")
    @classmethod
    def _assume_utc(cls, v: datetime | None) -> datetime | None:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


# --- Orders -------------------------------------------------------------------


class CustomerRequest(ApiModel):
    first_name: str
    last_name: str = ""
    email: str
    phone: str | None = None
    address: str | None = None
    city: str | None = None
    postal_code: str | None = None


class OrderItemRequest(ApiModel):
    product_id: str
    quantity: int
    variant_id: str | None = None


class PlaceOrderRequest(ApiModel):
    customer: CustomerRequest
    items: list[OrderItemRequest] = Field(default_factory=list)
    coupon_code: str | None = None


class UpdateOrderStatusRequest(ApiModel):
    status: str | None = None


# --- Wishlist -----------------------------------------------------------------


class WishlistAddRequest(ApiModel):
    product_id: str | None = None
    # Guest list held by the client; ignored for signed-in users
    product_ids: list[str] = Field(default_factory=list)


class WishlistSyncRequest(ApiModel):
    product_ids: list[str] = Field(default_factory=list)
