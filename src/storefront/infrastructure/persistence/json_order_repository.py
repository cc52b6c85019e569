"""JSON-backed implementation of OrderRepository."""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.model.order import CustomerInfo, Order, OrderLineItem, OrderStatus
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_table import JsonTable, dump_dt, load_dt


class JsonOrderRepository(JsonTable, OrderRepository):

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> int:
        if not self._records:
            return 1
        return max(o["id"] for o in self._records) + 1

    def get_by_id(self, order_id: int) -> Order | None:
        raw = self._find_raw("id", order_id)
        return self._to_domain(raw) if raw else None

    def count_with_coupon(self, coupon_id: str, user_id: str | None = None) -> int:
        return sum(
            1 for raw in self._records
            if raw.get("coupon_id") == coupon_id
            and (user_id is None or raw.get("user_id") == user_id)
        )

    def save(self, order: Order) -> None:
        if order.id is None:
            order.id = self.next_id()
        self._upsert_raw("id", self._to_raw(order))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        c = order.customer
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status.value,
            "customer": {
                "first_name": c.first_name,
                "last_name": c.last_name,
                "email": c.email,
                "phone": c.phone,
                "address": c.address,
                "city": c.city,
                "postal_code": c.postal_code,
            },
            "coupon_id": order.coupon_id,
            "discount": str(order.discount.amount) if order.discount else None,
            "created_at": dump_dt(order.created_at),
            "updated_at": dump_dt(order.updated_at),
            "items": [
                {
                    "product_id": item.product_id,
                    "variant_id": item.variant_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderLineItem(
                product_id=i["product_id"],
                variant_id=i.get("variant_id"),
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "ILS")),
            )
            for i in raw["items"]
        ]
        currency = items[0].unit_price.currency if items else "ILS"
        return Order(
            id=raw["id"],
            user_id=raw.get("user_id"),
            customer=CustomerInfo(**raw["customer"]),
            items=items,
            status=OrderStatus(raw["status"]),
            coupon_id=raw.get("coupon_id"),
            discount=Money(Decimal(raw["discount"]), currency) if raw.get("discount") else None,
            created_at=load_dt(raw["created_at"]),
            updated_at=load_dt(raw.get("updated_at")),
        )
