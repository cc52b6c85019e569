"""JSON-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal

from storefront.domain.model.product import Product, ProductVariant
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_table import JsonTable, dump_dec, load_dec


def _dump_money(money: Money | None) -> dict | None:
    if money is None:
        return None
    return {"amount": str(money.amount), "currency": money.currency}


def _load_money(raw: dict | None) -> Money | None:
    if raw is None:
        return None
    return Money(Decimal(raw["amount"]), raw.get("currency", "ILS"))


class JsonProductRepository(JsonTable, ProductRepository):

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        raw = self._find_raw("id", product_id)
        return self._to_domain(raw) if raw else None

    def get_by_sku(self, sku: str) -> Product | None:
        raw = self._find_raw("sku", sku)
        return self._to_domain(raw) if raw else None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._records]

    def save(self, product: Product) -> None:
        self._upsert_raw("id", self._to_raw(product))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "sku": product.sku,
            "price": _dump_money(product.price),
            "compare_price": _dump_money(product.compare_price),
            "category_id": product.category_id,
            "inventory": product.inventory,
            "in_stock": product.in_stock,
            "low_stock_threshold": product.low_stock_threshold,
            "reorder_point": product.reorder_point,
            "reorder_quantity": product.reorder_quantity,
            "variants": [
                {
                    "id": v.id,
                    "name": v.name,
                    "sku": v.sku,
                    "inventory": v.inventory,
                    "in_stock": v.in_stock,
                    "price": _dump_money(v.price),
                    "price_adjustment": dump_dec(v.price_adjustment),
                    "low_stock_threshold": v.low_stock_threshold,
                    "is_default": v.is_default,
                }
                for v in product.variants
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            sku=raw.get("sku"),
            price=_load_money(raw["price"]),
            compare_price=_load_money(raw.get("compare_price")),
            category_id=raw.get("category_id"),
            inventory=raw.get("inventory", 0),
            low_stock_threshold=raw.get("low_stock_threshold", 5),
            reorder_point=raw.get("reorder_point"),
            reorder_quantity=raw.get("reorder_quantity"),
            variants=[
                ProductVariant(
                    id=v["id"],
                    product_id=raw["id"],
                    name=v["name"],
                    sku=v.get("sku"),
                    inventory=v.get("inventory", 0),
                    in_stock=v.get("inventory", 0) > 0,
                    price=_load_money(v.get("price")),
                    price_adjustment=load_dec(v.get("price_adjustment")),
                    low_stock_threshold=v.get("low_stock_threshold"),
                    is_default=v.get("is_default", False),
                )
                for v in raw.get("variants", [])
            ],
        )
