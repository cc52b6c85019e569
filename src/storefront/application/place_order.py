"""Application service: Place Order use case.

Everything an order touches commits together in one unit of work: the
order row, a SALE log and stock deduction per line, threshold alerts,
coupon redemption and the queued notification messages. If any line
fails its stock check nothing is written.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from storefront.application import notifications
from storefront.application.dto import OrderDTO, OrderItemSpec
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.inventory import InventoryChangeType
from storefront.domain.model.order import CustomerInfo, Order, OrderLineItem
from storefront.domain.model.product import Product, ProductVariant
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.coupon_validator import CouponValidator
from storefront.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)

SALE_REASON = "Order placed"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlaceOrderHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        admin_email: str | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._uow = uow
        self._admin_email = admin_email
        self._clock = clock

    def handle(
        self,
        customer: CustomerInfo,
        item_specs: list[OrderItemSpec],
        user_id: str | None = None,
        coupon_code: str | None = None,
    ) -> OrderDTO:
        with self._uow as uow:
            products: dict[str, Product] = {}
            resolved: list[tuple[Product, ProductVariant | None, int]] = []
            line_items: list[OrderLineItem] = []

            # Resolve every line and check stock before any write
            for spec in item_specs:
                product = products.get(spec.product_id) or uow.products.get_by_id(spec.product_id)
                if product is None:
                    raise EntityNotFoundError("Product not found")
                products[product.id] = product

                variant = product.find_variant(spec.variant_id) if spec.variant_id else None
                qty = Quantity(spec.quantity)
                stock = variant.inventory if variant else product.inventory
                name = f"{product.name} - {variant.name}" if variant else product.name
                if stock < qty.value:
                    raise ValidationError(
                        f"Insufficient inventory for {name} "
                        f"(requested {qty.value}, available {stock})"
                    )

                resolved.append((product, variant, qty.value))
                line_items.append(
                    OrderLineItem(
                        product_id=product.id,
                        variant_id=variant.id if variant else None,
                        product_name=name,
                        quantity=qty,
                        unit_price=variant.effective_price(product.price) if variant else product.price,
                    )
                )

            order = Order.create(customer=customer, items=line_items, user_id=user_id)

            if coupon_code:
                quote = CouponValidator(uow.coupons, uow.orders).validate(
                    coupon_code, order.subtotal, self._clock(), user_id=user_id,
                )
                order.apply_coupon(quote.coupon.id, quote.discount)
                quote.coupon.redeem()
                uow.coupons.save(quote.coupon)

            uow.orders.save(order)

            ledger = InventoryLedger(uow)
            for product, variant, qty in resolved:
                if variant is not None:
                    ledger.apply_to_variant(
                        product, variant, variant.inventory - qty,
                        InventoryChangeType.SALE, SALE_REASON,
                        reference=str(order.id), skip_duplicate_alert=True,
                    )
                else:
                    ledger.apply(
                        product, product.inventory - qty,
                        InventoryChangeType.SALE, SALE_REASON,
                        reference=str(order.id), skip_duplicate_alert=True,
                    )

            uow.outbox.add(notifications.order_confirmation(order))
            if self._admin_email:
                uow.outbox.add(notifications.admin_new_order(order, self._admin_email))

            uow.commit()

        logger.info("order #%s placed, total %s", order.id, order.total)
        return OrderDTO.from_domain(order)
