"""Builders for the outbound messages queued by order use cases."""

from __future__ import annotations

from storefront.domain.model.notification import MessageKind, OutboxMessage
from storefront.domain.model.order import Order, OrderStatus


def _item_lines(order: Order) -> str:
    return "\n".join(
        f"  {item.product_name} x{item.quantity} - {item.line_total}" for item in order.items
    )


def order_confirmation(order: Order) -> OutboxMessage:
    body = (
        f"Hi {order.customer.first_name},\n\n"
        f"Thank you for your order #{order.id}.\n\n"
        f"{_item_lines(order)}\n\n"
        f"Subtotal: {order.subtotal}\n"
        f"Discount: {order.discount or '-'}\n"
        f"Total: {order.total}\n"
    )
    return OutboxMessage.new(
        MessageKind.ORDER_CONFIRMATION,
        order.customer.email,
        f"Order confirmation #{order.id}",
        body,
        reference=str(order.id),
    )


def admin_new_order(order: Order, admin_email: str) -> OutboxMessage:
    body = (
        f"New order #{order.id} from {order.customer.full_name} <{order.customer.email}>\n\n"
        f"{_item_lines(order)}\n\n"
        f"Total: {order.total}\n"
    )
    return OutboxMessage.new(
        MessageKind.ADMIN_NEW_ORDER,
        admin_email,
        f"New order #{order.id}",
        body,
        reference=str(order.id),
    )


def status_change(order: Order, previous: OrderStatus) -> OutboxMessage:
    if order.status == OrderStatus.SHIPPED:
        kind = MessageKind.SHIPPING_NOTICE
        subject = f"Your order #{order.id} is on its way"
    else:
        kind = MessageKind.ORDER_STATUS
        subject = f"Order #{order.id} is now {order.status.value.lower()}"
    body = (
        f"Hi {order.customer.first_name},\n\n"
        f"The status of order #{order.id} changed from "
        f"{previous.value} to {order.status.value}.\n"
    )
    return OutboxMessage.new(kind, order.customer.email, subject, body, reference=str(order.id))
