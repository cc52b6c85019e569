"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.dto import OrderDTO, OrderItemSpec
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.update_order_status import ShowOrderHandler, UpdateOrderStatusHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.order import CustomerInfo, OrderStatus
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.settings import Settings


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'p1:3,p2:1:v7' (product:qty[:variant]) into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for entry in raw.split(","):
        parts = [p.strip() for p in entry.strip().split(":")]
        if len(parts) not in (2, 3) or not parts[0]:
            raise click.BadParameter(
                f"Invalid item format '{entry.strip()}'. Expected 'ProductId:Quantity[:VariantId]'."
            )
        try:
            qty = int(parts[1])
        except ValueError:
            raise click.BadParameter(f"Invalid quantity '{parts[1]}' for product '{parts[0]}'.")
        variant_id = parts[2] if len(parts) == 3 and parts[2] else None
        specs.append(OrderItemSpec(product_id=parts[0], quantity=qty, variant_id=variant_id))
    return specs


def _print_order(dto: OrderDTO) -> None:
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name} <{dto.email}>")
    click.echo()
    click.echo(f"  {'Product':<28} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-' * 56}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<28} {item.quantity:>5} "
            f"{item.unit_price:>10.2f} {item.line_total:>10.2f}"
        )
    click.echo()
    if dto.discount:
        click.echo(f"  {'Subtotal:':>46} {dto.subtotal:>10.2f}")
        click.echo(f"  {'Discount:':>46} {-dto.discount:>10.2f}")
    click.echo(f"  {'Total:':>46} {dto.total:>10.2f}")


@click.command("place")
@click.option("--first-name", required=True)
@click.option("--last-name", required=True)
@click.option("--email", required=True)
@click.option("--phone", default=None)
@click.option("--address", default=None)
@click.option("--city", default=None)
@click.option("--items", required=True, help="Items as 'ProductId:Qty[:VariantId],...'.")
@click.option("--coupon", "coupon_code", default=None, help="Coupon code to apply.")
@click.option("--user", "user_id", default=None, help="Signed-in user placing the order.")
@click.pass_obj
def order_place(
    settings: Settings,
    first_name: str,
    last_name: str,
    email: str,
    phone: str | None,
    address: str | None,
    city: str | None,
    items: str,
    coupon_code: str | None,
    user_id: str | None,
) -> None:
    """Place an order, deducting stock."""
    specs = _parse_items(items)
    customer = CustomerInfo(
        first_name=first_name, last_name=last_name, email=email,
        phone=phone, address=address, city=city,
    )
    handler = PlaceOrderHandler(unit_of_work(settings), admin_email=settings.admin_email)

    try:
        dto = handler.handle(customer, specs, user_id=user_id, coupon_code=coupon_code)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _print_order(dto)


@click.command("show")
@click.argument("order_id", type=int)
@click.pass_obj
def order_show(settings: Settings, order_id: int) -> None:
    """Show order details."""
    try:
        dto = ShowOrderHandler(unit_of_work(settings)).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _print_order(dto)


@click.command("status")
@click.argument("order_id", type=int)
@click.argument("status", type=click.Choice([s.value for s in OrderStatus], case_sensitive=False))
@click.pass_obj
def order_status(settings: Settings, order_id: int, status: str) -> None:
    """Set an order's status and queue the customer email."""
    try:
        dto = UpdateOrderStatusHandler(unit_of_work(settings)).handle(order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} is now {dto.status}")
