import click

from storefront.infrastructure.cli.alert_commands import alerts_ack, alerts_list, alerts_purge
from storefront.infrastructure.cli.coupon_commands import (
    coupon_create,
    coupon_deactivate,
    coupon_list,
    coupon_validate,
)
from storefront.infrastructure.cli.inventory_commands import (
    inventory_adjust,
    inventory_availability,
    inventory_bulk,
    inventory_logs,
    inventory_release,
    inventory_reserve,
    inventory_show,
)
from storefront.infrastructure.cli.notification_commands import notifications_dispatch
from storefront.infrastructure.cli.order_commands import order_place, order_show, order_status
from storefront.infrastructure.cli.product_commands import product_add, product_list
from storefront.infrastructure.cli.serve_command import serve
from storefront.infrastructure.logging_config import configure_logging
from storefront.infrastructure.settings import load_settings


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Storefront back-office"""
    if ctx.obj is None:
        ctx.obj = load_settings()
    configure_logging(ctx.obj.log_level)


@cli.group()
def product() -> None:
    """Manage the product catalog."""


@cli.group()
def inventory() -> None:
    """Manage stock levels."""


@cli.group()
def alerts() -> None:
    """Review inventory alerts."""


@cli.group()
def coupon() -> None:
    """Manage coupons."""


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def notifications() -> None:
    """Deliver queued emails."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_list)
inventory.add_command(inventory_adjust)
inventory.add_command(inventory_availability)
inventory.add_command(inventory_bulk)
inventory.add_command(inventory_logs)
inventory.add_command(inventory_release)
inventory.add_command(inventory_reserve)
inventory.add_command(inventory_show)
alerts.add_command(alerts_ack)
alerts.add_command(alerts_list)
alerts.add_command(alerts_purge)
coupon.add_command(coupon_create)
coupon.add_command(coupon_deactivate)
coupon.add_command(coupon_list)
coupon.add_command(coupon_validate)
order.add_command(order_place)
order.add_command(order_show)
order.add_command(order_status)
notifications.add_command(notifications_dispatch)
cli.add_command(serve)
