"""CLI commands for stock levels, the inventory log and reservations."""

from __future__ import annotations

import json

import click

from storefront.application.adjust_inventory import AdjustInventoryHandler
from storefront.application.bulk_update_inventory import BulkUpdateInventoryHandler
from storefront.application.dto import InventoryUpdateSpec
from storefront.application.reserve_stock import CloseReservationHandler, ReserveStockHandler
from storefront.application.show_inventory import (
    FILTERS,
    ShowAvailabilityHandler,
    ShowInventoryHandler,
    ShowInventoryLogsHandler,
)
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.settings import Settings

CHANGE_TYPES = click.Choice(
    ["SALE", "RESTOCK", "RETURN", "ADJUSTMENT", "DAMAGE", "LOSS", "RESERVATION", "RELEASE"],
    case_sensitive=False,
)


def _load_updates(fh) -> list[InventoryUpdateSpec]:
    """Read a JSON array of ``{productId|sku, quantity, type, reason}`` objects."""
    try:
        raw = json.load(fh)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Not valid JSON: {exc}")
    if not isinstance(raw, list):
        raise click.BadParameter("Expected a JSON array of updates.")
    return [
        InventoryUpdateSpec(
            quantity=item.get("quantity"),
            type=item.get("type"),
            product_id=item.get("productId") or item.get("product_id"),
            sku=item.get("sku"),
            reason=item.get("reason"),
        )
        for item in raw
    ]


@click.command("adjust")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Signed change, e.g. -3 or 10.")
@click.option("--type", "change_type", required=True, type=CHANGE_TYPES, help="Kind of change.")
@click.option("--reason", default=None, help="Free-text reason for the log.")
@click.option("--actor", default=None, help="Who made the change.")
@click.pass_obj
def inventory_adjust(
    settings: Settings, product_id: str, quantity: int, change_type: str, reason: str | None,
    actor: str | None,
) -> None:
    """Apply a stock change to one product."""
    handler = AdjustInventoryHandler(unit_of_work(settings))

    try:
        result = handler.handle(product_id, quantity, change_type, reason=reason, actor_id=actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"{result.product.name}: {result.log.previous_qty} -> {result.log.new_qty} "
        f"({result.log.type} {result.log.quantity:+d})"
    )
    if result.alert:
        click.echo(f"ALERT {result.alert.type}: {result.alert.message}")


@click.command("bulk")
@click.argument("updates_file", type=click.File("r"))
@click.option("--actor", default=None, help="Who made the change.")
@click.pass_obj
def inventory_bulk(settings: Settings, updates_file, actor: str | None) -> None:
    """Apply a JSON file of stock updates ('-' reads stdin)."""
    updates = _load_updates(updates_file)
    handler = BulkUpdateInventoryHandler(unit_of_work(settings))

    try:
        result = handler.handle(updates, actor_id=actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Updated: {result.success}  Failed: {result.failed}")
    for error in result.errors:
        click.echo(f"  {error.product_id or error.sku or '?'}: {error.error}")


@click.command("show")
@click.option("--filter", "stock_filter", default="all", type=click.Choice(FILTERS), help="Which products to list.")
@click.option("--page", default=1, type=int)
@click.option("--limit", default=20, type=int)
@click.pass_obj
def inventory_show(settings: Settings, stock_filter: str, page: int, limit: int) -> None:
    """Show current inventory levels."""
    handler = ShowInventoryHandler(unit_of_work(settings))

    try:
        overview = handler.handle(filter=stock_filter, page=page, limit=limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    stats = overview.stats
    click.echo(
        f"{stats.total_products} products, {stats.low_stock_products} low, "
        f"{stats.out_of_stock_products} out of stock, {stats.active_alerts} open alerts"
    )
    if not overview.lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'Product':<24} {'Stock':>6} {'Reserved':>9} {'Available':>10} {'Alerts':>7}")
    click.echo("-" * 60)
    for line in overview.lines:
        click.echo(
            f"{line.product.name:<24} {line.product.inventory:>6} {line.reserved:>9} "
            f"{line.available:>10} {line.open_alerts:>7}"
        )
    click.echo(f"page {overview.page.page}/{overview.page.pages}")


@click.command("availability")
@click.argument("product_id")
@click.pass_obj
def inventory_availability(settings: Settings, product_id: str) -> None:
    """Show on-hand, reserved and available stock for a product."""
    handler = ShowAvailabilityHandler(unit_of_work(settings))

    try:
        dto = handler.handle(product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"inventory={dto.inventory} reserved={dto.reserved} available={dto.available}")


@click.command("logs")
@click.option("--product", "product_id", default=None, help="Only this product.")
@click.option("--type", "change_type", default=None, type=CHANGE_TYPES, help="Only this kind of change.")
@click.option("--page", default=1, type=int)
@click.option("--limit", default=50, type=int)
@click.pass_obj
def inventory_logs(
    settings: Settings, product_id: str | None, change_type: str | None, page: int, limit: int,
) -> None:
    """List inventory log entries, newest first."""
    handler = ShowInventoryLogsHandler(unit_of_work(settings))

    try:
        result = handler.handle(product_id=product_id, change_type=change_type, page=page, limit=limit)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.logs:
        click.echo("No log entries found.")
        return

    for log in result.logs:
        click.echo(
            f"{log.created_at:%Y-%m-%d %H:%M} {log.type:<11} {log.quantity:>+6} "
            f"{log.previous_qty:>5} -> {log.new_qty:<5} {log.product_id}  {log.reason or ''}"
        )


@click.command("reserve")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int)
@click.option("--reference", default=None, help="What the stock is held for.")
@click.pass_obj
def inventory_reserve(settings: Settings, product_id: str, quantity: int, reference: str | None) -> None:
    """Hold stock without removing it from the shelf count."""
    handler = ReserveStockHandler(unit_of_work(settings))

    try:
        reservation_id = handler.handle(product_id, quantity, reference=reference)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation {reservation_id} created")


@click.command("release")
@click.argument("reservation_id")
@click.option("--fulfilled", is_flag=True, help="Mark fulfilled instead of released.")
@click.pass_obj
def inventory_release(settings: Settings, reservation_id: str, fulfilled: bool) -> None:
    """Close an active reservation."""
    handler = CloseReservationHandler(unit_of_work(settings))

    try:
        handler.handle(reservation_id, fulfilled=fulfilled)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation {reservation_id} {'fulfilled' if fulfilled else 'released'}")
