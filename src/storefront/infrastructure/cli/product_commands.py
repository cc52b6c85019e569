"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from storefront.application.add_product import AddProductHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.settings import Settings


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 249.90).")
@click.option("--sku", default=None, help="Stock keeping unit.")
@click.option("--inventory", default=0, type=int, help="Opening stock.")
@click.option("--threshold", default=None, type=int, help="Low-stock threshold.")
@click.pass_obj
def product_add(
    settings: Settings, name: str, price: str, sku: str | None, inventory: int, threshold: int | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(
        unit_of_work(settings),
        currency=settings.currency,
        default_threshold=settings.default_low_stock_threshold,
    )

    try:
        product = handler.handle(
            name=name, price=price, sku=sku, inventory=inventory, low_stock_threshold=threshold,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.id} '{product.name}' added at {product.price:.2f}")


@click.command("list")
@click.pass_obj
def product_list(settings: Settings) -> None:
    """List all products in the catalog."""
    with unit_of_work(settings) as uow:
        products = uow.products.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<34} {'Name':<24} {'SKU':<12} {'Price':>10} {'Stock':>6}")
    click.echo("-" * 90)
    for p in products:
        click.echo(f"{p.id:<34} {p.name:<24} {p.sku or '-':<12} {str(p.price):>10} {p.inventory:>6}")
