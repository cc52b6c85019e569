"""CLI commands for coupons."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import click

from storefront.application.manage_coupons import (
    CouponSpec,
    CreateCouponHandler,
    DeactivateCouponHandler,
    ListCouponsHandler,
)
from storefront.application.validate_coupon import ValidateCouponHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.settings import Settings


def _utc(value: datetime | None) -> datetime | None:
    """click.DateTime yields naive datetimes; dates are entered in UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


@click.command("validate")
@click.argument("code")
@click.option("--subtotal", required=True, help="Cart subtotal.")
@click.option("--user", "user_id", default=None, help="Check the per-user limit for this user.")
@click.pass_obj
def coupon_validate(settings: Settings, code: str, subtotal: str, user_id: str | None) -> None:
    """Check a coupon against a subtotal without using it."""
    handler = ValidateCouponHandler(unit_of_work(settings), currency=settings.currency)

    try:
        result = handler.handle(code, subtotal, user_id=user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{result.coupon.code}: discount {result.discount:.2f}, total {result.final_total:.2f}")


@click.command("create")
@click.option("--code", required=True)
@click.option("--type", "discount_type", required=True, type=click.Choice(["PERCENTAGE", "FIXED"], case_sensitive=False))
@click.option("--value", required=True, help="Percent (1-100) or fixed amount.")
@click.option("--valid-from", type=click.DateTime(), default=None, help="Defaults to now.")
@click.option("--valid-to", type=click.DateTime(), default=None)
@click.option("--min-purchase", default=None)
@click.option("--max-discount", default=None)
@click.option("--usage-limit", type=int, default=None)
@click.option("--per-user", "usage_per_user", type=int, default=None)
@click.option("--description", default=None)
@click.pass_obj
def coupon_create(
    settings: Settings,
    code: str,
    discount_type: str,
    value: str,
    valid_from: datetime | None,
    valid_to: datetime | None,
    min_purchase: str | None,
    max_discount: str | None,
    usage_limit: int | None,
    usage_per_user: int | None,
    description: str | None,
) -> None:
    """Create a coupon."""
    try:
        spec = CouponSpec(
            code=code,
            discount_type=discount_type,
            discount_value=Decimal(value),
            valid_from=_utc(valid_from) or datetime.now(timezone.utc),
            valid_to=_utc(valid_to),
            description=description,
            min_purchase=Decimal(min_purchase) if min_purchase else None,
            max_discount=Decimal(max_discount) if max_discount else None,
            usage_limit=usage_limit,
            usage_per_user=usage_per_user,
        )
    except ArithmeticError:
        raise click.BadParameter("Amounts must be numbers.")

    handler = CreateCouponHandler(unit_of_work(settings), currency=settings.currency)
    try:
        dto = handler.handle(spec)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Coupon {dto.code} created ({dto.id})")


@click.command("list")
@click.pass_obj
def coupon_list(settings: Settings) -> None:
    """List all coupons."""
    coupons = ListCouponsHandler(unit_of_work(settings)).handle()

    if not coupons:
        click.echo("No coupons found.")
        return

    click.echo(f"{'Code':<20} {'Type':<11} {'Value':>8} {'Used':>6} {'Limit':>6} {'Active':>7}")
    click.echo("-" * 62)
    for c in coupons:
        limit = str(c.usage_limit) if c.usage_limit is not None else "-"
        click.echo(
            f"{c.code:<20} {c.discount_type:<11} {c.discount_value:>8g} {c.usage_count:>6} "
            f"{limit:>6} {'yes' if c.active else 'no':>7}"
        )


@click.command("deactivate")
@click.argument("code")
@click.pass_obj
def coupon_deactivate(settings: Settings, code: str) -> None:
    """Switch a coupon off without deleting it."""
    handler = DeactivateCouponHandler(unit_of_work(settings))

    try:
        dto = handler.handle(code)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Coupon {dto.code} deactivated")
