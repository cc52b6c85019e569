"""CLI commands for inventory alerts."""

from __future__ import annotations

import click

from storefront.application.manage_alerts import (
    AcknowledgeAlertsHandler,
    ListAlertsHandler,
    PurgeAlertsHandler,
)
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.settings import Settings


@click.command("list")
@click.option("--acknowledged", is_flag=True, help="Show acknowledged alerts instead of open ones.")
@click.pass_obj
def alerts_list(settings: Settings, acknowledged: bool) -> None:
    """List inventory alerts, newest first."""
    alerts = ListAlertsHandler(unit_of_work(settings)).handle(acknowledged=acknowledged)

    if not alerts:
        click.echo("No alerts.")
        return

    for alert in alerts:
        click.echo(f"{alert.id}  {alert.type:<12} {alert.message}")


@click.command("ack")
@click.argument("alert_ids", nargs=-1)
@click.option("--actor", default=None, help="Who is acknowledging.")
@click.pass_obj
def alerts_ack(settings: Settings, alert_ids: tuple[str, ...], actor: str | None) -> None:
    """Acknowledge one or more alerts."""
    handler = AcknowledgeAlertsHandler(unit_of_work(settings))

    try:
        count = handler.handle(list(alert_ids), actor_id=actor)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{count} alert(s) acknowledged")


@click.command("purge")
@click.pass_obj
def alerts_purge(settings: Settings) -> None:
    """Delete alerts acknowledged longer ago than the retention period."""
    handler = PurgeAlertsHandler(unit_of_work(settings), retention_days=settings.alert_retention_days)
    click.echo(f"{handler.handle()} alert(s) purged")
