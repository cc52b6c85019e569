"""CLI command that delivers queued notification emails."""

from __future__ import annotations

import click

from storefront.application.dispatch_notifications import DispatchNotificationsHandler
from storefront.infrastructure.bootstrap import email_sender, unit_of_work
from storefront.infrastructure.settings import Settings


@click.command("dispatch")
@click.pass_obj
def notifications_dispatch(settings: Settings) -> None:
    """Send every pending email once."""
    sender = email_sender(settings)
    try:
        result = DispatchNotificationsHandler(
            unit_of_work(settings),
            sender,
            max_attempts=settings.notification_max_attempts,
        ).handle()
    finally:
        sender.close()
    click.echo(f"sent={result.sent} retrying={result.retrying} given_up={result.given_up}")
