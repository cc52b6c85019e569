"""CLI command that runs the HTTP API."""

from __future__ import annotations

import click
import uvicorn

from storefront.infrastructure.api.app import create_app
from storefront.infrastructure.settings import Settings


@click.command("serve")
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, type=int, show_default=True)
@click.pass_obj
def serve(settings: Settings, host: str, port: int) -> None:
    """Run the back-office HTTP API."""
    uvicorn.run(create_app(settings), host=host, port=port, log_level=settings.log_level.lower())
