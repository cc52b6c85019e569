"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from storefront.application.dispatch_notifications import EmailSender
from storefront.infrastructure.notifications.http_email_sender import (
    HttpEmailSender,
    LoggingEmailSender,
)
from storefront.infrastructure.persistence.json_store import JsonDocumentStore, JsonUnitOfWork
from storefront.infrastructure.settings import Settings


def unit_of_work(settings: Settings) -> JsonUnitOfWork:
    return JsonUnitOfWork(JsonDocumentStore(settings.store_path))


def email_sender(settings: Settings) -> EmailSender:
    if not settings.email_api_key:
        return LoggingEmailSender()
    return HttpEmailSender(
        api_url=settings.email_api_url,
        api_key=settings.email_api_key,
        sender=settings.email_from,
        timeout=settings.email_timeout_seconds,
    )
