"""Outbound notification queued by a state change.

Messages are written in the same unit of work as the change that caused
them and delivered later, at least once, by the dispatcher.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.model.inventory import new_id


class MessageKind(Enum):
    ORDER_CONFIRMATION = "ORDER_CONFIRMATION"
    ADMIN_NEW_ORDER = "ADMIN_NEW_ORDER"
    ORDER_STATUS = "ORDER_STATUS"
    SHIPPING_NOTICE = "SHIPPING_NOTICE"


class DeliveryStatus(Enum):
    PENDING = "PENDING"
    SENT = "SENT"
    FAILED = "FAILED"


@dataclass
class OutboxMessage:
    id: str
    kind: MessageKind
    recipient: str
    subject: str
    body: str
    reference: str | None = None
    status: DeliveryStatus = DeliveryStatus.PENDING
    attempts: int = 0
    last_error: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    sent_at: datetime | None = None

    @staticmethod
    def new(kind: MessageKind, recipient: str, subject: str, body: str,
            reference: str | None = None) -> OutboxMessage:
        return OutboxMessage(
            id=new_id(),
            kind=kind,
            recipient=recipient,
            subject=subject,
            body=body,
            reference=reference,
        )

    def mark_sent(self) -> None:
        self.attempts += 1
        self.status = DeliveryStatus.SENT
        self.last_error = None
        self.sent_at = datetime.now(timezone.utc)

    def mark_attempt_failed(self, error: str, max_attempts: int) -> None:
        """Record a failed attempt; give up once ``max_attempts`` is reached."""
        self.attempts += 1
        self.last_error = error
        if self.attempts >= max_attempts:
            self.status = DeliveryStatus.FAILED
