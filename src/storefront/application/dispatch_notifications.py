"""Application service: deliver queued notifications.

Delivery is at-least-once: a message is marked SENT only after the
sender returns, and the mark is committed per message. A crash between
the two resends the message on the next run.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from storefront.domain.model.notification import DeliveryStatus, OutboxMessage
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


class EmailSender(ABC):

    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> str | None:
        """Send one email; return the provider's message id. Raise on failure."""

    def close(self) -> None:
        """Release any connection the sender holds."""


@dataclass(frozen=True)
class DispatchResultDTO:
    sent: int
    retrying: int
    given_up: int


class DispatchNotificationsHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        sender: EmailSender,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._uow = uow
        self._sender = sender
        self._max_attempts = max_attempts

    def handle(self) -> DispatchResultDTO:
        with self._uow as uow:
            pending = uow.outbox.list_pending()

        sent = retrying = given_up = 0
        for message in pending:
            self._deliver(message)
            with self._uow as uow:
                uow.outbox.save(message)
                uow.commit()

            if message.status == DeliveryStatus.SENT:
                sent += 1
            elif message.status == DeliveryStatus.FAILED:
                given_up += 1
            else:
                retrying += 1

        return DispatchResultDTO(sent=sent, retrying=retrying, given_up=given_up)

    def _deliver(self, message: OutboxMessage) -> None:
        try:
            provider_id = self._sender.send(message.recipient, message.subject, message.body)
        except Exception as exc:
            message.mark_attempt_failed(str(exc) or type(exc).__name__, self._max_attempts)
            logger.warning(
                "email %s to %s failed (attempt %d/%d): %s",
                message.kind.value, message.recipient, message.attempts, self._max_attempts, exc,
            )
            return
        message.mark_sent()
        logger.info("email %s sent to %s (id=%s)", message.kind.value, message.recipient, provider_id)
