"""Abstract repository for queued outbound notifications."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.notification import OutboxMessage


class OutboxRepository(ABC):

    @abstractmethod
    def add(self, message: OutboxMessage) -> None:
        """Queue a message."""

    @abstractmethod
    def list_pending(self) -> list[OutboxMessage]:
        """Return undelivered messages, oldest first."""

    @abstractmethod
    def save(self, message: OutboxMessage) -> None:
        """Persist delivery progress."""
