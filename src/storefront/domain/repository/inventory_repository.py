"""Abstract repositories for the inventory ledger records."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.inventory import (
    AlertType,
    InventoryAlert,
    InventoryChangeType,
    InventoryLog,
    StockReservation,
)


class InventoryLogRepository(ABC):

    @abstractmethod
    def add(self, log: InventoryLog) -> None:
        """Append a log entry. Entries are never updated."""

    @abstractmethod
    def list(
        self,
        product_id: str | None = None,
        change_type: InventoryChangeType | None = None,
    ) -> list[InventoryLog]:
        """Return matching entries, newest first."""


class InventoryAlertRepository(ABC):

    @abstractmethod
    def get_by_id(self, alert_id: str) -> InventoryAlert | None:
        """Return an alert by its ID, or None."""

    @abstractmethod
    def list(self, acknowledged: bool | None = None) -> list[InventoryAlert]:
        """Return alerts, newest first, optionally filtered by acknowledgement."""

    @abstractmethod
    def find_open(
        self, product_id: str, variant_id: str | None, alert_type: AlertType
    ) -> InventoryAlert | None:
        """Return an unacknowledged alert of this type for the product/variant."""

    @abstractmethod
    def save(self, alert: InventoryAlert) -> None:
        """Persist a new or updated alert."""

    @abstractmethod
    def delete(self, alert_id: str) -> None:
        """Remove an alert permanently."""


class ReservationRepository(ABC):

    @abstractmethod
    def get_by_id(self, reservation_id: str) -> StockReservation | None:
        """Return a reservation by its ID, or None."""

    @abstractmethod
    def list_active(self, product_id: str) -> list[StockReservation]:
        """Return ACTIVE reservations held against a product."""

    @abstractmethod
    def save(self, reservation: StockReservation) -> None:
        """Persist a new or updated reservation."""
