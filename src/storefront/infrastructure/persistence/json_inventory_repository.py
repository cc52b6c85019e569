"""JSON-backed implementations of the inventory ledger repositories."""

from __future__ import annotations

from storefront.domain.model.inventory import (
    AlertType,
    InventoryAlert,
    InventoryChangeType,
    InventoryLog,
    ReservationStatus,
    StockReservation,
)
from storefront.domain.repository.inventory_repository import (
    InventoryAlertRepository,
    InventoryLogRepository,
    ReservationRepository,
)
from storefront.infrastructure.persistence.json_table import JsonTable, dump_dt, load_dt


class JsonInventoryLogRepository(JsonTable, InventoryLogRepository):

    def add(self, log: InventoryLog) -> None:
        self._records.append(self._to_raw(log))

    def list(
        self,
        product_id: str | None = None,
        change_type: InventoryChangeType | None = None,
    ) -> list[InventoryLog]:
        logs = [
            self._to_domain(raw)
            for raw in self._records
            if (product_id is None or raw["product_id"] == product_id)
            and (change_type is None or raw["type"] == change_type.value)
        ]
        logs.sort(key=lambda log: log.created_at, reverse=True)
        return logs

    @staticmethod
    def _to_raw(log: InventoryLog) -> dict:
        return {
            "id": log.id,
            "product_id": log.product_id,
            "variant_id": log.variant_id,
            "type": log.type.value,
            "quantity": log.quantity,
            "previous_qty": log.previous_qty,
            "new_qty": log.new_qty,
            "reason": log.reason,
            "reference": log.reference,
            "created_by": log.created_by,
            "created_at": dump_dt(log.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryLog:
        return InventoryLog(
            id=raw["id"],
            product_id=raw["product_id"],
            variant_id=raw.get("variant_id"),
            type=InventoryChangeType(raw["type"]),
            quantity=raw["quantity"],
            previous_qty=raw["previous_qty"],
            new_qty=raw["new_qty"],
            reason=raw.get("reason"),
            reference=raw.get("reference"),
            created_by=raw.get("created_by"),
            created_at=load_dt(raw["created_at"]),
        )


class JsonInventoryAlertRepository(JsonTable, InventoryAlertRepository):

    def get_by_id(self, alert_id: str) -> InventoryAlert | None:
        raw = self._find_raw("id", alert_id)
        return self._to_domain(raw) if raw else None

    def list(self, acknowledged: bool | None = None) -> list[InventoryAlert]:
        alerts = [
            self._to_domain(raw)
            for raw in self._records
            if acknowledged is None or raw["acknowledged"] == acknowledged
        ]
        alerts.sort(key=lambda alert: alert.created_at, reverse=True)
        return alerts

    def find_open(
        self, product_id: str, variant_id: str | None, alert_type: AlertType
    ) -> InventoryAlert | None:
        for raw in self._records:
            if (
                raw["product_id"] == product_id
                and raw.get("variant_id") == variant_id
                and raw["type"] == alert_type.value
                and not raw["acknowledged"]
            ):
                return self._to_domain(raw)
        return None

    def save(self, alert: InventoryAlert) -> None:
        self._upsert_raw("id", self._to_raw(alert))

    def delete(self, alert_id: str) -> None:
        self._remove_raw("id", alert_id)

    @staticmethod
    def _to_raw(alert: InventoryAlert) -> dict:
        return {
            "id": alert.id,
            "product_id": alert.product_id,
            "variant_id": alert.variant_id,
            "type": alert.type.value,
            "threshold": alert.threshold,
            "message": alert.message,
            "acknowledged": alert.acknowledged,
            "acknowledged_by": alert.acknowledged_by,
            "acknowledged_at": dump_dt(alert.acknowledged_at),
            "created_at": dump_dt(alert.created_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> InventoryAlert:
        return InventoryAlert(
            id=raw["id"],
            product_id=raw["product_id"],
            variant_id=raw.get("variant_id"),
            type=AlertType(raw["type"]),
            threshold=raw.get("threshold"),
            message=raw["message"],
            acknowledged=raw["acknowledged"],
            acknowledged_by=raw.get("acknowledged_by"),
            acknowledged_at=load_dt(raw.get("acknowledged_at")),
            created_at=load_dt(raw["created_at"]),
        )


class JsonReservationRepository(JsonTable, ReservationRepository):

    def get_by_id(self, reservation_id: str) -> StockReservation | None:
        raw = self._find_raw("id", reservation_id)
        return self._to_domain(raw) if raw else None

    def list_active(self, product_id: str) -> list[StockReservation]:
        return [
            self._to_domain(raw)
            for raw in self._records
            if raw["product_id"] == product_id and raw["status"] == ReservationStatus.ACTIVE.value
        ]

    def save(self, reservation: StockReservation) -> None:
        self._upsert_raw("id", {
            "id": reservation.id,
            "product_id": reservation.product_id,
            "quantity": reservation.quantity,
            "status": reservation.status.value,
            "reference": reservation.reference,
            "created_at": dump_dt(reservation.created_at),
        })

    @staticmethod
    def _to_domain(raw: dict) -> StockReservation:
        return StockReservation(
            id=raw["id"],
            product_id=raw["product_id"],
            quantity=raw["quantity"],
            status=ReservationStatus(raw["status"]),
            reference=raw.get("reference"),
            created_at=load_dt(raw["created_at"]),
        )
