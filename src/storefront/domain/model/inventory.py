"""Inventory ledger records: change log, threshold alerts and reservations.

Log entries are append-only. Alerts accumulate until an operator
acknowledges them; a later restock does not clear an open alert.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

from storefront.domain.exceptions import ValidationError


def _now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return uuid.uuid4().hex


class InventoryChangeType(Enum):
    SALE = "SALE"
    RESTOCK = "RESTOCK"
    RETURN = "RETURN"
    ADJUSTMENT = "ADJUSTMENT"
    DAMAGE = "DAMAGE"
    LOSS = "LOSS"
    RESERVATION = "RESERVATION"
    RELEASE = "RELEASE"


class AlertType(Enum):
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"


class ReservationStatus(Enum):
    ACTIVE = "ACTIVE"
    RELEASED = "RELEASED"
    FULFILLED = "FULFILLED"


@dataclass(frozen=True)
class InventoryLog:
    """One inventory-affecting event. Never mutated after creation."""

    id: str
    product_id: str
    type: InventoryChangeType
    quantity: int
    previous_qty: int
    new_qty: int
    reason: str | None = None
    variant_id: str | None = None
    reference: str | None = None
    created_by: str | None = None
    created_at: datetime = field(default_factory=_now)

    def __post_init__(self) -> None:
        if self.new_qty - self.previous_qty != self.quantity:
            raise ValidationError(
                f"Log delta {self.quantity} does not match "
                f"{self.previous_qty} -> {self.new_qty}"
            )

    @staticmethod
    def record(
        product_id: str,
        change_type: InventoryChangeType,
        previous_qty: int,
        new_qty: int,
        reason: str | None = None,
        *,
        variant_id: str | None = None,
        reference: str | None = None,
        created_by: str | None = None,
    ) -> InventoryLog:
        return InventoryLog(
            id=new_id(),
            product_id=product_id,
            type=change_type,
            quantity=new_qty - previous_qty,
            previous_qty=previous_qty,
            new_qty=new_qty,
            reason=reason,
            variant_id=variant_id,
            reference=reference,
            created_by=created_by,
        )


@dataclass
class InventoryAlert:
    id: str
    product_id: str
    type: AlertType
    message: str
    threshold: int | None = None
    variant_id: str | None = None
    acknowledged: bool = False
    acknowledged_by: str | None = None
    acknowledged_at: datetime | None = None
    created_at: datetime = field(default_factory=_now)

    def acknowledge(self, actor_id: str | None, at: datetime | None = None) -> None:
        self.acknowledged = True
        self.acknowledged_by = actor_id
        self.acknowledged_at = at or _now()

    def is_purgeable(self, now: datetime, retention_days: int) -> bool:
        """True for alerts acknowledged longer ago than the retention window."""
        if not self.acknowledged or self.acknowledged_at is None:
            return False
        return self.acknowledged_at < now - timedelta(days=retention_days)


def alert_type_for_level(new_qty: int, threshold: int | None) -> AlertType | None:
    """Classify a post-write stock level.

    LOW_STOCK iff ``0 < new_qty <= threshold``; OUT_OF_STOCK iff ``new_qty == 0``.
    """
    if threshold is not None and 0 < new_qty <= threshold:
        return AlertType.LOW_STOCK
    if new_qty == 0:
        return AlertType.OUT_OF_STOCK
    return None


@dataclass
class StockReservation:
    """A temporary hold against on-hand stock."""

    id: str
    product_id: str
    quantity: int
    status: ReservationStatus = ReservationStatus.ACTIVE
    reference: str | None = None
    created_at: datetime = field(default_factory=_now)

    def release(self) -> None:
        self._leave_active(ReservationStatus.RELEASED)

    def fulfill(self) -> None:
        self._leave_active(ReservationStatus.FULFILLED)

    def _leave_active(self, status: ReservationStatus) -> None:
        if self.status != ReservationStatus.ACTIVE:
            raise ValidationError(
                f"Reservation {self.id} is {self.status.value}, expected ACTIVE"
            )
        self.status = status
