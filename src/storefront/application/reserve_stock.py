"""Application service: stock reservations.

A reservation holds stock without changing the on-hand count; it only
lowers what ``availability`` reports. Checkout does not consult it.
"""

from __future__ import annotations

import logging

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.inventory import StockReservation, new_id
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)


class ReserveStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: str, quantity: int, reference: str | None = None) -> str:
        """Create an ACTIVE reservation and return its id."""
        qty = Quantity(quantity).value

        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError("Product not found")

            available = InventoryLedger(uow).availability(product).available
            if qty > available:
                raise ValidationError(
                    f"Insufficient inventory for {product.name} "
                    f"(need {qty}, have {available} available)"
                )

            reservation = StockReservation(
                id=new_id(), product_id=product.id, quantity=qty, reference=reference,
            )
            uow.reservations.save(reservation)
            uow.commit()

        logger.info("reserved %d of product=%s (%s)", qty, product_id, reservation.id)
        return reservation.id


class CloseReservationHandler:
    """Moves a reservation out of ACTIVE, either released or fulfilled."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, reservation_id: str, fulfilled: bool = False) -> None:
        with self._uow as uow:
            reservation = uow.reservations.get_by_id(reservation_id)
            if reservation is None:
                raise EntityNotFoundError(f"Reservation {reservation_id} not found")
            if fulfilled:
                reservation.fulfill()
            else:
                reservation.release()
            uow.reservations.save(reservation)
            uow.commit()
