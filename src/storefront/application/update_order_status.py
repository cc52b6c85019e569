"""Application services: Show Order and Update Order Status."""

from __future__ import annotations

import logging

from storefront.application import notifications
from storefront.application.dto import OrderDTO
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class ShowOrderHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int) -> OrderDTO:
        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return OrderDTO.from_domain(order)


class UpdateOrderStatusHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, order_id: int, status: str | None) -> OrderDTO:
        """Set any known status and queue a customer notification.

        Delivery happens later; a notification that never goes out does
        not undo the status change.
        """
        new_status = OrderStatus.parse(status)

        with self._uow as uow:
            order = uow.orders.get_by_id(order_id)
            if order is None:
                raise EntityNotFoundError("Order not found")

            previous = order.change_status(new_status)
            uow.orders.save(order)
            if previous != new_status:
                uow.outbox.add(notifications.status_change(order, previous))
            uow.commit()

        logger.info("order #%s status %s -> %s", order_id, previous.value, new_status.value)
        return OrderDTO.from_domain(order)
