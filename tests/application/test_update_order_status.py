"""Integration tests for ShowOrder and UpdateOrderStatus."""

import pytest

from storefront.application.update_order_status import ShowOrderHandler, UpdateOrderStatusHandler
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.notification import MessageKind
from storefront.domain.model.order import CustomerInfo, Order, OrderLineItem
from storefront.domain.model.value_objects import Money, Quantity
from tests.fakes import FakeUnitOfWork


def _setup() -> FakeUnitOfWork:
    order = Order(
        id=7,
        customer=CustomerInfo("Dana", "Levi", "dana@example.com"),
        items=[OrderLineItem("p1", "Gold Ring", Quantity(1), Money.of("500"))],
    )
    return FakeUnitOfWork(orders=[order])


class TestUpdateStatus:

    def test_status_change_queues_email(self):
        uow = _setup()
        dto = UpdateOrderStatusHandler(uow).handle(7, "confirmed")

        assert dto.status == "CONFIRMED"
        assert uow.orders.get_by_id(7).updated_at is not None
        [message] = uow.outbox.all()
        assert message.kind == MessageKind.ORDER_STATUS
        assert message.recipient == "dana@example.com"
        assert "PENDING to CONFIRMED" in message.body

    def test_shipped_sends_shipping_notice(self):
        uow = _setup()
        UpdateOrderStatusHandler(uow).handle(7, "SHIPPED")
        [message] = uow.outbox.all()
        assert message.kind == MessageKind.SHIPPING_NOTICE

    def test_same_status_queues_nothing(self):
        uow = _setup()
        UpdateOrderStatusHandler(uow).handle(7, "PENDING")
        assert uow.outbox.all() == []

    def test_missing_status(self):
        with pytest.raises(ValidationError, match="Status is required"):
            UpdateOrderStatusHandler(_setup()).handle(7, None)

    def test_invalid_status(self):
        with pytest.raises(ValidationError, match="Invalid status"):
            UpdateOrderStatusHandler(_setup()).handle(7, "RETURNED")

    def test_unknown_order(self):
        with pytest.raises(EntityNotFoundError, match="Order not found"):
            UpdateOrderStatusHandler(_setup()).handle(99, "SHIPPED")


class TestShowOrder:

    def test_show(self):
        dto = ShowOrderHandler(_setup()).handle(7)
        assert dto.id == 7
        assert dto.total == 500.0
        assert dto.items[0].quantity == 1

    def test_not_found(self):
        with pytest.raises(EntityNotFoundError, match="not found"):
            ShowOrderHandler(_setup()).handle(8)
