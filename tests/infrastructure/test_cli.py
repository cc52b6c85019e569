"""CLI tests through click's CliRunner against a tmp_path store."""

import json

import pytest
from click.testing import CliRunner

from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.bootstrap import unit_of_work
from storefront.infrastructure.cli.main import cli
from storefront.infrastructure.settings import Settings
from tests.fakes import FakeEmailSender


@pytest.fixture
def settings(tmp_path) -> Settings:
    settings = Settings(data_dir=tmp_path)
    with unit_of_work(settings) as uow:
        uow.products.save(Product(id="p1", name="Gold Ring", price=Money.of("500"),
                                  sku="RNG-1", inventory=10, low_stock_threshold=5))
        uow.commit()
    return settings


@pytest.fixture
def run(settings):
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, list(args), obj=settings)

    return invoke


class TestProductCommands:

    def test_add(self, run, settings):
        result = run("product", "add", "--name", "Silver Chain", "--price", "120", "--inventory", "4")
        assert result.exit_code == 0, result.output
        assert "'Silver Chain' added at 120.00" in result.output

        with unit_of_work(settings) as uow:
            added = [p for p in uow.products.list_all() if p.name == "Silver Chain"][0]
            logs = uow.inventory_logs.list(product_id=added.id)
        assert added.inventory == 4
        assert [log.reason for log in logs] == ["Initial stock"]

    def test_duplicate_sku(self, run):
        result = run("product", "add", "--name", "Copy", "--price", "1", "--sku", "RNG-1")
        assert result.exit_code == 1
        assert "SKU 'RNG-1' already exists" in result.output


class TestInventoryCommands:

    def test_adjust_with_alert(self, run):
        result = run("inventory", "adjust", "--product", "p1", "--quantity", "-7", "--type", "sale")
        assert result.exit_code == 0, result.output
        assert "Gold Ring: 10 -> 3 (SALE -7)" in result.output
        assert "ALERT LOW_STOCK" in result.output

        alerts = run("alerts", "list")
        assert "Gold Ring is running low (3 units remaining)" in alerts.output

    def test_adjust_below_zero(self, run):
        result = run("inventory", "adjust", "--product", "p1", "--quantity", "-11", "--type", "LOSS")
        assert result.exit_code == 1
        assert "Insufficient inventory" in result.output

    def test_bulk_from_stdin(self, settings):
        updates = json.dumps([
            {"productId": "p1", "quantity": 2, "type": "SET"},
            {"sku": "NOPE", "quantity": 1},
        ])
        result = CliRunner().invoke(cli, ["inventory", "bulk", "-"], obj=settings, input=updates)
        assert result.exit_code == 0, result.output
        assert "Updated: 1  Failed: 1" in result.output
        assert "NOPE: Product not found" in result.output

    def test_availability(self, run):
        result = run("inventory", "availability", "p1")
        assert result.output.strip() == "inventory=10 reserved=0 available=10"

    def test_ack_without_ids(self, run):
        result = run("alerts", "ack")
        assert result.exit_code == 1
        assert "Invalid alert IDs" in result.output


class TestCouponCommands:

    def test_create_and_validate(self, run):
        created = run("coupon", "create", "--code", "welcome", "--type", "FIXED", "--value", "50")
        assert created.exit_code == 0, created.output
        assert created.output.startswith("Coupon WELCOME created")

        result = run("coupon", "validate", "WELCOME", "--subtotal", "200")
        assert result.output.strip() == "WELCOME: discount 50.00, total 150.00"

    def test_validate_unknown(self, run):
        result = run("coupon", "validate", "NOPE", "--subtotal", "200")
        assert result.exit_code == 1
        assert "Invalid coupon code" in result.output

    def test_deactivate(self, run):
        run("coupon", "create", "--code", "OFF10", "--type", "PERCENTAGE", "--value", "10")
        assert run("coupon", "deactivate", "off10").output.strip() == "Coupon OFF10 deactivated"

        result = run("coupon", "validate", "OFF10", "--subtotal", "100")
        assert "This coupon is no longer active" in result.output


class TestOrderCommands:

    def _place(self, run):
        return run(
            "order", "place", "--first-name", "Dana", "--last-name", "Levi",
            "--email", "dana@example.com", "--items", "p1:2",
        )

    def test_place_show_and_status(self, run):
        placed = self._place(run)
        assert placed.exit_code == 0, placed.output
        assert "Order #1  (status=PENDING)" in placed.output
        assert "1000.00" in placed.output

        assert "Dana Levi <dana@example.com>" in run("order", "show", "1").output

        result = run("order", "status", "1", "shipped")
        assert result.output.strip() == "Order #1 is now SHIPPED"

    def test_bad_items(self, run):
        result = run(
            "order", "place", "--first-name", "A", "--last-name", "B",
            "--email", "a@example.com", "--items", "p1",
        )
        assert result.exit_code == 2
        assert "Expected 'ProductId:Quantity[:VariantId]'" in result.output

    def test_unknown_order(self, run):
        result = run("order", "show", "42")
        assert result.exit_code == 1
        assert "Order #42 not found" in result.output

    def test_dispatch_queued_emails(self, run):
        self._place(run)
        run("order", "status", "1", "SHIPPED")

        first = run("notifications", "dispatch")
        assert first.output.strip() == "sent=2 retrying=0 given_up=0"
        second = run("notifications", "dispatch")
        assert second.output.strip() == "sent=0 retrying=0 given_up=0"

    def test_dispatch_closes_sender(self, run, monkeypatch):
        sender = FakeEmailSender(fail_times=1)
        monkeypatch.setattr(
            "storefront.infrastructure.cli.notification_commands.email_sender",
            lambda settings: sender,
        )
        self._place(run)

        result = run("notifications", "dispatch")

        assert result.output.strip() == "sent=0 retrying=1 given_up=0"
        assert sender.closed is True
