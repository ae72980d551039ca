"""End-to-end tests for the click CLI against a temporary data directory."""

import json
import re

import pytest
from click.testing import CliRunner

from orderflow.infrastructure.cli.main import cli
from orderflow.infrastructure.logging_config import reset_logging

_UUID = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("ORDERFLOW_DATA_DIR", str(tmp_path))
    reset_logging()
    yield tmp_path
    reset_logging()


@pytest.fixture
def run():
    runner = CliRunner()

    def _run(*args, ok=True):
        # each invocation gets fresh streams from the runner
        reset_logging()
        result = runner.invoke(cli, list(args))
        if ok:
            assert result.exit_code == 0, result.output
        return result

    return _run


def _create_item(run, sku="WIDGET-1", price="15.00", stock="10"):
    result = run(
        "item", "create", "--sku", sku, "--name", sku.title(),
        "--price", price, "--stock", stock, "--category", "Misc",
    )
    return re.search(_UUID, result.output).group(0)


def _create_order(run, items="WIDGET-1:3"):
    result = run("order", "create", "--customer", "ALICE", "--items", items)
    return re.search(_UUID, result.output).group(0)


class TestItemCommands:

    def test_create_and_show(self, run):
        _create_item(run)
        result = run("item", "show", "--sku", "WIDGET-1")
        assert "SKU:       WIDGET-1" in result.output
        assert "10 available, 0 reserved (10 total)" in result.output

    def test_duplicate_sku_fails(self, run):
        _create_item(run)
        result = run(
            "item", "create", "--sku", "WIDGET-1", "--name", "Again",
            "--price", "1", "--category", "Misc", ok=False,
        )
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_stock_commands(self, run):
        item_id = _create_item(run)
        assert "WIDGET-1: reserved, 6 available, 4 reserved" in run(
            "item", "reserve", "--id", item_id, "--quantity", "4"
        ).output
        assert "WIDGET-1: adjusted, 20 available, 4 reserved" in run(
            "item", "adjust", "--id", item_id, "--available", "20"
        ).output

    def test_over_reservation_fails(self, run):
        item_id = _create_item(run)
        result = run("item", "reserve", "--id", item_id, "--quantity", "11", ok=False)
        assert result.exit_code == 1
        assert "Only 10 available" in result.output

    def test_list_and_deactivate(self, run):
        item_id = _create_item(run)
        _create_item(run, sku="GADGET-2")
        run("item", "deactivate", "--id", item_id)

        listing = run("item", "list", "--active").output
        assert "GADGET-2" in listing
        assert "WIDGET-1" not in listing
        assert "Page 1: 1 of 1 item(s)" in listing

    def test_malformed_id_is_a_usage_error(self, run):
        result = run("item", "show", "--id", "not-a-uuid", ok=False)
        assert result.exit_code == 2


class TestOrderCommands:

    def test_full_lifecycle(self, run, data_dir):
        _create_item(run)
        order_id = _create_order(run)

        run("order", "validate", "--id", order_id)
        run("order", "pay-begin", "--id", order_id)
        run("order", "pay-confirm", "--id", order_id)
        run("order", "ship", "--id", order_id, "--tracking", "TRK-1")
        run("order", "deliver", "--id", order_id)

        shown = run("order", "show", "--id", order_id).output
        assert "status=DELIVERED" in shown
        assert "Tracking: TRK-1" in shown
        assert "45.00 USD" in shown

        item = json.loads((data_dir / "items.json").read_text())[0]
        assert (item["available"], item["reserved"]) == (7, 0)

    def test_skipping_payment_fails(self, run):
        _create_item(run)
        order_id = _create_order(run)
        run("order", "validate", "--id", order_id)

        result = run("order", "ship", "--id", order_id, "--tracking", "TRK", ok=False)
        assert result.exit_code == 1
        assert "Only paid orders can be shipped" in result.output

    def test_cancel_releases_stock(self, run, data_dir):
        _create_item(run)
        order_id = _create_order(run)
        run("order", "validate", "--id", order_id)

        run("order", "cancel", "--id", order_id, "--reason", "duplicate")

        item = json.loads((data_dir / "items.json").read_text())[0]
        assert (item["available"], item["reserved"]) == (10, 0)
        assert "Reason:   duplicate" in run("order", "show", "--id", order_id).output

    def test_bad_items_format(self, run):
        result = run("order", "create", "--customer", "ALICE", "--items", "WIDGET-1", ok=False)
        assert result.exit_code == 2
        assert "Expected 'SKU:Quantity'" in result.output

    def test_huge_quantity_is_reported_not_raised(self, run):
        _create_item(run)
        result = run(
            "order", "create", "--customer", "ALICE",
            "--items", "WIDGET-1:10000000000000000000000000000", ok=False,
        )
        assert result.exit_code == 1
        assert "out of range" in result.output
        assert not isinstance(result.exception, ArithmeticError)

    def test_list_by_status(self, run):
        _create_item(run)
        first = _create_order(run)
        second = _create_order(run)
        run("order", "validate", "--id", second)

        listing = run("order", "list", "--status", "pending").output
        assert first in listing
        assert second not in listing

    def test_update_customer(self, run):
        _create_item(run)
        order_id = _create_order(run)
        result = run("order", "update", "--id", order_id, "--customer", "BOB", "--items", "WIDGET-1:1")
        assert "Customer: BOB" in result.output
        assert "15.00 USD" in result.output


class TestEventCommands:

    def test_lists_published_events(self, run):
        _create_item(run)
        order_id = _create_order(run)
        run("order", "validate", "--id", order_id)

        output = run("events", "list").output
        lines = [line for line in output.splitlines() if line.strip()]
        assert ["ItemCreated", "OrderCreated", "StockReserved", "OrderValidated"] == [
            line.split()[1] for line in lines
        ]

    def test_filter_by_type(self, run):
        _create_item(run)
        output = run("events", "list", "--type", "ItemCreated").output
        assert "price=15.00 USD" in output
        assert run("events", "list", "--type", "OrderPaid").output.strip() == "No events found."


def test_verbose_logs_use_cases(run):
    result = run("-v", "item", "create", "--sku", "LOG-1", "--name", "Log",
                 "--price", "1", "--category", "Misc")
    assert "INFO orderflow.application.create_item" in result.output
