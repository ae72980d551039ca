"""Unit tests for the Item aggregate."""

import pytest

from orderflow.domain.events import (
    ItemActivated,
    ItemCreated,
    ItemDeactivated,
    ItemUpdated,
    StockAdjusted,
    StockCommitted,
    StockReleased,
    StockReserved,
)
from orderflow.domain.exceptions import ConflictError, StateError, ValidationError
from orderflow.domain.model.item import Item
from orderflow.domain.model.value_objects import Money, ProductCode, StockCounters


def _make_item(stock: int = 100, sku: str = "TEST-001") -> Item:
    """Helper to build a valid item with its creation event cleared."""
    item = Item.create(
        sku=ProductCode(sku),
        name="Test",
        description="A test item",
        price=Money.of("25.99"),
        initial_stock=stock,
        category="Electronics",
    )
    item.clear_events()
    return item


class TestItemCreation:

    def test_happy_path(self):
        item = Item.create(
            ProductCode("TEST-001"), "Test", "...", Money.of("25.99"), 100, "Electronics"
        )
        assert item.stock == StockCounters(100, 0)
        assert item.active is True
        assert item.version == 1
        assert len(item.events) == 1

        event = item.events[0]
        assert isinstance(event, ItemCreated)
        assert event.item_id == item.id
        assert event.sku == "TEST-001"
        assert event.price == Money.of("25.99")

    def test_none_description_becomes_empty(self):
        item = Item.create(ProductCode("A-1"), "Test", None, Money.of("1"), 0, "Misc")
        assert item.description == ""

    @pytest.mark.parametrize("name", ["", "   ", "x" * 201])
    def test_bad_name_rejected(self, name):
        with pytest.raises(ValidationError, match="Item name"):
            Item.create(ProductCode("A-1"), name, "", Money.of("1"), 0, "Misc")

    def test_name_of_200_chars_accepted(self):
        item = Item.create(ProductCode("A-1"), "x" * 200, "", Money.of("1"), 0, "Misc")
        assert len(item.name) == 200

    def test_blank_category_rejected(self):
        with pytest.raises(ValidationError, match="Category"):
            Item.create(ProductCode("A-1"), "Test", "", Money.of("1"), 0, "  ")

    def test_negative_initial_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Item.create(ProductCode("A-1"), "Test", "", Money.of("1"), -1, "Misc")

    def test_fields_are_read_only(self):
        item = _make_item()
        with pytest.raises(AttributeError):
            item.active = False  # type: ignore[misc]
        with pytest.raises(AttributeError):
            item.stock = StockCounters(0)  # type: ignore[misc]


class TestItemUpdate:

    def test_changes_fields_and_raises_event(self):
        item = _make_item()
        event = item.update("Renamed", "New text", Money.of("30.00"), "Gadgets")

        assert isinstance(event, ItemUpdated)
        assert item.name == "Renamed"
        assert item.price == Money.of("30.00")
        assert item.category == "Gadgets"
        assert item.version == 2
        assert item.events == (event,)

    def test_identical_values_are_a_no_op(self):
        item = _make_item()
        before = item.updated_at

        assert item.update("Test", "A test item", Money.of("25.99"), "Electronics") is None
        assert item.version == 1
        assert item.updated_at == before
        assert item.events == ()

    def test_inactive_item_cannot_be_updated(self):
        item = _make_item()
        item.deactivate()
        with pytest.raises(StateError, match="inactive"):
            item.update("Renamed", "", Money.of("1"), "Misc")

    def test_invalid_name_leaves_item_unchanged(self):
        item = _make_item()
        with pytest.raises(ValidationError):
            item.update("", "", Money.of("1"), "Misc")
        assert item.name == "Test"
        assert item.version == 1


class TestItemStock:

    def test_reserve(self):
        item = _make_item(stock=50)
        event = item.reserve_stock(20)
        assert item.stock == StockCounters(30, 20)
        assert isinstance(event, StockReserved)
        assert event.quantity == 20
        assert item.version == 2

    def test_reserve_more_than_available_leaves_item_unchanged(self):
        item = _make_item(stock=50)
        with pytest.raises(ConflictError, match="Only 50 available"):
            item.reserve_stock(60)
        assert item.stock == StockCounters(50, 0)
        assert item.version == 1
        assert item.events == ()

    def test_release(self):
        item = _make_item(stock=50)
        item.reserve_stock(20)
        event = item.release_stock(5)
        assert item.stock == StockCounters(35, 15)
        assert isinstance(event, StockReleased)

    def test_commit(self):
        item = _make_item(stock=50)
        item.reserve_stock(20)
        event = item.commit_stock(20)
        assert item.stock == StockCounters(30, 0)
        assert isinstance(event, StockCommitted)

    def test_adjust_records_old_and_new(self):
        item = _make_item(stock=50)
        event = item.adjust_stock(80)
        assert item.stock.available == 80
        assert isinstance(event, StockAdjusted)
        assert (event.old_available, event.new_available) == (50, 80)

    @pytest.mark.parametrize(
        "operation, args",
        [
            ("adjust_stock", (10,)),
            ("reserve_stock", (1,)),
            ("release_stock", (1,)),
            ("commit_stock", (1,)),
        ],
    )
    def test_inactive_item_stock_is_frozen(self, operation, args):
        item = _make_item(stock=50)
        item.reserve_stock(5)
        item.deactivate()
        item.clear_events()
        version = item.version

        with pytest.raises(StateError, match="inactive"):
            getattr(item, operation)(*args)
        assert item.version == version
        assert item.events == ()

    def test_each_mutation_bumps_version_once(self):
        item = _make_item(stock=50)
        item.reserve_stock(10)
        item.release_stock(5)
        item.commit_stock(5)
        item.adjust_stock(7)
        assert item.version == 5
        assert [e.event_type for e in item.events] == [
            "StockReserved", "StockReleased", "StockCommitted", "StockAdjusted",
        ]


class TestItemActivation:

    def test_deactivate_twice_only_changes_once(self):
        item = _make_item()

        first = item.deactivate()
        version = item.version
        second = item.deactivate()

        assert isinstance(first, ItemDeactivated)
        assert second is None
        assert item.active is False
        assert item.version == version == 2
        assert len(item.events) == 1

    def test_activate_active_item_is_a_no_op(self):
        item = _make_item()
        assert item.activate() is None
        assert item.version == 1
        assert item.events == ()

    def test_reactivate(self):
        item = _make_item()
        item.deactivate()
        event = item.activate()
        assert isinstance(event, ItemActivated)
        assert item.active is True
        assert item.version == 3


class TestItemEventQueue:

    def test_pull_events_drains_in_order(self):
        item = Item.create(ProductCode("Q-1"), "Queue", "", Money.of("1"), 10, "Misc")
        item.reserve_stock(2)

        events = item.pull_events()

        assert [e.event_type for e in events] == ["ItemCreated", "StockReserved"]
        assert item.events == ()

    def test_restore_raises_no_event(self):
        original = _make_item()
        restored = Item.restore(
            id=original.id,
            sku=original.sku,
            name=original.name,
            description=original.description,
            price=original.price,
            stock=StockCounters(3, 4),
            category=original.category,
            active=False,
            created_at=original.created_at,
            updated_at=original.updated_at,
            version=9,
        )
        assert restored.events == ()
        assert restored.version == 9
        assert restored.stock.total == 7
        assert restored.active is False
