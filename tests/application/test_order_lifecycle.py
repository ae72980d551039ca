"""Integration tests for the order pipeline handlers and their stock effects."""

from uuid import UUID, uuid4

import pytest

from orderflow.application.cancel_order import CancelOrderHandler
from orderflow.application.create_order import CreateOrderHandler
from orderflow.application.deliver_order import DeliverOrderHandler
from orderflow.application.dto import OrderItemSpec
from orderflow.application.process_payment import BeginPaymentHandler, MarkPaidHandler
from orderflow.application.ship_order import ShipOrderHandler
from orderflow.application.validate_order import ValidateOrderHandler
from orderflow.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    StateError,
    ValidationError,
)
from orderflow.domain.model.item import Item
from orderflow.domain.model.value_objects import Money, ProductCode, StockCounters
from tests.fakes import FakeEventPublisher, FakeItemRepository, FakeOrderRepository


class Shop:
    """Wires every order handler against one set of fakes."""

    def __init__(self, stock: dict[str, int]) -> None:
        self.items = {}
        for sku, qty in stock.items():
            item = Item.create(ProductCode(sku), sku.title(), "", Money.of("10.00"), qty, "Misc")
            item.clear_events()
            self.items[sku] = item
        self.item_repo = FakeItemRepository(list(self.items.values()))
        self.order_repo = FakeOrderRepository()
        self.publisher = FakeEventPublisher()

        args = (self.order_repo, self.item_repo, self.publisher)
        self.create = CreateOrderHandler(*args)
        self.validate = ValidateOrderHandler(*args)
        self.begin_payment = BeginPaymentHandler(self.order_repo, self.publisher)
        self.mark_paid = MarkPaidHandler(self.order_repo, self.publisher)
        self.ship = ShipOrderHandler(*args)
        self.deliver = DeliverOrderHandler(self.order_repo, self.publisher)
        self.cancel = CancelOrderHandler(*args)

    def new_order(self, **quantities: int) -> UUID:
        specs = [OrderItemSpec(sku.replace("_", "-"), qty) for sku, qty in quantities.items()]
        dto = self.create.handle("CUST-1", specs)
        self.publisher.published.clear()
        return UUID(dto.id)

    def stock(self, sku: str) -> StockCounters:
        return self.items[sku].stock

    def advance_to_paid(self, order_id: UUID) -> None:
        self.validate.handle(order_id)
        self.begin_payment.handle(order_id)
        self.mark_paid.handle(order_id)


@pytest.fixture
def shop():
    return Shop({"SKU-A": 10, "SKU-B": 5})


class TestValidateOrder:

    def test_reserves_stock_and_validates(self, shop):
        order_id = shop.new_order(SKU_A=3, SKU_B=2)

        dto = shop.validate.handle(order_id)

        assert dto.status == "VALIDATED"
        assert shop.stock("SKU-A") == StockCounters(7, 3)
        assert shop.stock("SKU-B") == StockCounters(3, 2)

    def test_item_events_published_before_order_event(self, shop):
        order_id = shop.new_order(SKU_A=3, SKU_B=2)
        shop.validate.handle(order_id)
        assert shop.publisher.types == ["StockReserved", "StockReserved", "OrderValidated"]

    def test_saves_items_and_order(self, shop):
        order_id = shop.new_order(SKU_A=1)
        shop.validate.handle(order_id)
        assert shop.item_repo.saves == 1
        assert shop.order_repo.saves == 2

    def test_insufficient_stock_leaves_everything_untouched(self, shop):
        order_id = shop.new_order(SKU_A=3, SKU_B=6)

        with pytest.raises(ConflictError, match="Only 5 available"):
            shop.validate.handle(order_id)

        assert shop.order_repo.get_by_id(order_id).status.value == "PENDING"
        assert shop.stock("SKU-A") == StockCounters(10, 0)
        assert shop.stock("SKU-B") == StockCounters(5, 0)
        assert shop.publisher.published == []

    def test_second_validation_reserves_nothing_more(self, shop):
        order_id = shop.new_order(SKU_A=3)
        shop.validate.handle(order_id)

        with pytest.raises(StateError, match="Only pending orders can be validated"):
            shop.validate.handle(order_id)
        assert shop.stock("SKU-A") == StockCounters(7, 3)

    def test_item_deactivated_after_ordering(self, shop):
        order_id = shop.new_order(SKU_A=1)
        shop.items["SKU-A"].deactivate()
        with pytest.raises(StateError, match="inactive"):
            shop.validate.handle(order_id)

    def test_unknown_order(self, shop):
        with pytest.raises(EntityNotFoundError):
            shop.validate.handle(uuid4())


class TestPayment:

    def test_two_step_payment(self, shop):
        order_id = shop.new_order(SKU_A=2)
        shop.validate.handle(order_id)

        processing = shop.begin_payment.handle(order_id)
        paid = shop.mark_paid.handle(order_id)

        assert processing.status == "PAYMENT_PROCESSING"
        assert paid.status == "PAID"
        assert shop.publisher.types[-1] == "OrderPaid"
        assert "OrderPaymentProcessing" not in shop.publisher.types

    def test_cannot_pay_pending_order(self, shop):
        order_id = shop.new_order(SKU_A=2)
        with pytest.raises(StateError, match="Only validated orders"):
            shop.begin_payment.handle(order_id)

    def test_cannot_skip_payment_processing(self, shop):
        order_id = shop.new_order(SKU_A=2)
        shop.validate.handle(order_id)
        with pytest.raises(StateError, match="payment processing"):
            shop.mark_paid.handle(order_id)


class TestShipAndDeliver:

    def test_ship_commits_reserved_stock(self, shop):
        order_id = shop.new_order(SKU_A=4)
        shop.advance_to_paid(order_id)

        dto = shop.ship.handle(order_id, "TRK-42")

        assert dto.status == "SHIPPED"
        assert dto.tracking_number == "TRK-42"
        assert shop.stock("SKU-A") == StockCounters(6, 0)
        assert shop.publisher.types[-2:] == ["StockCommitted", "OrderShipped"]

    def test_ship_without_tracking_number_commits_nothing(self, shop):
        order_id = shop.new_order(SKU_A=4)
        shop.advance_to_paid(order_id)

        with pytest.raises(ValidationError, match="Tracking number is required"):
            shop.ship.handle(order_id, "  ")

        assert shop.stock("SKU-A") == StockCounters(6, 4)

    def test_ship_unpaid_order_commits_nothing(self, shop):
        order_id = shop.new_order(SKU_A=4)
        shop.validate.handle(order_id)

        with pytest.raises(StateError, match="Only paid orders"):
            shop.ship.handle(order_id, "TRK")

        assert shop.stock("SKU-A") == StockCounters(6, 4)

    def test_deliver(self, shop):
        order_id = shop.new_order(SKU_A=1)
        shop.advance_to_paid(order_id)
        shop.ship.handle(order_id, "TRK")

        dto = shop.deliver.handle(order_id)

        assert dto.status == "DELIVERED"
        assert shop.publisher.types[-1] == "OrderDelivered"
        assert dto.version == 6

    def test_deliver_before_shipping(self, shop):
        order_id = shop.new_order(SKU_A=1)
        shop.advance_to_paid(order_id)
        with pytest.raises(StateError, match="Only shipped orders"):
            shop.deliver.handle(order_id)


class TestCancelOrder:

    def test_cancel_pending_touches_no_stock(self, shop):
        order_id = shop.new_order(SKU_A=3)

        dto = shop.cancel.handle(order_id, "changed my mind")

        assert dto.status == "CANCELLED"
        assert dto.cancellation_reason == "changed my mind"
        assert shop.stock("SKU-A") == StockCounters(10, 0)
        assert shop.item_repo.saves == 0
        assert shop.publisher.types == ["OrderCancelled"]

    def test_cancel_validated_releases_stock(self, shop):
        order_id = shop.new_order(SKU_A=3, SKU_B=5)
        shop.validate.handle(order_id)

        shop.cancel.handle(order_id)

        assert shop.stock("SKU-A") == StockCounters(10, 0)
        assert shop.stock("SKU-B") == StockCounters(5, 0)
        assert shop.publisher.types[-3:] == ["StockReleased", "StockReleased", "OrderCancelled"]

    @pytest.mark.parametrize("steps", [1, 2, 3])
    def test_cancel_after_reservation_restores_stock(self, shop, steps):
        order_id = shop.new_order(SKU_A=4)
        for handler in [shop.validate, shop.begin_payment, shop.mark_paid][:steps]:
            handler.handle(order_id)

        shop.cancel.handle(order_id)

        assert shop.stock("SKU-A") == StockCounters(10, 0)

    def test_cancel_shipped_keeps_committed_stock(self, shop):
        order_id = shop.new_order(SKU_A=4)
        shop.advance_to_paid(order_id)
        shop.ship.handle(order_id, "TRK")

        dto = shop.cancel.handle(order_id, "lost in transit")

        assert dto.status == "CANCELLED"
        assert shop.stock("SKU-A") == StockCounters(6, 0)

    def test_cancel_delivered_rejected(self, shop):
        order_id = shop.new_order(SKU_A=1)
        shop.advance_to_paid(order_id)
        shop.ship.handle(order_id, "TRK")
        shop.deliver.handle(order_id)

        with pytest.raises(StateError, match="are final"):
            shop.cancel.handle(order_id)

    def test_cancel_twice_rejected(self, shop):
        order_id = shop.new_order(SKU_A=1)
        shop.validate.handle(order_id)
        shop.cancel.handle(order_id)

        with pytest.raises(StateError, match="are final"):
            shop.cancel.handle(order_id)
        assert shop.stock("SKU-A") == StockCounters(10, 0)


class TestFullScenario:

    def test_order_walks_the_pipeline(self, shop):
        order_id = shop.new_order(SKU_A=2, SKU_B=1)

        shop.validate.handle(order_id)
        shop.begin_payment.handle(order_id)
        shop.mark_paid.handle(order_id)
        shop.ship.handle(order_id, "TRK-1")
        final = shop.deliver.handle(order_id)

        assert final.status == "DELIVERED"
        assert final.total == "30.00 USD"
        assert shop.stock("SKU-A").total == 8
        assert shop.stock("SKU-B").total == 4
        assert [t for t in shop.publisher.types if t.startswith("Order")] == [
            "OrderValidated", "OrderPaid", "OrderShipped", "OrderDelivered",
        ]
