"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model.
Catalog items are only read here: each line captures the item's current
price, and stock is reserved later, when the order is validated.
"""

from __future__ import annotations

import logging

from orderflow.application.dto import OrderDTO, OrderItemSpec, order_to_dto
from orderflow.application.events import EventPublisher, publish_events
from orderflow.domain.exceptions import EntityNotFoundError, StateError
from orderflow.domain.model.order import LineItem, Order
from orderflow.domain.repository.item_repository import ItemRepository
from orderflow.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def build_line_items(
    item_repo: ItemRepository, item_specs: list[OrderItemSpec]
) -> list[LineItem]:
    """Resolve each SKU to an active catalog item and snapshot its price."""
    line_items: list[LineItem] = []
    for spec in item_specs:
        item = item_repo.get_by_sku(spec.sku)
        if item is None:
            raise EntityNotFoundError(f"Item not found: '{spec.sku}'")
        if not item.active:
            raise StateError(f"Item '{spec.sku}' is inactive and cannot be ordered")

        line_items.append(
            LineItem(
                product_ref=item.sku.value,
                quantity=spec.quantity,
                unit_price=item.price,  # <-- price snapshot
            )
        )
    return line_items


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        item_repo: ItemRepository,
        publisher: EventPublisher,
    ) -> None:
        self._order_repo = order_repo
        self._item_repo = item_repo
        self._publisher = publisher

    def handle(self, customer_id: str, item_specs: list[OrderItemSpec]) -> OrderDTO:
        """Create a new PENDING order.

        Steps:
        1. Resolve each SKU to an Item (fail if missing or inactive).
        2. Build LineItems with *current* prices (snapshot).
        3. Let the Order aggregate validate all business rules.
        4. Persist, publish ``OrderCreated`` and return a DTO.
        """
        logger.info("Creating order for customer %s", customer_id)

        line_items = build_line_items(self._item_repo, item_specs)
        order = Order.create(customer_id=customer_id, items=line_items)

        self._order_repo.add(order)
        self._order_repo.save()
        publish_events(self._publisher, order)

        logger.info("Order %s created for customer %s", order.id, order.customer_id)
        return order_to_dto(order)
