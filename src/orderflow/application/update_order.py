"""Application service: Update Order use case.

Changes the customer of an order and, optionally, replaces its line
items.  Line items can only be replaced while the order is PENDING.
"""

from __future__ import annotations

import logging
from uuid import UUID

from orderflow.application.create_order import build_line_items
from orderflow.application.dto import OrderDTO, OrderItemSpec, order_to_dto
from orderflow.application.events import EventPublisher, publish_events
from orderflow.domain.exceptions import EntityNotFoundError, ValidationError
from orderflow.domain.repository.item_repository import ItemRepository
from orderflow.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        item_repo: ItemRepository,
        publisher: EventPublisher,
    ) -> None:
        self._order_repo = order_repo
        self._item_repo = item_repo
        self._publisher = publisher

    def handle(
        self,
        order_id: UUID,
        customer_id: str,
        item_specs: list[OrderItemSpec] | None = None,
    ) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            logger.warning("Order %s not found for update", order_id)
            raise EntityNotFoundError(f"Order {order_id} not found")

        # Resolve and check everything before touching the order
        line_items = None
        if item_specs is not None:
            if not item_specs:
                raise ValidationError("Order must contain at least one item")
            order.ensure_can_edit_items()
            line_items = build_line_items(self._item_repo, item_specs)
            for line in line_items:
                if line.unit_price.currency != order.currency:
                    raise ValidationError(
                        f"Item '{line.product_ref}' is priced in "
                        f"{line.unit_price.currency}, order is in {order.currency}"
                    )

        version_before = order.version
        order.update_customer(customer_id)
        if line_items is not None:
            order.replace_items(line_items)

        if order.version != version_before:
            self._order_repo.update(order)
            self._order_repo.save()
            publish_events(self._publisher, order)
            logger.info("Order %s updated for customer %s", order.id, order.customer_id)
        return order_to_dto(order)
