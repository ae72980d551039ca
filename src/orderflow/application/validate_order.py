"""Application service: Validate Order use case.

Orchestrates the domain service (stock reservation) and the Order
aggregate (state transition) to validate a pending order.
"""

from __future__ import annotations

import logging
from uuid import UUID

from orderflow.application.dto import OrderDTO, order_to_dto
from orderflow.application.events import EventPublisher, publish_events
from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.repository.item_repository import ItemRepository
from orderflow.domain.repository.order_repository import OrderRepository
from orderflow.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = logging.getLogger(__name__)


class ValidateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        item_repo: ItemRepository,
        publisher: EventPublisher,
    ) -> None:
        self._order_repo = order_repo
        self._item_repo = item_repo
        self._publisher = publisher

    def handle(self, order_id: UUID) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            logger.warning("Order %s not found for validation", order_id)
            raise EntityNotFoundError(f"Order {order_id} not found")

        # Check the transition before reserving anything
        order.ensure_can_validate()

        # Reserve stock first (domain service validates availability)
        svc = StockReservationService(self._item_repo)
        items = svc.reserve_for_order(order)

        # Then transition the order
        order.validate()

        self._item_repo.save()
        self._order_repo.update(order)
        self._order_repo.save()
        publish_events(self._publisher, *items, order)

        logger.info("Order %s validated, stock reserved for %d item(s)", order_id, len(items))
        return order_to_dto(order)
