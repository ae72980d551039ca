"""Application service: Deliver Order use case."""

from __future__ import annotations

import logging
from uuid import UUID

from orderflow.application.dto import OrderDTO, order_to_dto
from orderflow.application.events import EventPublisher, publish_events
from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class DeliverOrderHandler:

    def __init__(self, order_repo: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repo = order_repo
        self._publisher = publisher

    def handle(self, order_id: UUID) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            logger.warning("Order %s not found for delivery", order_id)
            raise EntityNotFoundError(f"Order {order_id} not found")

        order.deliver()

        self._order_repo.update(order)
        self._order_repo.save()
        publish_events(self._publisher, order)

        logger.info("Order %s delivered", order_id)
        return order_to_dto(order)
