"""Application service: Cancel Order use case.

If the order holds a stock reservation (VALIDATED, PAYMENT_PROCESSING or
PAID), releases it before cancelling.  PENDING orders never reserved
anything, and SHIPPED orders have already committed their stock, so
both are cancelled without stock changes.
"""

from __future__ import annotations

import logging
from uuid import UUID

from orderflow.application.dto import OrderDTO, order_to_dto
from orderflow.application.events import EventPublisher, publish_events
from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.model.item import Item
from orderflow.domain.model.order import OrderStatus
from orderflow.domain.repository.item_repository import ItemRepository
from orderflow.domain.repository.order_repository import OrderRepository
from orderflow.domain.service.stock_reservation_service import (
    StockReservationService,
)

logger = logging.getLogger(__name__)

RESERVING_STATUSES = (
    OrderStatus.VALIDATED,
    OrderStatus.PAYMENT_PROCESSING,
    OrderStatus.PAID,
)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        item_repo: ItemRepository,
        publisher: EventPublisher,
    ) -> None:
        self._order_repo = order_repo
        self._item_repo = item_repo
        self._publisher = publisher

    def handle(self, order_id: UUID, reason: str | None = None) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            logger.warning("Order %s not found for cancellation", order_id)
            raise EntityNotFoundError(f"Order {order_id} not found")

        order.ensure_can_cancel()

        items: list[Item] = []
        if order.status in RESERVING_STATUSES:
            svc = StockReservationService(self._item_repo)
            items = svc.release_for_order(order)

        order.cancel(reason)

        if items:
            self._item_repo.save()
        self._order_repo.update(order)
        self._order_repo.save()
        publish_events(self._publisher, *items, order)

        logger.info("Order %s cancelled (reason: %s)", order_id, order.cancellation_reason)
        return order_to_dto(order)
