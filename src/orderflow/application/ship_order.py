"""Application service: Ship Order use case.

Ships a paid order and permanently removes its reserved units from the
catalog: reserved stock becomes committed stock.
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


class ShipOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        item_repo: ItemRepository,
        publisher: EventPublisher,
    ) -> None:
        self._order_repo = order_repo
        self._item_repo = item_repo
        self._publisher = publisher

    def handle(self, order_id: UUID, tracking_number: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            logger.warning("Order %s not found for shipping", order_id)
            raise EntityNotFoundError(f"Order {order_id} not found")

        # Check the transition before committing any stock
        order.ensure_can_ship(tracking_number)

        svc = StockReservationService(self._item_repo)
        items = svc.commit_for_order(order)
        order.ship(tracking_number)

        self._item_repo.save()
        self._order_repo.update(order)
        self._order_repo.save()
        publish_events(self._publisher, *items, order)

        logger.info("Order %s shipped with tracking number %s", order_id, order.tracking_number)
        return order_to_dto(order)
