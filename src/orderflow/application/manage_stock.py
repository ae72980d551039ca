"""Application services: direct stock movements on a single item.

Each handler loads one Item, applies exactly one stock operation, saves
and publishes the resulting event.
"""

from __future__ import annotations

import logging
from uuid import UUID

from orderflow.application.dto import ItemDTO, item_to_dto
from orderflow.application.events import EventPublisher, publish_events
from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.model.item import Item
from orderflow.domain.repository.item_repository import ItemRepository

logger = logging.getLogger(__name__)


class _StockHandler:

    action = ""

    def __init__(self, item_repo: ItemRepository, publisher: EventPublisher) -> None:
        self._item_repo = item_repo
        self._publisher = publisher

    def handle(self, item_id: UUID, quantity: int) -> ItemDTO:
        item = self._item_repo.get_by_id(item_id)
        if item is None:
            logger.warning("Item %s not found to %s stock", item_id, self.action)
            raise EntityNotFoundError(f"Item {item_id} not found")

        self._apply(item, quantity)

        self._item_repo.update(item)
        self._item_repo.save()
        publish_events(self._publisher, item)

        logger.info(
            "Stock %s for item %s: %s (quantity %d)",
            self.action, item_id, item.stock, quantity,
        )
        return item_to_dto(item)

    def _apply(self, item: Item, quantity: int) -> None:
        raise NotImplementedError


class AdjustStockHandler(_StockHandler):
    """Set the available count, e.g. after a physical stock take."""

    action = "adjust"

    def _apply(self, item: Item, quantity: int) -> None:
        item.adjust_stock(quantity)


class ReserveStockHandler(_StockHandler):

    action = "reserve"

    def _apply(self, item: Item, quantity: int) -> None:
        item.reserve_stock(quantity)


class ReleaseStockHandler(_StockHandler):

    action = "release"

    def _apply(self, item: Item, quantity: int) -> None:
        item.release_stock(quantity)


class CommitStockHandler(_StockHandler):

    action = "commit"

    def _apply(self, item: Item, quantity: int) -> None:
        item.commit_stock(quantity)
