"""Application service: Update Item use case."""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from orderflow.application.dto import ItemDTO, item_to_dto
from orderflow.application.events import EventPublisher, publish_events
from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.model.value_objects import Money
from orderflow.domain.repository.item_repository import ItemRepository

logger = logging.getLogger(__name__)


class UpdateItemHandler:

    def __init__(self, item_repo: ItemRepository, publisher: EventPublisher) -> None:
        self._item_repo = item_repo
        self._publisher = publisher

    def handle(
        self,
        item_id: UUID,
        name: str,
        description: str | None,
        price: str | Decimal,
        category: str,
    ) -> ItemDTO:
        """Replace an item's descriptive fields.

        The price keeps the item's current currency.  Sending identical
        values changes nothing and publishes nothing.
        """
        item = self._item_repo.get_by_id(item_id)
        if item is None:
            logger.warning("Item %s not found for update", item_id)
            raise EntityNotFoundError(f"Item {item_id} not found")

        event = item.update(
            name=name,
            description=description,
            price=Money.of(price, item.price.currency),
            category=category,
        )
        if event is None:
            logger.info("Item %s unchanged", item_id)
            return item_to_dto(item)

        self._item_repo.update(item)
        self._item_repo.save()
        publish_events(self._publisher, item)

        logger.info("Item %s updated", item_id)
        return item_to_dto(item)
