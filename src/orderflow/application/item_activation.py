"""Application services: deactivate (soft delete) and reactivate an item."""

from __future__ import annotations

import logging
from uuid import UUID

from orderflow.application.dto import ItemDTO, item_to_dto
from orderflow.application.events import EventPublisher, publish_events
from orderflow.domain.exceptions import EntityNotFoundError
from orderflow.domain.repository.item_repository import ItemRepository

logger = logging.getLogger(__name__)


class DeactivateItemHandler:

    def __init__(self, item_repo: ItemRepository, publisher: EventPublisher) -> None:
        self._item_repo = item_repo
        self._publisher = publisher

    def handle(self, item_id: UUID) -> ItemDTO:
        item = self._item_repo.get_by_id(item_id)
        if item is None:
            logger.warning("Item %s not found for deactivation", item_id)
            raise EntityNotFoundError(f"Item {item_id} not found")

        if item.deactivate() is not None:
            self._item_repo.update(item)
            self._item_repo.save()
            publish_events(self._publisher, item)
            logger.info("Item %s deactivated", item_id)
        return item_to_dto(item)


class ActivateItemHandler:

    def __init__(self, item_repo: ItemRepository, publisher: EventPublisher) -> None:
        self._item_repo = item_repo
        self._publisher = publisher

    def handle(self, item_id: UUID) -> ItemDTO:
        item = self._item_repo.get_by_id(item_id)
        if item is None:
            logger.warning("Item %s not found for activation", item_id)
            raise EntityNotFoundError(f"Item {item_id} not found")

        if item.activate() is not None:
            self._item_repo.update(item)
            self._item_repo.save()
            publish_events(self._publisher, item)
            logger.info("Item %s activated", item_id)
        return item_to_dto(item)
