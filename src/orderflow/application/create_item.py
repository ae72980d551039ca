"""Application service: Create Item use case."""

from __future__ import annotations

import logging
from decimal import Decimal

from orderflow.application.dto import ItemDTO, item_to_dto
from orderflow.application.events import EventPublisher, publish_events
from orderflow.domain.exceptions import ConflictError
from orderflow.domain.model.item import Item
from orderflow.domain.model.value_objects import Money, ProductCode
from orderflow.domain.repository.item_repository import ItemRepository

logger = logging.getLogger(__name__)


class CreateItemHandler:

    def __init__(self, item_repo: ItemRepository, publisher: EventPublisher) -> None:
        self._item_repo = item_repo
        self._publisher = publisher

    def handle(
        self,
        sku: str,
        name: str,
        description: str | None,
        price: str | Decimal,
        initial_stock: int,
        category: str,
        currency: str = "USD",
    ) -> ItemDTO:
        """Add a new item to the catalog.  SKUs are unique."""
        code = ProductCode(sku)
        if self._item_repo.get_by_sku(code.value) is not None:
            logger.warning("Rejected duplicate SKU %s", code)
            raise ConflictError(f"Item with SKU '{code}' already exists")

        item = Item.create(
            sku=code,
            name=name,
            description=description,
            price=Money.of(price, currency),
            initial_stock=initial_stock,
            category=category,
        )
        self._item_repo.add(item)
        self._item_repo.save()
        publish_events(self._publisher, item)

        logger.info("Item %s with SKU %s created", item.id, code)
        return item_to_dto(item)
