"""Abstract repository for the Item aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (JSON, in-memory) live in the
infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from orderflow.domain.model.item import Item


class ItemRepository(ABC):

    @abstractmethod
    def get_by_id(self, item_id: UUID) -> Item | None:
        """Return an item by its ID, or None if not found."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Item | None:
        """Return an item by its exact SKU, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Item]:
        """Return every item in the catalog, active or not."""

    @abstractmethod
    def add(self, item: Item) -> None:
        """Stage a new item for the next ``save()``."""

    @abstractmethod
    def update(self, item: Item) -> None:
        """Stage changes to a loaded item for the next ``save()``."""

    @abstractmethod
    def save(self) -> None:
        """Commit staged items.

        Raises ConcurrencyError, writing nothing, if any updated item was
        changed in storage since it was loaded.
        """
