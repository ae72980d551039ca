"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from uuid import UUID

from orderflow.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: UUID) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, oldest first."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Stage a new order for the next ``save()``."""

    @abstractmethod
    def update(self, order: Order) -> None:
        """Stage changes to a loaded order for the next ``save()``."""

    @abstractmethod
    def save(self) -> None:
        """Commit staged orders, checking each change token."""
