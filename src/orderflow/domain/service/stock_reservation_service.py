"""Domain service: Stock Reservation.

This service coordinates the cross-aggregate operation of reserving,
releasing or committing catalog stock for an order.  It lives in the
domain layer because the logic is a core business rule, not just
orchestration.

The two-phase approach (validate-then-mutate) ensures we never leave
stock in a partially-reserved state if one item fails validation.
Nothing is committed here: the calling handler invokes ``save()``.
"""

from __future__ import annotations

from collections import Counter

from orderflow.domain.exceptions import (
    ConflictError,
    EntityNotFoundError,
    StateError,
)
from orderflow.domain.model.item import Item
from orderflow.domain.model.order import Order
from orderflow.domain.repository.item_repository import ItemRepository


class StockReservationService:

    def __init__(self, item_repo: ItemRepository) -> None:
        self._item_repo = item_repo

    def reserve_for_order(self, order: Order) -> list[Item]:
        """Reserve stock for every line item in the order.

        Uses a two-phase approach:
          Phase 1, load and validate. Ensure every item exists, is
                   active and has enough available stock. Fails fast
                   before any mutation.
          Phase 2, mutate. Call ``reserve_stock()`` on each Item and
                   stage it with the repository.
        """
        # Phase 1: load all items and validate
        to_reserve: list[tuple[Item, int]] = []

        for sku, qty in self._quantities_by_sku(order).items():
            item = self._load(sku)
            if not item.active:
                raise StateError(f"Item {sku} is inactive and cannot be reserved")
            if qty > item.stock.available:
                raise ConflictError(
                    f"Cannot reserve {qty} items of {sku}. "
                    f"Only {item.stock.available} available."
                )
            to_reserve.append((item, qty))

        # Phase 2: mutate and stage
        for item, qty in to_reserve:
            item.reserve_stock(qty)
            self._item_repo.update(item)
        return [item for item, _ in to_reserve]

    def release_for_order(self, order: Order) -> list[Item]:
        """Return an order's reserved units to available stock."""
        return self._apply(order, Item.release_stock)

    def commit_for_order(self, order: Order) -> list[Item]:
        """Permanently remove an order's reserved units (the order shipped)."""
        return self._apply(order, Item.commit_stock)

    # --- Internal helpers -----------------------------------------------------

    def _apply(self, order: Order, operation) -> list[Item]:
        loaded: list[tuple[Item, int]] = []
        for sku, qty in self._quantities_by_sku(order).items():
            item = self._load(sku)
            if not item.active:
                raise StateError(f"Item {sku} is inactive; its stock is frozen")
            if qty > item.stock.reserved:
                raise ConflictError(
                    f"Item {sku} has only {item.stock.reserved} reserved, "
                    f"order needs {qty}"
                )
            loaded.append((item, qty))

        for item, qty in loaded:
            operation(item, qty)
            self._item_repo.update(item)
        return [item for item, _ in loaded]

    def _load(self, sku: str) -> Item:
        item = self._item_repo.get_by_sku(sku)
        if item is None:
            raise EntityNotFoundError(f"No catalog item with SKU '{sku}'")
        return item

    @staticmethod
    def _quantities_by_sku(order: Order) -> dict[str, int]:
        totals: Counter[str] = Counter()
        for line in order.items:
            totals[line.product_ref] += line.quantity
        return dict(totals)
