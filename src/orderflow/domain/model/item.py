"""Item aggregate: a catalog entry with its own stock counters.

Items live independently of orders.  Orders reference them by SKU only;
stock moves through the Item's own methods so every change bumps the
change token and raises exactly one event.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from orderflow.domain.events import (
    DomainEvent,
    ItemActivated,
    ItemCreated,
    ItemDeactivated,
    ItemUpdated,
    StockAdjusted,
    StockCommitted,
    StockReleased,
    StockReserved,
)
from orderflow.domain.exceptions import StateError, ValidationError
from orderflow.domain.model.aggregate import AggregateRoot, utcnow
from orderflow.domain.model.value_objects import Money, ProductCode, StockCounters

MAX_NAME_LENGTH = 200


class Item(AggregateRoot):
    """Aggregate root for catalog entries.

    Use ``Item.create()`` for new items and ``Item.restore()`` to rebuild a
    persisted one.  State is exposed through read-only properties and only
    changes through the methods below.
    """

    def __init__(
        self,
        *,
        id: UUID,
        sku: ProductCode,
        name: str,
        description: str | None,
        price: Money,
        stock: StockCounters,
        category: str,
        active: bool,
        created_at: datetime,
        updated_at: datetime,
        version: int,
    ) -> None:
        if not isinstance(sku, ProductCode):
            raise ValidationError("Item requires a ProductCode")
        if not isinstance(price, Money):
            raise ValidationError("Item price must be Money")
        if not isinstance(stock, StockCounters):
            raise ValidationError("Item stock must be StockCounters")
        super().__init__(version=version, updated_at=updated_at)
        self._id = id
        self._sku = sku
        self._name = _validate_name(name)
        self._description = description or ""
        self._price = price
        self._stock = stock
        self._category = _validate_category(category)
        self._active = active
        self._created_at = created_at

    # --- Factories ------------------------------------------------------------

    @classmethod
    def create(
        cls,
        sku: ProductCode,
        name: str,
        description: str | None,
        price: Money,
        initial_stock: int,
        category: str,
    ) -> Item:
        """Create a new active item, raising ``ItemCreated``."""
        now = utcnow()
        item = cls(
            id=uuid4(),
            sku=sku,
            name=name,
            description=description,
            price=price,
            stock=StockCounters(initial_stock, 0),
            category=category,
            active=True,
            created_at=now,
            updated_at=now,
            version=1,
        )
        item._record(ItemCreated(item_id=item.id, sku=sku.value, name=item.name, price=price))
        return item

    @classmethod
    def restore(
        cls,
        *,
        id: UUID,
        sku: ProductCode,
        name: str,
        description: str | None,
        price: Money,
        stock: StockCounters,
        category: str,
        active: bool,
        created_at: datetime,
        updated_at: datetime,
        version: int,
    ) -> Item:
        """Rebuild a persisted item.  Validates fields, raises no event."""
        return cls(
            id=id,
            sku=sku,
            name=name,
            description=description,
            price=price,
            stock=stock,
            category=category,
            active=active,
            created_at=created_at,
            updated_at=updated_at,
            version=version,
        )

    # --- Read-only state ------------------------------------------------------

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def sku(self) -> ProductCode:
        return self._sku

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def price(self) -> Money:
        return self._price

    @property
    def stock(self) -> StockCounters:
        return self._stock

    @property
    def category(self) -> str:
        return self._category

    @property
    def active(self) -> bool:
        return self._active

    @property
    def created_at(self) -> datetime:
        return self._created_at

    # --- Mutations ------------------------------------------------------------

    def update(
        self,
        name: str,
        description: str | None,
        price: Money,
        category: str,
    ) -> DomainEvent | None:
        """Replace the descriptive fields.  Identical values are a no-op."""
        self._require_active("update")
        name = _validate_name(name)
        category = _validate_category(category)
        if not isinstance(price, Money):
            raise ValidationError("Item price must be Money")
        description = description or ""

        if (
            name == self._name
            and description == self._description
            and price == self._price
            and category == self._category
        ):
            return None

        self._name = name
        self._description = description
        self._price = price
        self._category = category
        self._touch()
        return self._record(
            ItemUpdated(item_id=self._id, sku=self._sku.value, name=name, price=price)
        )

    def adjust_stock(self, new_available: int) -> DomainEvent:
        self._require_active("adjust stock for")
        old_available = self._stock.available
        self._stock = self._stock.adjust(new_available)
        self._touch()
        return self._record(
            StockAdjusted(
                item_id=self._id,
                sku=self._sku.value,
                old_available=old_available,
                new_available=new_available,
            )
        )

    def reserve_stock(self, quantity: int) -> DomainEvent:
        self._require_active("reserve stock for")
        self._stock = self._stock.reserve(quantity)
        self._touch()
        return self._record(
            StockReserved(item_id=self._id, sku=self._sku.value, quantity=quantity)
        )

    def release_stock(self, quantity: int) -> DomainEvent:
        self._require_active("release stock for")
        self._stock = self._stock.release(quantity)
        self._touch()
        return self._record(
            StockReleased(item_id=self._id, sku=self._sku.value, quantity=quantity)
        )

    def commit_stock(self, quantity: int) -> DomainEvent:
        self._require_active("commit stock for")
        self._stock = self._stock.commit(quantity)
        self._touch()
        return self._record(
            StockCommitted(item_id=self._id, sku=self._sku.value, quantity=quantity)
        )

    def deactivate(self) -> DomainEvent | None:
        """Soft delete.  Items are never removed from the catalog."""
        if not self._active:
            return None
        self._active = False
        self._touch()
        return self._record(ItemDeactivated(item_id=self._id, sku=self._sku.value))

    def activate(self) -> DomainEvent | None:
        if self._active:
            return None
        self._active = True
        self._touch()
        return self._record(ItemActivated(item_id=self._id, sku=self._sku.value))

    # --- Internal helpers -----------------------------------------------------

    def _require_active(self, action: str) -> None:
        if not self._active:
            raise StateError(f"Cannot {action} inactive item {self._sku}")

    def __repr__(self) -> str:
        return f"Item(id={self._id}, sku={self._sku.value!r}, stock=({self._stock}))"


def _validate_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Item name cannot be empty")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Item name cannot exceed {MAX_NAME_LENGTH} characters")
    return name


def _validate_category(category: str) -> str:
    if not isinstance(category, str) or not category.strip():
        raise ValidationError("Category cannot be empty")
    return category
