"""Domain events raised by the Item and Order aggregates.

Events are immutable facts named in the past tense.  Aggregates queue
them; the application layer publishes them after a successful save.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

from orderflow.domain.model.value_objects import Money


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base class for every event: a unique id and the moment it happened."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def event_type(self) -> str:
        return type(self).__name__


# ---------------------------------------------------------------------------
# Catalog item events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ItemCreated(DomainEvent):
    item_id: UUID
    sku: str
    name: str
    price: Money


@dataclass(frozen=True)
class ItemUpdated(DomainEvent):
    item_id: UUID
    sku: str
    name: str
    price: Money


@dataclass(frozen=True)
class StockAdjusted(DomainEvent):
    item_id: UUID
    sku: str
    old_available: int
    new_available: int


@dataclass(frozen=True)
class StockReserved(DomainEvent):
    item_id: UUID
    sku: str
    quantity: int


@dataclass(frozen=True)
class StockReleased(DomainEvent):
    item_id: UUID
    sku: str
    quantity: int


@dataclass(frozen=True)
class StockCommitted(DomainEvent):
    item_id: UUID
    sku: str
    quantity: int


@dataclass(frozen=True)
class ItemDeactivated(DomainEvent):
    item_id: UUID
    sku: str


@dataclass(frozen=True)
class ItemActivated(DomainEvent):
    item_id: UUID
    sku: str


# ---------------------------------------------------------------------------
# Order events
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    order_id: UUID
    customer_id: str
    total: Money


@dataclass(frozen=True)
class OrderValidated(DomainEvent):
    order_id: UUID
    customer_id: str


@dataclass(frozen=True)
class OrderPaid(DomainEvent):
    order_id: UUID
    total: Money


@dataclass(frozen=True)
class OrderShipped(DomainEvent):
    order_id: UUID
    customer_id: str
    tracking_number: str


@dataclass(frozen=True)
class OrderDelivered(DomainEvent):
    order_id: UUID
    customer_id: str


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    order_id: UUID
    customer_id: str
    reason: str | None = None
