"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from orderflow.domain.model.item import Item
from orderflow.domain.model.order import Order

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for (SKU + quantity)."""

    sku: str
    quantity: int


@dataclass(frozen=True)
class LineItemDTO:
    """Output: a single line item as displayed to the user."""

    sku: str
    quantity: int
    unit_price: str  # formatted, e.g. "15.00 USD"
    subtotal: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    customer_id: str
    status: str
    items: list[LineItemDTO]
    total: str
    tracking_number: str | None
    cancellation_reason: str | None
    created_at: str
    updated_at: str
    version: int


@dataclass(frozen=True)
class ItemDTO:
    """Output: a catalog item with its stock counters."""

    id: str
    sku: str
    name: str
    description: str
    price: str
    category: str
    available: int
    reserved: int
    total_stock: int
    active: bool
    created_at: str
    updated_at: str
    version: int


@dataclass(frozen=True)
class ItemPageDTO:
    """Output: one page of a filtered item listing."""

    items: list[ItemDTO]
    total_count: int
    page: int
    page_size: int

    @property
    def has_next(self) -> bool:
        return self.page * self.page_size < self.total_count

    @property
    def has_previous(self) -> bool:
        return self.page > 1


# --- Mapping ------------------------------------------------------------------


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=str(order.id),
        customer_id=order.customer_id,
        status=order.status.value,
        items=[
            LineItemDTO(
                sku=line.product_ref,
                quantity=line.quantity,
                unit_price=str(line.unit_price),
                subtotal=str(line.subtotal),
            )
            for line in order.items
        ],
        total=str(order.total),
        tracking_number=order.tracking_number,
        cancellation_reason=order.cancellation_reason,
        created_at=order.created_at.strftime(_TIMESTAMP_FORMAT),
        updated_at=order.updated_at.strftime(_TIMESTAMP_FORMAT),
        version=order.version,
    )


def item_to_dto(item: Item) -> ItemDTO:
    return ItemDTO(
        id=str(item.id),
        sku=item.sku.value,
        name=item.name,
        description=item.description,
        price=str(item.price),
        category=item.category,
        available=item.stock.available,
        reserved=item.stock.reserved,
        total_stock=item.stock.total,
        active=item.active,
        created_at=item.created_at.strftime(_TIMESTAMP_FORMAT),
        updated_at=item.updated_at.strftime(_TIMESTAMP_FORMAT),
        version=item.version,
    )
