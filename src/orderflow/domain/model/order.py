"""Order aggregate: the core of the domain.

The Order is an aggregate root that owns its line items and walks a
fixed fulfillment pipeline:

    PENDING -> VALIDATED -> PAYMENT_PROCESSING -> PAID -> SHIPPED -> DELIVERED

Any non-terminal order can be CANCELLED.  DELIVERED and CANCELLED are
terminal.  All business invariants are enforced here.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from orderflow.domain.events import (
    DomainEvent,
    OrderCancelled,
    OrderCreated,
    OrderDelivered,
    OrderPaid,
    OrderShipped,
    OrderValidated,
)
from orderflow.domain.exceptions import StateError, ValidationError
from orderflow.domain.model.aggregate import AggregateRoot, utcnow
from orderflow.domain.model.value_objects import Money

MAX_PRODUCT_REF_LENGTH = 50


class OrderStatus(Enum):
    PENDING = "PENDING"
    VALIDATED = "VALIDATED"
    PAYMENT_PROCESSING = "PAYMENT_PROCESSING"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)


@dataclass(frozen=True)
class LineItem:
    """Captures the price snapshot of a product at order-creation time.

    ``product_ref`` is the SKU of the catalog item; the order never holds
    the Item itself.
    """

    product_ref: str
    quantity: int
    unit_price: Money  # locked at order-creation time

    def __post_init__(self) -> None:
        if not isinstance(self.product_ref, str) or not self.product_ref.strip():
            raise ValidationError("Product reference cannot be empty")
        if len(self.product_ref) > MAX_PRODUCT_REF_LENGTH:
            raise ValidationError(
                f"Product reference cannot exceed {MAX_PRODUCT_REF_LENGTH} characters"
            )
        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.quantity).__name__}"
            )
        if self.quantity <= 0:
            raise ValidationError("Quantity must be positive")
        if not isinstance(self.unit_price, Money):
            raise ValidationError("Unit price must be Money")
        if self.unit_price.amount <= 0:
            raise ValidationError("Unit price must be greater than zero")

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity


class Order(AggregateRoot):
    """Aggregate root for customer orders.

    Use ``Order.create()`` for new orders and ``Order.restore()`` to rebuild
    a persisted one.  The total is never stored: it is recomputed from the
    current line items on every read.
    """

    def __init__(
        self,
        *,
        id: UUID,
        customer_id: str,
        items: list[LineItem],
        status: OrderStatus,
        currency: str,
        created_at: datetime,
        updated_at: datetime,
        version: int,
        tracking_number: str | None = None,
        cancellation_reason: str | None = None,
    ) -> None:
        super().__init__(version=version, updated_at=updated_at)
        self._id = id
        self._customer_id = _validate_customer_id(customer_id)
        self._status = status
        self._currency = Money.zero(currency).currency
        self._items: list[LineItem] = []
        for line in items:
            self._items.append(self._check_line(line))
        self._created_at = created_at
        self._tracking_number = tracking_number
        self._cancellation_reason = cancellation_reason

    # --- Factories ------------------------------------------------------------

    @classmethod
    def create(cls, customer_id: str, items: list[LineItem]) -> Order:
        """Create a new PENDING order, raising ``OrderCreated``."""
        customer_id = _validate_customer_id(customer_id)
        if not items:
            raise ValidationError("Order must contain at least one item")

        now = utcnow()
        order = cls(
            id=uuid4(),
            customer_id=customer_id,
            items=list(items),
            status=OrderStatus.PENDING,
            currency=_first_currency(items),
            created_at=now,
            updated_at=now,
            version=1,
        )
        order._record(
            OrderCreated(order_id=order.id, customer_id=order.customer_id, total=order.total)
        )
        return order

    @classmethod
    def restore(
        cls,
        *,
        id: UUID,
        customer_id: str,
        items: list[LineItem],
        status: OrderStatus,
        currency: str,
        created_at: datetime,
        updated_at: datetime,
        version: int,
        tracking_number: str | None = None,
        cancellation_reason: str | None = None,
    ) -> Order:
        """Rebuild a persisted order.  Validates fields, raises no event."""
        return cls(
            id=id,
            customer_id=customer_id,
            items=items,
            status=status,
            currency=currency,
            created_at=created_at,
            updated_at=updated_at,
            version=version,
            tracking_number=tracking_number,
            cancellation_reason=cancellation_reason,
        )

    # --- Read-only state ------------------------------------------------------

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def customer_id(self) -> str:
        return self._customer_id

    @property
    def items(self) -> tuple[LineItem, ...]:
        return tuple(self._items)

    @property
    def status(self) -> OrderStatus:
        return self._status

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def tracking_number(self) -> str | None:
        return self._tracking_number

    @property
    def cancellation_reason(self) -> str | None:
        return self._cancellation_reason

    @property
    def total(self) -> Money:
        result = Money.zero(self._currency)
        for line in self._items:
            result = result + line.subtotal
        return result

    # --- State transitions ----------------------------------------------------

    def ensure_can_validate(self) -> None:
        """Raise the error ``validate()`` would raise, changing nothing."""
        self._require_status(OrderStatus.PENDING, "Only pending orders can be validated")
        if not self._items:
            raise StateError("Cannot validate order without items")

    def validate(self) -> DomainEvent:
        """Transition PENDING -> VALIDATED.

        Stock reservation for the line items happens *before* this call,
        coordinated by the application handler.
        """
        self.ensure_can_validate()
        self._move_to(OrderStatus.VALIDATED)
        return self._record(OrderValidated(order_id=self._id, customer_id=self._customer_id))

    def begin_payment(self) -> None:
        """Transition VALIDATED -> PAYMENT_PROCESSING.  Raises no event."""
        self._require_status(
            OrderStatus.VALIDATED, "Only validated orders can proceed to payment"
        )
        self._move_to(OrderStatus.PAYMENT_PROCESSING)

    def mark_paid(self) -> DomainEvent:
        """Transition PAYMENT_PROCESSING -> PAID."""
        self._require_status(
            OrderStatus.PAYMENT_PROCESSING,
            "Only orders in payment processing can be marked as paid",
        )
        self._move_to(OrderStatus.PAID)
        return self._record(OrderPaid(order_id=self._id, total=self.total))

    def ensure_can_ship(self, tracking_number: str) -> None:
        self._require_status(OrderStatus.PAID, "Only paid orders can be shipped")
        if not isinstance(tracking_number, str) or not tracking_number.strip():
            raise ValidationError("Tracking number is required")

    def ship(self, tracking_number: str) -> DomainEvent:
        """Transition PAID -> SHIPPED, recording the carrier tracking number."""
        self.ensure_can_ship(tracking_number)
        tracking_number = tracking_number.strip()
        self._tracking_number = tracking_number
        self._move_to(OrderStatus.SHIPPED)
        return self._record(
            OrderShipped(
                order_id=self._id,
                customer_id=self._customer_id,
                tracking_number=tracking_number,
            )
        )

    def deliver(self) -> DomainEvent:
        """Transition SHIPPED -> DELIVERED."""
        self._require_status(OrderStatus.SHIPPED, "Only shipped orders can be delivered")
        self._move_to(OrderStatus.DELIVERED)
        return self._record(OrderDelivered(order_id=self._id, customer_id=self._customer_id))

    def cancel(self, reason: str | None = None) -> DomainEvent:
        """Transition any non-terminal status -> CANCELLED.

        If the order holds a stock reservation, releasing it must happen
        *before* calling this (coordinated by the application handler).
        """
        self.ensure_can_cancel()
        reason = reason.strip() if reason and reason.strip() else None
        self._cancellation_reason = reason
        self._move_to(OrderStatus.CANCELLED)
        return self._record(
            OrderCancelled(order_id=self._id, customer_id=self._customer_id, reason=reason)
        )

    def ensure_can_cancel(self) -> None:
        if self._status.is_terminal:
            raise StateError(
                f"Cannot cancel order in {self._status.value} status: "
                f"delivered or already cancelled orders are final"
            )

    # --- Editing (PENDING only, except the customer) ----------------------------

    def ensure_can_edit_items(self) -> None:
        self._require_status(OrderStatus.PENDING, "Only pending orders can be edited")

    def add_item(self, line: LineItem) -> None:
        self.ensure_can_edit_items()
        self._items.append(self._check_line(line))
        self._touch()

    def replace_items(self, lines: list[LineItem]) -> None:
        """Swap in a new set of lines as one edit.

        Every line is checked before anything changes, so a rejected line
        leaves the order as it was.
        """
        self.ensure_can_edit_items()
        if not lines:
            raise ValidationError("Order must contain at least one item")
        checked = [self._check_line(line) for line in lines]
        self._items = checked
        self._touch()

    def clear_items(self) -> None:
        self.ensure_can_edit_items()
        if not self._items:
            return
        self._items.clear()
        self._touch()

    def update_customer(self, customer_id: str) -> None:
        customer_id = _validate_customer_id(customer_id)
        if customer_id == self._customer_id:
            return
        self._customer_id = customer_id
        self._touch()

    # --- Internal helpers -----------------------------------------------------

    def _require_status(self, expected: OrderStatus, message: str) -> None:
        if self._status != expected:
            raise StateError(f"{message} (current status is {self._status.value})")

    def _move_to(self, status: OrderStatus) -> None:
        self._status = status
        self._touch()

    def _check_line(self, line: LineItem) -> LineItem:
        if not isinstance(line, LineItem):
            raise ValidationError("Order items must be LineItem instances")
        if line.unit_price.currency != self._currency:
            raise ValidationError(
                f"Cannot mix {line.unit_price.currency} item into a "
                f"{self._currency} order"
            )
        return line

    def __repr__(self) -> str:
        return f"Order(id={self._id}, status={self._status.value}, total={self.total})"


def _first_currency(items: list[LineItem]) -> str:
    first = items[0]
    return first.unit_price.currency if isinstance(first, LineItem) else "USD"


def _validate_customer_id(customer_id: str) -> str:
    if not isinstance(customer_id, str) or not customer_id.strip():
        raise ValidationError("Customer ID cannot be empty")
    return customer_id.strip()
