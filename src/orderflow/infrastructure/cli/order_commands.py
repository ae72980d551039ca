"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from orderflow.application.cancel_order import CancelOrderHandler
from orderflow.application.create_order import CreateOrderHandler
from orderflow.application.deliver_order import DeliverOrderHandler
from orderflow.application.dto import OrderDTO, OrderItemSpec
from orderflow.application.process_payment import BeginPaymentHandler, MarkPaidHandler
from orderflow.application.ship_order import ShipOrderHandler
from orderflow.application.show_order import ListOrdersHandler, ShowOrderHandler
from orderflow.application.update_order import UpdateOrderHandler
from orderflow.application.validate_order import ValidateOrderHandler
from orderflow.domain.exceptions import DomainException
from orderflow.domain.model.order import OrderStatus
from orderflow.infrastructure.bootstrap import (
    event_publisher,
    item_repository,
    order_repository,
)


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse 'WIDGET-1:3,GADGET-2:5' into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'SKU:Quantity'."
            )
        sku, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for item '{sku}'."
            )
        specs.append(OrderItemSpec(sku=sku.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order {dto.id}  (status={dto.status}, version {dto.version})")
    click.echo(f"Customer: {dto.customer_id}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.tracking_number:
        click.echo(f"Tracking: {dto.tracking_number}")
    if dto.cancellation_reason:
        click.echo(f"Reason:   {dto.cancellation_reason}")
    click.echo()

    click.echo(f"  {'SKU':<20} {'Qty':>5} {'Price':>14} {'Subtotal':>14}")
    click.echo(f"  {'-'*56}")
    for item in dto.items:
        click.echo(
            f"  {item.sku:<20} {item.quantity:>5} {item.unit_price:>14} {item.subtotal:>14}"
        )
    click.echo(f"  {'-'*56}")
    click.echo(f"  {'Order Total':<27} {dto.total:>28}")


@click.command("create")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--items", required=True, help="Items as 'SKU:Qty,SKU:Qty'.")
def order_create(customer: str, items: str) -> None:
    """Create a new order (status PENDING)."""
    specs = _parse_items(items)

    handler = CreateOrderHandler(
        order_repo=order_repository(),
        item_repo=item_repository(),
        publisher=event_publisher(),
    )

    try:
        dto = handler.handle(customer_id=customer, item_specs=specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} created  (status={dto.status})")
    _display_order(dto)


@click.command("update")
@click.option("--id", "order_id", required=True, type=click.UUID, help="Order ID.")
@click.option("--customer", required=True, help="Customer ID.")
@click.option("--items", default=None, help="Replacement items as 'SKU:Qty,SKU:Qty'.")
def order_update(order_id, customer: str, items: str | None) -> None:
    """Change the customer and, for pending orders, the items."""
    specs = _parse_items(items) if items else None

    handler = UpdateOrderHandler(
        order_repo=order_repository(),
        item_repo=item_repository(),
        publisher=event_publisher(),
    )

    try:
        dto = handler.handle(order_id, customer_id=customer, item_specs=specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=click.UUID, help="Order ID to display.")
def order_show(order_id) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--customer", default=None, help="Only orders of this customer.")
@click.option(
    "--status",
    default=None,
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=False),
    help="Only orders in this status.",
)
def order_list(customer: str | None, status: str | None) -> None:
    """List orders, oldest first."""
    handler = ListOrdersHandler(order_repo=order_repository())

    try:
        dtos = handler.handle(customer_id=customer, status=status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not dtos:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<36}  {'Customer':<16} {'Status':<18} {'Total':>14}")
    click.echo("-" * 88)
    for dto in dtos:
        click.echo(f"{dto.id:<36}  {dto.customer_id:<16} {dto.status:<18} {dto.total:>14}")


def _transition_command(name: str, handler_factory, help_text: str, done: str):
    @click.command(name, help=help_text)
    @click.option("--id", "order_id", required=True, type=click.UUID, help="Order ID.")
    def command(order_id) -> None:
        handler = handler_factory()

        try:
            dto = handler.handle(order_id)
        except DomainException as exc:
            raise click.ClickException(str(exc))

        click.echo(f"Order {dto.id} {done} (status={dto.status}).")

    return command


order_validate = _transition_command(
    "validate",
    lambda: ValidateOrderHandler(order_repository(), item_repository(), event_publisher()),
    "Validate a pending order (reserves stock).",
    "validated, stock reserved",
)
order_pay_begin = _transition_command(
    "pay-begin",
    lambda: BeginPaymentHandler(order_repository(), event_publisher()),
    "Start payment processing for a validated order.",
    "is processing payment",
)
order_pay_confirm = _transition_command(
    "pay-confirm",
    lambda: MarkPaidHandler(order_repository(), event_publisher()),
    "Mark an order in payment processing as paid.",
    "paid",
)
order_deliver = _transition_command(
    "deliver",
    lambda: DeliverOrderHandler(order_repository(), event_publisher()),
    "Mark a shipped order as delivered.",
    "delivered",
)


@click.command("ship")
@click.option("--id", "order_id", required=True, type=click.UUID, help="Order ID to ship.")
@click.option("--tracking", required=True, help="Carrier tracking number.")
def order_ship(order_id, tracking: str) -> None:
    """Ship a paid order (commits reserved stock)."""
    handler = ShipOrderHandler(
        order_repo=order_repository(),
        item_repo=item_repository(),
        publisher=event_publisher(),
    )

    try:
        dto = handler.handle(order_id, tracking_number=tracking)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} shipped, tracking {dto.tracking_number}.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=click.UUID, help="Order ID to cancel.")
@click.option("--reason", default=None, help="Why the order is cancelled.")
def order_cancel(order_id, reason: str | None) -> None:
    """Cancel an order (releases reserved stock if any)."""
    handler = CancelOrderHandler(
        order_repo=order_repository(),
        item_repo=item_repository(),
        publisher=event_publisher(),
    )

    try:
        dto = handler.handle(order_id, reason=reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.id} cancelled.")
