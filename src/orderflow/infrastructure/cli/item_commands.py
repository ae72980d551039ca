"""CLI commands for the Item aggregate and its stock."""

from __future__ import annotations

import click

from orderflow.application.create_item import CreateItemHandler
from orderflow.application.dto import ItemDTO
from orderflow.application.item_activation import (
    ActivateItemHandler,
    DeactivateItemHandler,
)
from orderflow.application.manage_stock import (
    AdjustStockHandler,
    CommitStockHandler,
    ReleaseStockHandler,
    ReserveStockHandler,
)
from orderflow.application.show_items import ListItemsHandler, ShowItemHandler
from orderflow.application.update_item import UpdateItemHandler
from orderflow.domain.exceptions import DomainException
from orderflow.infrastructure.bootstrap import event_publisher, item_repository


def _display_item(dto: ItemDTO) -> None:
    status = "active" if dto.active else "inactive"
    click.echo(f"Item {dto.id}  ({status}, version {dto.version})")
    click.echo(f"SKU:       {dto.sku}")
    click.echo(f"Name:      {dto.name}")
    if dto.description:
        click.echo(f"About:     {dto.description}")
    click.echo(f"Category:  {dto.category}")
    click.echo(f"Price:     {dto.price}")
    click.echo(
        f"Stock:     {dto.available} available, {dto.reserved} reserved "
        f"({dto.total_stock} total)"
    )
    click.echo(f"Updated:   {dto.updated_at}")


@click.command("create")
@click.option("--sku", required=True, help="Product code, e.g. WIDGET-001.")
@click.option("--name", required=True, help="Item name.")
@click.option("--description", default="", help="Free-text description.")
@click.option("--price", required=True, help="Unit price (e.g. 15.00).")
@click.option("--currency", default="USD", show_default=True, help="Price currency.")
@click.option("--stock", "initial_stock", default=0, type=int, help="Initial available stock.")
@click.option("--category", required=True, help="Catalog category.")
def item_create(
    sku: str,
    name: str,
    description: str,
    price: str,
    currency: str,
    initial_stock: int,
    category: str,
) -> None:
    """Add a new item to the catalog."""
    handler = CreateItemHandler(item_repo=item_repository(), publisher=event_publisher())

    try:
        dto = handler.handle(
            sku=sku,
            name=name,
            description=description,
            price=price,
            initial_stock=initial_stock,
            category=category,
            currency=currency,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {dto.id} '{dto.sku}' created at {dto.price}")


@click.command("update")
@click.option("--id", "item_id", required=True, type=click.UUID, help="Item ID.")
@click.option("--name", required=True, help="Item name.")
@click.option("--description", default="", help="Free-text description.")
@click.option("--price", required=True, help="Unit price (e.g. 29.99).")
@click.option("--category", required=True, help="Catalog category.")
def item_update(item_id, name: str, description: str, price: str, category: str) -> None:
    """Update an item's name, description, price and category."""
    handler = UpdateItemHandler(item_repo=item_repository(), publisher=event_publisher())

    try:
        dto = handler.handle(
            item_id=item_id,
            name=name,
            description=description,
            price=price,
            category=category,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {dto.id} is at version {dto.version}")


@click.command("show")
@click.option("--id", "item_id", default=None, type=click.UUID, help="Item ID.")
@click.option("--sku", default=None, help="Product code.")
def item_show(item_id, sku: str | None) -> None:
    """Show one item, by ID or by SKU."""
    handler = ShowItemHandler(item_repo=item_repository())

    try:
        dto = handler.handle(item_id=item_id, sku=sku)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_item(dto)


@click.command("list")
@click.option("--category", default=None, help="Only this category.")
@click.option("--active/--inactive", "active", default=None, help="Only active or inactive items.")
@click.option("--search", default=None, help="Match SKU, name or description.")
@click.option("--page", default=1, type=int, show_default=True)
@click.option("--page-size", default=20, type=int, show_default=True)
def item_list(
    category: str | None,
    active: bool | None,
    search: str | None,
    page: int,
    page_size: int,
) -> None:
    """List catalog items with their stock."""
    handler = ListItemsHandler(item_repo=item_repository())

    try:
        result = handler.handle(
            category=category, active=active, search=search, page=page, page_size=page_size
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not result.items:
        click.echo("No items found.")
        return

    click.echo(
        f"{'SKU':<16} {'Name':<20} {'Price':>12} {'Available':>10} {'Reserved':>9} {'Active':>7}"
    )
    click.echo("-" * 79)
    for dto in result.items:
        click.echo(
            f"{dto.sku:<16} {dto.name[:20]:<20} {dto.price:>12} "
            f"{dto.available:>10} {dto.reserved:>9} {'yes' if dto.active else 'no':>7}"
        )
    click.echo(f"Page {result.page}: {len(result.items)} of {result.total_count} item(s)")


def _stock_command(name: str, handler_cls, option: str, help_text: str, verb: str):
    @click.command(name, help=help_text)
    @click.option("--id", "item_id", required=True, type=click.UUID, help="Item ID.")
    @click.option(f"--{option}", "quantity", required=True, type=int, help="Number of units.")
    def command(item_id, quantity: int) -> None:
        handler = handler_cls(item_repo=item_repository(), publisher=event_publisher())

        try:
            dto = handler.handle(item_id, quantity)
        except DomainException as exc:
            raise click.ClickException(str(exc))

        click.echo(
            f"{dto.sku}: {verb}, {dto.available} available, {dto.reserved} reserved"
        )

    return command


item_adjust = _stock_command(
    "adjust", AdjustStockHandler, "available", "Set the available stock of an item.", "adjusted"
)
item_reserve = _stock_command(
    "reserve", ReserveStockHandler, "quantity", "Reserve units of an item.", "reserved"
)
item_release = _stock_command(
    "release", ReleaseStockHandler, "quantity", "Release reserved units of an item.", "released"
)
item_commit = _stock_command(
    "commit", CommitStockHandler, "quantity", "Commit reserved units (they leave stock).", "committed"
)


@click.command("deactivate")
@click.option("--id", "item_id", required=True, type=click.UUID, help="Item ID.")
def item_deactivate(item_id) -> None:
    """Deactivate an item (soft delete)."""
    handler = DeactivateItemHandler(item_repo=item_repository(), publisher=event_publisher())

    try:
        dto = handler.handle(item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {dto.sku} is inactive.")


@click.command("activate")
@click.option("--id", "item_id", required=True, type=click.UUID, help="Item ID.")
def item_activate(item_id) -> None:
    """Reactivate a deactivated item."""
    handler = ActivateItemHandler(item_repo=item_repository(), publisher=event_publisher())

    try:
        dto = handler.handle(item_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Item {dto.sku} is active.")
