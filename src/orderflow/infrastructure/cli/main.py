import logging

import click

from orderflow.infrastructure.cli.event_commands import events_list
from orderflow.infrastructure.cli.item_commands import (
    item_activate,
    item_adjust,
    item_commit,
    item_create,
    item_deactivate,
    item_list,
    item_release,
    item_reserve,
    item_show,
    item_update,
)
from orderflow.infrastructure.cli.order_commands import (
    order_cancel,
    order_create,
    order_deliver,
    order_list,
    order_pay_begin,
    order_pay_confirm,
    order_ship,
    order_show,
    order_update,
    order_validate,
)
from orderflow.infrastructure.logging_config import configure_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log use-case activity to stderr.")
def cli(verbose: bool) -> None:
    """orderflow: order fulfillment and catalog stock"""
    configure_logging(level=logging.INFO if verbose else logging.WARNING)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def item() -> None:
    """Manage catalog items and their stock."""


@cli.group()
def events() -> None:
    """Inspect published domain events."""


# Register subcommands
order.add_command(order_cancel)
order.add_command(order_create)
order.add_command(order_deliver)
order.add_command(order_list)
order.add_command(order_pay_begin)
order.add_command(order_pay_confirm)
order.add_command(order_ship)
order.add_command(order_show)
order.add_command(order_update)
order.add_command(order_validate)
item.add_command(item_activate)
item.add_command(item_adjust)
item.add_command(item_commit)
item.add_command(item_create)
item.add_command(item_deactivate)
item.add_command(item_list)
item.add_command(item_release)
item.add_command(item_reserve)
item.add_command(item_show)
item.add_command(item_update)
events.add_command(events_list)
