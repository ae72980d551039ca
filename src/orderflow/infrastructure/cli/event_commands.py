"""CLI commands for the event outbox."""

from __future__ import annotations

import click

from orderflow.infrastructure.bootstrap import event_publisher


@click.command("list")
@click.option("--type", "event_type", default=None, help="Only events of this type, e.g. OrderPaid.")
def events_list(event_type: str | None) -> None:
    """List published events, oldest first."""
    records = event_publisher().read_all()
    if event_type:
        records = [r for r in records if r["event_type"] == event_type]

    if not records:
        click.echo("No events found.")
        return

    for record in records:
        payload = ", ".join(
            f"{key}={value['amount']} {value['currency']}"
            if isinstance(value, dict) else f"{key}={value}"
            for key, value in record["payload"].items()
        )
        click.echo(f"{record['occurred_at']}  {record['event_type']:<16} {payload}")
