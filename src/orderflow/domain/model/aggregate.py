"""Shared behaviour of aggregate roots: change token and pending events."""

from __future__ import annotations

from datetime import datetime, timezone

from orderflow.domain.events import DomainEvent


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AggregateRoot:
    """Base for Item and Order.

    ``version`` is the change token a repository compares on save.  It
    moves exactly once per committed mutation and never on a no-op.

    Events are queued in the order they were raised.  The caller drains
    them with ``pull_events()`` after the aggregate has been persisted.
    """

    def __init__(self, version: int, updated_at: datetime) -> None:
        self._version = version
        self._updated_at = updated_at
        self._events: list[DomainEvent] = []

    @property
    def version(self) -> int:
        return self._version

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def events(self) -> tuple[DomainEvent, ...]:
        return tuple(self._events)

    def pull_events(self) -> list[DomainEvent]:
        """Return pending events in insertion order and clear the queue."""
        events, self._events = self._events, []
        return events

    def clear_events(self) -> None:
        self._events.clear()

    # --- Internal helpers -----------------------------------------------------

    def _touch(self) -> None:
        self._version += 1
        self._updated_at = utcnow()

    def _record(self, event: DomainEvent) -> DomainEvent:
        self._events.append(event)
        return event
