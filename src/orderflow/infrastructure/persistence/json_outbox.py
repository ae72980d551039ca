"""Append-only JSON-lines outbox for published domain events.

Each published event becomes one line: its type, id, timestamp and
payload.  Money is written as ``{"amount": "...", "currency": "..."}``.
"""

from __future__ import annotations

import dataclasses
import fcntl
import json
import os
from datetime import datetime
from pathlib import Path
from uuid import UUID

from orderflow.application.events import EventPublisher
from orderflow.domain.events import DomainEvent
from orderflow.domain.model.value_objects import Money

_ENVELOPE_FIELDS = ("event_id", "occurred_at")


def event_to_dict(event: DomainEvent) -> dict:
    payload = {
        f.name: _plain(getattr(event, f.name))
        for f in dataclasses.fields(event)
        if f.name not in _ENVELOPE_FIELDS
    }
    return {
        "event_type": event.event_type,
        "event_id": str(event.event_id),
        "occurred_at": event.occurred_at.isoformat(),
        "payload": payload,
    }


def _plain(value):
    if isinstance(value, Money):
        return {"amount": str(value.amount), "currency": value.currency}
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class JsonOutboxPublisher(EventPublisher):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    def publish(self, event: DomainEvent) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        with self._file_path.open("a", encoding="utf-8") as fh:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
            try:
                fh.write(json.dumps(event_to_dict(event)) + "\n")
                fh.flush()
                os.fsync(fh.fileno())
            finally:
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)

    def read_all(self) -> list[dict]:
        if not self._file_path.exists():
            return []
        with self._file_path.open(encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]
