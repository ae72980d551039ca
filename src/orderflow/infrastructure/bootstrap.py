"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import os
from pathlib import Path

from orderflow.infrastructure.persistence.json_item_repository import (
    JsonItemRepository,
)
from orderflow.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from orderflow.infrastructure.persistence.json_outbox import JsonOutboxPublisher

DATA_DIR_ENV = "ORDERFLOW_DATA_DIR"

# Default data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    """``$ORDERFLOW_DATA_DIR`` if set, else ``<project root>/data``."""
    configured = os.environ.get(DATA_DIR_ENV)
    return Path(configured) if configured else _DEFAULT_DATA_DIR


def item_repository() -> JsonItemRepository:
    return JsonItemRepository(data_dir() / "items.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(data_dir() / "orders.json")


def event_publisher() -> JsonOutboxPublisher:
    return JsonOutboxPublisher(data_dir() / "outbox.jsonl")
