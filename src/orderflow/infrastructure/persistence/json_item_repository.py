"""JSON-file-backed implementation of ItemRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from uuid import UUID

from orderflow.domain.model.item import Item
from orderflow.domain.model.value_objects import Money, ProductCode, StockCounters
from orderflow.domain.repository.item_repository import ItemRepository
from orderflow.infrastructure.persistence.json_store import VersionedJsonRepository


class JsonItemRepository(VersionedJsonRepository[Item], ItemRepository):

    unique_fields = ("sku",)

    def __init__(self, file_path: Path) -> None:
        super().__init__(file_path)

    # --- ItemRepository interface ---------------------------------------------

    def get_by_id(self, item_id: UUID) -> Item | None:
        return self._find(lambda raw: raw["id"] == str(item_id))

    def get_by_sku(self, sku: str) -> Item | None:
        return self._find(lambda raw: raw["sku"] == sku)

    def list_all(self) -> list[Item]:
        return self._all()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: Item) -> dict:
        return {
            "id": str(item.id),
            "sku": item.sku.value,
            "name": item.name,
            "description": item.description,
            "price": str(item.price.amount),
            "currency": item.price.currency,
            "available": item.stock.available,
            "reserved": item.stock.reserved,
            "category": item.category,
            "active": item.active,
            "created_at": item.created_at.isoformat(),
            "updated_at": item.updated_at.isoformat(),
            "version": item.version,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Item:
        return Item.restore(
            id=UUID(raw["id"]),
            sku=ProductCode(raw["sku"]),
            name=raw["name"],
            description=raw.get("description", ""),
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            stock=StockCounters(raw["available"], raw.get("reserved", 0)),
            category=raw["category"],
            active=raw.get("active", True),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            version=raw["version"],
        )
