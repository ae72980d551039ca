"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path
from uuid import UUID

from orderflow.domain.model.order import LineItem, Order, OrderStatus
from orderflow.domain.model.value_objects import Money
from orderflow.domain.repository.order_repository import OrderRepository
from orderflow.infrastructure.persistence.json_store import VersionedJsonRepository


class JsonOrderRepository(VersionedJsonRepository[Order], OrderRepository):

    def __init__(self, file_path: Path) -> None:
        super().__init__(file_path)

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: UUID) -> Order | None:
        return self._find(lambda raw: raw["id"] == str(order_id))

    def list_all(self) -> list[Order]:
        return self._all()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": str(order.id),
            "customer_id": order.customer_id,
            "status": order.status.value,
            "currency": order.currency,
            "tracking_number": order.tracking_number,
            "cancellation_reason": order.cancellation_reason,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "version": order.version,
            "items": [
                {
                    "product_ref": line.product_ref,
                    "quantity": line.quantity,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                }
                for line in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            LineItem(
                product_ref=i["product_ref"],
                quantity=i["quantity"],
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
            )
            for i in raw["items"]
        ]
        return Order.restore(
            id=UUID(raw["id"]),
            customer_id=raw["customer_id"],
            items=items,
            status=OrderStatus(raw["status"]),
            currency=raw.get("currency", "USD"),
            tracking_number=raw.get("tracking_number"),
            cancellation_reason=raw.get("cancellation_reason"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            version=raw["version"],
        )
