"""Application services: order queries."""

from __future__ import annotations

from uuid import UUID

from orderflow.application.dto import OrderDTO, order_to_dto
from orderflow.domain.exceptions import EntityNotFoundError, ValidationError
from orderflow.domain.model.order import OrderStatus
from orderflow.domain.repository.order_repository import OrderRepository


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: UUID) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")
        return order_to_dto(order)


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        customer_id: str | None = None,
        status: str | None = None,
    ) -> list[OrderDTO]:
        """List orders, oldest first, optionally filtered by customer and status."""
        wanted_status = None
        if status:
            try:
                wanted_status = OrderStatus(status.strip().upper())
            except ValueError as exc:
                raise ValidationError(f"Unknown order status '{status}'") from exc

        orders = self._order_repo.list_all()
        if customer_id:
            orders = [o for o in orders if o.customer_id == customer_id.strip()]
        if wanted_status is not None:
            orders = [o for o in orders if o.status == wanted_status]
        orders.sort(key=lambda o: o.created_at)
        return [order_to_dto(o) for o in orders]
