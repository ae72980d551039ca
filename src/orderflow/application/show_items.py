"""Application services: catalog queries."""

from __future__ import annotations

from uuid import UUID

from orderflow.application.dto import ItemDTO, ItemPageDTO, item_to_dto
from orderflow.domain.exceptions import EntityNotFoundError, ValidationError
from orderflow.domain.repository.item_repository import ItemRepository

MAX_PAGE_SIZE = 100


class ShowItemHandler:

    def __init__(self, item_repo: ItemRepository) -> None:
        self._item_repo = item_repo

    def handle(self, item_id: UUID | None = None, sku: str | None = None) -> ItemDTO:
        """Look an item up by ID or by SKU (exactly one of them)."""
        if (item_id is None) == (sku is None):
            raise ValidationError("Provide either an item ID or a SKU")

        if item_id is not None:
            item = self._item_repo.get_by_id(item_id)
            label = str(item_id)
        else:
            item = self._item_repo.get_by_sku(sku)
            label = f"with SKU '{sku}'"
        if item is None:
            raise EntityNotFoundError(f"Item {label} not found")
        return item_to_dto(item)


class ListItemsHandler:

    def __init__(self, item_repo: ItemRepository) -> None:
        self._item_repo = item_repo

    def handle(
        self,
        category: str | None = None,
        active: bool | None = None,
        search: str | None = None,
        page: int = 1,
        page_size: int = 20,
    ) -> ItemPageDTO:
        """Filter the catalog and return one page, ordered by SKU.

        ``search`` matches SKU, name or description, case-insensitively.
        """
        if page < 1:
            raise ValidationError("Page number must be at least 1")
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValidationError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")

        items = self._item_repo.list_all()
        if category:
            items = [i for i in items if i.category.lower() == category.lower()]
        if active is not None:
            items = [i for i in items if i.active == active]
        if search:
            needle = search.lower()
            items = [
                i for i in items
                if needle in i.sku.value.lower()
                or needle in i.name.lower()
                or needle in i.description.lower()
            ]
        items.sort(key=lambda i: i.sku.value)

        start = (page - 1) * page_size
        return ItemPageDTO(
            items=[item_to_dto(i) for i in items[start:start + page_size]],
            total_count=len(items),
            page=page,
            page_size=page_size,
        )
