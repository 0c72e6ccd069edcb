"""Item repository for database operations"""

from typing import Any, Dict, List, Optional

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.item import Item, ItemPrice
from ..schemas.item import ItemFilters
from .sorting import resolve_order_by

ITEM_SORT_COLUMNS = {
    "name": Item.name,
    "createdAt": Item.created_at,
    "updatedAt": Item.updated_at,
}


class ItemRepository:
    """Repository for item database operations"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_item(
        self, values: Dict[str, Any], prices: List[Dict[str, Any]]
    ) -> Item:
        """Create an item together with its city prices"""
        item = Item(**values)
        item.prices = [ItemPrice(city=p["city"], price=p["price"]) for p in prices]
        self.session.add(item)
        await self.session.commit()
        return await self.get_item_by_id(item.id, refresh=True)  # type: ignore

    async def get_item_by_id(
        self, item_id: int, refresh: bool = False
    ) -> Optional[Item]:
        """Get item by ID with prices"""
        query = (
            select(Item).options(selectinload(Item.prices)).where(Item.id == item_id)
        )
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await self.session.execute(query)
        return result.scalars().first()

    async def list_items(self, filters: ItemFilters) -> List[Item]:
        """List items matching the filters, unpaginated"""
        query = select(Item).options(selectinload(Item.prices))

        if filters.category_id is not None:
            query = query.where(Item.category_id == filters.category_id)
        if filters.vendor_id is not None:
            query = query.where(Item.vendor_id == filters.vendor_id)
        if filters.is_active is not None:
            query = query.where(Item.is_active == filters.is_active)
        if filters.search:
            query = query.where(Item.name.icontains(filters.search, autoescape=True))

        # Price bounds only apply together with a city, and all conditions
        # must hold for the same price entry.
        if filters.city and (
            filters.min_price is not None or filters.max_price is not None
        ):
            conditions = [ItemPrice.city == filters.city]
            if filters.min_price is not None:
                conditions.append(ItemPrice.price >= filters.min_price)
            if filters.max_price is not None:
                conditions.append(ItemPrice.price <= filters.max_price)
            query = query.where(Item.prices.any(and_(*conditions)))

        query = query.order_by(
            resolve_order_by(ITEM_SORT_COLUMNS, filters.sort_by, filters.order)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update_item(
        self,
        item: Item,
        values: Dict[str, Any],
        prices: Optional[List[Dict[str, Any]]] = None,
    ) -> Item:
        """Apply field changes and optionally replace the price list"""
        for field, value in values.items():
            setattr(item, field, value)
        if prices is not None:
            item.prices = [ItemPrice(city=p["city"], price=p["price"]) for p in prices]
        await self.session.commit()
        return await self.get_item_by_id(item.id, refresh=True)  # type: ignore

    async def set_active(self, item: Item, is_active: bool) -> Item:
        """Flip the active flag; the record itself is retained"""
        item.is_active = is_active
        await self.session.commit()
        return await self.get_item_by_id(item.id, refresh=True)  # type: ignore

    async def delete_item(self, item: Item) -> None:
        """Hard delete an item and its prices"""
        await self.session.delete(item)
        await self.session.commit()
