"""Category repository for database operations"""

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.category import Category
from ..schemas.category import CategoryFilters
from .sorting import resolve_order_by

CATEGORY_SORT_COLUMNS = {
    "name": Category.name,
    "slug": Category.slug,
    "level": Category.level,
    "createdAt": Category.created_at,
    "updatedAt": Category.updated_at,
}


class CategoryRepository:
    """Repository for category database operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_category(self, values: Dict[str, Any]) -> Category:
        """Create a new category"""
        category = Category(**values)
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)
        return category

    async def get_category_by_id(self, category_id: int) -> Optional[Category]:
        """Get category by ID"""
        query = select(Category).where(Category.id == category_id)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_category_by_slug(self, slug: str) -> Optional[Category]:
        """Get category by slug"""
        query = select(Category).where(Category.slug == slug)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by exact name"""
        query = select(Category).where(Category.name == name)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_categories_by_ids(self, ids: Iterable[int]) -> Dict[int, Category]:
        """Fetch several categories keyed by id; unknown ids are left out"""
        wanted = {i for i in ids if i is not None}
        if not wanted:
            return {}
        query = select(Category).where(Category.id.in_(wanted))
        result = await self.db.execute(query)
        return {category.id: category for category in result.scalars().all()}

    async def list_categories(self, filters: CategoryFilters) -> List[Category]:
        """List categories matching the filters, unpaginated"""
        query = select(Category)

        if filters.search:
            query = query.where(
                or_(
                    Category.name.icontains(filters.search, autoescape=True),
                    Category.description.icontains(filters.search, autoescape=True),
                )
            )
        if filters.root_only:
            query = query.where(Category.parent_id.is_(None))
        elif filters.parent_id is not None:
            query = query.where(Category.parent_id == filters.parent_id)
        if filters.is_active is not None:
            query = query.where(Category.is_active == filters.is_active)

        query = query.order_by(
            resolve_order_by(CATEGORY_SORT_COLUMNS, filters.sort_by, filters.order)
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_children(self, parent_ids: Iterable[int]) -> List[Category]:
        """Direct children of any of the given categories"""
        wanted = list(parent_ids)
        if not wanted:
            return []
        query = select(Category).where(Category.parent_id.in_(wanted))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_descendants(self, category_id: int) -> List[Category]:
        """All categories below ``category_id``, breadth first"""
        descendants: List[Category] = []
        seen = {category_id}
        frontier = [category_id]
        while frontier:
            children = [
                child
                for child in await self.get_children(frontier)
                if child.id not in seen
            ]
            seen.update(child.id for child in children)
            descendants.extend(children)
            frontier = [child.id for child in children]
        return descendants

    async def save(self) -> None:
        """Commit pending changes made to loaded categories"""
        await self.db.commit()

    async def delete_category(self, category: Category) -> None:
        """Hard delete a category"""
        await self.db.delete(category)
        await self.db.commit()
