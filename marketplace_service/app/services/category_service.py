"""Category service for business logic"""

import re
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.category import Category
from ..providers.image_provider import CATEGORY_IMAGES, CloudinaryImageStorage
from ..repository.category_repository import CategoryRepository
from ..schemas.category import (
    CategoryCreate,
    CategoryFilters,
    CategoryResponse,
    CategoryUpdate,
)
from ..schemas.common import EntitySummary
from ..utils.logging import setup_marketplace_logging

logger = setup_marketplace_logging("category_service")


def make_slug(text: str) -> str:
    """Lowercase URL-safe slug: runs of other characters collapse to ``-``"""
    slug = re.sub(r"[^a-z0-9]+", "-", text.strip().lower()).strip("-")
    if not slug:
        raise ValueError("Slug must contain letters or digits")
    return slug


def tree_position(parent: Optional[Category]) -> Tuple[int, List[int]]:
    """Level and ancestor path of a category placed under ``parent``"""
    if parent is None:
        return 0, []
    return parent.level + 1, [*(parent.path or []), parent.id]


class CategoryService:
    """Service class for category business logic"""

    def __init__(
        self,
        db: AsyncSession,
        image_storage: Optional[CloudinaryImageStorage] = None,
    ):
        self.db = db
        self.repository = CategoryRepository(db)
        self.image_storage = image_storage

    def _to_response(
        self,
        category: Category,
        parents: Dict[int, Category],
        ancestors: Optional[List[EntitySummary]] = None,
    ) -> CategoryResponse:
        parent = None
        if category.parent_id is not None:
            found = parents.get(category.parent_id)
            parent = EntitySummary(
                id=category.parent_id, name=found.name if found else None
            )
        return CategoryResponse(
            id=category.id,
            name=category.name,
            slug=category.slug,
            description=category.description,
            parent_id=category.parent_id,
            parent=parent,
            level=category.level,
            path=list(category.path or []),
            ancestors=ancestors,
            image=category.image,
            is_active=category.is_active,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )

    async def _ensure_unique(
        self, name: Optional[str], slug: Optional[str], exclude_id: Optional[int] = None
    ) -> None:
        if name is not None:
            existing = await self.repository.get_category_by_name(name)
            if existing and existing.id != exclude_id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Category with this name already exists",
                )
        if slug is not None:
            existing = await self.repository.get_category_by_slug(slug)
            if existing and existing.id != exclude_id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Category with this slug already exists",
                )

    async def _get_parent(self, parent_id: Optional[int]) -> Optional[Category]:
        if parent_id is None:
            return None
        parent = await self.repository.get_category_by_id(parent_id)
        if not parent:
            raise ValueError(f"Parent category {parent_id} not found")
        return parent

    async def list_categories(
        self, filters: CategoryFilters, correlation_id: Optional[str] = None
    ) -> List[CategoryResponse]:
        """List categories with their parent populated"""
        categories = await self.repository.list_categories(filters)
        parents = await self.repository.get_categories_by_ids(
            c.parent_id for c in categories if c.parent_id is not None
        )

        logger.info(
            "Categories listed",
            extra={
                "count": len(categories),
                "filters": filters.model_dump(exclude_none=True),
                "correlation_id": correlation_id,
            },
        )
        return [self._to_response(c, parents) for c in categories]

    async def get_category(
        self, category_id: int, correlation_id: Optional[str] = None
    ) -> Optional[CategoryResponse]:
        """Get category by ID, including its ancestor chain"""
        category = await self.repository.get_category_by_id(category_id)
        if not category:
            return None

        path = list(category.path or [])
        known = await self.repository.get_categories_by_ids(path)
        ancestors = [
            EntitySummary(id=i, name=known[i].name if i in known else None)
            for i in path
        ]

        logger.info(
            "Category retrieved",
            extra={"category_id": category_id, "correlation_id": correlation_id},
        )
        return self._to_response(category, known, ancestors)

    async def create_category(
        self,
        category_data: CategoryCreate,
        image: Optional[UploadFile] = None,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> CategoryResponse:
        """Create a category; level and path are derived from the parent"""
        try:
            name = category_data.name.strip()
            if not name:
                raise ValueError("Category name is required")
            slug = make_slug(category_data.slug or name)
            await self._ensure_unique(name, slug)

            parent = await self._get_parent(category_data.parent_id)
            level, path = tree_position(parent)

            image_url = None
            if image is not None and self.image_storage is not None:
                image_url = await self.image_storage.upload_image(
                    image, CATEGORY_IMAGES
                )

            category = await self.repository.create_category(
                {
                    "name": name,
                    "slug": slug,
                    "description": category_data.description,
                    "parent_id": parent.id if parent else None,
                    "level": level,
                    "path": path,
                    "image": image_url,
                    "is_active": category_data.is_active,
                }
            )

            logger.info(
                "Category created successfully",
                extra={
                    "category_id": category.id,
                    "category_name": category.name,
                    "parent_id": category.parent_id,
                    "level": category.level,
                    "user_id": user_id,
                    "correlation_id": correlation_id,
                },
            )
            parents = {parent.id: parent} if parent else {}
            return self._to_response(category, parents)

        except Exception as e:
            logger.error(
                f"Failed to create category: {str(e)}",
                extra={
                    "category_name": category_data.name,
                    "user_id": user_id,
                    "correlation_id": correlation_id,
                    "error": str(e),
                },
            )
            raise

    async def update_category(
        self,
        category_id: int,
        category_data: CategoryUpdate,
        image: Optional[UploadFile] = None,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Optional[CategoryResponse]:
        """Partially update a category.

        Moving a category re-derives level and path for it and every
        descendant. A category cannot become its own ancestor.
        """
        category = await self.repository.get_category_by_id(category_id)
        if not category:
            return None

        try:
            fields = category_data.model_fields_set
            changes: Dict[str, object] = {}

            if "name" in fields and category_data.name is not None:
                changes["name"] = category_data.name.strip()
            if "slug" in fields and category_data.slug:
                changes["slug"] = make_slug(category_data.slug)
            elif "name" in changes and changes["name"] != category.name:
                changes["slug"] = make_slug(str(changes["name"]))
            await self._ensure_unique(
                changes.get("name"),  # type: ignore[arg-type]
                changes.get("slug"),  # type: ignore[arg-type]
                exclude_id=category.id,
            )

            if "description" in fields:
                changes["description"] = category_data.description
            if "is_active" in fields and category_data.is_active is not None:
                changes["is_active"] = category_data.is_active

            descendants: List[Category] = []
            parent: Optional[Category] = None
            moving = (
                "parent_id" in fields and category_data.parent_id != category.parent_id
            )
            if moving:
                if category_data.parent_id == category.id:
                    raise ValueError("Category cannot be its own parent")
                parent = await self._get_parent(category_data.parent_id)
                descendants = await self.repository.get_descendants(category.id)
                if parent and parent.id in {d.id for d in descendants}:
                    raise ValueError("Category cannot be moved under its own descendant")
                level, path = tree_position(parent)
                changes.update(
                    {
                        "parent_id": parent.id if parent else None,
                        "level": level,
                        "path": path,
                    }
                )

            old_image = category.image
            if image is not None and self.image_storage is not None:
                changes["image"] = await self.image_storage.upload_image(
                    image, CATEGORY_IMAGES
                )

            for field, value in changes.items():
                setattr(category, field, value)

            if moving:
                placed: Dict[int, Category] = {category.id: category}
                for node in descendants:
                    node_parent = placed[node.parent_id]  # type: ignore[index]
                    node.level, node.path = tree_position(node_parent)
                    placed[node.id] = node

            await self.repository.save()

            if "image" in changes and old_image and self.image_storage is not None:
                await self.image_storage.delete_image(old_image)

            logger.info(
                "Category updated successfully",
                extra={
                    "category_id": category_id,
                    "updated_fields": sorted(changes),
                    "descendants_repositioned": len(descendants),
                    "user_id": user_id,
                    "correlation_id": correlation_id,
                },
            )

            parents = await self.repository.get_categories_by_ids(
                [category.parent_id] if category.parent_id is not None else []
            )
            return self._to_response(category, parents)

        except Exception as e:
            logger.error(
                f"Failed to update category {category_id}: {str(e)}",
                extra={
                    "category_id": category_id,
                    "user_id": user_id,
                    "correlation_id": correlation_id,
                    "error": str(e),
                },
            )
            raise

    async def delete_category(
        self,
        category_id: int,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> bool:
        """Hard delete a category.

        Children and items that reference it are left untouched and keep the
        dangling id.
        """
        category = await self.repository.get_category_by_id(category_id)
        if not category:
            return False

        image = category.image
        await self.repository.delete_category(category)
        if image and self.image_storage is not None:
            await self.image_storage.delete_image(image)

        logger.info(
            "Category deleted",
            extra={
                "category_id": category_id,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return True
