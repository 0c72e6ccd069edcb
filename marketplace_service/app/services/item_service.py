"""Item service for business logic"""

from typing import Any, Dict, List, Optional

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.category import Category
from ..models.item import Item
from ..models.vendor import Vendor
from ..providers.image_provider import ITEM_IMAGES, CloudinaryImageStorage
from ..repository.category_repository import CategoryRepository
from ..repository.item_repository import ItemRepository
from ..repository.vendor_repository import VendorRepository
from ..schemas.common import EntitySummary
from ..schemas.item import (
    MISSING_ITEM_FIELDS_MESSAGE,
    ItemCreate,
    ItemFilters,
    ItemResponse,
    ItemUpdate,
    PriceEntry,
)
from ..utils.logging import setup_marketplace_logging

logger = setup_marketplace_logging("item_service")

ADMIN_OWNER_NAME = "Admin"
UNKNOWN_VENDOR_OWNER_NAME = "Unknown vendor"


class ItemService:
    """Service class for item business logic"""

    def __init__(
        self,
        session: AsyncSession,
        image_storage: Optional[CloudinaryImageStorage] = None,
    ):
        self.session = session
        self.repository = ItemRepository(session)
        self.category_repository = CategoryRepository(session)
        self.vendor_repository = VendorRepository(session)
        self.image_storage = image_storage

    async def _populate(self, items: List[Item]) -> List[ItemResponse]:
        categories = await self.category_repository.get_categories_by_ids(
            i.category_id for i in items
        )
        vendors = await self.vendor_repository.get_vendors_by_ids(
            i.vendor_id for i in items
        )
        return [self._to_response(i, categories, vendors) for i in items]

    @staticmethod
    def _to_response(
        item: Item, categories: Dict[int, Category], vendors: Dict[int, Vendor]
    ) -> ItemResponse:
        category = categories.get(item.category_id)
        vendor_summary = None
        owner_name = ADMIN_OWNER_NAME
        if item.vendor_id is not None:
            vendor = vendors.get(item.vendor_id)
            vendor_summary = EntitySummary(
                id=item.vendor_id, name=vendor.name if vendor else None
            )
            owner_name = vendor.name if vendor else UNKNOWN_VENDOR_OWNER_NAME

        return ItemResponse(
            id=item.id,
            name=item.name,
            description=item.description,
            prices=[PriceEntry(city=p.city, price=p.price) for p in item.prices],
            category=EntitySummary(
                id=item.category_id, name=category.name if category else None
            ),
            vendor=vendor_summary,
            owner_name=owner_name,
            image=item.image,
            is_active=item.is_active,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    async def _check_references(
        self, category_id: Optional[int], vendor_id: Optional[int]
    ) -> None:
        if category_id is not None:
            if not await self.category_repository.get_category_by_id(category_id):
                raise ValueError(f"Category {category_id} not found")
        if vendor_id is not None:
            if not await self.vendor_repository.get_vendor_by_id(vendor_id):
                raise ValueError(f"Vendor {vendor_id} not found")

    async def list_items(
        self, filters: ItemFilters, correlation_id: Optional[str] = None
    ) -> List[ItemResponse]:
        items = await self.repository.list_items(filters)
        logger.info(
            "Items listed",
            extra={
                "count": len(items),
                "filters": filters.model_dump(exclude_none=True),
                "correlation_id": correlation_id,
            },
        )
        return await self._populate(items)

    async def get_item(
        self, item_id: int, correlation_id: Optional[str] = None
    ) -> Optional[ItemResponse]:
        item = await self.repository.get_item_by_id(item_id)
        if not item:
            return None
        return (await self._populate([item]))[0]

    async def create_item(
        self,
        item_data: ItemCreate,
        image: Optional[UploadFile] = None,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> ItemResponse:
        """Create an item; the image is uploaded before anything is stored"""
        name = (item_data.name or "").strip()
        if not name or item_data.category is None or not item_data.prices:
            raise ValueError(MISSING_ITEM_FIELDS_MESSAGE)

        try:
            await self._check_references(item_data.category, item_data.vendor)

            image_url = None
            if image is not None and self.image_storage is not None:
                image_url = await self.image_storage.upload_image(image, ITEM_IMAGES)

            item = await self.repository.create_item(
                {
                    "name": name,
                    "description": item_data.description,
                    "category_id": item_data.category,
                    "vendor_id": item_data.vendor,
                    "image": image_url,
                    "is_active": item_data.is_active,
                },
                [p.model_dump() for p in item_data.prices],
            )

            logger.info(
                "Item created successfully",
                extra={
                    "item_id": item.id,
                    "category_id": item.category_id,
                    "vendor_id": item.vendor_id,
                    "price_entries": len(item.prices),
                    "user_id": user_id,
                    "correlation_id": correlation_id,
                },
            )
            return (await self._populate([item]))[0]

        except Exception as e:
            logger.error(
                f"Failed to create item: {str(e)}",
                extra={
                    "item_name": name,
                    "user_id": user_id,
                    "correlation_id": correlation_id,
                    "error": str(e),
                },
            )
            raise

    async def update_item(
        self,
        item_id: int,
        item_data: ItemUpdate,
        image: Optional[UploadFile] = None,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Optional[ItemResponse]:
        """Partially update an item.

        A new image replaces the stored one; the old remote image is removed
        after the record is saved.
        """
        item = await self.repository.get_item_by_id(item_id)
        if not item:
            return None

        fields = item_data.model_fields_set
        if "prices" in fields and not item_data.prices:
            raise ValueError("At least one price entry is required")

        values: Dict[str, Any] = {}
        if "name" in fields and item_data.name is not None:
            values["name"] = item_data.name.strip()
        if "description" in fields:
            values["description"] = item_data.description
        if "category" in fields and item_data.category is not None:
            values["category_id"] = item_data.category
        if "vendor" in fields:
            values["vendor_id"] = item_data.vendor
        if "is_active" in fields and item_data.is_active is not None:
            values["is_active"] = item_data.is_active

        await self._check_references(
            values.get("category_id"), values.get("vendor_id")
        )

        old_image = item.image
        if image is not None and self.image_storage is not None:
            values["image"] = await self.image_storage.upload_image(image, ITEM_IMAGES)

        prices = (
            [p.model_dump() for p in item_data.prices] if item_data.prices else None
        )
        item = await self.repository.update_item(item, values, prices)

        if "image" in values and old_image and self.image_storage is not None:
            await self.image_storage.delete_image(old_image)

        logger.info(
            "Item updated successfully",
            extra={
                "item_id": item_id,
                "updated_fields": sorted(values) + (["prices"] if prices else []),
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return (await self._populate([item]))[0]

    async def deactivate_item(
        self,
        item_id: int,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> Optional[ItemResponse]:
        """Soft delete: the item stays retrievable with isActive=false"""
        item = await self.repository.get_item_by_id(item_id)
        if not item:
            return None

        item = await self.repository.set_active(item, False)
        logger.info(
            "Item deactivated",
            extra={
                "item_id": item_id,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return (await self._populate([item]))[0]

    async def delete_item(
        self,
        item_id: int,
        user_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> bool:
        """Hard delete: removes the remote image, then the record"""
        item = await self.repository.get_item_by_id(item_id)
        if not item:
            return False

        if item.image and self.image_storage is not None:
            await self.image_storage.delete_image(item.image)
        await self.repository.delete_item(item)

        logger.info(
            "Item deleted",
            extra={
                "item_id": item_id,
                "user_id": user_id,
                "correlation_id": correlation_id,
            },
        )
        return True
