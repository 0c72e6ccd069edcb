"""Item API endpoints"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, status

from marketplace_service.app.api.dependencies import (
    CorrelationIdDep,
    CurrentUserIdDep,
    ItemServiceDep,
)
from marketplace_service.app.api.payload import read_payload
from marketplace_service.app.schemas.common import ApiResponse, ListResponse
from marketplace_service.app.schemas.item import (
    ItemCreate,
    ItemFilters,
    ItemResponse,
    ItemUpdate,
    parse_prices_field,
)
from marketplace_service.app.services.item_service import ItemService

router = APIRouter(prefix="/items")


@router.get("")
async def list_items(
    category: Optional[int] = Query(None, description="Category id"),
    vendor: Optional[int] = Query(None, description="Vendor id"),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = Query(None, description="Case-insensitive name match"),
    city: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    sort_by: str = Query("createdAt", alias="sortBy"),
    order: str = Query("desc"),
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ItemService = ItemServiceDep,
) -> ListResponse[ItemResponse]:
    """List items; price bounds only apply together with ``city``"""
    filters = ItemFilters(
        category_id=category,
        vendor_id=vendor,
        is_active=is_active,
        search=search,
        city=city,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        order=order,
    )
    items = await service.list_items(filters, correlation_id)
    return ListResponse(count=len(items), data=items)


@router.get("/{item_id}")
async def get_item(
    item_id: int,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: ItemService = ItemServiceDep,
) -> ApiResponse[ItemResponse]:
    item = await service.get_item(item_id, correlation_id)
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return ApiResponse(data=item)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_item(
    request: Request,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: ItemService = ItemServiceDep,
) -> ApiResponse[ItemResponse]:
    """Create an item from JSON or a multipart form with an image.

    In multipart forms ``prices`` is a JSON-encoded list of
    ``{"city", "price"}`` objects.
    """
    payload, image = await read_payload(request)
    if "prices" in payload:
        payload["prices"] = parse_prices_field(payload["prices"])
    item_data = ItemCreate.model_validate(payload)

    try:
        item = await service.create_item(
            item_data, image, user_id=user_id, correlation_id=correlation_id
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ApiResponse(data=item, message="Item created successfully")


@router.put("/{item_id}")
async def update_item(
    item_id: int,
    request: Request,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: ItemService = ItemServiceDep,
) -> ApiResponse[ItemResponse]:
    payload, image = await read_payload(request)
    if "prices" in payload:
        payload["prices"] = parse_prices_field(payload["prices"])
    item_data = ItemUpdate.model_validate(payload)

    try:
        item = await service.update_item(
            item_id, item_data, image, user_id=user_id, correlation_id=correlation_id
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return ApiResponse(data=item, message="Item updated successfully")


@router.patch("/{item_id}/deactivate")
async def deactivate_item(
    item_id: int,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: ItemService = ItemServiceDep,
) -> ApiResponse[ItemResponse]:
    """Soft delete an item"""
    item = await service.deactivate_item(
        item_id, user_id=user_id, correlation_id=correlation_id
    )
    if not item:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return ApiResponse(data=item, message="Item deactivated successfully")


@router.delete("/{item_id}")
async def delete_item(
    item_id: int,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: ItemService = ItemServiceDep,
) -> ApiResponse[None]:
    """Hard delete an item and its image"""
    deleted = await service.delete_item(
        item_id, user_id=user_id, correlation_id=correlation_id
    )
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return ApiResponse(message="Item deleted successfully")
