"""Category API endpoints"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, status

from marketplace_service.app.api.dependencies import (
    CategoryServiceDep,
    CorrelationIdDep,
    CurrentUserIdDep,
)
from marketplace_service.app.api.payload import read_payload
from marketplace_service.app.schemas.category import (
    CategoryCreate,
    CategoryFilters,
    CategoryResponse,
    CategoryUpdate,
)
from marketplace_service.app.schemas.common import ApiResponse, ListResponse
from marketplace_service.app.services.category_service import CategoryService

router = APIRouter(prefix="/category")


@router.get("")
async def list_categories(
    search: Optional[str] = Query(None, description="Name or description substring"),
    parent_id: Optional[str] = Query(
        None, alias="parentId", description="Parent id, or 'null' for roots"
    ),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    order: str = Query("desc"),
    correlation_id: Optional[str] = CorrelationIdDep,
    service: CategoryService = CategoryServiceDep,
) -> ListResponse[CategoryResponse]:
    """List categories (unpaginated)"""
    root_only = parent_id is not None and parent_id.lower() in ("null", "none", "")
    if parent_id is not None and not root_only and not parent_id.isdigit():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="parentId must be a category id or 'null'",
        )

    filters = CategoryFilters(
        search=search,
        parent_id=None if root_only or parent_id is None else int(parent_id),
        root_only=root_only,
        is_active=is_active,
        sort_by=sort_by,
        order=order,
    )
    categories = await service.list_categories(filters, correlation_id)
    return ListResponse(count=len(categories), data=categories)


@router.get("/{category_id}")
async def get_category(
    category_id: int,
    correlation_id: Optional[str] = CorrelationIdDep,
    service: CategoryService = CategoryServiceDep,
) -> ApiResponse[CategoryResponse]:
    """Get category details by ID"""
    category = await service.get_category(category_id, correlation_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Category not found"
        )
    return ApiResponse(data=category)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(
    request: Request,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: CategoryService = CategoryServiceDep,
) -> ApiResponse[CategoryResponse]:
    """Create a category from JSON or a multipart form with an image"""
    payload, image = await read_payload(request)
    category_data = CategoryCreate.model_validate(payload)

    try:
        category = await service.create_category(
            category_data, image, user_id=user_id, correlation_id=correlation_id
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return ApiResponse(data=category, message="Category created successfully")


@router.put("/{category_id}")
async def update_category(
    category_id: int,
    request: Request,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: CategoryService = CategoryServiceDep,
) -> ApiResponse[CategoryResponse]:
    """Partially update a category"""
    payload, image = await read_payload(request)
    category_data = CategoryUpdate.model_validate(payload)

    try:
        category = await service.update_category(
            category_id,
            category_data,
            image,
            user_id=user_id,
            correlation_id=correlation_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Category not found"
        )
    return ApiResponse(data=category, message="Category updated successfully")


@router.delete("/{category_id}")
async def delete_category(
    category_id: int,
    correlation_id: Optional[str] = CorrelationIdDep,
    user_id: str = CurrentUserIdDep,
    service: CategoryService = CategoryServiceDep,
) -> ApiResponse[None]:
    """Hard delete a category; referencing children and items are kept"""
    deleted = await service.delete_category(
        category_id, user_id=user_id, correlation_id=correlation_id
    )
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Category not found"
        )
    return ApiResponse(message="Category deleted successfully")
