"""Admin account management (superadmin only)"""

from typing import Any, Dict

from fastapi import APIRouter, HTTPException, status

from marketplace_service.app.api.dependencies import AdminServiceDep, SuperAdminDep
from marketplace_service.app.schemas.admin import (
    AdminCreate,
    AdminResponse,
    AdminRoleUpdate,
)
from marketplace_service.app.schemas.common import ApiResponse, ListResponse
from marketplace_service.app.services.admin_service import AdminService

router = APIRouter(prefix="/admins")


@router.get("")
async def list_admins(
    current_admin: Dict[str, Any] = SuperAdminDep,
    admin_service: AdminService = AdminServiceDep,
) -> ListResponse[AdminResponse]:
    admins = await admin_service.list_admins()
    return ListResponse(count=len(admins), data=admins)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_admin(
    data: AdminCreate,
    current_admin: Dict[str, Any] = SuperAdminDep,
    admin_service: AdminService = AdminServiceDep,
) -> ApiResponse[AdminResponse]:
    admin = await admin_service.create_admin(data, current_admin["user_id"])
    return ApiResponse(data=admin, message="Admin created successfully")


@router.get("/{admin_id}")
async def get_admin(
    admin_id: int,
    current_admin: Dict[str, Any] = SuperAdminDep,
    admin_service: AdminService = AdminServiceDep,
) -> ApiResponse[AdminResponse]:
    admin = await admin_service.get_admin(admin_id)
    if not admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found"
        )
    return ApiResponse(data=admin)


@router.delete("/{admin_id}")
async def delete_admin(
    admin_id: int,
    current_admin: Dict[str, Any] = SuperAdminDep,
    admin_service: AdminService = AdminServiceDep,
) -> ApiResponse[None]:
    try:
        deleted = await admin_service.delete_admin(admin_id, current_admin["user_id"])
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found"
        )
    return ApiResponse(message="Admin deleted successfully")


@router.put("/{admin_id}/role")
async def update_admin_role(
    admin_id: int,
    data: AdminRoleUpdate,
    current_admin: Dict[str, Any] = SuperAdminDep,
    admin_service: AdminService = AdminServiceDep,
) -> ApiResponse[AdminResponse]:
    try:
        admin = await admin_service.update_role(
            admin_id, data, current_admin["user_id"]
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not admin:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found"
        )
    return ApiResponse(data=admin, message="Admin role updated successfully")
