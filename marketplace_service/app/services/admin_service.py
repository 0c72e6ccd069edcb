from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.password_security import PasswordSecurity
from ..repository.admin_repository import AdminRepository
from ..schemas.admin import AdminCreate, AdminResponse, AdminRoleUpdate
from ..utils.logging import setup_marketplace_logging

logger = setup_marketplace_logging("admin_service")


class AdminService:
    """Admin account management, reserved for superadmins."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repository = AdminRepository(session)

    async def list_admins(self) -> List[AdminResponse]:
        admins = await self.repository.list_all()
        return [AdminResponse.model_validate(a) for a in admins]

    async def get_admin(self, admin_id: int) -> Optional[AdminResponse]:
        admin = await self.repository.query_id(admin_id)
        if not admin:
            return None
        return AdminResponse.model_validate(admin)

    async def create_admin(
        self, data: AdminCreate, acting_admin_id: str
    ) -> AdminResponse:
        if await self.repository.query_email(data.email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Admin with this email already exists",
            )

        admin = await self.repository.create(
            {
                "name": data.name,
                "email": data.email,
                "password_hash": PasswordSecurity.hash_password(data.password),
                "role": data.role,
            }
        )
        logger.info(
            "Admin created",
            extra={
                "admin_id": admin.id,
                "role": admin.role,
                "acting_admin_id": acting_admin_id,
            },
        )
        return AdminResponse.model_validate(admin)

    async def delete_admin(self, admin_id: int, acting_admin_id: str) -> bool:
        if str(admin_id) == str(acting_admin_id):
            raise ValueError("You cannot delete your own account")

        admin = await self.repository.query_id(admin_id)
        if not admin:
            return False

        await self.repository.delete(admin)
        logger.info(
            "Admin deleted",
            extra={"admin_id": admin_id, "acting_admin_id": acting_admin_id},
        )
        return True

    async def update_role(
        self, admin_id: int, data: AdminRoleUpdate, acting_admin_id: str
    ) -> Optional[AdminResponse]:
        if str(admin_id) == str(acting_admin_id):
            raise ValueError("You cannot change your own role")

        admin = await self.repository.query_id(admin_id)
        if not admin:
            return None

        previous_role = admin.role
        admin = await self.repository.update(admin, {"role": data.role})
        logger.info(
            "Admin role updated",
            extra={
                "admin_id": admin_id,
                "previous_role": previous_role,
                "role": admin.role,
                "acting_admin_id": acting_admin_id,
            },
        )
        return AdminResponse.model_validate(admin)
