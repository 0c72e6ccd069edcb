from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.admin import Admin


class AdminRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def query_id(self, admin_id: int) -> Optional[Admin]:
        query = select(Admin).where(Admin.id == admin_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def query_email(self, email: str) -> Optional[Admin]:
        query = select(Admin).where(Admin.email == email.strip().lower())
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count(Admin.id)))
        return result.scalar() or 0

    async def list_all(self) -> List[Admin]:
        result = await self.session.execute(select(Admin).order_by(Admin.created_at))
        return list(result.scalars().all())

    async def create(self, values: Dict[str, Any]) -> Admin:
        admin = Admin(**values)
        self.session.add(admin)
        await self.session.commit()
        await self.session.refresh(admin)
        return admin

    async def update(self, admin: Admin, values: Dict[str, Any]) -> Admin:
        for field, value in values.items():
            setattr(admin, field, value)
        await self.session.commit()
        await self.session.refresh(admin)
        return admin

    async def delete(self, admin: Admin) -> None:
        await self.session.delete(admin)
        await self.session.commit()
