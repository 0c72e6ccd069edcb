"""Vendor repository for database operations"""

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.vendor import Vendor
from ..schemas.vendor import VendorFilters
from .sorting import resolve_order_by

VENDOR_SORT_COLUMNS = {
    "name": Vendor.name,
    "companyName": Vendor.company_name,
    "city": Vendor.city,
    "createdAt": Vendor.created_at,
    "updatedAt": Vendor.updated_at,
}


class VendorRepository:
    """Repository for vendor database operations"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_vendor(self, values: Dict[str, Any]) -> Vendor:
        vendor = Vendor(**values)
        self.session.add(vendor)
        await self.session.commit()
        await self.session.refresh(vendor)
        return vendor

    async def get_vendor_by_id(self, vendor_id: int) -> Optional[Vendor]:
        query = select(Vendor).where(Vendor.id == vendor_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_vendor_by_email(self, email: str) -> Optional[Vendor]:
        query = select(Vendor).where(Vendor.email == email.lower())
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_vendors_by_ids(self, ids: Iterable[Optional[int]]) -> Dict[int, Vendor]:
        """Fetch several vendors keyed by id; unknown ids are left out"""
        wanted = {i for i in ids if i is not None}
        if not wanted:
            return {}
        query = select(Vendor).where(Vendor.id.in_(wanted))
        result = await self.session.execute(query)
        return {vendor.id: vendor for vendor in result.scalars().all()}

    async def list_vendors(self, filters: VendorFilters) -> List[Vendor]:
        query = select(Vendor)

        if filters.city:
            query = query.where(Vendor.city == filters.city)
        if filters.is_active is not None:
            query = query.where(Vendor.is_active == filters.is_active)
        if filters.is_discarded is not None:
            query = query.where(Vendor.is_discarded == filters.is_discarded)
        if filters.company_name:
            query = query.where(
                Vendor.company_name.icontains(filters.company_name, autoescape=True)
            )
        if filters.search:
            query = query.where(
                or_(
                    Vendor.name.icontains(filters.search, autoescape=True),
                    Vendor.email.icontains(filters.search, autoescape=True),
                    Vendor.company_name.icontains(filters.search, autoescape=True),
                    Vendor.city.icontains(filters.search, autoescape=True),
                )
            )

        query = query.order_by(
            resolve_order_by(VENDOR_SORT_COLUMNS, filters.sort_by, filters.order)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def update_vendor(self, vendor: Vendor, values: Dict[str, Any]) -> Vendor:
        for field, value in values.items():
            setattr(vendor, field, value)
        await self.session.commit()
        await self.session.refresh(vendor)
        return vendor

    async def delete_vendor(self, vendor: Vendor) -> None:
        await self.session.delete(vendor)
        await self.session.commit()
