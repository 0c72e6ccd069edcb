"""
FastAPI dependency injection for the Marketplace Service
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace_service.app.core.database import database_manager
from marketplace_service.app.middleware.auth.auth_middleware import (
    authenticated_user,
    superadmin_user,
)
from marketplace_service.app.providers.image_provider import CloudinaryImageStorage
from marketplace_service.app.services.admin_service import AdminService
from marketplace_service.app.services.auth_service import AuthService
from marketplace_service.app.services.booking_service import BookingService
from marketplace_service.app.services.category_service import CategoryService
from marketplace_service.app.services.item_service import ItemService
from marketplace_service.app.services.vendor_service import VendorService


# --------------------------------------------------------------
# Database Dependency
# --------------------------------------------------------------
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide async database session"""

    async with database_manager.async_session_maker() as session:
        yield session


# --------------------------------------------------------------
# Image Storage Dependency
# --------------------------------------------------------------
_image_storage: Optional[CloudinaryImageStorage] = None


def get_image_storage() -> CloudinaryImageStorage:
    """Provide the shared Cloudinary image storage client"""

    global _image_storage
    if _image_storage is None:
        _image_storage = CloudinaryImageStorage()
    return _image_storage


# --------------------------------------------------------------
# Service Dependencies
# --------------------------------------------------------------
def get_auth_service(session: AsyncSession = Depends(get_async_session)) -> AuthService:
    return AuthService(session)


def get_admin_service(
    session: AsyncSession = Depends(get_async_session),
) -> AdminService:
    return AdminService(session)


def get_category_service(
    session: AsyncSession = Depends(get_async_session),
    image_storage: CloudinaryImageStorage = Depends(get_image_storage),
) -> CategoryService:
    return CategoryService(session, image_storage)


def get_item_service(
    session: AsyncSession = Depends(get_async_session),
    image_storage: CloudinaryImageStorage = Depends(get_image_storage),
) -> ItemService:
    return ItemService(session, image_storage)


def get_vendor_service(
    session: AsyncSession = Depends(get_async_session),
) -> VendorService:
    return VendorService(session)


def get_booking_service(
    session: AsyncSession = Depends(get_async_session),
) -> BookingService:
    return BookingService(session)


# --------------------------------------------------------------
# Request-Based Dependencies
# --------------------------------------------------------------
def get_correlation_id(request: Request) -> Optional[str]:
    """Extract correlation ID from request headers or state"""

    return request.headers.get("X-Correlation-ID") or getattr(
        request.state, "correlation_id", None
    )


def get_current_user_id(request: Request) -> str:
    """Get current authenticated admin ID from middleware state"""

    user_id = getattr(request.state, "user_id", None)
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return str(user_id)


CorrelationIdDep = Depends(get_correlation_id)
DatabaseDep = Depends(get_async_session)
CurrentUserIdDep = Depends(get_current_user_id)

AuthenticatedUserDep = Depends(authenticated_user)
SuperAdminDep = Depends(superadmin_user)

AuthServiceDep = Depends(get_auth_service)
AdminServiceDep = Depends(get_admin_service)
CategoryServiceDep = Depends(get_category_service)
ItemServiceDep = Depends(get_item_service)
VendorServiceDep = Depends(get_vendor_service)
BookingServiceDep = Depends(get_booking_service)
