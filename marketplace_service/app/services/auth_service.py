from datetime import timedelta
from typing import Optional

from fastapi import HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.password_security import PasswordSecurity
from ..core.settings import get_settings
from ..models.admin import Admin, AdminRole
from ..repository.admin_repository import AdminRepository
from ..schemas.admin import AdminResponse
from ..schemas.auth import LoginRequest, SetupRequest
from ..utils.jwt_handler import JWTHandler
from ..utils.logging import setup_marketplace_logging

settings = get_settings()
logger = setup_marketplace_logging(
    "marketplace_service.auth", log_level=settings.LOG_LEVEL
)

jwt_handler = JWTHandler(secret_key=settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def cookie_options() -> dict:
    """Attributes shared by the session cookie on set and on clear"""
    samesite = settings.AUTH_COOKIE_SAMESITE.lower()
    secure = settings.AUTH_COOKIE_SECURE or settings.is_production
    if settings.is_production:
        samesite = "none"
    return {"httponly": True, "secure": secure, "samesite": samesite, "path": "/"}


class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.admin_repository = AdminRepository(session)

    async def authenticate_admin(
        self, data: LoginRequest, response: Response
    ) -> AdminResponse:
        """Check credentials and set the session cookie.

        Unknown email and wrong password fail with the same 401.
        """
        if not data.email or not data.password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Please provide email and password",
            )

        admin = await self.admin_repository.query_email(data.email)
        if not admin or not PasswordSecurity.verify_password(
            data.password, admin.password_hash
        ):
            logger.warning(
                "Admin login failed",
                extra={"event_type": "admin_login_failed", "admin_found": bool(admin)},
            )
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials",
            )

        token = self.issue_token(admin)
        response.set_cookie(
            key=settings.AUTH_COOKIE_NAME,
            value=token,
            max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            **cookie_options(),
        )

        logger.info(
            "Admin logged in",
            extra={
                "admin_id": admin.id,
                "role": admin.role,
                "event_type": "admin_login",
            },
        )
        return AdminResponse.model_validate(admin)

    @staticmethod
    def issue_token(admin: Admin) -> str:
        return jwt_handler.encode_token(
            {"user_id": str(admin.id), "email": admin.email, "role": admin.role},
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    @staticmethod
    def logout(response: Response) -> None:
        """Expire the session cookie immediately"""
        response.set_cookie(
            key=settings.AUTH_COOKIE_NAME,
            value="",
            max_age=0,
            expires=0,
            **cookie_options(),
        )

    async def get_current_admin(self, admin_id: Optional[str]) -> AdminResponse:
        if not admin_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
            )
        admin = await self.admin_repository.query_id(int(admin_id))
        if not admin:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Admin not found"
            )
        return AdminResponse.model_validate(admin)

    async def setup_superadmin(self, data: SetupRequest) -> AdminResponse:
        """Create the first superadmin; refused once any admin exists"""
        if await self.admin_repository.count() > 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Setup already completed",
            )

        admin = await self.admin_repository.create(
            {
                "name": data.name,
                "email": data.email,
                "password_hash": PasswordSecurity.hash_password(data.password),
                "role": AdminRole.SUPERADMIN.value,
            }
        )
        logger.info(
            "Initial superadmin created",
            extra={"admin_id": admin.id, "event_type": "admin_setup"},
        )
        return AdminResponse.model_validate(admin)
