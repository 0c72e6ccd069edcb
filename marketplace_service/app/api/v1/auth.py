"""Admin authentication endpoints"""

from fastapi import APIRouter, Request, Response, status

from marketplace_service.app.api.dependencies import AuthServiceDep
from marketplace_service.app.schemas.admin import AdminResponse
from marketplace_service.app.schemas.auth import LoginRequest, SetupRequest
from marketplace_service.app.schemas.common import ApiResponse
from marketplace_service.app.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


@router.post("/login")
async def login(
    data: LoginRequest,
    response: Response,
    auth_service: AuthService = AuthServiceDep,
) -> ApiResponse[AdminResponse]:
    """Log an admin in and set the session cookie"""

    admin = await auth_service.authenticate_admin(data, response)
    return ApiResponse(data=admin, message="Logged in successfully")


@router.post("/logout")
async def logout(response: Response) -> ApiResponse[None]:
    """Clear the session cookie"""

    AuthService.logout(response)
    return ApiResponse(message="Logged out successfully")


@router.get("/me")
async def get_current_admin(
    request: Request,
    auth_service: AuthService = AuthServiceDep,
) -> ApiResponse[AdminResponse]:
    """Return the admin behind the current session"""

    admin = await auth_service.get_current_admin(
        getattr(request.state, "user_id", None)
    )
    return ApiResponse(data=admin)


@router.post("/setup", status_code=status.HTTP_201_CREATED)
async def setup_superadmin(
    data: SetupRequest,
    auth_service: AuthService = AuthServiceDep,
) -> ApiResponse[AdminResponse]:
    """Create the first superadmin of a fresh installation"""

    admin = await auth_service.setup_superadmin(data)
    return ApiResponse(data=admin, message="Superadmin created")
