from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from marketplace_service.app.core.settings import get_settings
from marketplace_service.app.utils.jwt_handler import JWTHandler
from marketplace_service.app.utils.logging import setup_marketplace_logging

logger = setup_marketplace_logging("marketplace_service_auth")
settings = get_settings()

DEFAULT_EXCLUDE_PATHS = [
    "/api/health",
    "/api/auth/login",
    "/api/auth/logout",
    "/api/auth/setup",
]


def auth_error_response(
    request: Request, status_code: int, error_type: str, message: str, reason: str
) -> JSONResponse:
    """Error envelope for requests rejected before reaching a route"""
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "message": message,
            "error": {
                "type": error_type,
                "message": message,
                "correlation_id": getattr(request.state, "correlation_id", "unknown"),
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "path": request.url.path,
                "method": request.method,
                "details": {"reason": reason},
            },
        },
    )


class MarketplaceAuthMiddleware(BaseHTTPMiddleware):
    """Authenticate /api requests with the admin session token.

    The token comes from the session cookie, or from an
    ``Authorization: Bearer`` header when no cookie is present.
    """

    def __init__(
        self,
        app: Any,
        exclude_paths: Optional[list[str]] = None,
        protected_prefix: str = "/api",
    ):
        super().__init__(app)
        self.exclude_paths = exclude_paths or DEFAULT_EXCLUDE_PATHS
        self.protected_prefix = protected_prefix
        self.jwt_handler = JWTHandler(
            secret_key=settings.SECRET_KEY, algorithm=settings.ALGORITHM
        )

    def _should_skip_auth(self, request: Request) -> bool:
        """Check if the request should skip authentication."""

        path = request.url.path
        if request.method == "OPTIONS":
            return True
        if not path.startswith(self.protected_prefix):
            return True
        for exclude_path in self.exclude_paths:
            if path == exclude_path or path.startswith(exclude_path + "/"):
                return True
        return False

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if self._should_skip_auth(request):
            return await call_next(request)

        correlation_id = getattr(request.state, "correlation_id", "unknown")
        auth_result = self._authenticate_request(request)

        if not auth_result["authenticated"]:
            logger.warning(
                f"Authentication failed: {auth_result['reason']}",
                extra={
                    "correlation_id": correlation_id,
                    "path": request.url.path,
                    "method": request.method,
                    "reason": auth_result["reason"],
                    "event_type": "auth_failed",
                },
            )
            return auth_error_response(
                request,
                status_code=401,
                error_type="authentication_error",
                message="Authentication required",
                reason=auth_result["reason"],
            )

        request.state.user_id = auth_result["user_id"]
        request.state.user_role = auth_result["user_role"]
        request.state.token_data = auth_result["token_data"]

        logger.debug(
            "Request authenticated",
            extra={
                "correlation_id": correlation_id,
                "user_id": auth_result["user_id"],
                "user_role": auth_result["user_role"],
                "token_source": auth_result["token_source"],
                "path": request.url.path,
                "method": request.method,
                "event_type": "auth_success",
            },
        )
        return await call_next(request)

    def _extract_token(self, request: Request) -> tuple[Optional[str], str]:
        token = request.cookies.get(settings.AUTH_COOKIE_NAME)
        if token and token.strip() not in ("", "null", "undefined"):
            return token, "cookie"

        authorization = request.headers.get("Authorization", "")
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip(), "bearer"
        return None, "none"

    def _authenticate_request(self, request: Request) -> Dict[str, Any]:
        token, source = self._extract_token(request)
        if not token:
            return {"authenticated": False, "reason": "missing_token"}

        try:
            token_data = self.jwt_handler.decode_token(token)
        except ValueError as e:
            logger.info(f"JWT validation failed: {str(e)}")
            return {"authenticated": False, "reason": "invalid_token"}

        return {
            "authenticated": True,
            "user_id": token_data.user_id,
            "user_role": token_data.role,
            "token_data": token_data.model_dump(mode="json"),
            "token_source": source,
        }


class AuthenticatedUser:
    """Dependency to get authenticated admin info from request."""

    def __init__(self, required_role: Optional[str] = None):
        self.required_role = required_role

    async def __call__(self, request: Request) -> Dict[str, Any]:
        user_id = getattr(request.state, "user_id", None)
        user_role = getattr(request.state, "user_role", None)

        if not user_id:
            raise HTTPException(status_code=401, detail="Authentication required")

        if self.required_role and user_role != self.required_role:
            raise HTTPException(
                status_code=403,
                detail="You do not have permission to perform this action",
            )

        return {
            "user_id": user_id,
            "role": user_role,
            "token_data": getattr(request.state, "token_data", {}),
        }


def setup_marketplace_auth_middleware(
    app: FastAPI, exclude_paths: Optional[list[str]] = None
) -> None:
    """Setup authentication middleware for the Marketplace Service."""

    exclude_paths = exclude_paths or DEFAULT_EXCLUDE_PATHS
    app.add_middleware(MarketplaceAuthMiddleware, exclude_paths=exclude_paths)

    logger.info(
        "Marketplace Service authentication middleware configured",
        extra={"excluded_paths": exclude_paths, "event_type": "auth_middleware_setup"},
    )


authenticated_user = AuthenticatedUser()
superadmin_user = AuthenticatedUser(required_role="superadmin")
