from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from marketplace_service.app.middleware.auth.auth_middleware import (
    auth_error_response,
)
from marketplace_service.app.utils.logging import setup_marketplace_logging

logger = setup_marketplace_logging("marketplace_service_roles")

DEFAULT_ROLE_REQUIREMENTS: Dict[str, Union[str, List[str]]] = {
    "/api/admins": "superadmin",
}


class MarketplaceRoleAuthorizationMiddleware(BaseHTTPMiddleware):
    """Reject authenticated requests whose role does not match the path."""

    def __init__(
        self,
        app: Any,
        role_requirements: Optional[Dict[str, Union[str, List[str]]]] = None,
    ):
        super().__init__(app)
        self.role_requirements = role_requirements or DEFAULT_ROLE_REQUIREMENTS

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        user_id = getattr(request.state, "user_id", None)
        if not user_id or request.method == "OPTIONS":
            # Unauthenticated requests were already turned away or are public
            return await call_next(request)

        user_role = getattr(request.state, "user_role", None) or ""
        required_roles = self._required_roles(request.url.path)
        if required_roles and user_role not in required_roles:
            logger.warning(
                "Role authorization failed",
                extra={
                    "correlation_id": getattr(
                        request.state, "correlation_id", "unknown"
                    ),
                    "user_id": user_id,
                    "user_role": user_role,
                    "required_roles": required_roles,
                    "path": request.url.path,
                    "method": request.method,
                    "event_type": "role_auth_failed",
                },
            )
            return auth_error_response(
                request,
                status_code=403,
                error_type="authorization_error",
                message="You do not have permission to perform this action",
                reason="insufficient_role",
            )

        return await call_next(request)

    def _required_roles(self, path: str) -> List[str]:
        for prefix, roles in self.role_requirements.items():
            if path == prefix or path.startswith(prefix + "/"):
                return [roles] if isinstance(roles, str) else list(roles)
        return []


def setup_marketplace_role_authorization_middleware(
    app: FastAPI,
    role_requirements: Optional[Dict[str, Union[str, List[str]]]] = None,
) -> None:
    """Setup role authorization middleware for the Marketplace Service."""

    role_requirements = role_requirements or DEFAULT_ROLE_REQUIREMENTS
    app.add_middleware(
        MarketplaceRoleAuthorizationMiddleware, role_requirements=role_requirements
    )

    logger.info(
        "Role authorization middleware configured",
        extra={
            "role_requirements": role_requirements,
            "event_type": "role_middleware_setup",
        },
    )
