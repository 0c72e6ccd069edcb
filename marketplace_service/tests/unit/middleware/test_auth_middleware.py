"""
Unit tests for Marketplace Service authentication and role middleware.
"""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI, HTTPException, Request
from fastapi.testclient import TestClient

from marketplace_service.app.core.settings import get_settings
from marketplace_service.app.middleware.auth.auth_middleware import (
    AuthenticatedUser,
    MarketplaceAuthMiddleware,
)
from marketplace_service.app.middleware.auth.role_middleware import (
    MarketplaceRoleAuthorizationMiddleware,
)
from marketplace_service.app.utils.jwt_handler import JWTHandler

settings = get_settings()


def issue(role: str = "admin", user_id: str = "1", minutes: int = 5) -> str:
    handler = JWTHandler(settings.SECRET_KEY, settings.ALGORITHM)
    return handler.encode_token(
        {"user_id": user_id, "email": "a@example.com", "role": role},
        expires_delta=timedelta(minutes=minutes),
    )


@pytest.fixture
def test_app():
    app = FastAPI()

    @app.get("/api/health")
    async def health():
        return {"ok": True}

    @app.get("/api/items")
    async def items(request: Request):
        return {"user_id": request.state.user_id, "role": request.state.user_role}

    @app.get("/api/admins")
    async def admins():
        return {"ok": True}

    @app.get("/public")
    async def public():
        return {"ok": True}

    app.add_middleware(MarketplaceRoleAuthorizationMiddleware)
    app.add_middleware(MarketplaceAuthMiddleware)
    return app


class TestMarketplaceAuthMiddleware:
    """Test cases for authentication middleware"""

    @pytest.fixture
    def auth_middleware(self):
        return MarketplaceAuthMiddleware(app=FastAPI())

    def make_request(self, path: str, method: str = "GET"):
        request = MagicMock(spec=Request)
        request.url.path = path
        request.method = method
        return request

    def test_should_skip_auth_excluded_paths(self, auth_middleware):
        for path in ["/api/health", "/api/auth/login", "/api/auth/setup", "/docs"]:
            assert auth_middleware._should_skip_auth(self.make_request(path))

        assert not auth_middleware._should_skip_auth(self.make_request("/api/items"))
        assert not auth_middleware._should_skip_auth(self.make_request("/api/auth/me"))

    def test_preflight_requests_skip_auth(self, auth_middleware):
        request = self.make_request("/api/items", method="OPTIONS")
        assert auth_middleware._should_skip_auth(request)

    def test_missing_token_returns_401_envelope(self, test_app):
        response = TestClient(test_app).get("/api/items")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["error"]["type"] == "authentication_error"
        assert body["error"]["details"]["reason"] == "missing_token"

    def test_invalid_token_rejected(self, test_app):
        client = TestClient(test_app)
        client.cookies.set(settings.AUTH_COOKIE_NAME, "not-a-jwt")

        response = client.get("/api/items")

        assert response.status_code == 401
        assert response.json()["error"]["details"]["reason"] == "invalid_token"

    def test_expired_token_rejected(self, test_app):
        client = TestClient(test_app)
        client.cookies.set(settings.AUTH_COOKIE_NAME, issue(minutes=-1))

        assert client.get("/api/items").status_code == 401

    def test_cookie_token_authenticates(self, test_app):
        client = TestClient(test_app)
        client.cookies.set(settings.AUTH_COOKIE_NAME, issue(user_id="12"))

        response = client.get("/api/items")

        assert response.status_code == 200
        assert response.json() == {"user_id": "12", "role": "admin"}

    def test_bearer_token_authenticates(self, test_app):
        response = TestClient(test_app).get(
            "/api/items", headers={"Authorization": f"Bearer {issue()}"}
        )

        assert response.status_code == 200

    def test_excluded_and_non_api_paths_are_public(self, test_app):
        client = TestClient(test_app)

        assert client.get("/api/health").status_code == 200
        assert client.get("/public").status_code == 200


class TestRoleAuthorizationMiddleware:
    def test_admin_role_blocked_from_admin_management(self, test_app):
        client = TestClient(test_app)
        client.cookies.set(settings.AUTH_COOKIE_NAME, issue(role="admin"))

        response = client.get("/api/admins")

        assert response.status_code == 403
        body = response.json()
        assert body["error"]["type"] == "authorization_error"
        assert body["message"] == "You do not have permission to perform this action"

    def test_superadmin_allowed(self, test_app):
        client = TestClient(test_app)
        client.cookies.set(settings.AUTH_COOKIE_NAME, issue(role="superadmin"))

        assert client.get("/api/admins").status_code == 200

    def test_other_paths_open_to_admins(self, test_app):
        client = TestClient(test_app)
        client.cookies.set(settings.AUTH_COOKIE_NAME, issue(role="admin"))

        assert client.get("/api/items").status_code == 200


class TestAuthenticatedUser:
    def make_request(self, user_id=None, role=None):
        request = MagicMock(spec=Request)
        request.state = MagicMock()
        request.state.user_id = user_id
        request.state.user_role = role
        request.state.token_data = {}
        return request

    @pytest.mark.asyncio
    async def test_unauthenticated_request(self):
        with pytest.raises(HTTPException) as exc_info:
            await AuthenticatedUser()(self.make_request())
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_wrong_role(self):
        with pytest.raises(HTTPException) as exc_info:
            await AuthenticatedUser("superadmin")(self.make_request("1", "admin"))
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_matching_role(self):
        user = await AuthenticatedUser("superadmin")(
            self.make_request("1", "superadmin")
        )
        assert user["user_id"] == "1"
        assert user["role"] == "superadmin"
