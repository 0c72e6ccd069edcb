"""
Unit tests for Marketplace Service error envelopes.
"""

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from marketplace_service.app.middleware.error.error_handler import (
    setup_marketplace_error_handling,
)


@pytest.fixture
def client():
    app = FastAPI()
    setup_marketplace_error_handling(app)

    @app.get("/not-found")
    async def not_found():
        raise HTTPException(status_code=404, detail="Thing not found")

    @app.get("/value")
    async def value():
        raise ValueError("Invalid prices format")

    @app.get("/permission")
    async def permission():
        raise PermissionError("nope")

    @app.get("/duplicate")
    async def duplicate():
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    @app.get("/typed")
    async def typed(limit: int):
        return {"limit": limit}

    return TestClient(app, raise_server_exceptions=False)


class TestErrorEnvelope:
    def test_http_exception(self, client):
        response = client.get("/not-found")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Thing not found"
        assert body["error"]["type"] == "not_found"
        assert body["error"]["path"] == "/not-found"
        assert body["error"]["method"] == "GET"
        assert "timestamp" in body["error"]

    def test_value_error_is_bad_request(self, client):
        response = client.get("/value")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid prices format"

    def test_permission_error_is_forbidden(self, client):
        response = client.get("/permission")

        assert response.status_code == 403
        assert response.json()["error"]["type"] == "authorization_error"

    def test_integrity_error_is_conflict(self, client):
        response = client.get("/duplicate")

        assert response.status_code == 409
        assert response.json()["error"]["type"] == "conflict"

    def test_unhandled_error_hides_details(self, client):
        response = client.get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "An internal server error occurred"
        assert "secret internals" not in response.text

    def test_request_validation_is_bad_request(self, client):
        response = client.get("/typed", params={"limit": "many"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["type"] == "validation_error"
        fields = [e["field"] for e in body["error"]["details"]["validation_errors"]]
        assert "query.limit" in fields
