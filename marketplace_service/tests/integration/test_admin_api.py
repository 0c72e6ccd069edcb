"""
Integration tests for superadmin-only admin management.
"""

from marketplace_service.tests.conftest import ADMIN


def _admin_id(client, email):
    admins = client.get("/api/admins").json()["data"]
    return next(a["id"] for a in admins if a["email"] == email)


class TestAdminManagement:
    def test_plain_admin_is_forbidden(self, admin_client):
        for method, path in [
            ("get", "/api/admins"),
            ("post", "/api/admins"),
            ("delete", "/api/admins/1"),
            ("put", "/api/admins/1/role"),
        ]:
            response = getattr(admin_client, method)(path)
            assert response.status_code == 403, path
            assert response.json()["success"] is False

    def test_plain_admin_can_use_catalogue(self, admin_client):
        assert admin_client.get("/api/category").status_code == 200

    def test_superadmin_lists_admins(self, superadmin_client):
        superadmin_client.post("/api/admins", json=ADMIN)

        response = superadmin_client.get("/api/admins")

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert {a["role"] for a in body["data"]} == {"admin", "superadmin"}
        assert all("password" not in a and "passwordHash" not in a for a in body["data"])

    def test_duplicate_email_conflict(self, superadmin_client):
        superadmin_client.post("/api/admins", json=ADMIN)

        response = superadmin_client.post("/api/admins", json=ADMIN)

        assert response.status_code == 409

    def test_cannot_delete_self(self, superadmin_client):
        own_id = superadmin_client.get("/api/auth/me").json()["data"]["id"]

        response = superadmin_client.delete(f"/api/admins/{own_id}")

        assert response.status_code == 400
        assert superadmin_client.get(f"/api/admins/{own_id}").status_code == 200

    def test_cannot_change_own_role(self, superadmin_client):
        own_id = superadmin_client.get("/api/auth/me").json()["data"]["id"]

        response = superadmin_client.put(
            f"/api/admins/{own_id}/role", json={"role": "admin"}
        )

        assert response.status_code == 400
        me = superadmin_client.get("/api/auth/me").json()["data"]
        assert me["role"] == "superadmin"

    def test_promote_and_delete_other_admin(self, superadmin_client):
        superadmin_client.post("/api/admins", json=ADMIN)
        staff_id = _admin_id(superadmin_client, ADMIN["email"])

        promoted = superadmin_client.put(
            f"/api/admins/{staff_id}/role", json={"role": "superadmin"}
        )
        assert promoted.status_code == 200
        assert promoted.json()["data"]["role"] == "superadmin"

        deleted = superadmin_client.delete(f"/api/admins/{staff_id}")
        assert deleted.status_code == 200
        assert superadmin_client.get(f"/api/admins/{staff_id}").status_code == 404

    def test_invalid_role_rejected(self, superadmin_client):
        superadmin_client.post("/api/admins", json=ADMIN)
        staff_id = _admin_id(superadmin_client, ADMIN["email"])

        response = superadmin_client.put(
            f"/api/admins/{staff_id}/role", json={"role": "owner"}
        )

        assert response.status_code == 400

    def test_missing_admin(self, superadmin_client):
        assert superadmin_client.delete("/api/admins/999").status_code == 404
