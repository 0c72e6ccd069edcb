"""
Integration tests for the category tree endpoints.
"""


def create_category(client, name, parent_id=None, **extra):
    response = client.post(
        "/api/category", json={"name": name, "parentId": parent_id, **extra}
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestCategoryTree:
    def test_levels_and_paths_follow_parents(self, superadmin_client):
        a = create_category(superadmin_client, "Home Services")
        b = create_category(superadmin_client, "Cleaning", a["id"])
        c = create_category(superadmin_client, "Deep Cleaning", b["id"])

        assert (a["level"], a["path"]) == (0, [])
        assert (b["level"], b["path"]) == (1, [a["id"]])
        assert (c["level"], c["path"]) == (2, [a["id"], b["id"]])
        assert a["slug"] == "home-services"
        assert c["parent"] == {"id": b["id"], "name": "Cleaning"}

    def test_detail_includes_ancestors(self, superadmin_client):
        a = create_category(superadmin_client, "Home Services")
        b = create_category(superadmin_client, "Cleaning", a["id"])
        c = create_category(superadmin_client, "Deep Cleaning", b["id"])

        detail = superadmin_client.get(f"/api/category/{c['id']}").json()["data"]

        assert [x["name"] for x in detail["ancestors"]] == [
            "Home Services",
            "Cleaning",
        ]

    def test_unknown_parent_rejected(self, superadmin_client):
        response = superadmin_client.post(
            "/api/category", json={"name": "Orphan", "parentId": 999}
        )

        assert response.status_code == 400

    def test_duplicate_name_conflict(self, superadmin_client):
        create_category(superadmin_client, "Plumbing")

        response = superadmin_client.post("/api/category", json={"name": "Plumbing"})

        assert response.status_code == 409

    def test_list_filters(self, superadmin_client):
        a = create_category(superadmin_client, "Home Services")
        create_category(superadmin_client, "Cleaning", a["id"])
        create_category(superadmin_client, "Beauty", isActive=False)

        roots = superadmin_client.get("/api/category", params={"parentId": "null"})
        assert {c["name"] for c in roots.json()["data"]} == {"Home Services", "Beauty"}

        children = superadmin_client.get("/api/category", params={"parentId": a["id"]})
        assert [c["name"] for c in children.json()["data"]] == ["Cleaning"]

        active = superadmin_client.get("/api/category", params={"isActive": "false"})
        assert [c["name"] for c in active.json()["data"]] == ["Beauty"]

        search = superadmin_client.get("/api/category", params={"search": "clean"})
        assert search.json()["count"] == 1

        by_name = superadmin_client.get(
            "/api/category", params={"sortBy": "name", "order": "asc"}
        )
        assert [c["name"] for c in by_name.json()["data"]] == [
            "Beauty",
            "Cleaning",
            "Home Services",
        ]

    def test_invalid_parent_filter(self, superadmin_client):
        response = superadmin_client.get("/api/category", params={"parentId": "abc"})

        assert response.status_code == 400

    def test_move_repositions_descendants(self, superadmin_client):
        a = create_category(superadmin_client, "Home Services")
        b = create_category(superadmin_client, "Cleaning", a["id"])
        c = create_category(superadmin_client, "Deep Cleaning", b["id"])

        response = superadmin_client.put(
            f"/api/category/{b['id']}", json={"parentId": None}
        )
        assert response.status_code == 200
        assert response.json()["data"]["level"] == 0

        moved = superadmin_client.get(f"/api/category/{c['id']}").json()["data"]
        assert (moved["level"], moved["path"]) == (1, [b["id"]])

    def test_cannot_move_under_descendant(self, superadmin_client):
        a = create_category(superadmin_client, "Home Services")
        b = create_category(superadmin_client, "Cleaning", a["id"])

        own = superadmin_client.put(f"/api/category/{a['id']}", json={"parentId": a["id"]})
        below = superadmin_client.put(
            f"/api/category/{a['id']}", json={"parentId": b["id"]}
        )

        assert own.status_code == 400
        assert below.status_code == 400

    def test_rename_regenerates_slug(self, superadmin_client):
        a = create_category(superadmin_client, "Home Services")

        response = superadmin_client.put(
            f"/api/category/{a['id']}", json={"name": "Home Care"}
        )

        assert response.json()["data"]["slug"] == "home-care"

    def test_delete_with_children_succeeds(self, superadmin_client):
        a = create_category(superadmin_client, "Home Services")
        b = create_category(superadmin_client, "Cleaning", a["id"])

        response = superadmin_client.delete(f"/api/category/{a['id']}")
        assert response.status_code == 200
        assert superadmin_client.get(f"/api/category/{a['id']}").status_code == 404

        child = superadmin_client.get(f"/api/category/{b['id']}").json()["data"]
        assert child["parentId"] == a["id"]
        assert child["ancestors"] == [{"id": a["id"], "name": None}]

    def test_missing_category(self, superadmin_client):
        assert superadmin_client.get("/api/category/404").status_code == 404
        assert superadmin_client.delete("/api/category/404").status_code == 404


class TestCategoryImages:
    def test_multipart_create_uploads_image(self, superadmin_client, image_storage):
        response = superadmin_client.post(
            "/api/category",
            data={"name": "Painting", "parentId": "null", "description": ""},
            files={"image": ("wall.png", b"png-bytes", "image/png")},
        )

        assert response.status_code == 201
        body = response.json()["data"]
        assert body["image"] == image_storage.uploaded[0]
        assert body["parentId"] is None
        assert body["description"] is None

    def test_replacing_image_deletes_old_one(self, superadmin_client, image_storage):
        created = superadmin_client.post(
            "/api/category",
            data={"name": "Painting"},
            files={"image": ("old.png", b"old", "image/png")},
        ).json()["data"]

        response = superadmin_client.put(
            f"/api/category/{created['id']}",
            data={"description": "Walls and doors"},
            files={"image": ("new.png", b"new", "image/png")},
        )

        assert response.status_code == 200
        assert response.json()["data"]["image"] == image_storage.uploaded[1]
        assert image_storage.deleted == [created["image"]]

    def test_delete_removes_image(self, superadmin_client, image_storage):
        created = superadmin_client.post(
            "/api/category",
            data={"name": "Painting"},
            files={"image": ("old.png", b"old", "image/png")},
        ).json()["data"]

        superadmin_client.delete(f"/api/category/{created['id']}")

        assert image_storage.deleted == [created["image"]]
