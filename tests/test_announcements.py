from nurul_iman.errors import PersistenceError, StorageError
from nurul_iman.models import Announcement

from conftest import png_bytes


def _add(client, headers, title="Friday Prayer", slug="friday-prayer", banner=None, filename="banner.png"):
    files = {"banner": (filename, banner if banner is not None else png_bytes(), "image/png")}
    data = {"title": title, "description": "Khutbah at 12:00", "slug": slug}
    return client.post("/api/v1/announcement/add", data=data, files=files, headers=headers)


def _stored_path(images_dir, reference):
    assert reference.startswith("/images/")
    return images_dir / reference[len("/images/"):]


def test_admin_adds_announcement(client, make_user, images_dir):
    user_id, headers = make_user("admin", name="Admin")
    r = _add(client, headers)
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Success to add announcement"
    data = body["data"]
    assert data["user_id"] == user_id
    assert data["created_by"] == "Admin"
    assert data["slug"] == "friday-prayer"
    assert data["images"].endswith(".png")
    assert "announcement-friday-prayer-" in data["images"]
    assert _stored_path(images_dir, data["images"]).is_file()

    served = client.get(data["images"])
    assert served.status_code == 200
    assert served.content == png_bytes()


def test_slug_generated_from_title(client, make_user):
    _, headers = make_user("admin")
    r = _add(client, headers, title="Kajian Ahad Pagi!", slug="")
    assert r.status_code == 200
    assert r.json()["data"]["slug"] == "kajian-ahad-pagi"


def test_user_role_cannot_add(client, make_user, count_announcements, images_dir):
    _, headers = make_user("user")
    r = _add(client, headers)
    assert r.status_code == 400
    assert r.json()["message"] == "You do not have access to add announcements"
    assert count_announcements() == 0
    assert not any(images_dir.iterdir())


def test_unauthenticated_add_has_no_side_effect(client, count_announcements, images_dir):
    r = _add(client, {"Authorization": "Bearer broken"})
    assert r.status_code == 401
    assert count_announcements() == 0
    assert not any(images_dir.iterdir())


def test_add_requires_banner(client, make_user):
    _, headers = make_user("admin")
    r = client.post(
        "/api/v1/announcement/add",
        data={"title": "T", "description": "D", "slug": "t"},
        headers=headers,
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Failed to upload banner image"


def test_add_missing_title_is_422(client, make_user):
    _, headers = make_user("admin")
    r = client.post(
        "/api/v1/announcement/add",
        data={"description": "D"},
        files={"banner": ("b.png", png_bytes(), "image/png")},
        headers=headers,
    )
    assert r.status_code == 422
    assert any(e.startswith("title") for e in r.json()["data"]["errors"])


def test_banner_size_limit(app, client, make_user, count_announcements):
    _, headers = make_user("admin")
    limit = app.state.settings.max_banner_bytes
    assert _add(client, headers, banner=png_bytes(limit), slug="exact").status_code == 200
    r = _add(client, headers, banner=png_bytes(limit + 1), slug="too-big")
    assert r.status_code == 400
    assert r.json()["message"] == "Image too large, max 1MB"
    assert count_announcements() == 1


def test_banner_must_be_image(client, make_user):
    _, headers = make_user("admin")
    r = _add(client, headers, filename="banner")
    assert r.status_code == 400
    r = _add(client, headers, filename="notes.txt")
    assert r.status_code == 400
    # dotted names keep their real extension
    r = _add(client, headers, filename="my.friday.banner.JPG")
    assert r.status_code == 200
    assert r.json()["data"]["images"].endswith(".jpg")


def test_failed_insert_removes_uploaded_banner(client, make_user, monkeypatch, images_dir):
    _, headers = make_user("admin")

    def fail(self, item):
        raise PersistenceError("Failed to add announcement")

    monkeypatch.setattr(
        "nurul_iman.repositories.announcement_repository.AnnouncementRepository.add_announcement", fail
    )
    r = _add(client, headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Failed to add announcement"
    assert not any(images_dir.iterdir())


def test_list_pagination_newest_first(app, client, make_user):
    user_id, _ = make_user("admin")
    with app.state.session_factory() as db:
        for i in range(1, 13):
            db.add(Announcement(title=f"A{i}", description="d", images="", slug=f"a{i}", user_id=user_id))
            db.commit()

    r = client.get("/api/v1/announcements?page=2&per_page=5")
    assert r.status_code == 200
    body = r.json()
    assert body["page"] == 2
    assert body["per_page"] == 5
    assert body["total"] == 12
    assert [x["title"] for x in body["data"]] == ["A7", "A6", "A5", "A4", "A3"]
    assert all(x["created_by"] == "Tester" for x in body["data"])


def test_list_defaults_for_bad_query(client):
    r = client.get("/api/v1/announcements?page=abc&per_page=-3")
    assert r.status_code == 200
    body = r.json()
    assert (body["page"], body["per_page"], body["total"]) == (1, 10, 0)
    assert body["data"] == []


def test_detail_and_missing(client, make_user):
    _, headers = make_user("admin")
    created = _add(client, headers).json()["data"]
    r = client.get(f"/api/v1/announcements/{created['id']}")
    assert r.status_code == 200
    assert r.json()["data"]["title"] == "Friday Prayer"

    r = client.get("/api/v1/announcements/999")
    assert r.status_code == 400
    assert r.json()["message"] == "Announcement not found"


def test_update_with_new_banner_replaces_old(client, make_user, images_dir):
    _, headers = make_user("admin")
    created = _add(client, headers).json()["data"]
    old_path = _stored_path(images_dir, created["images"])

    r = client.put(
        f"/api/v1/announcements/{created['id']}",
        data={"title": "Friday Prayer (moved)", "description": "13:00", "slug": "friday-prayer"},
        files={"banner": ("new.webp", png_bytes(1000), "image/webp")},
        headers=headers,
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["title"] == "Friday Prayer (moved)"
    assert data["images"] != created["images"]
    assert data["images"].endswith(".webp")
    assert _stored_path(images_dir, data["images"]).is_file()
    assert not old_path.exists()


def test_update_without_banner_keeps_image(client, make_user, images_dir):
    _, headers = make_user("admin")
    created = _add(client, headers).json()["data"]
    r = client.put(
        f"/api/v1/announcements/{created['id']}",
        data={"title": "New title", "description": "New description"},
        headers=headers,
    )
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["images"] == created["images"]
    assert data["slug"] == "new-title"
    assert _stored_path(images_dir, data["images"]).is_file()


def test_failed_update_keeps_old_banner(client, make_user, monkeypatch, images_dir):
    _, headers = make_user("admin")
    created = _add(client, headers).json()["data"]

    def fail(self, item):
        raise PersistenceError("Failed to update announcement")

    monkeypatch.setattr("nurul_iman.repositories.announcement_repository.AnnouncementRepository.update", fail)
    r = client.put(
        f"/api/v1/announcements/{created['id']}",
        data={"title": "X", "description": "Y"},
        files={"banner": ("new.png", png_bytes(1000), "image/png")},
        headers=headers,
    )
    assert r.status_code == 400
    assert [p.name for p in images_dir.iterdir()] == [_stored_path(images_dir, created["images"]).name]


def test_user_role_cannot_update_or_delete(client, make_user):
    _, admin = make_user("admin")
    _, user = make_user("user")
    created = _add(client, admin).json()["data"]
    r = client.put(
        f"/api/v1/announcements/{created['id']}",
        data={"title": "X", "description": "Y"},
        headers=user,
    )
    assert r.status_code == 400
    assert r.json()["message"] == "You do not have access to update announcements"
    r = client.delete(f"/api/v1/announcements/{created['id']}", headers=user)
    assert r.status_code == 400
    assert client.get(f"/api/v1/announcements/{created['id']}").status_code == 200


def test_delete_removes_row_and_banner(client, make_user, images_dir):
    _, headers = make_user("super-admin")
    created = _add(client, headers).json()["data"]
    path = _stored_path(images_dir, created["images"])

    r = client.delete(f"/api/v1/announcements/{created['id']}", headers=headers)
    assert r.status_code == 200
    assert r.json()["message"] == "Delete Success"
    assert client.get(f"/api/v1/announcements/{created['id']}").status_code == 400
    assert client.get("/api/v1/announcements").json()["total"] == 0
    assert not path.exists()


def test_delete_when_banner_already_gone(client, make_user, images_dir):
    _, headers = make_user("admin")
    created = _add(client, headers).json()["data"]
    _stored_path(images_dir, created["images"]).unlink()
    r = client.delete(f"/api/v1/announcements/{created['id']}", headers=headers)
    assert r.status_code == 200


def test_delete_storage_failure_keeps_row(app, client, make_user, monkeypatch):
    _, headers = make_user("admin")
    created = _add(client, headers).json()["data"]

    def fail(reference):
        raise StorageError("Delete failed")

    monkeypatch.setattr(app.state.storage, "delete", fail)
    r = client.delete(f"/api/v1/announcements/{created['id']}", headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Delete failed"
    assert client.get(f"/api/v1/announcements/{created['id']}").status_code == 200


def test_legacy_policy_reproduces_old_rules(make_settings, make_user):
    from fastapi.testclient import TestClient
    from nurul_iman.bootstrap import create_app

    legacy_app = create_app(make_settings(authorization_policy="legacy"))
    legacy = TestClient(legacy_app)
    # make_user is bound to the default app; both share the same sqlite file
    _, admin = make_user("admin")
    _, ustadz = make_user("ustadz")

    assert _add(legacy, ustadz).status_code == 400
    created = _add(legacy, admin).json()["data"]
    r = legacy.delete(f"/api/v1/announcements/{created['id']}", headers=admin)
    assert r.status_code == 400
    assert r.json()["message"] == "You do not have access to delete announcements"
