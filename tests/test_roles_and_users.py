from fastapi.testclient import TestClient
from sqlalchemy import inspect

from nurul_iman.bootstrap import create_app
from conftest import png_bytes


def test_startup_creates_tables_and_seeds_roles(app, client, make_user):
    tables = set(inspect(app.state.engine).get_table_names())
    assert {
        "roles", "users", "announcements", "articles", "categories", "study_rundowns", "study_videos",
    } <= tables

    _, admin = make_user("admin")
    r = client.get("/api/v1/roles", headers=admin)
    assert r.status_code == 200
    names = [x["role_name"] for x in r.json()["data"]]
    assert names == ["super-admin", "admin", "ustadz", "user"]


def test_role_crud(client, make_user):
    _, admin = make_user("admin")
    r = client.post("/api/v1/role/add", json={"role_name": "Bendahara"}, headers=admin)
    assert r.status_code == 200
    role = r.json()["data"]
    assert role["role_name"] == "bendahara"

    dup = client.post("/api/v1/role/add", json={"role_name": "bendahara"}, headers=admin)
    assert dup.status_code == 400
    assert dup.json()["message"] == "Role already exists"

    r = client.put(f"/api/v1/roles/{role['id']}", json={"role_name": "treasurer"}, headers=admin)
    assert r.json()["data"]["role_name"] == "treasurer"

    assert client.delete(f"/api/v1/roles/{role['id']}", headers=admin).status_code == 200
    assert client.get(f"/api/v1/roles/{role['id']}", headers=admin).status_code == 400


def test_role_in_use_cannot_be_deleted(client, make_user):
    _, admin = make_user("admin")
    roles = client.get("/api/v1/roles", headers=admin).json()["data"]
    admin_role = next(r for r in roles if r["role_name"] == "admin")
    r = client.delete(f"/api/v1/roles/{admin_role['id']}", headers=admin)
    assert r.status_code == 400
    assert r.json()["message"] == "Role is still assigned to users"


def test_user_role_cannot_manage_roles(client, make_user):
    _, user = make_user("user")
    assert client.get("/api/v1/roles", headers=user).status_code == 400
    assert client.post("/api/v1/role/add", json={"role_name": "x"}, headers=user).status_code == 400
    assert client.get("/api/v1/roles").status_code == 401


def test_admin_manages_users(client, make_user):
    admin_id, admin = make_user("admin", name="Admin")
    user_id, _ = make_user("user", name="Jamaah")
    roles = client.get("/api/v1/roles", headers=admin).json()["data"]
    ustadz_role = next(r for r in roles if r["role_name"] == "ustadz")

    listing = client.get("/api/v1/users", headers=admin)
    assert listing.status_code == 200
    assert {u["id"] for u in listing.json()["data"]} == {admin_id, user_id}
    assert all("password" not in u for u in listing.json()["data"])

    r = client.put(f"/api/v1/users/{user_id}", json={"role_id": ustadz_role["id"]}, headers=admin)
    assert r.status_code == 200
    assert r.json()["data"]["role"] == "ustadz"

    r = client.put(f"/api/v1/users/{user_id}", json={"role_id": 999}, headers=admin)
    assert r.status_code == 400

    assert client.delete(f"/api/v1/users/{admin_id}", headers=admin).status_code == 400
    assert client.delete(f"/api/v1/users/{user_id}", headers=admin).status_code == 200
    assert client.get(f"/api/v1/users/{user_id}", headers=admin).status_code == 400


def test_user_role_cannot_manage_users(client, make_user):
    _, user = make_user("user")
    r = client.get("/api/v1/users", headers=user)
    assert r.status_code == 400
    assert r.json()["message"] == "You do not have access to manage users"


def test_user_with_announcements_cannot_be_deleted(client, make_user, count_announcements):
    _, admin = make_user("admin", name="Admin")
    author_id, author = make_user("admin", name="Author")
    files = {"banner": ("banner.png", png_bytes(), "image/png")}
    data = {"title": "Friday Prayer", "description": "Khutbah at 12:00", "slug": "friday-prayer"}
    assert client.post("/api/v1/announcement/add", data=data, files=files, headers=author).status_code == 200

    r = client.delete(f"/api/v1/users/{author_id}", headers=admin)
    assert r.status_code == 400
    assert r.json()["message"] == "User still owns announcements or study rundowns"
    assert client.get(f"/api/v1/users/{author_id}", headers=admin).status_code == 200

    listing = client.get("/api/v1/announcements").json()["data"]
    assert [a["created_by"] for a in listing] == ["Author"]
    assert count_announcements() == 1


def test_presenter_with_rundowns_cannot_be_deleted(client, make_user):
    _, admin = make_user("admin")
    ustadz_id, _ = make_user("ustadz", name="Ustadz Ahmad")
    data = {
        "title": "Kajian Tafsir",
        "on_scheduled": "true",
        "schedule_date": "2024-03-01",
        "user_id": str(ustadz_id),
        "time": "18:30",
    }
    assert client.post("/api/v1/rundown/add", data=data, headers=admin).status_code == 200

    r = client.delete(f"/api/v1/users/{ustadz_id}", headers=admin)
    assert r.status_code == 400
    assert client.get("/api/v1/rundown").json()["data"][0]["ustadz_name"] == "Ustadz Ahmad"


def test_legacy_policy_keeps_user_management_for_staff(make_settings, make_user):
    legacy = TestClient(create_app(make_settings(authorization_policy="legacy")))
    # make_user is bound to the default app; both share the same sqlite file
    admin_id, admin = make_user("admin")
    user_id, user = make_user("user")
    roles = legacy.get("/api/v1/roles", headers=admin).json()["data"]
    super_admin = next(r for r in roles if r["role_name"] == "super-admin")

    r = legacy.put(f"/api/v1/users/{user_id}", json={"role_id": super_admin["id"]}, headers=user)
    assert r.status_code == 400
    assert r.json()["message"] == "You do not have access to manage users"
    assert legacy.get("/api/v1/roles", headers=user).status_code == 400
    assert legacy.get(f"/api/v1/users/{user_id}", headers=admin).json()["data"]["role"] == "user"
