"""User management endpoint tests."""

from fastapi.testclient import TestClient


def test_list_users_is_admin_only(client: TestClient, register, make_admin) -> None:
    user = register()
    admin = make_admin()

    forbidden = client.get("/api/users", headers=user["headers"])
    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "Not authorized to access this route"

    response = client.get("/api/users", headers=admin["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["total"] == 2
    assert body["page"] == 1
    assert body["limit"] == 10
    assert body["hasNextPage"] is False


def test_list_users_filters_and_search(client: TestClient, register, make_admin) -> None:
    register(email="alice@example.com", name="Alice")
    register(email="bob@example.com", name="Bob")
    admin = make_admin(email="root@example.com")

    by_role = client.get("/api/users", params={"role": "admin"}, headers=admin["headers"]).json()
    assert [u["email"] for u in by_role["data"]] == ["root@example.com"]

    by_search = client.get("/api/users", params={"search": "ALI"}, headers=admin["headers"]).json()
    assert [u["email"] for u in by_search["data"]] == ["alice@example.com"]

    sorted_by_email = client.get(
        "/api/users", params={"sortBy": "email", "order": "asc"}, headers=admin["headers"]
    ).json()
    assert [u["email"] for u in sorted_by_email["data"]] == [
        "alice@example.com", "bob@example.com", "root@example.com",
    ]


def test_user_search_treats_wildcards_literally(client: TestClient, register, make_admin) -> None:
    register(email="ann_lee@example.com", name="Ann Lee")
    register(email="annxlee@example.com", name="Ann X")
    admin = make_admin(email="root@example.com")

    underscore = client.get("/api/users", params={"search": "ann_"}, headers=admin["headers"]).json()
    assert [u["email"] for u in underscore["data"]] == ["ann_lee@example.com"]

    percent = client.get("/api/users", params={"search": "%"}, headers=admin["headers"]).json()
    assert percent["total"] == 0


def test_admin_creates_user(client: TestClient, make_admin) -> None:
    admin = make_admin()

    response = client.post(
        "/api/users",
        json={"email": "staff@example.com", "password": "secret123", "name": "Staff", "role": "admin"},
        headers=admin["headers"],
    )

    assert response.status_code == 201
    assert response.json()["data"]["role"] == "admin"
    login = client.post("/api/auth/login", json={"email": "staff@example.com", "password": "secret123"})
    assert login.status_code == 200


def test_user_reads_own_profile_but_not_others(client: TestClient, register) -> None:
    alice = register()
    bob = register()

    own = client.get(f"/api/users/{alice['id']}", headers=alice["headers"])
    assert own.status_code == 200
    assert own.json()["data"]["id"] == alice["id"]

    other = client.get(f"/api/users/{bob['id']}", headers=alice["headers"])
    assert other.status_code == 403


def test_admin_gets_missing_user(client: TestClient, make_admin) -> None:
    admin = make_admin()

    response = client.get("/api/users/4242", headers=admin["headers"])

    assert response.status_code == 404
    assert response.json()["error"] == "User with id 4242 not found"


def test_user_cannot_change_own_role(client: TestClient, register) -> None:
    user = register()

    response = client.put(f"/api/users/{user['id']}", json={"role": "admin"}, headers=user["headers"])

    assert response.status_code == 403
    assert response.json()["error"] == "Not authorized to update role or account status"


def test_update_profile_and_email_conflict(client: TestClient, register) -> None:
    register(email="taken@example.com")
    user = register(email="me@example.com")

    renamed = client.put(f"/api/users/{user['id']}", json={"name": "New Name"}, headers=user["headers"])
    assert renamed.status_code == 200
    assert renamed.json()["data"]["name"] == "New Name"
    assert renamed.json()["data"]["email"] == "me@example.com"

    conflict = client.put(f"/api/users/{user['id']}", json={"email": "taken@example.com"}, headers=user["headers"])
    assert conflict.status_code == 409
    assert conflict.json()["error"] == "Email already exists"


def test_admin_deletes_user_but_not_self(client: TestClient, register, make_admin) -> None:
    user = register()
    admin = make_admin()

    self_delete = client.delete(f"/api/users/{admin['id']}", headers=admin["headers"])
    assert self_delete.status_code == 400
    assert self_delete.json()["error"] == "Cannot delete your own admin account"

    response = client.delete(f"/api/users/{user['id']}", headers=admin["headers"])
    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/api/users/{user['id']}", headers=admin["headers"]).status_code == 404


def test_deactivate_own_account(client: TestClient, register) -> None:
    user = register(email="leaving@example.com")

    response = client.delete("/api/users/account", headers=user["headers"])

    assert response.status_code == 200
    assert client.get("/api/auth/me", headers=user["headers"]).status_code == 401
    login = client.post("/api/auth/login", json={"email": "leaving@example.com", "password": "secret123"})
    assert login.json()["error"] == "Account is disabled"
