"""Menu endpoint tests, including the create-with-QR-code flow."""

from fastapi.testclient import TestClient
from sqlalchemy import func, select

from conftest import PNG_BYTES
from qrbites.domain.models.menu import Menu
from qrbites.domain.models.menu_item import MenuItem


def test_create_menu_attaches_qr_code(client: TestClient, register, create_restaurant, storage) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])

    response = client.post(
        "/api/menus",
        json={"name": "Lunch", "restaurantId": restaurant["id"], "categories": "Starters, Mains"},
        headers=owner["headers"],
    )

    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert data["restaurantId"] == restaurant["id"]
    assert data["categories"] == ["Starters", "Mains"]
    assert data["isActive"] is True
    assert data["qrCodeUrl"].startswith("https://res.cloudinary.com/")
    assert "/qrbites/qrcodes/" in data["qrCodeUrl"]
    assert any(upload.startswith("qrbites/qrcodes/") for upload in storage.uploads)


def test_create_menu_with_images(client: TestClient, register, create_restaurant, storage) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])

    response = client.post(
        "/api/menus",
        data={"name": "Brunch", "restaurantId": str(restaurant["id"])},
        files=[
            ("images", ("one.png", PNG_BYTES, "image/png")),
            ("images", ("two.jpg", PNG_BYTES, "image/jpeg")),
        ],
        headers=owner["headers"],
    )

    assert response.status_code == 201, response.text
    data = response.json()["data"]
    assert len(data["imageUrls"]) == 2
    assert data["imageUrl"] == data["imageUrls"][0]
    assert all("/qrbites/menus/" in url for url in data["imageUrls"])


def test_qr_failure_rolls_back_menu_and_images(
    client: TestClient, register, create_restaurant, storage, session_factory
) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])
    storage.failing_folders.add("qrcodes")

    response = client.post(
        "/api/menus",
        data={"name": "Doomed Menu", "restaurantId": str(restaurant["id"])},
        files={"images": ("one.png", PNG_BYTES, "image/png")},
        headers=owner["headers"],
    )

    assert response.status_code == 500
    assert response.json()["error"] == "Cloud storage upload failed"
    with session_factory() as db:
        assert db.scalar(select(func.count()).select_from(Menu)) == 0
    menu_uploads = [upload for upload in storage.uploads if upload.startswith("qrbites/menus/")]
    assert len(menu_uploads) == 1
    assert storage.destroyed == menu_uploads


def test_get_menu_includes_restaurant_and_items(
    client: TestClient, register, create_restaurant, create_menu, create_menu_item
) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])
    menu = create_menu(owner["headers"], restaurant["id"])
    create_menu_item(owner["headers"], menu["id"], name="Bruschetta")
    create_menu_item(owner["headers"], menu["id"], name="Tiramisu", category="Dessert")

    response = client.get(f"/api/menus/{menu['id']}", headers=owner["headers"])

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["restaurant"] == {"id": restaurant["id"], "name": restaurant["name"], "logoUrl": None}
    assert [item["name"] for item in data["menuItems"]] == ["Bruschetta", "Tiramisu"]


def test_new_menu_is_private_to_its_owner_and_starts_empty(
    client: TestClient, register, create_restaurant, create_menu
) -> None:
    owner = register()
    stranger = register()
    restaurant = create_restaurant(owner["headers"])
    menu = create_menu(owner["headers"], restaurant["id"])
    assert menu["qrCodeUrl"]

    forbidden = client.get(f"/api/menus/{menu['id']}", headers=stranger["headers"])
    assert forbidden.status_code == 403
    assert forbidden.json()["error"] == "Not authorized to access this menu"

    response = client.get(f"/api/menus/{menu['id']}", headers=owner["headers"])
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["menuItems"] == []
    assert data["qrCodeUrl"] == menu["qrCodeUrl"]


def test_list_menus_by_restaurant(client: TestClient, register, create_restaurant, create_menu) -> None:
    owner = register()
    stranger = register()
    first = create_restaurant(owner["headers"], name="First Place")
    second = create_restaurant(owner["headers"], name="Second Place")
    create_menu(owner["headers"], first["id"], name="Breakfast")
    create_menu(owner["headers"], second["id"], name="Supper")

    all_mine = client.get("/api/menus", headers=owner["headers"]).json()
    assert all_mine["total"] == 2

    filtered = client.get("/api/menus", params={"restaurantId": first["id"]}, headers=owner["headers"]).json()
    assert [menu["name"] for menu in filtered["data"]] == ["Breakfast"]

    foreign = client.get("/api/menus", params={"restaurantId": first["id"]}, headers=stranger["headers"])
    assert foreign.status_code == 403

    assert client.get("/api/menus", headers=stranger["headers"]).json()["total"] == 0


def test_update_menu_replaces_images(client: TestClient, register, create_restaurant, create_menu) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])
    menu = create_menu(owner["headers"], restaurant["id"])

    response = client.put(
        f"/api/menus/{menu['id']}",
        data={"description": "Now with photos"},
        files=[("images", ("new.png", PNG_BYTES, "image/png"))],
        headers=owner["headers"],
    )

    assert response.status_code == 200, response.text
    data = response.json()["data"]
    assert data["description"] == "Now with photos"
    assert data["name"] == "Dinner Menu"
    assert len(data["imageUrls"]) == 1
    assert data["qrCodeUrl"] == menu["qrCodeUrl"]


def test_menu_image_endpoint(client: TestClient, register, create_restaurant, create_menu) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])
    menu = create_menu(owner["headers"], restaurant["id"])

    response = client.post(
        f"/api/menus/{menu['id']}/image",
        files={"image": ("cover.jpeg", PNG_BYTES, "image/jpeg")},
        headers=owner["headers"],
    )

    assert response.status_code == 200
    assert "/qrbites/menus/" in response.json()["data"]["imageUrl"]


def test_regenerate_qr_code(client: TestClient, register, create_restaurant, create_menu) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])
    menu = create_menu(owner["headers"], restaurant["id"])

    response = client.post(f"/api/menus/{menu['id']}/qrcode", headers=owner["headers"])

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["qrCodeUrl"] != menu["qrCodeUrl"]
    assert data["qrCodeData"]["url"] == f"http://api.test/r/{menu['id']}?restaurant={restaurant['id']}"
    assert data["qrCodeData"]["downloadUrl"] == data["qrCodeUrl"]
    assert "generatedAt" in data["qrCodeData"]


def test_delete_menu_removes_items(
    client: TestClient, register, create_restaurant, create_menu, create_menu_item, session_factory
) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])
    menu = create_menu(owner["headers"], restaurant["id"])
    create_menu_item(owner["headers"], menu["id"])
    create_menu_item(owner["headers"], menu["id"], name="Calzone")

    response = client.delete(f"/api/menus/{menu['id']}", headers=owner["headers"])

    assert response.status_code == 204
    with session_factory() as db:
        assert db.scalar(select(func.count()).select_from(MenuItem)) == 0


def test_delete_restaurant_cascades_to_menus_and_items(
    client: TestClient, register, create_restaurant, create_menu, create_menu_item, session_factory
) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])
    menu = create_menu(owner["headers"], restaurant["id"])
    create_menu_item(owner["headers"], menu["id"])

    assert client.delete(f"/api/restaurants/{restaurant['id']}", headers=owner["headers"]).status_code == 204

    with session_factory() as db:
        assert db.scalar(select(func.count()).select_from(Menu)) == 0
        assert db.scalar(select(func.count()).select_from(MenuItem)) == 0
