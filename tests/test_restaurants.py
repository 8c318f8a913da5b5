"""Restaurant endpoint tests."""

import json

from fastapi.testclient import TestClient

from conftest import PNG_BYTES


def test_create_restaurant(client: TestClient, register, restaurant_payload) -> None:
    owner = register()

    response = client.post("/api/restaurants", json=restaurant_payload(), headers=owner["headers"])

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["userId"] == owner["id"]
    assert data["name"] == "Trattoria Roma"
    assert data["isActive"] is True
    assert data["location"]["zipCode"] == "10115"
    assert data["contact"]["phone"] == "+4915112345678"
    assert [entry["day"] for entry in data["hours"]] == list(range(7))
    assert data["owner"]["email"] == owner["email"]


def test_create_restaurant_requires_all_seven_days(client: TestClient, register, restaurant_payload) -> None:
    owner = register()
    payload = restaurant_payload()
    payload["hours"] = payload["hours"][:6]

    response = client.post("/api/restaurants", json=payload, headers=owner["headers"])

    assert response.status_code == 422
    assert response.json()["details"]["hours"] == "Business hours must include all 7 days"


def test_create_restaurant_field_validation(client: TestClient, register, restaurant_payload) -> None:
    owner = register()
    payload = restaurant_payload(name="ab")
    payload["location"]["zipCode"] = "1234"
    payload["contact"]["phone"] = "030 1234567"

    response = client.post("/api/restaurants", json=payload, headers=owner["headers"])

    assert response.status_code == 422
    details = response.json()["details"]
    assert details["name"] == "Name must be at least 3 characters"
    assert details["location.zipCode"] == "Please provide a valid German postal code (5 digits, e.g., 12345)"
    assert details["contact.phone"].startswith("Please provide a valid phone number")


def test_create_restaurant_with_logo_upload(client: TestClient, register, restaurant_payload, storage) -> None:
    owner = register()
    payload = restaurant_payload()
    form = {
        "name": payload["name"],
        "location": json.dumps(payload["location"]),
        "contact": json.dumps(payload["contact"]),
        "hours": json.dumps(payload["hours"]),
    }

    response = client.post(
        "/api/restaurants",
        data=form,
        files={"logo": ("logo.png", PNG_BYTES, "image/png")},
        headers=owner["headers"],
    )

    assert response.status_code == 201, response.text
    logo_url = response.json()["data"]["logoUrl"]
    assert "/qrbites/restaurants/" in logo_url
    assert len(storage.uploads) == 1


def test_list_restaurants_only_shows_own(client: TestClient, register, make_admin, create_restaurant) -> None:
    alice = register()
    bob = register()
    admin = make_admin()
    create_restaurant(alice["headers"], name="Alice Diner")
    create_restaurant(bob["headers"], name="Bob Bistro")

    mine = client.get("/api/restaurants", headers=alice["headers"]).json()
    assert [r["name"] for r in mine["data"]] == ["Alice Diner"]
    assert mine["total"] == 1

    everything = client.get("/api/restaurants", headers=admin["headers"]).json()
    assert everything["total"] == 2


def test_list_restaurants_name_filter(client: TestClient, register, create_restaurant) -> None:
    owner = register()
    create_restaurant(owner["headers"], name="Sushi Bar")
    create_restaurant(owner["headers"], name="Pizza Place")

    response = client.get("/api/restaurants", params={"name": "sushi"}, headers=owner["headers"]).json()

    assert [r["name"] for r in response["data"]] == ["Sushi Bar"]


def test_update_restaurant_merges_nested_objects(client: TestClient, register, create_restaurant) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])

    response = client.put(
        f"/api/restaurants/{restaurant['id']}",
        json={"name": "Trattoria Nuova", "location": {"city": "Hamburg"}},
        headers=owner["headers"],
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["name"] == "Trattoria Nuova"
    assert data["location"]["city"] == "Hamburg"
    assert data["location"]["street"] == "Hauptstrasse"
    assert data["description"] == restaurant["description"]


def test_logo_endpoint(client: TestClient, register, create_restaurant) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])

    missing = client.post(f"/api/restaurants/{restaurant['id']}/logo", headers=owner["headers"])
    assert missing.status_code == 400
    assert missing.json()["error"] == "Please upload an image"

    response = client.post(
        f"/api/restaurants/{restaurant['id']}/logo",
        files={"logo": ("logo.webp", PNG_BYTES, "image/webp")},
        headers=owner["headers"],
    )
    assert response.status_code == 200
    logo_url = response.json()["data"]["logoUrl"]

    fetched = client.get(f"/api/restaurants/{restaurant['id']}", headers=owner["headers"]).json()
    assert fetched["data"]["logoUrl"] == logo_url


def test_delete_restaurant(client: TestClient, register, create_restaurant) -> None:
    owner = register()
    restaurant = create_restaurant(owner["headers"])

    response = client.delete(f"/api/restaurants/{restaurant['id']}", headers=owner["headers"])

    assert response.status_code == 204
    assert client.get(f"/api/restaurants/{restaurant['id']}", headers=owner["headers"]).status_code == 404
