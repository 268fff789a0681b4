import pytest

from helpers import ADMIN_EMAIL, ADMIN_PASSWORD, USER_EMAIL, USER_PASSWORD, auth_header

PRODUCT = {"name": "Jollof Rice", "description": "Party style", "price_cents": 2500, "category": "mains"}


def _token(client, email, password):
    res = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200
    return res.get_json()["access_token"]


@pytest.fixture
def admin_headers(client, admin):
    return auth_header(_token(client, ADMIN_EMAIL, ADMIN_PASSWORD))


@pytest.fixture
def user_headers(client, user):
    return auth_header(_token(client, USER_EMAIL, USER_PASSWORD))


def _create(client, headers, **overrides):
    res = client.post("/api/v1/products", json=dict(PRODUCT, **overrides), headers=headers)
    assert res.status_code == 201, res.get_json()
    return res.get_json()["data"]


def test_admin_creates_and_anyone_reads(client, admin_headers):
    created = _create(client, admin_headers)
    assert created["is_available"] is True
    assert created["price_cents"] == 2500

    res = client.get(f"/api/v1/products/{created['id']}")
    assert res.status_code == 200
    assert res.get_json()["data"]["name"] == "Jollof Rice"


def test_writes_require_admin(client, user_headers):
    res = client.post("/api/v1/products", json=PRODUCT, headers=user_headers)
    assert res.status_code == 403
    assert res.get_json()["error"] == "FORBIDDEN"


def test_writes_require_a_token(client):
    res = client.post("/api/v1/products", json=PRODUCT)
    assert res.status_code == 401


@pytest.mark.parametrize(
    "overrides",
    [{"name": "x"}, {"price_cents": -1}, {"category": ""}, {"image_url": "not a url"}, {"price_cents": "12"}],
)
def test_create_validation(client, admin_headers, overrides):
    res = client.post("/api/v1/products", json=dict(PRODUCT, **overrides), headers=admin_headers)
    assert res.status_code == 422
    assert res.get_json()["error"] == "VALIDATION_ERROR"


def test_partial_update(client, admin_headers):
    created = _create(client, admin_headers)

    res = client.put(
        f"/api/v1/products/{created['id']}", json={"price_cents": 3000, "is_available": False}, headers=admin_headers
    )
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["price_cents"] == 3000
    assert data["is_available"] is False
    assert data["name"] == PRODUCT["name"]


def test_empty_update_is_rejected(client, admin_headers):
    created = _create(client, admin_headers)
    res = client.put(f"/api/v1/products/{created['id']}", json={}, headers=admin_headers)
    assert res.status_code == 422


def test_update_and_delete_unknown_product(client, admin_headers):
    assert client.put("/api/v1/products/missing", json={"name": "New name"}, headers=admin_headers).status_code == 404
    assert client.delete("/api/v1/products/missing", headers=admin_headers).status_code == 404


def test_delete(client, admin_headers, user_headers):
    created = _create(client, admin_headers)

    assert client.delete(f"/api/v1/products/{created['id']}", headers=user_headers).status_code == 403
    res = client.delete(f"/api/v1/products/{created['id']}", headers=admin_headers)
    assert res.status_code == 200
    assert client.get(f"/api/v1/products/{created['id']}").status_code == 404


def test_list_paginates(client, admin_headers):
    for i in range(3):
        _create(client, admin_headers, name=f"Dish {i}")

    res = client.get("/api/v1/products?page=2&limit=2")
    assert res.status_code == 200
    body = res.get_json()
    assert body["meta"] == {"page": 2, "limit": 2, "total": 3}
    assert len(body["data"]) == 1


def test_list_rejects_non_integer_paging(client):
    assert client.get("/api/v1/products?page=abc").status_code == 400
