# tests/test_products_api.py
import pytest

from conftest import SEED_PRODUCTS, read_products, write_products

NEW_PRODUCT = {
    "title": "Desk Lamp",
    "description": "Warm LED lamp",
    "code": "LAMP-01",
    "price": 35,
    "stock": 12,
}


def test_list_all_products(client):
    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json() == SEED_PRODUCTS

def test_limit_returns_first_items_in_stored_order(client):
    r = client.get("/api/products", params={"limit": 2})
    assert r.status_code == 200
    assert [p["id"] for p in r.json()] == [1, 2]

@pytest.mark.parametrize("limit", ["0", "-3", "abc"])
def test_non_positive_or_bad_limit_means_no_limit(client, limit):
    r = client.get("/api/products", params={"limit": limit})
    assert r.status_code == 200
    assert len(r.json()) == 5

@pytest.mark.parametrize("limit", ["2abc", "2.5", " 2"])
def test_limit_uses_leading_integer(client, limit):
    r = client.get("/api/products", params={"limit": limit})
    assert [p["id"] for p in r.json()] == [1, 2]

def test_stored_records_are_returned_as_stored(client, products_file):
    stored = [
        {"id": 1, "title": "A", "price": "abc", "stock": "5"},
        {"id": 2, "title": "B", "price": "100", "stock": "5", "code": None},
        {"title": "no id"},
    ]
    write_products(products_file, stored)

    r = client.get("/api/products")
    assert r.status_code == 200
    assert r.json() == stored
    assert client.get("/api/products/1").json() == stored[0]
    assert client.get("/api/products/2").json() == stored[1]

def test_get_product_by_id(client):
    r = client.get("/api/products/3")
    assert r.status_code == 200
    assert r.json()["code"] == "P-003"

@pytest.mark.parametrize("pid", ["99", "03", "3.0", "abc"])
def test_get_product_not_found(client, pid):
    r = client.get(f"/api/products/{pid}")
    assert r.status_code == 404
    assert r.json() == {"detail": "Product not found"}

def test_add_product_assigns_next_id_and_defaults(client, products_file):
    r = client.post("/api/products", json=NEW_PRODUCT)
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == 6
    assert body["status"] is True
    assert body["category"] == ""
    assert body["thumbnails"] == []
    assert read_products(products_file)[-1] == body

def test_add_product_accepts_name_for_title(client):
    payload = dict(NEW_PRODUCT)
    payload["name"] = payload.pop("title")
    r = client.post("/api/products", json=payload)
    assert r.status_code == 200
    assert r.json()["title"] == "Desk Lamp"

def test_added_ids_are_unique_and_greater_than_existing(client):
    ids = []
    for n in range(3):
        r = client.post("/api/products", json={**NEW_PRODUCT, "code": f"LAMP-{n}"})
        ids.append(r.json()["id"])
    assert ids == [6, 7, 8]
    stored = [p["id"] for p in client.get("/api/products").json()]
    assert len(stored) == len(set(stored))

def test_add_skips_gaps_and_string_ids(client, products_file):
    write_products(products_file, [{"id": 2}, {"id": "9"}, {"id": 4}])
    r = client.post("/api/products", json=NEW_PRODUCT)
    assert r.json()["id"] == 10

@pytest.mark.parametrize("field", ["title", "description", "code", "price", "stock"])
def test_add_product_missing_required_field(client, products_file, field):
    before = products_file.read_text(encoding="utf-8")
    payload = {k: v for k, v in NEW_PRODUCT.items() if k != field}
    r = client.post("/api/products", json=payload)
    assert r.status_code == 400
    assert field in r.json()["detail"]
    assert products_file.read_text(encoding="utf-8") == before

def test_add_product_falsy_required_field(client, products_file):
    before = products_file.read_text(encoding="utf-8")
    r = client.post("/api/products", json={**NEW_PRODUCT, "stock": 0})
    assert r.status_code == 400
    assert products_file.read_text(encoding="utf-8") == before

def test_malformed_body_is_bad_request(client):
    r = client.post("/api/products", content="not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400

def test_update_merges_fields_and_sets_string_id(client, products_file):
    r = client.put("/api/products/3", json={"price": 50})
    assert r.status_code == 200
    expected = {**SEED_PRODUCTS[2], "price": 50, "id": "3"}
    assert r.json() == expected
    assert read_products(products_file)[2] == expected

def test_update_keeps_extra_fields(client):
    r = client.put("/api/products/1", json={"color": "red"})
    assert r.status_code == 200
    assert r.json()["color"] == "red"
    assert r.json()["title"] == "Product 1"

def test_updated_product_is_still_found(client):
    client.put("/api/products/2", json={"stock": 1})
    r = client.get("/api/products/2")
    assert r.status_code == 200
    assert r.json()["id"] == "2"
    assert r.json()["stock"] == 1

def test_update_not_found(client, products_file):
    before = products_file.read_text(encoding="utf-8")
    r = client.put("/api/products/99", json={"price": 1})
    assert r.status_code == 404
    assert products_file.read_text(encoding="utf-8") == before

def test_missing_document_is_server_error(client, products_file):
    products_file.unlink()
    r = client.get("/api/products")
    assert r.status_code == 500
    assert r.json() == {"detail": "Error reading products"}

def test_malformed_document_is_server_error(client, products_file):
    products_file.write_text("{broken", encoding="utf-8")
    assert client.get("/api/products/1").status_code == 500
    assert client.post("/api/products", json=NEW_PRODUCT).status_code == 500

def test_home_page_lists_products(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "text/html" in r.headers["content-type"]
    for p in SEED_PRODUCTS:
        assert p["title"] in r.text

def test_realtime_page_subscribes(client):
    r = client.get("/realtimeproducts")
    assert r.status_code == 200
    assert "Product 5" in r.text
    assert "/ws" in r.text

def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}
