from decimal import Decimal


def _create_category(client, name="Beverages", **fields):
    response = client.post("/categories", json={"name": name, **fields})
    assert response.status_code == 201, response.text
    return response.json()


def _create_supplier(client, name="Acme", **fields):
    response = client.post("/suppliers", json={"name": name, **fields})
    assert response.status_code == 201, response.text
    return response.json()


def _product_payload(category, supplier, **fields):
    payload = {
        "name": "Cola",
        "code": "C-001",
        "price": 1.50,
        "stock": 100,
        "category_id": category["id"],
        "supplier_id": supplier["id"],
    }
    payload.update(fields)
    return payload


def test_health_check(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Inventory API is running"}


def test_product_lifecycle(client):
    category = _create_category(client)
    supplier = _create_supplier(client, email="a@x.com")

    response = client.post("/products", json=_product_payload(category, supplier))
    assert response.status_code == 201
    product = response.json()
    assert Decimal(str(product["price"])) == Decimal("1.50")
    assert product["updated_at"] is None
    assert product["category"] == {"id": category["id"], "name": "Beverages"}

    duplicate = client.post("/products", json=_product_payload(category, supplier, name="Other"))
    assert duplicate.status_code == 422
    assert [e["field"] for e in duplicate.json()["errors"]] == ["code"]

    update = _product_payload(category, supplier, id=product["id"], stock=50)
    response = client.put(f"/products/{product['id']}", json=update)
    assert response.status_code == 200
    body = response.json()
    assert body["stock"] == 50
    assert body["updated_at"] is not None
    assert body["created_at"] == product["created_at"]

    assert client.delete(f"/products/{product['id']}").status_code == 204
    assert client.get(f"/products/{product['id']}").status_code == 404


def test_request_validation_uses_field_error_shape(client):
    category = _create_category(client)
    supplier = _create_supplier(client)

    response = client.post("/products", json=_product_payload(category, supplier, price=0, stock=-1))

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "validation_failed"
    assert {e["field"] for e in body["errors"]} == {"price", "stock"}


def test_update_with_mismatched_id_is_conflict(client):
    category = _create_category(client)

    response = client.put(
        f"/categories/{category['id']}",
        json={"id": category["id"] + 1, "name": "Renamed"},
    )

    assert response.status_code == 409
    assert response.json()["error"] == "id_mismatch"
    assert client.get(f"/categories/{category['id']}").json()["name"] == "Beverages"


def test_update_with_stale_version_is_conflict(client):
    category = _create_category(client)
    url = f"/categories/{category['id']}"

    first = client.put(url, json={"id": category["id"], "name": "Drinks", "version": 1})
    assert first.status_code == 200
    assert first.json()["version"] == 2

    stale = client.put(url, json={"id": category["id"], "name": "Sodas", "version": 1})
    assert stale.status_code == 409
    assert stale.json()["error"] == "concurrency_conflict"


def test_category_with_products_must_be_deactivated_instead(client):
    category = _create_category(client)
    supplier = _create_supplier(client)
    client.post("/products", json=_product_payload(category, supplier))

    response = client.delete(f"/categories/{category['id']}")
    assert response.status_code == 409
    assert response.json()["error"] == "dependents_exist"
    assert response.json()["count"] == 1

    toggled = client.post(f"/categories/{category['id']}/toggle-active")
    assert toggled.status_code == 200
    assert toggled.json()["active"] is False

    assert client.get("/categories").json() == []
    assert len(client.get("/categories", params={"active_only": False}).json()) == 1


def test_category_detail_includes_products(client):
    category = _create_category(client)
    supplier = _create_supplier(client)
    client.post("/products", json=_product_payload(category, supplier))

    detail = client.get(f"/categories/{category['id']}").json()

    assert [p["code"] for p in detail["products"]] == ["C-001"]


def test_delete_empty_supplier(client):
    supplier = _create_supplier(client)

    assert client.delete(f"/suppliers/{supplier['id']}").status_code == 204
    assert client.get(f"/suppliers/{supplier['id']}").status_code == 404


def test_duplicate_supplier_fields(client):
    _create_supplier(client, email="a@x.com", phone="555-0100")

    response = client.post(
        "/suppliers",
        json={"name": "Acme", "email": "a@x.com", "phone": "555-0100"},
    )

    assert response.status_code == 422
    assert [e["field"] for e in response.json()["errors"]] == ["name", "email", "phone"]


def test_supplier_views(client):
    category = _create_category(client)
    acme = _create_supplier(client, email="a@x.com")
    _create_supplier(client, name="Silent")
    client.post("/products", json=_product_payload(category, acme))

    contacts = client.get("/suppliers/contacts").json()
    assert [s["name"] for s in contacts] == ["Acme"]

    ranking = client.get("/suppliers/most-products").json()
    assert [(s["name"], s["product_count"]) for s in ranking] == [("Acme", 1), ("Silent", 0)]


def test_most_products_categories(client):
    busy = _create_category(client, "Busy")
    _create_category(client, "Quiet")
    supplier = _create_supplier(client)
    client.post("/products", json=_product_payload(busy, supplier))

    ranking = client.get("/categories/most-products").json()

    assert [(c["name"], c["product_count"]) for c in ranking] == [("Busy", 1), ("Quiet", 0)]


def test_low_stock_endpoint(client):
    category = _create_category(client)
    supplier = _create_supplier(client)
    for index, stock in enumerate([0, 3, 5, 10, 20]):
        client.post(
            "/products",
            json=_product_payload(category, supplier, code=f"S-{index}", stock=stock),
        )

    response = client.get("/products/low-stock", params={"threshold": 5})

    assert response.status_code == 200
    assert [p["stock"] for p in response.json()] == [0, 3, 5]


def test_product_options_endpoint(client):
    _create_category(client)
    _create_supplier(client)

    options = client.get("/products/options").json()

    assert [c["name"] for c in options["categories"]] == ["Beverages"]
    assert [s["name"] for s in options["suppliers"]] == ["Acme"]


def test_missing_entities_are_not_found(client):
    assert client.get("/categories/999").status_code == 404
    assert client.post("/suppliers/999/toggle-active").status_code == 404
    assert client.delete("/products/999").json()["error"] == "not_found"


def test_error_bodies_name_the_entity(client):
    missing = client.get("/products/999").json()
    assert missing["entity_type"] == "Product"
    assert missing["entity_id"] == 999

    category = _create_category(client)
    supplier = _create_supplier(client)
    client.post("/products", json=_product_payload(category, supplier))

    refused = client.delete(f"/categories/{category['id']}").json()
    assert refused["entity_type"] == "Category"
    assert refused["entity_id"] == category["id"]
    assert refused["count"] == 1


def test_negative_low_stock_threshold_returns_nothing(client):
    category = _create_category(client)
    supplier = _create_supplier(client)
    client.post("/products", json=_product_payload(category, supplier, stock=0))

    response = client.get("/products/low-stock", params={"threshold": -1})

    assert response.status_code == 200
    assert response.json() == []
