from __future__ import annotations


def _register(client, email: str = "maker@officina.it") -> str:
    resp = client.post(
        "/suppliers/register",
        json={
            "email": email,
            "password": "s3cret",
            "confirmPassword": "s3cret",
            "firstName": "Giulia",
            "lastName": "Bianchi",
            "birthYear": 1990,
        },
    )
    assert resp.status_code == 200
    return resp.json()["data"]["token"]


def test_health_endpoint(client):
    resp = client.get("/health", headers={"x-trace-id": "trace_abc"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"] == {"ok": True}
    assert body["meta"]["trace_id"] == "trace_abc"
    assert resp.headers["x-trace-id"] == "trace_abc"
    assert resp.headers["x-request-id"].startswith("req_")


def test_register_then_me_returns_profile(client):
    token = _register(client)
    resp = client.get("/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["user"]["email"] == "maker@officina.it"
    assert data["profile"]["displayName"] == "Giulia Bianchi"


def test_register_duplicate_and_invalid_payloads(client):
    _register(client)
    resp = client.post(
        "/suppliers/register",
        json={
            "email": "MAKER@officina.it",
            "password": "x",
            "confirmPassword": "x",
            "firstName": "A",
            "lastName": "B",
            "birthYear": "1990",
        },
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "REGISTER_EMAIL_TAKEN"

    resp = client.post("/suppliers/register", json={"email": "new@x.it"})
    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "missing field"


def test_protected_routes_require_bearer_token(client):
    for method, path in [
        ("get", "/me"),
        ("get", "/suppliers/tariffs"),
        ("post", "/suppliers/update"),
        ("get", "/catalog/materials"),
        ("get", "/shipping/carriers"),
        ("post", "/shipping/pickup"),
    ]:
        resp = getattr(client, method)(path)
        assert resp.status_code == 401, path
        assert resp.json()["error"]["code"] == "AUTH_UNAUTHORIZED"


def test_signup_and_login(client):
    resp = client.post("/auth/signup", json={"email": "buyer@x.it", "password": "pw"})
    assert resp.status_code == 200
    resp = client.post("/auth/login", json={"email": "buyer@x.it", "password": "pw"})
    assert resp.status_code == 200
    assert resp.json()["data"]["token"]

    resp = client.post("/auth/login", json={"email": "buyer@x.it", "password": "bad"})
    assert resp.status_code == 401


def test_tariffs_and_public_listing(client, auth_headers):
    headers = auth_headers("lab@x.it")
    resp = client.post(
        "/suppliers/update",
        headers=headers,
        json={"company": "Laser Lab", "processes": ["Laser"], "address": {"city": "Torino"}},
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["supplier"]["email"] == "lab@x.it"

    resp = client.post(
        "/suppliers/tariffs",
        headers=headers,
        json={"materials": [{"key": "PMMA", "name": "Acrilico", "unit": "€/cm²", "ratePerMin": "20", "myPrice": -3}]},
    )
    assert resp.status_code == 200
    items = resp.json()["data"]["items"]
    assert items[0]["ratePerMin"] == 20
    assert items[0]["myPrice"] == 0

    resp = client.get("/suppliers/tariffs", headers=headers)
    assert resp.json()["data"]["total"] == 1

    resp = client.post("/suppliers/tariffs", headers=headers, json={"materials": "PLA"})
    assert resp.status_code == 400

    resp = client.get("/public/suppliers")
    assert resp.status_code == 200
    listed = resp.json()["data"]["items"]
    assert len(listed) == 1
    assert listed[0]["name"] == "Laser Lab"
    assert listed[0]["settings"]["pricePerMinute"] == 20
    assert listed[0]["settings"]["shipping"]["city"] == "Torino"


def test_hidden_supplier_is_not_listed(client, auth_headers):
    client.post("/suppliers/update", headers=auth_headers("ghost@x.it"), json={"visible": False})
    resp = client.get("/public/suppliers")
    assert resp.json()["data"] == {"items": [], "total": 0}


def test_catalog_and_carriers(client, auth_headers):
    resp = client.get("/public/catalog/materials", params={"process": "CNC", "q": "allum"})
    assert resp.status_code == 200
    keys = [m["key"] for m in resp.json()["data"]["items"]]
    assert keys == ["Al6061", "Al7075"]

    resp = client.get("/catalog/materials", headers=auth_headers("lab@x.it"))
    assert resp.json()["data"]["total"] == 6

    resp = client.get("/public/catalog/materials", params={"process": "Forgia"})
    assert resp.json()["data"]["items"] == []

    resp = client.get("/public/shipping/carriers")
    assert resp.json()["data"]["total"] == 7


def test_pickup_requires_core_fields(client, auth_headers):
    headers = auth_headers("lab@x.it")
    resp = client.post("/shipping/pickup", headers=headers, json={"carrierId": "brt", "date": "2026-11-02"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "PICKUP_INCOMPLETE"

    resp = client.post(
        "/shipping/pickup",
        headers=headers,
        json={"carrierId": "brt", "date": "2026-11-02", "timeFrom": "09:00", "timeTo": "12:00"},
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["status"] == "requested"
    assert data["pickupId"].startswith("pk_")


def test_order_endpoints(client):
    resp = client.post("/orders", json={"items": [{"name": "Part"}], "total_cents": 1299})
    assert resp.status_code == 201
    order_id = resp.json()["data"]["id"]

    resp = client.post("/api/create-payment-intent", json={"amount_cents": 1299, "order_id": order_id})
    assert resp.status_code == 200
    assert resp.json()["data"]["mode"] == "mock"

    resp = client.get(f"/orders/{order_id}")
    assert resp.json()["data"]["status"] == "awaiting_payment"

    resp = client.post(f"/orders/{order_id}/paid", json={"payment_intent_id": "pi_123"})
    assert resp.status_code == 200
    assert resp.json()["data"]["payment"]["intentId"] == "pi_123"

    resp = client.post(f"/orders/{order_id}/awaiting-bank")
    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "awaiting_bank"


def test_order_errors(client):
    resp = client.post("/orders", json={"total_cents": 1299})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "ORDER_MISSING_FIELD"

    resp = client.get("/orders/ord_missing")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "ORDER_NOT_FOUND"

    resp = client.post("/orders/ord_missing/paid")
    assert resp.status_code == 404

    resp = client.post("/api/create-payment-intent", json={"amount_cents": 0})
    assert resp.status_code == 400


def test_unknown_route_and_malformed_body(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "REQ_NOT_FOUND"

    resp = client.post("/auth/login", content=b"{broken", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "REQ_VALIDATION_FAILED"


def test_profile_update_without_body(client, auth_headers):
    resp = client.post("/suppliers/update", headers=auth_headers("bare@x.it"))
    assert resp.status_code == 200
    supplier = resp.json()["data"]["supplier"]
    assert supplier["email"] == "bare@x.it"
    assert supplier["visible"] is True

    resp = client.get("/public/suppliers")
    assert [s["email"] for s in resp.json()["data"]["items"]] == ["bare@x.it"]
