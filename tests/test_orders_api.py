# tests/test_orders_api.py
from fastapi.testclient import TestClient
from storefront import main
from storefront.database import ORDERS

client = TestClient(main.app)

def reset():
    main.db.clear()

def _order(email="asha@example.com", **extra):
    body = {
        "name": "Asha",
        "email": email,
        "phone": "9800000000",
        "address": "12 MG Road",
        "paymentMethod": "cod",
        "items": [
            {"productId": "p1", "name": "Ladoo", "price": 120, "quantity": 2},
            {"productId": "p2", "name": "Bhujia", "price": 80, "quantity": 1},
        ],
    }
    body.update(extra)
    return body

def _stored(created_at, email="x@example.com", total=100):
    return main.db.insert(ORDERS, {
        "name": "X", "email": email, "phone": "1", "address": None, "paymentMethod": "upi",
        "total": total, "status": "pending", "createdAt": created_at,
        "items": [{"productId": "p1", "name": "Ladoo", "price": total, "quantity": 1}],
    })

def test_recent_orders_empty():
    reset()
    r = client.get("/api/orders/recent")
    assert r.status_code == 200
    assert r.json() == []

def test_place_order_computes_total_and_starts_pending():
    reset()
    r = client.post("/api/orders", json=_order())
    assert r.status_code == 201
    order = r.json()["order"]
    assert order["id"]
    assert order["total"] == 320
    assert order["status"] == "pending"
    assert order["createdAt"]
    assert [it["name"] for it in order["items"]] == ["Ladoo", "Bhujia"]

    recent = client.get("/api/orders/recent").json()
    assert [o["id"] for o in recent] == [order["id"]]

def test_place_order_validation():
    reset()
    r = client.post("/api/orders", json=_order(items=[]))
    assert r.status_code == 400
    assert "error" in r.json()

    bad_qty = _order(items=[{"productId": "p1", "name": "Ladoo", "price": 120, "quantity": 0}])
    assert client.post("/api/orders", json=bad_qty).status_code == 400

    no_email = _order()
    del no_email["email"]
    assert client.post("/api/orders", json=no_email).status_code == 400

    assert client.get("/api/orders/recent").json() == []

def test_recent_orders_newest_first_and_bounded():
    reset()
    old = _stored("2026-01-01T10:00:00+00:00")
    new = _stored("2026-03-01T10:00:00+00:00")
    mid = _stored("2026-02-01T10:00:00+00:00")

    r = client.get("/api/orders/recent")
    assert [o["id"] for o in r.json()] == [new["id"], mid["id"], old["id"]]

    r = client.get("/api/orders/recent", params={"limit": 2})
    assert [o["id"] for o in r.json()] == [new["id"], mid["id"]]

def test_recent_orders_rejects_bad_limit():
    reset()
    r = client.get("/api/orders/recent", params={"limit": 0})
    assert r.status_code == 400
    assert "error" in r.json()

def test_place_order_rejects_non_finite_item_price():
    reset()
    raw = (
        '{"name": "Asha", "email": "asha@example.com", "phone": "1", "paymentMethod": "cod",'
        ' "items": [{"productId": "p1", "name": "Ladoo", "price": 1e999, "quantity": 1}]}'
    )
    r = client.post("/api/orders", content=raw, headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert "price" in r.json()["error"]
    assert client.get("/api/orders/recent").json() == []
