# tests/test_app_boundary.py
import asyncio
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient
from storefront import main
from storefront.errors import StoreError

client = TestClient(main.app)

def test_request_without_origin_is_allowed():
    r = client.get("/api/products")
    assert r.status_code == 200

def test_allowed_origin_gets_cors_headers():
    origin = "http://localhost:8080"
    r = client.get("/api/products", headers={"Origin": origin})
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == origin

def test_preflight_from_allowed_origin():
    origin = "https://vinayak-sweet.onrender.com"
    r = client.options("/api/products", headers={
        "Origin": origin,
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "Content-Type",
    })
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == origin

def test_unknown_origin_is_rejected():
    r = client.get("/api/products", headers={"Origin": "https://evil.example"})
    assert r.status_code == 403
    assert r.json() == {"error": "Not allowed by CORS"}

def test_oversized_body_is_rejected(monkeypatch):
    monkeypatch.setattr(main, "settings", replace(main.settings, max_body_bytes=10))
    r = client.post("/api/products", json={"name": "Ladoo", "price": 120, "category": "sweets"})
    assert r.status_code == 413
    assert "error" in r.json()

class UnreachableStore:
    def connect(self):
        raise StoreError("cannot open store")

def test_store_connection_failure_at_startup_is_fatal(monkeypatch):
    monkeypatch.setattr(main, "db", UnreachableStore())
    with pytest.raises(SystemExit) as exc:
        asyncio.run(main.connect_store())
    assert exc.value.code == 1

def test_oversized_chunked_body_is_rejected(monkeypatch):
    monkeypatch.setattr(main, "settings", replace(main.settings, max_body_bytes=10))
    chunks = iter([b'{"name": "Ladoo", ', b'"price": 120, "category": "sweets"}'])
    r = client.post("/api/products", content=chunks, headers={"Content-Type": "application/json"})
    assert "content-length" not in r.request.headers
    assert r.status_code == 413
    assert r.json() == {"error": "Request body too large"}

def test_too_large_response_keeps_cors_headers(monkeypatch):
    monkeypatch.setattr(main, "settings", replace(main.settings, max_body_bytes=10))
    origin = "http://localhost:8080"
    r = client.post("/api/products", json={"name": "Ladoo", "price": 120, "category": "sweets"},
                    headers={"Origin": origin})
    assert r.status_code == 413
    assert r.headers["access-control-allow-origin"] == origin

class ExplodingProducts:
    def list(self):
        raise KeyError("boom")

def test_unexpected_error_is_json_with_cors_headers(monkeypatch):
    monkeypatch.setattr(main, "product_store", ExplodingProducts())
    origin = "http://localhost:8080"
    r = client.get("/api/products", headers={"Origin": origin})
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
    assert r.headers["access-control-allow-origin"] == origin

def test_unknown_route_uses_error_body():
    r = client.get("/api/nope")
    assert r.status_code == 404
    assert "error" in r.json()
