"""In-memory fake store client for dashboard tests.

Implements the async client surface used by DashboardState and
ProductCatalog. Order reads snapshot the server data when the request is
issued, and can be held open with asyncio.Event gates to reorder responses.
"""

import asyncio
from typing import Any, Dict, List, Optional

from storefront_client.errors import NetworkError


def product(pid: str, name: str = "Ladoo", stock: int = 10, **extra) -> Dict[str, Any]:
    return {"id": pid, "name": name, "price": 100.0, "category": "sweets", "stock": stock,
            "isFeatured": False, "image": "", "description": "", **extra}


def order(oid: str, email: str = "a@x.com", total: float = 100, status: str = "pending") -> Dict[str, Any]:
    return {"_id": oid, "name": "A", "email": email, "phone": "1", "paymentMethod": "cod",
            "total": total, "status": status, "createdAt": "2026-01-01T00:00:00Z",
            "items": [{"productId": "p1", "name": "Ladoo", "price": total, "quantity": 1}]}


class FakeStoreClient:

    def __init__(self, products: Optional[List[Dict[str, Any]]] = None,
                 orders: Optional[List[Dict[str, Any]]] = None) -> None:
        self.products = list(products or [])
        self.orders = list(orders or [])
        self.product_error: Optional[NetworkError] = None
        self.order_error: Optional[NetworkError] = None
        self.create_error: Optional[NetworkError] = None
        self.order_gates: List[asyncio.Event] = []
        self.product_calls = 0
        self.order_calls = 0
        self.created: List[Dict[str, Any]] = []

    async def list_products(self) -> List[Dict[str, Any]]:
        self.product_calls += 1
        if self.product_error:
            raise self.product_error
        return [dict(p) for p in self.products]

    async def list_recent_orders(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        self.order_calls += 1
        snapshot = [dict(o) for o in self.orders]
        if self.order_gates:
            gate = self.order_gates.pop(0)
            await gate.wait()
        if self.order_error:
            raise self.order_error
        return snapshot

    async def create_product(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self.create_error:
            raise self.create_error
        self.created.append(payload)
        record = {**payload, "id": f"new{len(self.created)}"}
        self.products.append(record)
        return record
