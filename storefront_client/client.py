# storefront_client/client.py
import logging
from typing import Any, Dict, List, Optional

import httpx
import requests
from rich import print

from .config import ClientSettings, resolve_base_url
from .errors import NetworkError

logger = logging.getLogger("storefront_client.client")

# ---------------------------
# Response helpers
# ---------------------------
def read_json_safe(resp: Any) -> Any:
    """Decode a response body as JSON, falling back to the raw text (or None)."""
    try:
        return resp.json()
    except ValueError:
        return resp.text or None


def error_message(data: Any, default: str) -> str:
    if isinstance(data, dict):
        return data.get("error") or data.get("message") or default
    return default


def unwrap_product(data: Any) -> Dict[str, Any]:
    """
    The create endpoint answers {"message", "product"}; older deployments
    answered with the bare record. Both come out as the record.
    """
    if isinstance(data, dict) and isinstance(data.get("product"), dict):
        return data["product"]
    if isinstance(data, dict) and data:
        return data
    raise NetworkError("Malformed product in response")


def unwrap_order(data: Any) -> Dict[str, Any]:
    if isinstance(data, dict) and isinstance(data.get("order"), dict):
        return data["order"]
    if isinstance(data, dict) and data:
        return data
    raise NetworkError("Malformed order in response")


def record_id(record: Dict[str, Any]) -> Optional[str]:
    return record.get("_id") or record.get("id")


def _as_list(data: Any, what: str) -> List[Dict[str, Any]]:
    if not isinstance(data, list):
        raise NetworkError(f"Malformed {what} list in response")
    return data


# ---------------------------
# Sync client (requests)
# ---------------------------
class StoreClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        cfg = ClientSettings.from_env()
        self.base_url = resolve_base_url(base_url) if base_url is not None else cfg.api_url
        self.timeout = timeout if timeout is not None else cfg.request_timeout
        self.session = requests.Session()

    def _request(self, method: str, path: str, default_error: str, **kwargs) -> Any:
        try:
            r = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(str(e) or default_error)
        data = read_json_safe(r)
        if not r.ok:
            raise NetworkError(error_message(data, default_error), status_code=r.status_code)
        return data

    def list_products(self) -> List[Dict[str, Any]]:
        return _as_list(self._request("GET", "/api/products", "Failed to fetch products"), "product")

    def create_product(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = self._request("POST", "/api/products", "Failed to add product", json=payload)
        return unwrap_product(data)

    def list_recent_orders(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limit} if limit else None
        return _as_list(self._request("GET", "/api/orders/recent", "Failed to fetch orders", params=params), "order")

    def place_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = self._request("POST", "/api/orders", "Failed to place order", json=payload)
        return unwrap_order(data)


# ---------------------------
# Async client (httpx)
# ---------------------------
class AsyncStoreClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        cfg = ClientSettings.from_env()
        self.base_url = resolve_base_url(base_url) if base_url is not None else cfg.api_url
        self.timeout = timeout if timeout is not None else cfg.request_timeout
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=transport)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, default_error: str, **kwargs) -> Any:
        try:
            r = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(str(e) or default_error)
        data = read_json_safe(r)
        if not r.is_success:
            raise NetworkError(error_message(data, default_error), status_code=r.status_code)
        return data

    async def list_products(self) -> List[Dict[str, Any]]:
        return _as_list(await self._request("GET", "/api/products", "Failed to fetch products"), "product")

    async def create_product(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._request("POST", "/api/products", "Failed to add product", json=payload)
        return unwrap_product(data)

    async def list_recent_orders(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"limit": limit} if limit else None
        return _as_list(await self._request("GET", "/api/orders/recent", "Failed to fetch orders", params=params), "order")

    async def place_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = await self._request("POST", "/api/orders", "Failed to place order", json=payload)
        return unwrap_order(data)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Storefront API client")
    parser.add_argument("--base-url", default=None, help="Backend origin (defaults to API_URL)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-products", help="List all products")

    ap = subparsers.add_parser("add-product", help="Create a product")
    ap.add_argument("--name", required=True, help="Product name")
    ap.add_argument("--price", type=float, required=True, help="Price in rupees")
    ap.add_argument("--category", required=True, help="sweets, namkeens, festival or other")
    ap.add_argument("--stock", type=int, default=0, help="Units in stock")
    ap.add_argument("--description", default="", help="Short description")
    ap.add_argument("--featured", action="store_true", help="Show on the storefront front page")

    ro = subparsers.add_parser("recent-orders", help="List recent orders")
    ro.add_argument("--limit", type=int, default=None)

    args = parser.parse_args()
    c = StoreClient(base_url=args.base_url)

    try:
        if args.command == "list-products":
            print(c.list_products())
        elif args.command == "add-product":
            print(c.create_product({
                "name": args.name, "price": args.price, "category": args.category,
                "stock": args.stock, "description": args.description, "isFeatured": args.featured,
            }))
        elif args.command == "recent-orders":
            print(c.list_recent_orders(args.limit))
    except NetworkError as e:
        print(f"[red]Error:[/red] {e.message}")
        raise SystemExit(1)
