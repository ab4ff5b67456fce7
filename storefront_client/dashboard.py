import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from .client import record_id
from .errors import NetworkError
from .polling import PollingRefresher

logger = logging.getLogger("storefront_client.dashboard")

ORDER_STATUSES = ("pending", "processing", "completed", "cancelled")
PRODUCT_CATEGORIES = ("sweets", "namkeens", "festival", "other")

# notify(title, description, destructive)
Notifier = Callable[[str, str, bool], None]


def _log_notify(title: str, description: str, destructive: bool = False) -> None:
    level = logging.ERROR if destructive else logging.INFO
    logger.log(level, "%s: %s", title, description)


@dataclass(frozen=True)
class DashboardStats:
    total_orders: int
    total_products: int
    total_customers: int
    revenue: float


def compute_stats(products: List[Dict[str, Any]], orders: List[Dict[str, Any]]) -> DashboardStats:
    # cancelled orders still count toward revenue
    return DashboardStats(
        total_orders=len(orders),
        total_products=len(products),
        total_customers=len({o.get("email") for o in orders}),
        revenue=sum(o.get("total") or 0 for o in orders),
    )


def _blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def _parse_stock(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("Stock must be a whole number.")
    try:
        stock = int(str(value).strip())
    except ValueError:
        raise ValueError("Stock must be a whole number.")
    if stock < 0:
        raise ValueError("Stock cannot be negative.")
    return stock


def build_product_payload(form: Dict[str, Any]) -> Dict[str, Any]:
    """Turn add-product form fields into the create request body."""
    if _blank(form.get("name")) or _blank(form.get("price")) or _blank(form.get("category")):
        raise ValueError("Name, price and category are required.")
    try:
        price = float(str(form["price"]).strip())
    except ValueError:
        raise ValueError("Price must be a number.")
    if not math.isfinite(price):
        raise ValueError("Price must be a number.")
    if price < 0:
        raise ValueError("Price cannot be negative.")

    stock = 0 if _blank(form.get("stock")) else _parse_stock(form["stock"])
    return {
        "name": str(form["name"]).strip(),
        "description": str(form.get("description") or "").strip(),
        "price": price,
        "category": form["category"],
        "stock": stock,
        "image": form.get("image") or "",
        "isFeatured": bool(form.get("isFeatured")),
    }


class DashboardState:
    """
    Owner dashboard state: products, orders and the edits made to them.

    Stock edits and order status changes are applied locally only; the next
    orders refresh replaces local order statuses with the server's.
    """

    def __init__(self, client, notify: Optional[Notifier] = None, poll_interval: float = 15.0):
        self.client = client
        self.notify = notify or _log_notify
        self.refresher = PollingRefresher(self.fetch_orders, interval=poll_interval)

        self.products: List[Dict[str, Any]] = []
        self.orders: List[Dict[str, Any]] = []
        self.loading = False
        self.saving = False
        self.message = ""
        self.editing_stock: Optional[str] = None
        self.selected_order: Optional[Dict[str, Any]] = None
        self.active = False

        self._issued = {"products": 0, "orders": 0}
        self._applied = {"products": 0, "orders": 0}
        self._floor = {"products": 0, "orders": 0}

    @property
    def stats(self) -> DashboardStats:
        return compute_stats(self.products, self.orders)

    # ---------------------------
    # Lifetime
    # ---------------------------
    async def activate(self) -> None:
        self.products, self.orders = [], []
        self.editing_stock = None
        self.selected_order = None
        self.message = ""
        self._floor = dict(self._issued)
        self.active = True
        self.refresher.start()
        await asyncio.gather(self.fetch_products(), self.fetch_orders())

    def deactivate(self) -> None:
        self.active = False
        self.refresher.stop()
        self.editing_stock = None

    # ---------------------------
    # Fetchers
    # ---------------------------
    def _issue(self, kind: str) -> int:
        self._issued[kind] += 1
        return self._issued[kind]

    def _accept(self, kind: str, seq: int) -> bool:
        if not self.active:
            logger.debug("Dropping %s response #%d after deactivation", kind, seq)
            return False
        if seq <= self._floor[kind] or seq < self._applied[kind]:
            logger.debug("Dropping stale %s response #%d", kind, seq)
            return False
        self._applied[kind] = seq
        return True

    async def fetch_products(self) -> None:
        seq = self._issue("products")
        self.loading = True
        try:
            products = await self.client.list_products()
        except NetworkError as e:
            logger.error("Failed to fetch products: %s", e.message)
            if self.active:
                self.notify("Failed to fetch products", e.message, True)
        else:
            if self._accept("products", seq):
                self.products = list(products)
        finally:
            if seq == self._issued["products"]:
                self.loading = False

    async def fetch_orders(self) -> None:
        seq = self._issue("orders")
        try:
            orders = await self.client.list_recent_orders()
        except NetworkError as e:
            # secondary panel: log only
            logger.error("Failed to fetch orders: %s", e.message)
            return
        if self._accept("orders", seq):
            self.orders = list(orders)
            if self.selected_order is not None:
                self.selected_order = self.find_order(record_id(self.selected_order))

    # ---------------------------
    # Actions
    # ---------------------------
    async def add_product(self, form: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        self.message = ""
        self.saving = True
        try:
            payload = build_product_payload(form)
            created = await self.client.create_product(payload)
        except (ValueError, NetworkError) as e:
            reason = getattr(e, "message", None) or str(e)
            self.message = f"Error: {reason}"
            self.notify("Add product failed", reason, True)
            return None
        finally:
            self.saving = False

        if self.active:
            self.products = self.products + [created]
        self.message = "Product added successfully!"
        self.notify("Product added", f"{payload['name']} has been created.", False)
        return created

    def change_order_status_local(self, order_id: str, status: str) -> bool:
        if status not in ORDER_STATUSES:
            raise ValueError(f"unknown order status: {status}")
        found = False
        updated = []
        for o in self.orders:
            if record_id(o) == order_id:
                o = {**o, "status": status}
                found = True
            updated.append(o)
        self.orders = updated
        if found and self.selected_order is not None and record_id(self.selected_order) == order_id:
            self.selected_order = self.find_order(order_id)
        return found

    def begin_stock_edit(self, product_id: str) -> None:
        self.editing_stock = product_id

    def cancel_stock_edit(self) -> None:
        self.editing_stock = None

    def commit_stock_edit(self, product_id: str, value: Any) -> bool:
        """Commit the inline stock field (blur or Enter); always closes the edit slot."""
        try:
            stock = _parse_stock(value)
        except ValueError:
            self.editing_stock = None
            raise
        return self.update_stock_inline(product_id, stock)

    def update_stock_inline(self, product_id: str, stock: int) -> bool:
        stock = _parse_stock(stock)
        found = False
        updated = []
        for p in self.products:
            if record_id(p) == product_id:
                p = {**p, "stock": stock}
                found = True
            updated.append(p)
        self.products = updated
        self.editing_stock = None
        return found

    # ---------------------------
    # Lookups
    # ---------------------------
    def find_order(self, order_id: Optional[str]) -> Optional[Dict[str, Any]]:
        for o in self.orders:
            if record_id(o) == order_id:
                return o
        return None

    def select_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        self.selected_order = self.find_order(order_id)
        return self.selected_order

    def clear_selected_order(self) -> None:
        self.selected_order = None
