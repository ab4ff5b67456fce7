import logging
from typing import Dict, Any, List, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .core import ProductIn, OrderIn, _make_product_dict, _make_order_dict
from .database import PRODUCTS, ORDERS
from .errors import StoreError, ValidationError

logger = logging.getLogger("storefront.services")

# This file contains the product and order store logic behind the API routes.

REQUIRED_PRODUCT_FIELDS = ("name", "price", "category")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _parse(model, payload: Dict[str, Any]) -> BaseModel:
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "body"
        raise ValidationError(f"{field}: {first['msg']}")


def _created_at(doc: Dict[str, Any]) -> str:
    return doc.get("createdAt") or ""


class ProductStore:
    def __init__(self, db):
        self.db = db

    def list(self) -> List[Dict[str, Any]]:
        try:
            return self.db.find(PRODUCTS)
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(str(e) or "Internal server error")

    def create(self, candidate: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate and persist a product candidate.

        name, price and category must be present; price and stock are
        coerced to numbers before the record is stored.
        """
        if not isinstance(candidate, dict) or any(_is_blank(candidate.get(f)) for f in REQUIRED_PRODUCT_FIELDS):
            raise ValidationError("Name, price, and category are required.")

        product = _parse(ProductIn, {k: v for k, v in candidate.items() if v is not None})
        try:
            return self.db.insert(PRODUCTS, _make_product_dict(product))
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(str(e) or "Internal server error")


class OrderStore:
    def __init__(self, db, recent_limit: int = 50):
        self.db = db
        self.recent_limit = recent_limit

    def list_recent(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        limit = limit or self.recent_limit
        try:
            orders = self.db.find(ORDERS)
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(str(e) or "Internal server error")
        orders.sort(key=_created_at, reverse=True)
        return orders[:limit]

    def create(self, candidate: Dict[str, Any]) -> Dict[str, Any]:
        if not isinstance(candidate, dict):
            raise ValidationError("Order body must be a JSON object.")
        order = _parse(OrderIn, candidate)
        try:
            return self.db.insert(ORDERS, _make_order_dict(order))
        except StoreError:
            raise
        except Exception as e:
            raise StoreError(str(e) or "Internal server error")
