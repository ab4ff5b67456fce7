import logging
from typing import Any, Dict, List

from .errors import NetworkError

logger = logging.getLogger("storefront_client.catalog")


class ProductCatalog:
    """Product listing for storefront views, fetched once."""

    def __init__(self, client):
        self.client = client
        self.products: List[Dict[str, Any]] = []
        self.loading = True
        self._loaded = False

    async def load(self) -> List[Dict[str, Any]]:
        if self._loaded:
            return self.products
        self._loaded = True
        try:
            self.products = await self.client.list_products()
        except NetworkError as e:
            logger.error("Failed to fetch products: %s", e.message)
        finally:
            self.loading = False
        return self.products

    def featured(self) -> List[Dict[str, Any]]:
        return [p for p in self.products if p.get("isFeatured")]

    def in_category(self, category: str) -> List[Dict[str, Any]]:
        return [p for p in self.products if p.get("category") == category]
