#!/usr/bin/env python
import asyncio

from storefront_client.client import AsyncStoreClient, StoreClient
from storefront_client.dashboard import DashboardState


def seed(c: StoreClient):
    # -----------------------------
    # Register products
    # -----------------------------
    print("Adding products...")
    ladoo = c.create_product({"name": "Motichoor Ladoo", "price": 120, "category": "sweets", "stock": 40, "isFeatured": True})
    bhujia = c.create_product({"name": "Aloo Bhujia", "price": 80, "category": "namkeens", "stock": 25})
    print(ladoo)
    print(bhujia)

    # -----------------------------
    # Place a couple of orders
    # -----------------------------
    print("\nPlacing orders...")
    for email, qty in (("asha@example.com", 2), ("asha@example.com", 1), ("ravi@example.com", 3)):
        order = c.place_order({
            "name": email.split("@")[0].title(),
            "email": email,
            "phone": "9800000000",
            "paymentMethod": "cod",
            "items": [{"productId": ladoo["id"], "name": ladoo["name"], "price": ladoo["price"], "quantity": qty}],
        })
        print(order["id"], order["total"])


async def snapshot(base_url: str):
    async with AsyncStoreClient(base_url=base_url) as client:
        state = DashboardState(client)
        await state.activate()
        state.deactivate()
    print("\nDashboard:", state.stats)


def main():
    c = StoreClient()
    seed(c)
    asyncio.run(snapshot(c.base_url))


if __name__ == "__main__":
    main()
