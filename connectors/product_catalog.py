"""
Module: connectors.product_catalog

In-memory product catalog store for the restaurant menu. Supplies defaults
that prefill a pricing request; the advisor itself never reads it.
"""

from typing import Any
import asyncio
import copy

from models.enums import SpoilageRisk
from models.pricing import Product


def default_menu() -> list[Product]:
    return [
        Product("p1", "Chicken Momo", 250, "Momo", 0, True, 10, SpoilageRisk.HIGH, False),
        Product("p2", "Veg Chowmein", 180, "Noodles", 0, True, 8, SpoilageRisk.MEDIUM, False),
        Product("p3", "Vegetable Thukpa", 200, "Soups", 0, True, 7, SpoilageRisk.HIGH, False),
        Product("p4", "Juju Dhau", 150, "Desserts", 25, True, 9, SpoilageRisk.HIGH, True),
        Product("p5", "Aloo Sandheko", 120, "Appetizers", 0, True, 6, SpoilageRisk.MEDIUM, False),
        Product("p6", "Nepali Thali Set", 550, "Main Course", 0, True, 8, SpoilageRisk.LOW, False),
        Product("p7", "Masala Tea", 80, "Beverages", 100, False, 9, SpoilageRisk.LOW, True),
    ]


class InMemoryProductCatalog:
    """
    Product catalog connector backed by a dict keyed on product_id.
    """

    def __init__(self, products: list[Product] | None = None):
        menu = default_menu() if products is None else products
        self._products: dict[str, Product] = {p.product_id: p for p in menu}

    async def get_product(self, product_id: str) -> Product | None:
        """Get a copy of a product by ID."""
        await asyncio.sleep(0)
        product = self._products.get(product_id)
        return copy.copy(product) if product else None

    async def list_products(self, available_only: bool = False) -> list[Product]:
        await asyncio.sleep(0)
        products = sorted(self._products.values(), key=lambda p: p.product_id)
        if available_only:
            products = [p for p in products if p.available]
        return [copy.copy(p) for p in products]

    async def prefill_request(self, product_id: str) -> dict[str, Any] | None:
        """
        Wire-shaped pricing request defaults for a product, or None if the
        product is unknown. Values are passed through unvalidated.
        """
        product = await self.get_product(product_id)
        if product is None:
            return None
        return {
            "productName": product.name,
            "currentStockQty": product.stock_qty,
            "popularityScore": product.popularity_score,
            "spoilageRisk": product.spoilage_risk.value,
            "currentPrice": product.price,
        }
