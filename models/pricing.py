"""
Pricing-related data models for the restaurant pricing advisor.
Includes the request/response pair of the advisory flow and the catalog
product record used to prefill a request.
"""

import json
from dataclasses import dataclass
from typing import Any

from .enums import PriceDirection, SpoilageRisk

# Prices closer than this are treated as unchanged.
PRICE_TOLERANCE = 0.005


@dataclass(frozen=True)
class PricingRequest:
    """
    Signals for one product, built per form submission and never stored.
    """

    product_name: str
    current_stock_qty: int
    popularity_score: float
    spoilage_risk: SpoilageRisk
    current_price: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "productName": self.product_name,
            "currentStockQty": self.current_stock_qty,
            "popularityScore": self.popularity_score,
            "spoilageRisk": self.spoilage_risk.value,
            "currentPrice": self.current_price,
        }


@dataclass(frozen=True)
class PricingResponse:
    """
    Suggested price and the rationale behind it.
    """

    suggested_price: float
    reasoning: str

    def direction_from(self, current_price: float) -> PriceDirection:
        delta = self.suggested_price - current_price
        if delta > PRICE_TOLERANCE:
            return PriceDirection.RAISE
        if delta < -PRICE_TOLERANCE:
            return PriceDirection.LOWER
        return PriceDirection.HOLD

    def to_dict(self) -> dict[str, Any]:
        return {"suggestedPrice": self.suggested_price, "reasoning": self.reasoning}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PricingResponse":
        return cls(
            suggested_price=float(data["suggestedPrice"]),
            reasoning=str(data["reasoning"]),
        )

    @classmethod
    def from_json(cls, text: str) -> "PricingResponse":
        return cls.from_dict(json.loads(text))


@dataclass
class Product:
    """
    Menu item as held by the product catalog store.
    """

    product_id: str
    name: str
    price: float
    category: str
    stock_qty: int = 0
    available: bool = True
    popularity_score: float = 5
    spoilage_risk: SpoilageRisk = SpoilageRisk.MEDIUM
    is_stock_managed: bool = False
