"""
Deterministic rule-based pricing backend.

Each signal contributes a percentage adjustment to the current price:

- stock: low supply pushes the price up, surplus pushes it down;
- popularity: fast sellers push up, slow sellers push down;
- spoilage: medium trims the price slightly, high forces a markdown.

High spoilage dominates: upward stock/popularity pressure is discarded
before the spoilage discount is applied, so a perishable product is never
priced up.
"""

import logging
import math
import sys

from config.config import PricingRulesConfig
from models.enums import PriceDirection, SpoilageRisk
from models.pricing import PricingRequest, PricingResponse

logger = logging.getLogger(__name__)


def stock_level(qty: int, config: PricingRulesConfig) -> str:
    if qty <= config.low_stock_max:
        return "low"
    if qty >= config.high_stock_min:
        return "high"
    return "moderate"


def popularity_level(score: float, config: PricingRulesConfig) -> str:
    if score <= config.low_popularity_max:
        return "low"
    if score >= config.high_popularity_min:
        return "high"
    return "moderate"


class RuleBasedPricingBackend:
    """
    Hand-coded implementation of the pricing heuristics.
    Interchangeable with the generative backend behind PricingAdvisor.
    """

    name = "rules"

    def __init__(self, config: PricingRulesConfig | None = None):
        self.config = config or PricingRulesConfig()
        logger.info(
            f"Rule-based pricing backend init (stock<= {self.config.low_stock_max} low, "
            f">= {self.config.high_stock_min} high; popularity<= {self.config.low_popularity_max} low, "
            f">= {self.config.high_popularity_min} high; MaxChange={self.config.max_change_pct}%)"
        )

    async def evaluate(self, request: PricingRequest) -> PricingResponse:
        return self.decide(request)

    def components(self, request: PricingRequest) -> dict[str, float]:
        """Percentage adjustment contributed by each signal."""
        cfg = self.config
        stock = stock_level(request.current_stock_qty, cfg)
        popularity = popularity_level(request.popularity_score, cfg)

        stock_pct = 0.0
        if stock == "low":
            stock_pct = cfg.low_stock_pct
        elif stock == "high":
            stock_pct = cfg.high_stock_pct

        popularity_pct = 0.0
        if popularity == "high":
            popularity_pct = cfg.high_popularity_pct
        elif popularity == "low":
            popularity_pct = cfg.low_popularity_pct

        spoilage_pct = 0.0
        if request.spoilage_risk == SpoilageRisk.MEDIUM:
            spoilage_pct = cfg.medium_spoilage_pct
        elif request.spoilage_risk == SpoilageRisk.HIGH:
            spoilage_pct = cfg.high_spoilage_pct

        return {"stock": stock_pct, "popularity": popularity_pct, "spoilage": spoilage_pct}

    def change_pct(self, request: PricingRequest) -> tuple[float, bool]:
        """
        Total capped change in percent, and whether spoilage overrode
        upward demand pressure.
        """
        comps = self.components(request)
        demand = comps["stock"] + comps["popularity"]
        overridden = False
        if request.spoilage_risk == SpoilageRisk.HIGH and demand > 0:
            demand = 0.0
            overridden = True
        total = demand + comps["spoilage"]
        cap = self.config.max_change_pct
        return max(-cap, min(cap, total)), overridden

    def decide(self, request: PricingRequest) -> PricingResponse:
        change, overridden = self.change_pct(request)
        current = request.current_price
        price = round(current * (1 + change / 100), 2)
        if not math.isfinite(price):
            # Near the top of the float range the raise is capped at the largest finite price.
            price = sys.float_info.max

        # Rounding must not flip the direction of the change.
        if change > 0:
            price = max(price, current)
        elif change < 0:
            price = min(price, current)
        if price < self.config.min_price:
            price = min(self.config.min_price, current)

        response = PricingResponse(suggested_price=price, reasoning="")
        direction = response.direction_from(current)
        reasoning = self._explain(request, price, direction, overridden)
        logger.info(
            f"Decide '{request.product_name}': {current:.2f} -> {price:.2f} "
            f"(Change={change:.2f}%, Direction={direction.value})"
        )
        return PricingResponse(suggested_price=price, reasoning=reasoning)

    def _explain(
        self,
        request: PricingRequest,
        price: float,
        direction: PriceDirection,
        overridden: bool,
    ) -> str:
        cfg = self.config
        name = request.product_name
        current = request.current_price

        if direction == PriceDirection.RAISE:
            pct = (price - current) / current * 100
            parts = [f"Raise the price of {name} from {current:.2f} to {price:.2f} (+{pct:.1f}%)."]
        elif direction == PriceDirection.LOWER:
            pct = (current - price) / current * 100
            parts = [f"Lower the price of {name} from {current:.2f} to {price:.2f} (-{pct:.1f}%)."]
        else:
            parts = [f"Keep the price of {name} at {current:.2f}."]

        stock = stock_level(request.current_stock_qty, cfg)
        qty = request.current_stock_qty
        if stock == "low":
            parts.append(f"Stock is low ({qty} units), so supply is scarce.")
        elif stock == "high":
            parts.append(f"Stock is high ({qty} units), so there is surplus inventory to clear.")
        else:
            parts.append(f"Stock is moderate ({qty} units).")

        popularity = popularity_level(request.popularity_score, cfg)
        score = f"{request.popularity_score:g}/10"
        if popularity == "high":
            parts.append(f"Popularity is high ({score}), so customers are willing to pay more.")
        elif popularity == "low":
            parts.append(f"Popularity is low ({score}), so demand needs stimulating.")
        else:
            parts.append(f"Popularity is moderate ({score}).")

        if request.spoilage_risk == SpoilageRisk.HIGH:
            parts.append(
                "Spoilage risk is high, so the product must sell quickly before it loses value."
            )
            if overridden:
                parts.append("Spoilage risk outweighs the strong demand signals.")
        elif request.spoilage_risk == SpoilageRisk.MEDIUM:
            parts.append("Spoilage risk is medium, which trims the adjustment slightly.")
        else:
            parts.append("Spoilage risk is low.")

        if direction == PriceDirection.HOLD:
            parts.append("The signals balance out at the current price.")
        return " ".join(parts)
