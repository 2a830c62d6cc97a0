"""
Demo script for the restaurant pricing advisor.

Runs a few hand-picked scenarios and the whole menu through a rule-based
advisor and logs each suggestion or error.

Run with: python -m demos.pricing_assistant_demo
"""

import asyncio

from agents.pricing_advisor import PricingAdvisor
from agents.pricing_rules import RuleBasedPricingBackend
from connectors.product_catalog import InMemoryProductCatalog
from models.errors import AdvisorUnavailable, InvalidInput
from utils.logger import get_logger

logger = get_logger("pricing-demo")

SCENARIOS = [
    {
        "productName": "Chicken Momo",
        "currentStockQty": 50,
        "popularityScore": 10,
        "spoilageRisk": "high",
        "currentPrice": 250,
    },
    {
        "productName": "Nepali Thali Set",
        "currentStockQty": 3,
        "popularityScore": 9,
        "spoilageRisk": "low",
        "currentPrice": 550,
    },
    {
        "productName": "Aloo Sandheko",
        "currentStockQty": 60,
        "popularityScore": 2,
        "spoilageRisk": "medium",
        "currentPrice": 120,
    },
    {
        "productName": "X",
        "currentStockQty": -1,
        "popularityScore": 5,
        "spoilageRisk": "medium",
        "currentPrice": 100,
    },
]


async def run_request(advisor: PricingAdvisor, payload: dict) -> None:
    try:
        response = await advisor.suggest_price(payload)
    except InvalidInput as e:
        logger.warning(f"{payload.get('productName')}: fix your input ({e})")
        return
    except AdvisorUnavailable as e:
        logger.error(f"{payload.get('productName')}: try again later ({e.reason})")
        return
    logger.info(
        f"{payload['productName']}: {payload['currentPrice']} -> {response.suggested_price:.2f} | "
        f"{response.reasoning}"
    )


async def main():
    advisor = PricingAdvisor(RuleBasedPricingBackend(), timeout_seconds=2.0)
    catalog = InMemoryProductCatalog()

    logger.info("--- Scenarios ---")
    for payload in SCENARIOS:
        await run_request(advisor, payload)

    logger.info("--- Menu ---")
    for product in await catalog.list_products():
        payload = await catalog.prefill_request(product.product_id)
        await run_request(advisor, payload)


if __name__ == "__main__":
    asyncio.run(main())
