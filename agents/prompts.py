from __future__ import annotations

"""Prompt builder for the generative pricing backend.

The builder only formats the user-visible prompt; the system message and model
parameters stay with the caller in `agents.pricing_llm`.
"""

from models.pricing import PricingRequest

__all__ = ["PRICING_SYSTEM_PROMPT", "build_pricing_prompt"]


PRICING_SYSTEM_PROMPT = (
    "You are an expert pricing strategist for a restaurant. "
    "Respond ONLY with a JSON object of the form "
    '{"suggestedPrice": <number>, "reasoning": "<string>"}.'
)


def build_pricing_prompt(request: PricingRequest) -> str:
    """Return the user prompt asking for an optimal price for one product."""
    return f"""
        Based on the following information, suggest an optimal price for the product to maximize profits and minimize waste.

        Product Name: {request.product_name}
        Current Stock Quantity: {request.current_stock_qty}
        Popularity Score (1 = slow seller, 10 = fast seller): {request.popularity_score}
        Spoilage Risk: {request.spoilage_risk.value}
        Current Price: {request.current_price:.2f}

        Consider the following factors when determining the optimal price:
        - High stock quantity and low popularity may indicate a need to lower the price to increase sales and reduce waste.
        - Low stock quantity and high popularity may indicate a need to increase the price to maximize profits.
        - High spoilage risk may indicate a need to lower the price to sell the product quickly.
        - When these factors conflict, spoilage risk wins: never suggest a price above the current price when spoilage risk is high.

        Respond with:
        - "suggestedPrice": a positive number.
        - "reasoning": a brief explanation that states whether to raise, lower, or keep the price and which factors drove it.
        """
