"""
Module: agents.pricing_llm

Generative pricing backend. Renders the pricing prompt, makes exactly one
chat completion call and schema-checks whatever comes back.
"""

import logging

from openai import AsyncOpenAI

from config.config import LLMBackendConfig
from models.errors import AdvisorUnavailable
from models.pricing import PricingRequest, PricingResponse
from utils.openai_utils import request_chat_completion

from .pricing_adapter import parse_backend_output
from .prompts import PRICING_SYSTEM_PROMPT, build_pricing_prompt


class LLMPricingBackend:
    """
    Pricing backend that defers the decision to a hosted model.
    """

    name = "llm"

    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
        logger: logging.Logger | None = None,
    ):
        self.client = client
        self.model = model
        self.temperature = temperature
        self.logger = logger or logging.getLogger(__name__)

    async def evaluate(self, request: PricingRequest) -> PricingResponse:
        messages = [
            {"role": "system", "content": PRICING_SYSTEM_PROMPT},
            {"role": "user", "content": build_pricing_prompt(request)},
        ]
        content = await request_chat_completion(
            self.client,
            model=self.model,
            messages=messages,
            logger=self.logger,
            temperature=self.temperature,
            response_format={"type": "json_object"},
        )
        self.logger.debug(f"Model answered for '{request.product_name}': {content[:200]}")
        return parse_backend_output(content)


def build_llm_backend(
    config: LLMBackendConfig, logger: logging.Logger | None = None
) -> LLMPricingBackend:
    """Create the OpenAI client from config and wrap it in a backend."""
    if not config.api_key or config.api_key == "YOUR_API_KEY_HERE":
        raise AdvisorUnavailable("OpenAI API key missing or placeholder; LLM backend disabled.")
    client = AsyncOpenAI(api_key=config.api_key)
    return LLMPricingBackend(
        client,
        model=config.model,
        temperature=config.temperature,
        logger=logger,
    )
