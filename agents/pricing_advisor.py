"""
Module: agents.pricing_advisor

Contains the PricingAdvisor, the single entry point of the advisory flow.
Validates the request, awaits one backend evaluation under a timeout, and
checks the answer against the pricing policy before returning it.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Protocol

from config.config import PricingRulesConfig
from models.enums import PriceDirection, SpoilageRisk
from models.errors import AdvisorUnavailable
from models.pricing import PricingRequest, PricingResponse

from .pricing_adapter import (
    MalformedOutput,
    check_request,
    claimed_direction,
    parse_backend_output,
    require_valid_request,
)
from .pricing_rules import popularity_level, stock_level


class PricingBackend(Protocol):
    """Anything that can turn a validated request into a suggestion."""

    async def evaluate(self, request: PricingRequest) -> PricingResponse: ...


def expected_bounds(
    request: PricingRequest, config: PricingRulesConfig | None = None
) -> tuple[float | None, float | None]:
    """
    Return (lower, upper) bounds on the suggested price implied by the
    signals. ``None`` means unbounded on that side.
    """
    cfg = config or PricingRulesConfig()
    current = request.current_price
    stock = stock_level(request.current_stock_qty, cfg)
    popularity = popularity_level(request.popularity_score, cfg)

    if request.spoilage_risk == SpoilageRisk.HIGH:
        return None, current
    if stock == "high" and popularity == "low":
        return None, current
    if stock == "low" and popularity == "high" and request.spoilage_risk == SpoilageRisk.LOW:
        return current, None
    return None, None


def _contradicts(
    claimed: PriceDirection | None,
    actual: PriceDirection,
    move_pct: float,
    hold_tolerance_pct: float,
) -> bool:
    if claimed is None or claimed == actual:
        return False
    # "Keep the price" survives rounding-sized moves only.
    if claimed == PriceDirection.HOLD:
        return move_pct > hold_tolerance_pct
    return True


class PricingAdvisor:
    """
    Stateless pricing advisor. One request in, one suggestion out.
    No retries: a failed evaluation surfaces as AdvisorUnavailable.
    """

    def __init__(
        self,
        backend: PricingBackend,
        timeout_seconds: float = 10.0,
        policy: PricingRulesConfig | None = None,
        logger: logging.Logger | None = None,
    ):
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        self.backend = backend
        self.timeout_seconds = timeout_seconds
        self.policy = policy or PricingRulesConfig()
        self.logger = logger or logging.getLogger(__name__)

    @property
    def backend_name(self) -> str:
        return getattr(self.backend, "name", type(self.backend).__name__)

    async def suggest_price(
        self, request: PricingRequest | Mapping[str, Any]
    ) -> PricingResponse:
        """
        Produce a pricing suggestion.

        Args:
            request: A PricingRequest or a wire-shaped mapping of its fields.

        Returns:
            The validated PricingResponse.

        Raises:
            InvalidInput: a field violates its constraint (no backend call made).
            AdvisorUnavailable: the backend failed, timed out, or answered
                with something unusable.
        """
        if isinstance(request, PricingRequest):
            request = check_request(request)
        else:
            request = require_valid_request(request)

        self.logger.info(
            f"Requesting price suggestion for '{request.product_name}' via {self.backend_name}"
        )
        try:
            raw = await asyncio.wait_for(
                self.backend.evaluate(request), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as exc:
            self.logger.warning(
                f"Pricing backend timed out after {self.timeout_seconds:.1f}s for '{request.product_name}'"
            )
            raise AdvisorUnavailable(
                f"Pricing backend timed out after {self.timeout_seconds:.1f}s"
            ) from exc
        except AdvisorUnavailable:
            raise
        except Exception as exc:  # noqa: BLE001
            self.logger.warning(f"Pricing backend failed for '{request.product_name}': {exc}")
            raise AdvisorUnavailable(f"Pricing backend failed: {exc}") from exc

        response = self._check_response(request, raw)
        self.logger.info(
            f"Suggested price for '{request.product_name}': {request.current_price:.2f} -> "
            f"{response.suggested_price:.2f} ({response.direction_from(request.current_price).value})"
        )
        return response

    def _check_response(self, request: PricingRequest, raw: Any) -> PricingResponse:
        try:
            response = parse_backend_output(raw)
        except MalformedOutput as exc:
            self.logger.warning(f"Malformed backend response for '{request.product_name}': {exc}")
            raise AdvisorUnavailable(f"Malformed backend response: {exc}") from exc

        current = request.current_price
        actual = response.direction_from(current)
        claimed = claimed_direction(response.reasoning)
        move_pct = abs(response.suggested_price - current) / current * 100
        if _contradicts(claimed, actual, move_pct, self.policy.hold_tolerance_pct):
            self.logger.warning(
                f"Backend reasoning claims '{claimed.value}' but price moves '{actual.value}' "
                f"for '{request.product_name}'"
            )
            raise AdvisorUnavailable(
                f"Backend reasoning says {claimed.value} but the suggested price moves {actual.value}"
            )

        lower, upper = expected_bounds(request, self.policy)
        price = response.suggested_price
        if (upper is not None and price > upper) or (lower is not None and price < lower):
            self.logger.warning(
                f"Backend price {price:.2f} for '{request.product_name}' violates pricing policy "
                f"(bounds {lower}, {upper})"
            )
            raise AdvisorUnavailable("Backend suggestion violates the pricing policy")
        return response
