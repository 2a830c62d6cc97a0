# agents/pricing_adapter.py

"""Validation and marshalling at the pricing service boundary.

Requests are checked by a hand-written validator that returns a tagged
result instead of raising, so the HTTP layer and the advisor can share it.
Backend output is schema-checked before anything reaches the caller.
"""

import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from models.enums import PriceDirection, SpoilageRisk
from models.errors import FieldError, InvalidInput
from models.pricing import PricingRequest, PricingResponse

__all__ = [
    "REQUEST_FIELDS",
    "ValidationOk",
    "ValidationErr",
    "MalformedOutput",
    "validate_pricing_request",
    "require_valid_request",
    "check_request",
    "parse_backend_output",
    "claimed_direction",
]

REQUEST_FIELDS = (
    "productName",
    "currentStockQty",
    "popularityScore",
    "spoilageRisk",
    "currentPrice",
)

POPULARITY_MIN = 1
POPULARITY_MAX = 10


@dataclass(frozen=True)
class ValidationOk:
    request: PricingRequest
    ok: bool = True


@dataclass(frozen=True)
class ValidationErr:
    errors: tuple[FieldError, ...]
    ok: bool = False

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]

    def to_exception(self) -> InvalidInput:
        return InvalidInput(list(self.errors))


class MalformedOutput(ValueError):
    """Backend produced something that is not a usable PricingResponse."""


def _is_real(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_name(value: Any) -> tuple[str | None, str | None]:
    if not isinstance(value, str):
        return None, "must be a string"
    if not value.strip():
        return None, "must not be empty"
    return value.strip(), None


def _check_stock(value: Any) -> tuple[int | None, str | None]:
    if not _is_real(value):
        return None, "must be an integer"
    if isinstance(value, float):
        if not value.is_integer():
            return None, "must be an integer"
        value = int(value)
    if value < 0:
        return None, "must not be negative"
    return value, None


def _check_popularity(value: Any) -> tuple[float | None, str | None]:
    if not _is_real(value) or not math.isfinite(value):
        return None, "must be a number"
    if not POPULARITY_MIN <= value <= POPULARITY_MAX:
        return None, f"must be between {POPULARITY_MIN} and {POPULARITY_MAX}"
    return value, None


def _check_spoilage(value: Any) -> tuple[SpoilageRisk | None, str | None]:
    allowed = ", ".join(r.value for r in SpoilageRisk)
    if isinstance(value, SpoilageRisk):
        return value, None
    if not isinstance(value, str):
        return None, f"must be one of: {allowed}"
    try:
        return SpoilageRisk(value.strip().lower()), None
    except ValueError:
        return None, f"must be one of: {allowed}"


def _check_price(value: Any) -> tuple[float | None, str | None]:
    if not _is_real(value) or not math.isfinite(value):
        return None, "must be a number"
    if value <= 0:
        return None, "must be greater than 0"
    return float(value), None


_CHECKS = {
    "productName": _check_name,
    "currentStockQty": _check_stock,
    "popularityScore": _check_popularity,
    "spoilageRisk": _check_spoilage,
    "currentPrice": _check_price,
}


def validate_pricing_request(payload: Mapping[str, Any]) -> ValidationOk | ValidationErr:
    """Check every request field and collect all violations in field order."""
    if not isinstance(payload, Mapping):
        return ValidationErr(errors=(FieldError("request", "must be a JSON object"),))

    values: dict[str, Any] = {}
    errors: list[FieldError] = []
    for name in REQUEST_FIELDS:
        if name not in payload or payload[name] is None:
            errors.append(FieldError(name, "is required"))
            continue
        value, reason = _CHECKS[name](payload[name])
        if reason:
            errors.append(FieldError(name, reason))
        else:
            values[name] = value

    if errors:
        return ValidationErr(errors=tuple(errors))
    return ValidationOk(
        request=PricingRequest(
            product_name=values["productName"],
            current_stock_qty=values["currentStockQty"],
            popularity_score=values["popularityScore"],
            spoilage_risk=values["spoilageRisk"],
            current_price=values["currentPrice"],
        )
    )


def require_valid_request(payload: Mapping[str, Any]) -> PricingRequest:
    result = validate_pricing_request(payload)
    if isinstance(result, ValidationErr):
        raise result.to_exception()
    return result.request


def check_request(request: PricingRequest) -> PricingRequest:
    """Hold an already-built request to the same constraints as wire input."""
    payload = {
        "productName": request.product_name,
        "currentStockQty": request.current_stock_qty,
        "popularityScore": request.popularity_score,
        "spoilageRisk": request.spoilage_risk,
        "currentPrice": request.current_price,
    }
    return require_valid_request(payload)


_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def parse_backend_output(raw: Any) -> PricingResponse:
    """Turn a backend answer (mapping or JSON text) into a PricingResponse."""
    if isinstance(raw, PricingResponse):
        data: Any = raw.to_dict()
    elif isinstance(raw, str):
        text = raw.strip()
        fenced = _FENCE_RE.match(text)
        if fenced:
            text = fenced.group(1)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedOutput(f"response is not valid JSON: {exc}") from exc
    else:
        data = raw

    if not isinstance(data, Mapping):
        raise MalformedOutput("response is not a JSON object")
    for key in ("suggestedPrice", "reasoning"):
        if key not in data:
            raise MalformedOutput(f"response is missing '{key}'")

    price = data["suggestedPrice"]
    reasoning = data["reasoning"]
    if not _is_real(price) or not math.isfinite(price):
        raise MalformedOutput("suggestedPrice is not a number")
    if price <= 0:
        raise MalformedOutput(f"suggestedPrice must be positive, got {price}")
    if not isinstance(reasoning, str) or not reasoning.strip():
        raise MalformedOutput("reasoning is empty")

    return PricingResponse(suggested_price=float(price), reasoning=reasoning.strip())


# Recommendation phrases commit the rationale to a direction; the earliest
# unnegated one wins, so "lower the price to drive higher sales" is a cut.
_RECOMMENDATIONS = (
    (PriceDirection.HOLD, r"\b(keep|hold|maintain|leave)\b[^.]*\bprice\b[^.]*\b(unchanged|as is|steady|same|where it is)\b"),
    (PriceDirection.HOLD, r"\b(keep|hold|maintain)(ing)? the (current )?price\b"),
    (PriceDirection.HOLD, r"\b(keep|leave) it (unchanged|steady|as is|the same)\b"),
    (PriceDirection.HOLD, r"\bno (price )?change\b"),
    (PriceDirection.HOLD, r"\bprice (stays|remains) (unchanged|the same)\b"),
    (PriceDirection.RAISE, r"\b(raise|raising|increase|increasing|mark(ing)? up|bump(ing)? up)\b"),
    (PriceDirection.LOWER, r"\b(lower|lowering|reduce|reducing|decrease|decreasing|cut|cutting|discount|discounting|mark(ing)? down)\b"),
)
# Descriptive wording only counts when no recommendation is found and it
# points one way.
_DESCRIPTIONS = (
    (PriceDirection.RAISE, r"\b(higher|pricier|price rise)\b"),
    (PriceDirection.LOWER, r"\b(cheaper|markdown|drop(ping)?)\b"),
)
_NEGATION_RE = re.compile(r"\b(not|never|no need to|avoid|without|don't|do not)\s+(\w+\s+){0,2}$")


def _unnegated_matches(text: str, patterns) -> list[tuple[int, PriceDirection]]:
    found = []
    for direction, pattern in patterns:
        for match in re.finditer(pattern, text):
            prefix = text[max(0, match.start() - 30) : match.start()]
            if not _NEGATION_RE.search(prefix):
                found.append((match.start(), direction))
    return found


def claimed_direction(reasoning: str) -> PriceDirection | None:
    """
    Return the direction the rationale recommends, or None when it commits
    to none.
    """
    text = reasoning.lower()
    recommended = _unnegated_matches(text, _RECOMMENDATIONS)
    if recommended:
        return min(recommended, key=lambda hit: hit[0])[1]
    described = {direction for _, direction in _unnegated_matches(text, _DESCRIPTIONS)}
    if len(described) == 1:
        return described.pop()
    return None
