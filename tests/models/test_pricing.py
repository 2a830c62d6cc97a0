import json

import pytest

from models.enums import PriceDirection, SpoilageRisk
from models.errors import AdvisorUnavailable, FieldError, InvalidInput
from models.pricing import PricingRequest, PricingResponse, Product


def test_response_json_round_trip():
    """Serializing a response to JSON and back yields an identical response."""
    original = PricingResponse(suggested_price=237.5, reasoning="Lower the price to move stock.")
    restored = PricingResponse.from_json(original.to_json())
    assert restored == original


def test_response_uses_wire_names():
    response = PricingResponse(suggested_price=99.99, reasoning="Hold.")
    assert json.loads(response.to_json()) == {"suggestedPrice": 99.99, "reasoning": "Hold."}


@pytest.mark.parametrize(
    "suggested, expected",
    [
        (110.0, PriceDirection.RAISE),
        (90.0, PriceDirection.LOWER),
        (100.0, PriceDirection.HOLD),
        (100.004, PriceDirection.HOLD),
    ],
)
def test_direction_from(suggested, expected):
    response = PricingResponse(suggested_price=suggested, reasoning="x")
    assert response.direction_from(100.0) == expected


def test_request_to_dict():
    request = PricingRequest("Masala Tea", 100, 9, SpoilageRisk.LOW, 80.0)
    assert request.to_dict() == {
        "productName": "Masala Tea",
        "currentStockQty": 100,
        "popularityScore": 9,
        "spoilageRisk": "low",
        "currentPrice": 80.0,
    }


def test_product_defaults():
    product = Product(product_id="p9", name="Sel Roti", price=60, category="Snacks")
    assert product.stock_qty == 0
    assert product.available is True
    assert product.spoilage_risk == SpoilageRisk.MEDIUM
    assert product.is_stock_managed is False


def test_invalid_input_lists_fields():
    exc = InvalidInput([FieldError("currentStockQty", "must not be negative"), FieldError("currentPrice", "is required")])
    assert exc.fields == ["currentStockQty", "currentPrice"]
    assert "currentStockQty must not be negative" in str(exc)
    assert "fix" in exc.user_message.lower()


def test_invalid_input_requires_errors():
    with pytest.raises(ValueError):
        InvalidInput([])


def test_advisor_unavailable_message():
    exc = AdvisorUnavailable("timed out")
    assert exc.reason == "timed out"
    assert "try again later" in exc.user_message.lower()
