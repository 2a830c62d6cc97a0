"""
Data models specific to the pricing assistant HTTP API.
"""

from pydantic import BaseModel, Field

from .enums import PriceDirection, SpoilageRisk


class PricingSuggestionOut(BaseModel):
    suggestedPrice: float = Field(gt=0)
    reasoning: str
    direction: PriceDirection


class FieldErrorOut(BaseModel):
    field: str
    reason: str


class ErrorOut(BaseModel):
    """Error body. ``fields``/``details`` are only set for invalid input."""

    error: str
    message: str
    fields: list[str] = []
    details: list[FieldErrorOut] = []


class ProductOut(BaseModel):
    productId: str
    name: str
    price: float
    category: str
    stockQty: int
    available: bool
    popularityScore: float
    spoilageRisk: SpoilageRisk
    isStockManaged: bool


class HealthOut(BaseModel):
    status: str
    backend: str
