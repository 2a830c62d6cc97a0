"""
Error taxonomy for the pricing advisory flow.

``InvalidInput`` means the caller must fix the request; ``AdvisorUnavailable``
means the downstream computation failed and the caller may try again later.
Both are terminal for the current request.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """One violated constraint, keyed by the wire name of the field."""

    field: str
    reason: str

    def __str__(self) -> str:
        return f"{self.field} {self.reason}"


class PricingError(Exception):
    """Base class for advisory flow failures."""

    user_message = "Failed to get pricing suggestion."


class InvalidInput(PricingError):
    user_message = "Please fix the highlighted fields and submit again."

    def __init__(self, errors: list[FieldError]):
        if not errors:
            raise ValueError("InvalidInput requires at least one field error")
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


class AdvisorUnavailable(PricingError):
    user_message = "The pricing assistant is unavailable right now. Please try again later."

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
