"""Fake pricing backends for testing the advisor."""

import asyncio

from models.pricing import PricingRequest, PricingResponse


class StaticBackend:
    """Returns a fixed answer (any shape) and records the requests it saw."""

    name = "static"

    def __init__(self, answer):
        self.answer = answer
        self.calls: list[PricingRequest] = []

    async def evaluate(self, request: PricingRequest):
        self.calls.append(request)
        return self.answer


class FailingBackend:
    name = "failing"

    def __init__(self, exc: Exception):
        self.exc = exc
        self.calls = 0

    async def evaluate(self, request: PricingRequest) -> PricingResponse:
        self.calls += 1
        raise self.exc


class SlowBackend:
    """Sleeps before answering; records whether it was cancelled."""

    name = "slow"

    def __init__(self, delay: float, answer: PricingResponse | None = None):
        self.delay = delay
        self.answer = answer
        self.calls = 0
        self.cancelled = False

    async def evaluate(self, request: PricingRequest) -> PricingResponse:
        self.calls += 1
        try:
            await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return self.answer or PricingResponse(
            suggested_price=request.current_price,
            reasoning="Keep the price unchanged.",
        )
