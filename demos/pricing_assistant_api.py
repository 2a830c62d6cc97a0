"""
FastAPI application exposing the pricing advisor as a single POST endpoint,
plus catalog lookups used to prefill the pricing form.

Run with: uvicorn demos.pricing_assistant_api:get_app --factory --reload
"""

from typing import Any

from fastapi import Body, Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from agents.pricing_advisor import PricingAdvisor
from agents.pricing_llm import build_llm_backend
from agents.pricing_rules import RuleBasedPricingBackend
from config.config import ServiceConfig
from connectors.identity_provider import (
    InMemoryIdentityProvider,
    User,
    can_use_pricing_assistant,
)
from connectors.product_catalog import InMemoryProductCatalog
from models.api import ErrorOut, FieldErrorOut, HealthOut, PricingSuggestionOut, ProductOut
from models.enums import ApprovalStatus, UserRole
from models.errors import AdvisorUnavailable, InvalidInput
from models.pricing import Product
from utils.logger import get_logger

logger = get_logger("pricing-api")


def build_advisor(config: ServiceConfig) -> PricingAdvisor:
    """Construct the advisor and its backend once, at process start."""
    if config.backend == "llm":
        backend = build_llm_backend(config.llm)
    else:
        backend = RuleBasedPricingBackend(config.rules)
    return PricingAdvisor(backend, timeout_seconds=config.timeout_seconds, policy=config.rules)


def default_users() -> list[User]:
    return [
        User(uid="superadmin", email="admin@restaurant.local", name="Super Admin",
             role=UserRole.SUPERADMIN, status=ApprovalStatus.APPROVED),
        User(uid="manager-1", email="manager@restaurant.local", name="Floor Manager",
             role=UserRole.MANAGER, status=ApprovalStatus.APPROVED),
        User(uid="staff-1", email="staff@restaurant.local", name="Waiter",
             role=UserRole.EMPLOYEE, status=ApprovalStatus.APPROVED, manager_id="manager-1"),
        User(uid="pending-1", email="new@restaurant.local", name="New Manager",
             role=UserRole.MANAGER, status=ApprovalStatus.PENDING),
    ]


def _product_out(product: Product) -> ProductOut:
    return ProductOut(
        productId=product.product_id,
        name=product.name,
        price=product.price,
        category=product.category,
        stockQty=product.stock_qty,
        available=product.available,
        popularityScore=product.popularity_score,
        spoilageRisk=product.spoilage_risk,
        isStockManaged=product.is_stock_managed,
    )


# --- Dependencies --- #


def get_advisor(request: Request) -> PricingAdvisor:
    return request.app.state.advisor


def get_catalog(request: Request) -> InMemoryProductCatalog:
    return request.app.state.catalog


async def get_pricing_user(
    request: Request, x_user_id: str | None = Header(default=None)
) -> User:
    """Resolve the caller and gate on role; the advisor itself is role-agnostic."""
    if not x_user_id:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Missing X-User-Id header")
    user = await request.app.state.identity.get_user(x_user_id)
    if user is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unknown user")
    if not can_use_pricing_assistant(user):
        logger.info(f"User {user.uid} ({user.role.value}, {user.status.value}) denied pricing access")
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Pricing assistant requires an approved manager")
    return user


# --- Application factory --- #


def create_app(
    advisor: PricingAdvisor | None = None,
    catalog: InMemoryProductCatalog | None = None,
    identity: InMemoryIdentityProvider | None = None,
) -> FastAPI:
    app = FastAPI(title="Restaurant Pricing Assistant")
    app.state.advisor = advisor or build_advisor(ServiceConfig.from_env())
    app.state.catalog = catalog or InMemoryProductCatalog()
    app.state.identity = identity or InMemoryIdentityProvider(default_users())

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput):
        body = ErrorOut(
            error="invalid_input",
            message=exc.user_message,
            fields=exc.fields,
            details=[FieldErrorOut(field=e.field, reason=e.reason) for e in exc.errors],
        )
        return JSONResponse(status_code=422, content=body.model_dump())

    @app.exception_handler(AdvisorUnavailable)
    async def advisor_unavailable_handler(request: Request, exc: AdvisorUnavailable):
        logger.error(f"Pricing suggestion failed: {exc.reason}")
        body = ErrorOut(error="advisor_unavailable", message=exc.user_message)
        return JSONResponse(status_code=503, content=body.model_dump(exclude={"fields", "details"}))

    @app.get("/health", response_model=HealthOut)
    async def health(advisor: PricingAdvisor = Depends(get_advisor)):
        return HealthOut(status="ok", backend=advisor.backend_name)

    @app.post("/pricing/suggest", response_model=PricingSuggestionOut)
    async def suggest_price(
        payload: Any = Body(...),
        user: User = Depends(get_pricing_user),
        advisor: PricingAdvisor = Depends(get_advisor),
    ):
        """Suggest a new price for one product from its stock, popularity and spoilage signals."""
        logger.info(f"Pricing suggestion requested by {user.uid}")
        response = await advisor.suggest_price(payload)
        current = float(payload["currentPrice"])
        return PricingSuggestionOut(
            suggestedPrice=response.suggested_price,
            reasoning=response.reasoning,
            direction=response.direction_from(current),
        )

    @app.get("/products", response_model=list[ProductOut])
    async def list_products(
        available_only: bool = False,
        catalog: InMemoryProductCatalog = Depends(get_catalog),
    ):
        return [_product_out(p) for p in await catalog.list_products(available_only)]

    @app.get("/products/{product_id}/pricing-request")
    async def prefill_pricing_request(
        product_id: str,
        catalog: InMemoryProductCatalog = Depends(get_catalog),
    ) -> dict[str, Any]:
        prefill = await catalog.prefill_request(product_id)
        if prefill is None:
            raise HTTPException(404, f"Product {product_id} not found")
        return prefill

    logger.info(f"Pricing assistant API ready (backend={app.state.advisor.backend_name})")
    return app


def get_app() -> FastAPI:
    """Default app wired from the environment. Built on call, not on import."""
    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(get_app(), host="0.0.0.0", port=8000)
