import importlib

import pytest
from fastapi.testclient import TestClient

from agents.pricing_advisor import PricingAdvisor
from agents.pricing_rules import RuleBasedPricingBackend
from config.config import ServiceConfig
from connectors.identity_provider import InMemoryIdentityProvider
from connectors.product_catalog import InMemoryProductCatalog
import demos.pricing_assistant_api as pricing_api
from demos.pricing_assistant_api import build_advisor, create_app, default_users
from models.errors import AdvisorUnavailable
from tests.mocks import FailingBackend, SlowBackend

MANAGER = {"X-User-Id": "manager-1"}


def make_client(advisor: PricingAdvisor | None = None) -> TestClient:
    app = create_app(
        advisor=advisor or PricingAdvisor(RuleBasedPricingBackend(), timeout_seconds=1.0),
        catalog=InMemoryProductCatalog(),
        identity=InMemoryIdentityProvider(default_users()),
    )
    return TestClient(app)


@pytest.fixture
def client() -> TestClient:
    return make_client()


# --- POST /pricing/suggest --- #


def test_suggest_price_momo(client):
    payload = {
        "productName": "Chicken Momo",
        "currentStockQty": 50,
        "popularityScore": 10,
        "spoilageRisk": "high",
        "currentPrice": 250,
    }
    resp = client.post("/pricing/suggest", json=payload, headers=MANAGER)
    assert resp.status_code == 200
    body = resp.json()
    assert body["suggestedPrice"] < 250
    assert body["direction"] == "lower"
    assert "spoilage" in body["reasoning"].lower()


def test_suggest_price_thali(client):
    payload = {
        "productName": "Nepali Thali Set",
        "currentStockQty": 3,
        "popularityScore": 9,
        "spoilageRisk": "low",
        "currentPrice": 550,
    }
    resp = client.post("/pricing/suggest", json=payload, headers={"X-User-Id": "superadmin"})
    assert resp.status_code == 200
    assert resp.json()["suggestedPrice"] >= 550
    assert resp.json()["direction"] == "raise"


def test_invalid_input_returns_422_with_fields(client):
    payload = {
        "productName": "X",
        "currentStockQty": -1,
        "popularityScore": 5,
        "spoilageRisk": "medium",
        "currentPrice": 100,
    }
    for _ in range(2):
        resp = client.post("/pricing/suggest", json=payload, headers=MANAGER)
        assert resp.status_code == 422
        body = resp.json()
        assert body["error"] == "invalid_input"
        assert body["fields"] == ["currentStockQty"]
        assert body["details"] == [{"field": "currentStockQty", "reason": "must not be negative"}]


def test_non_object_body_is_invalid_input(client):
    resp = client.post("/pricing/suggest", json=[1, 2, 3], headers=MANAGER)
    assert resp.status_code == 422
    assert resp.json()["fields"] == ["request"]


def test_backend_failure_returns_503(valid_payload):
    client = make_client(PricingAdvisor(FailingBackend(RuntimeError("boom"))))
    resp = client.post("/pricing/suggest", json=valid_payload, headers=MANAGER)
    assert resp.status_code == 503
    body = resp.json()
    assert body["error"] == "advisor_unavailable"
    assert "try again later" in body["message"].lower()
    assert "boom" not in body["message"]


def test_backend_timeout_returns_503(valid_payload):
    client = make_client(PricingAdvisor(SlowBackend(delay=2.0), timeout_seconds=0.05))
    resp = client.post("/pricing/suggest", json=valid_payload, headers=MANAGER)
    assert resp.status_code == 503


# --- Authorization gating --- #


def test_missing_user_header(client, valid_payload):
    assert client.post("/pricing/suggest", json=valid_payload).status_code == 401


def test_unknown_user(client, valid_payload):
    resp = client.post("/pricing/suggest", json=valid_payload, headers={"X-User-Id": "ghost"})
    assert resp.status_code == 401


@pytest.mark.parametrize("uid", ["staff-1", "pending-1"])
def test_forbidden_users(client, valid_payload, uid):
    resp = client.post("/pricing/suggest", json=valid_payload, headers={"X-User-Id": uid})
    assert resp.status_code == 403


# --- Catalog endpoints --- #


def test_list_products(client):
    resp = client.get("/products")
    assert resp.status_code == 200
    names = [p["name"] for p in resp.json()]
    assert "Chicken Momo" in names
    assert len(names) == 7
    available = client.get("/products", params={"available_only": True}).json()
    assert len(available) == 6


def test_prefill_then_suggest(client):
    prefill = client.get("/products/p4/pricing-request")
    assert prefill.status_code == 200
    payload = prefill.json()
    assert payload["productName"] == "Juju Dhau"
    resp = client.post("/pricing/suggest", json=payload, headers=MANAGER)
    assert resp.status_code == 200
    # Juju Dhau is highly perishable.
    assert resp.json()["suggestedPrice"] <= payload["currentPrice"]


def test_prefill_unknown_product(client):
    assert client.get("/products/p404/pricing-request").status_code == 404


def test_health(client):
    assert client.get("/health").json() == {"status": "ok", "backend": "rules"}


# --- Wiring --- #


def test_build_advisor_rules():
    advisor = build_advisor(ServiceConfig(backend="rules", timeout_seconds=3.0))
    assert advisor.backend_name == "rules"
    assert advisor.timeout_seconds == 3.0


def test_build_advisor_llm_without_key():
    with pytest.raises(AdvisorUnavailable):
        build_advisor(ServiceConfig(backend="llm"))


def test_import_does_not_build_default_app(monkeypatch):
    monkeypatch.setenv("PRICING_BACKEND", "llm")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    module = importlib.reload(pricing_api)
    assert not hasattr(module, "app")
    with pytest.raises(AdvisorUnavailable):
        module.get_app()


def test_get_app_uses_environment(monkeypatch):
    monkeypatch.setenv("PRICING_BACKEND", "rules")
    client = TestClient(pricing_api.get_app())
    assert client.get("/health").json() == {"status": "ok", "backend": "rules"}
