"""
Configuration classes for the restaurant pricing advisor.
Defines thresholds for the rule-based backend and settings for the
generative backend and the HTTP service in a type-safe, extensible way.
"""

from dataclasses import dataclass, field

from utils.env import env_float, env_str, load_project_dotenv

BACKENDS = ("rules", "llm")


@dataclass
class PricingRulesConfig:
    low_stock_max: int = 10
    high_stock_min: int = 40
    low_popularity_max: float = 3
    high_popularity_min: float = 8
    # Percent of the current price
    low_stock_pct: float = 4.0
    high_stock_pct: float = -4.0
    high_popularity_pct: float = 4.0
    low_popularity_pct: float = -4.0
    medium_spoilage_pct: float = -2.0
    high_spoilage_pct: float = -10.0
    max_change_pct: float = 15.0
    min_price: float = 0.01
    # Largest move (percent) a "keep the price" rationale may accompany
    hold_tolerance_pct: float = 1.0


@dataclass
class LLMBackendConfig:
    api_key: str | None = None
    model: str = "gpt-4o-mini"
    temperature: float = 0.2


@dataclass
class ServiceConfig:
    backend: str = "rules"
    timeout_seconds: float = 10.0
    rules: PricingRulesConfig = field(default_factory=PricingRulesConfig)
    llm: LLMBackendConfig = field(default_factory=LLMBackendConfig)

    def __post_init__(self):
        if self.backend not in BACKENDS:
            raise ValueError(
                f"Unknown pricing backend '{self.backend}', expected one of {BACKENDS}"
            )
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Build the service config from the environment (and project .env)."""
        load_project_dotenv()
        return cls(
            backend=env_str("PRICING_BACKEND", "rules").lower(),
            timeout_seconds=env_float("PRICING_TIMEOUT_SECONDS", 10.0),
            llm=LLMBackendConfig(
                api_key=env_str("OPENAI_API_KEY", None),
                model=env_str("PRICING_LLM_MODEL", "gpt-4o-mini"),
                temperature=env_float("PRICING_LLM_TEMPERATURE", 0.2),
            ),
        )


# Example usage:
# config = ServiceConfig.from_env()
# backend = RuleBasedPricingBackend(config.rules)
