"""Static per-model price table used for local cost estimates.

Prices are USD per million tokens. They are a rough guide only: the router
bills on actual usage, which this table does not track.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelPricing:
    id: str
    input_cost_per_million: float
    output_cost_per_million: float


DEFAULT_PRICING_MODEL = "gpt-5-2025-08-07"

PRICING: list[ModelPricing] = [
    ModelPricing(id="gpt-5-2025-08-07", input_cost_per_million=1.25, output_cost_per_million=5.0),
    ModelPricing(id="gpt-5-mini-2025-08-07", input_cost_per_million=0.25, output_cost_per_million=1.0),
    ModelPricing(id="gpt-4o-2024-11-20", input_cost_per_million=1.75, output_cost_per_million=7.0),
    ModelPricing(id="gpt-4o-mini-2024-07-18", input_cost_per_million=0.105, output_cost_per_million=0.42),
    ModelPricing(id="claude-sonnet-4@20250514", input_cost_per_million=2.1, output_cost_per_million=8.4),
    ModelPricing(id="claude-3-5-sonnet-v2@20241022", input_cost_per_million=2.1, output_cost_per_million=8.4),
]

_PRICING_BY_ID: dict[str, ModelPricing] = {p.id: p for p in PRICING}


def get_pricing(model: str | None) -> ModelPricing:
    """Price entry for ``model``; unknown or missing models use the default entry."""
    return _PRICING_BY_ID.get(model or DEFAULT_PRICING_MODEL) or _PRICING_BY_ID[DEFAULT_PRICING_MODEL]


def list_pricing() -> list[ModelPricing]:
    return list(PRICING)


def estimate_cost(model: str | None, input_tokens: int, output_tokens: int) -> float:
    pricing = get_pricing(model)
    return (
        input_tokens / 1_000_000 * pricing.input_cost_per_million
        + output_tokens / 1_000_000 * pricing.output_cost_per_million
    )
