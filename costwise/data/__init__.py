"""Pricing data and estimate storage for Costwise."""

from costwise.data.pricing import DEFAULT_PRICING, PricingTables
from costwise.data.regional import regional_insight
from costwise.data.repository import EstimateRepository, InMemoryEstimateRepository

__all__ = [
    "DEFAULT_PRICING",
    "EstimateRepository",
    "InMemoryEstimateRepository",
    "PricingTables",
    "regional_insight",
]
