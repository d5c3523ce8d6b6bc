"""Enums for the Costwise domain models.

These enums are the categorical project inputs that drive the pricing
multipliers in the cost calculator.
"""

from enum import StrEnum


class MaterialQuality(StrEnum):
    """Material quality tiers, cheapest first."""

    BUDGET = "budget"
    STANDARD = "standard"
    PREMIUM = "premium"
    LUXURY = "luxury"


class SiteAccess(StrEnum):
    """How hard it is to get crews and materials onto the job site."""

    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"
    VERY_DIFFICULT = "very-difficult"


class TimelineSensitivity(StrEnum):
    """Schedule pressure the client places on the project."""

    FLEXIBLE = "flexible"
    STANDARD = "standard"
    URGENT = "urgent"
