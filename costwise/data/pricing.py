"""Static pricing tables for the Costwise cost calculator.

Every rate and multiplier the calculator applies lives here, bundled into a
single immutable :class:`PricingTables` object so callers can substitute
their own tables (e.g. in tests) without touching the calculator.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from costwise.data.regional import (
    DEFAULT_REGIONAL_MULTIPLIER,
    REGIONAL_MULTIPLIERS,
    normalize_zip,
)
from costwise.models.enums import MaterialQuality, SiteAccess, TimelineSensitivity

# Material cost per SF at standard quality, used when no explicit
# materials list is supplied.
MATERIAL_COST_PER_SF: dict[str, float] = {
    "kitchen-remodel": 25.0,
    "bathroom-remodel": 35.0,
    "home-addition": 45.0,
    "deck-construction": 15.0,
    "flooring-installation": 6.0,
    "roofing-replacement": 5.0,
    "siding-installation": 4.0,
}

DEFAULT_MATERIAL_COST_PER_SF: float = 25.0

QUALITY_MULTIPLIERS: dict[MaterialQuality, float] = {
    MaterialQuality.BUDGET: 0.8,
    MaterialQuality.STANDARD: 1.0,
    MaterialQuality.PREMIUM: 1.4,
    MaterialQuality.LUXURY: 1.8,
}

ACCESS_MULTIPLIERS: dict[SiteAccess, float] = {
    SiteAccess.EASY: 1.0,
    SiteAccess.MODERATE: 1.0,
    SiteAccess.DIFFICULT: 1.15,
    SiteAccess.VERY_DIFFICULT: 1.25,
}

TIMELINE_SENSITIVITY_MULTIPLIERS: dict[TimelineSensitivity, float] = {
    TimelineSensitivity.FLEXIBLE: 0.95,
    TimelineSensitivity.STANDARD: 1.0,
    TimelineSensitivity.URGENT: 1.2,
}

# Keyed by the lower-cased timeline string. Independent of timeline
# sensitivity; both multipliers are applied.
SCHEDULE_MULTIPLIERS: dict[str, float] = {
    "rush": 1.3,
    "expedited": 1.3,
    "fast": 1.15,
    "standard": 1.0,
    "extended": 0.9,
    "1-2 weeks": 1.25,
    "2-4 weeks": 1.15,
    "4-8 weeks": 1.0,
    "8-12 weeks": 0.95,
    "3-6 months": 0.9,
    "6+ months": 0.9,
}

PERMIT_MINIMUM: float = 500.0
PERMIT_RATE_PER_SF: float = 0.5
DEMOLITION_RATE_PER_SF: float = 5.0
OVERHEAD_RATE: float = 0.15

PRICING_VERSION = "2024.4"


class PricingTables(BaseModel):
    """Immutable bundle of every rate the calculator uses.

    Lookups never raise: unknown keys resolve to the neutral value for that
    table (1.0 for multipliers, the default $/SF for project types).
    """

    model_config = ConfigDict(frozen=True)

    material_cost_per_sf: dict[str, float] = Field(
        default_factory=lambda: dict(MATERIAL_COST_PER_SF)
    )
    default_material_cost_per_sf: float = DEFAULT_MATERIAL_COST_PER_SF
    quality_multipliers: dict[MaterialQuality, float] = Field(
        default_factory=lambda: dict(QUALITY_MULTIPLIERS)
    )
    access_multipliers: dict[SiteAccess, float] = Field(
        default_factory=lambda: dict(ACCESS_MULTIPLIERS)
    )
    timeline_sensitivity_multipliers: dict[TimelineSensitivity, float] = Field(
        default_factory=lambda: dict(TIMELINE_SENSITIVITY_MULTIPLIERS)
    )
    schedule_multipliers: dict[str, float] = Field(
        default_factory=lambda: dict(SCHEDULE_MULTIPLIERS)
    )
    regional_multipliers: dict[str, float] = Field(
        default_factory=lambda: dict(REGIONAL_MULTIPLIERS)
    )
    permit_minimum: float = PERMIT_MINIMUM
    permit_rate_per_sf: float = PERMIT_RATE_PER_SF
    demolition_rate_per_sf: float = DEMOLITION_RATE_PER_SF
    overhead_rate: float = OVERHEAD_RATE
    version: str = PRICING_VERSION

    def get_material_cost_per_sf(self, project_type: str) -> float:
        key = project_type.strip().lower()
        return self.material_cost_per_sf.get(key, self.default_material_cost_per_sf)

    def get_quality_multiplier(self, quality: MaterialQuality) -> float:
        return self.quality_multipliers.get(quality, 1.0)

    def get_access_multiplier(self, site_access: SiteAccess) -> float:
        return self.access_multipliers.get(site_access, 1.0)

    def get_timeline_sensitivity_multiplier(
        self, sensitivity: TimelineSensitivity
    ) -> float:
        return self.timeline_sensitivity_multipliers.get(sensitivity, 1.0)

    def get_schedule_multiplier(self, timeline: str | None) -> float:
        """Multiplier for a free-form timeline string (case-insensitive)."""
        if not timeline:
            return 1.0
        return self.schedule_multipliers.get(timeline.strip().lower(), 1.0)

    def get_regional_multiplier(self, zip_code: str | None) -> float:
        """Regional multiplier for a ZIP; 1.0 when missing or unknown."""
        key = normalize_zip(zip_code)
        if key is None:
            return DEFAULT_REGIONAL_MULTIPLIER
        return self.regional_multipliers.get(key, DEFAULT_REGIONAL_MULTIPLIER)


DEFAULT_PRICING = PricingTables()
