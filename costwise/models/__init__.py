"""Domain models for the Costwise estimation engine."""

from costwise.models.enums import MaterialQuality, SiteAccess, TimelineSensitivity
from costwise.models.estimate import (
    CostBreakdown,
    CostCategory,
    Estimate,
    ScenarioImpact,
    ScenarioResult,
)
from costwise.models.project import LaborLineItem, MaterialLineItem, ProjectInput

__all__ = [
    "CostBreakdown",
    "CostCategory",
    "Estimate",
    "LaborLineItem",
    "MaterialLineItem",
    "MaterialQuality",
    "ProjectInput",
    "ScenarioImpact",
    "ScenarioResult",
    "SiteAccess",
    "TimelineSensitivity",
]
