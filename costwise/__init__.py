"""Costwise renovation cost estimation engine.

Usage::

    from costwise import create_default_assembler

    assembler = create_default_assembler()
    estimate = assembler.assemble({"projectType": "kitchen-remodel", "area": 350})
"""

from costwise.data.pricing import DEFAULT_PRICING, PricingTables
from costwise.data.repository import EstimateRepository, InMemoryEstimateRepository
from costwise.engine import CostCalculator
from costwise.exceptions import (
    CostEstimationError,
    CostwiseError,
    EstimateValidationError,
    NarrativeError,
)
from costwise.factory import create_default_assembler, create_default_calculator
from costwise.models.enums import MaterialQuality, SiteAccess, TimelineSensitivity
from costwise.models.estimate import (
    CostBreakdown,
    CostCategory,
    Estimate,
    ScenarioImpact,
    ScenarioResult,
)
from costwise.models.project import LaborLineItem, MaterialLineItem, ProjectInput
from costwise.services.assembler import EstimateAssembler
from costwise.services.scenarios import ScenarioRecalculator

__all__ = [
    "DEFAULT_PRICING",
    "CostBreakdown",
    "CostCalculator",
    "CostCategory",
    "CostEstimationError",
    "CostwiseError",
    "Estimate",
    "EstimateAssembler",
    "EstimateRepository",
    "EstimateValidationError",
    "InMemoryEstimateRepository",
    "LaborLineItem",
    "MaterialLineItem",
    "MaterialQuality",
    "NarrativeError",
    "PricingTables",
    "ProjectInput",
    "ScenarioImpact",
    "ScenarioRecalculator",
    "ScenarioResult",
    "SiteAccess",
    "TimelineSensitivity",
    "create_default_assembler",
    "create_default_calculator",
]
