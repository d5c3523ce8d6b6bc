"""Core cost calculator for the Costwise estimation library.

The CostCalculator turns a validated ProjectInput into a CostBreakdown:

1. **Material cost**: sum of the explicit materials list, or area times the
   project type's $/SF times the material quality multiplier.
2. **Labor cost**: sum of the labor crews, or the legacy
   workers x hours x rate fields when no crews are listed.
3. **Permit cost**: $0.50/SF with a $500 floor, only when permits apply.
4. **Soft costs**: demolition surcharge ($5/SF) plus 15% overhead on the
   base cost (materials + labor + permits).
5. **Multipliers**: site access, timeline sensitivity, timeline string
   (schedule bucket) and regional ZIP multipliers, applied to the
   post-overhead subtotal. The total is rounded to whole dollars.
6. **Category split**: materials, labor and permits are scaled by the same
   multipliers; equipment & overhead takes the remainder so the categories
   always sum to the total.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from costwise.data.pricing import DEFAULT_PRICING
from costwise.exceptions import CostEstimationError, EstimateValidationError
from costwise.models.estimate import CostBreakdown, CostCategory

if TYPE_CHECKING:
    from costwise.data.pricing import PricingTables
    from costwise.models.project import ProjectInput

logger = logging.getLogger(__name__)

ENGINE_VERSION = "0.1.0"


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round half away from zero, as currency is rounded on an invoice.

    Raises:
        CostEstimationError: If the value cannot be represented at the
            requested precision.
    """
    factor = 10 ** ndigits
    # Trim float noise first so 1711.4999999999998 rounds like 1711.5
    scaled = round(abs(value) * factor, 6)
    if not math.isfinite(scaled):
        msg = f"Cannot round {value!r} to {ndigits} decimal places"
        raise CostEstimationError(msg)
    return math.floor(scaled + 0.5) / factor * math.copysign(1, value)


class CostCalculator:
    """Pure calculator that converts a ProjectInput into a CostBreakdown.

    Args:
        pricing: The pricing tables to apply. Defaults to the built-in tables.

    Example::

        calculator = CostCalculator()
        breakdown = calculator.calculate(ProjectInput(area=350))
    """

    def __init__(self, pricing: PricingTables | None = None) -> None:
        self._pricing = pricing or DEFAULT_PRICING

    @property
    def pricing(self) -> PricingTables:
        return self._pricing

    def calculate(self, project: ProjectInput) -> CostBreakdown:
        """Compute the cost breakdown for a project.

        Raises:
            EstimateValidationError: If the area is not positive.
            CostEstimationError: If the pricing tables produce a non-finite
                total.
        """
        if not project.area > 0:
            raise EstimateValidationError(
                [{"field": "area", "message": "area must be greater than 0"}]
            )

        pricing = self._pricing

        material_cost = self._material_cost(project)
        labor_cost = self._labor_cost(project)

        permit_cost = 0.0
        if project.permit_needed:
            permit_cost = max(
                pricing.permit_minimum, project.area * pricing.permit_rate_per_sf
            )

        demolition_cost = 0.0
        if project.demolition_required:
            demolition_cost = project.area * pricing.demolition_rate_per_sf

        base_cost = material_cost + labor_cost + permit_cost
        soft_costs = demolition_cost + base_cost * pricing.overhead_rate

        access = pricing.get_access_multiplier(project.site_access)
        sensitivity = pricing.get_timeline_sensitivity_multiplier(
            project.timeline_sensitivity
        )
        schedule = pricing.get_schedule_multiplier(project.timeline)
        regional = pricing.get_regional_multiplier(project.zip_code)
        multiplier = access * sensitivity * schedule * regional

        subtotal = (base_cost + soft_costs) * multiplier
        if not math.isfinite(subtotal):
            msg = f"Cost calculation for {project.project_type} produced {subtotal}"
            raise CostEstimationError(msg)
        total = round_half_up(subtotal)

        logger.debug(
            "Calculated %s: base=%.2f soft=%.2f multiplier=%.4f total=%.0f",
            project.project_type, base_cost, soft_costs, multiplier, total,
        )

        materials_amount = round_half_up(material_cost * multiplier, 2)
        labor_amount = round_half_up(labor_cost * multiplier, 2)
        permits_amount = round_half_up(permit_cost * multiplier, 2)
        overhead_amount = round_half_up(
            total - materials_amount - labor_amount - permits_amount, 2
        )

        return CostBreakdown(
            materials=self._category(materials_amount, total),
            labor=self._category(labor_amount, total),
            permits=self._category(permits_amount, total),
            equipment_overhead=self._category(overhead_amount, total),
            total=total,
            material_cost=round_half_up(material_cost, 2),
            labor_cost=round_half_up(labor_cost, 2),
            permit_cost=round_half_up(permit_cost, 2),
            demolition_cost=round_half_up(demolition_cost, 2),
            soft_costs=round_half_up(soft_costs, 2),
            base_cost=round_half_up(base_cost, 2),
            access_multiplier=access,
            timeline_sensitivity_multiplier=sensitivity,
            schedule_multiplier=schedule,
            regional_multiplier=regional,
        )

    def _material_cost(self, project: ProjectInput) -> float:
        if project.materials:
            return sum(item.total for item in project.materials)
        per_sf = self._pricing.get_material_cost_per_sf(project.project_type)
        quality = self._pricing.get_quality_multiplier(project.material_quality)
        return project.area * per_sf * quality

    @staticmethod
    def _labor_cost(project: ProjectInput) -> float:
        if project.labor_types:
            return sum(item.total for item in project.labor_types)
        return project.labor_workers * project.labor_hours * project.labor_rate

    @staticmethod
    def _category(amount: float, total: float) -> CostCategory:
        percentage = int(round_half_up(amount / total * 100)) if total > 0 else 0
        return CostCategory(amount=amount, percentage=percentage)
