"""Cost breakdown, estimate and scenario models for Costwise."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field, model_validator

from costwise.models.project import CamelModel, ProjectInput


class CostCategory(CamelModel):
    """One slice of the cost breakdown."""

    amount: float
    percentage: int


class CostBreakdown(CamelModel):
    """Calculator output: category amounts plus the raw components behind them.

    Category amounts are post-multiplier and always sum to ``total``. The raw
    ``*_cost`` fields are the pre-multiplier components the total was built
    from.
    """

    materials: CostCategory
    labor: CostCategory
    permits: CostCategory
    equipment_overhead: CostCategory
    total: float

    material_cost: float
    labor_cost: float
    permit_cost: float
    demolition_cost: float
    soft_costs: float
    base_cost: float

    access_multiplier: float = 1.0
    timeline_sensitivity_multiplier: float = 1.0
    schedule_multiplier: float = 1.0
    regional_multiplier: float = 1.0

    @model_validator(mode="after")
    def categories_sum_to_total(self) -> CostBreakdown:
        summed = (
            self.materials.amount
            + self.labor.amount
            + self.permits.amount
            + self.equipment_overhead.amount
        )
        # Whole-dollar tolerance, widened for totals beyond float cent precision
        if abs(summed - self.total) > max(1.0, abs(self.total) * 1e-9):
            msg = f"Category amounts sum to {summed}, expected total {self.total}"
            raise ValueError(msg)
        return self

    @property
    def combined_multiplier(self) -> float:
        return (
            self.access_multiplier
            * self.timeline_sensitivity_multiplier
            * self.schedule_multiplier
            * self.regional_multiplier
        )


class Estimate(ProjectInput):
    """A persisted estimate: the project input plus its computed costs.

    Estimates are immutable. ``id`` is ``None`` only on an unsaved draft; the
    repository assigns it exactly once when the estimate is stored.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    material_cost: float
    labor_cost: float
    permit_cost: float
    soft_costs: float
    estimated_cost: float
    breakdown: CostBreakdown
    created_at: datetime = Field(default_factory=datetime.now)

    def project_input(self) -> ProjectInput:
        """Rebuild the ProjectInput this estimate was computed from."""
        data = self.model_dump(include=set(ProjectInput.model_fields))
        return ProjectInput.model_validate(data)

    def to_response_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys for the HTTP API."""
        return self.model_dump(mode="json", by_alias=True)

    def to_summary_dict(self) -> dict[str, Any]:
        """Produce a flat, display-ready summary for the frontend."""
        from costwise.data.regional import regional_insight
        from costwise.formatting import format_currency

        categories = {
            "Materials": self.breakdown.materials,
            "Labor": self.breakdown.labor,
            "Permits": self.breakdown.permits,
            "Equipment & Overhead": self.breakdown.equipment_overhead,
        }
        top_driver = max(categories, key=lambda name: categories[name].amount)

        return {
            "id": self.id,
            "project_type": self.project_type,
            "area_formatted": f"{self.area:,.0f} SF",
            "material_quality": self.material_quality.value,
            "total_cost_formatted": format_currency(self.estimated_cost),
            "cost_per_sf_formatted": format_currency(self.estimated_cost / self.area),
            "categories": [
                {
                    "name": name,
                    "amount_formatted": format_currency(category.amount),
                    "percentage": category.percentage,
                }
                for name, category in categories.items()
            ],
            "top_cost_driver": top_driver,
            "regional_insight": regional_insight(self.zip_code),
            "created_at_formatted": self.created_at.strftime("%Y-%m-%d %H:%M"),
        }


class ScenarioImpact(CamelModel):
    """Cost delta of a what-if scenario against its baseline.

    ``percentage_change`` is None when the baseline total is zero.
    """

    cost_difference: float
    percentage_change: float | None


class ScenarioResult(CamelModel):
    """An ephemeral what-if recomputation. Never persisted."""

    changes: dict[str, Any] = Field(default_factory=dict)
    breakdown: CostBreakdown
    impact: ScenarioImpact
    # The repriced input; None on results built by hand
    project: ProjectInput | None = None

    @property
    def estimated_cost(self) -> float:
        return self.breakdown.total

    @property
    def material_cost(self) -> float:
        return self.breakdown.material_cost

    @property
    def labor_cost(self) -> float:
        return self.breakdown.labor_cost

    @property
    def permit_cost(self) -> float:
        return self.breakdown.permit_cost

    @property
    def soft_costs(self) -> float:
        return self.breakdown.soft_costs

    def to_response_dict(self) -> dict[str, Any]:
        """Flat camelCase payload matching the calculate-scenario contract."""
        return {
            "estimatedCost": self.estimated_cost,
            "materialCost": self.material_cost,
            "laborCost": self.labor_cost,
            "permitCost": self.permit_cost,
            "softCosts": self.soft_costs,
            "costDifference": self.impact.cost_difference,
            "percentageChange": self.impact.percentage_change,
            "changes": self.changes,
            "breakdown": self.breakdown.model_dump(mode="json", by_alias=True),
        }
