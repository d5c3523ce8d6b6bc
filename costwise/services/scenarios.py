"""What-if scenario recalculation.

A scenario merges a handful of overrides ("switch to premium materials",
"add a worker", "rush the timeline") onto a stored estimate's inputs and
reprices the result. Scenarios are ephemeral: the original estimate is never
mutated and the recalculated result is never persisted.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from costwise.engine import round_half_up
from costwise.models.estimate import ScenarioImpact, ScenarioResult
from costwise.models.project import ProjectInput
from costwise.services.assembler import default_description, snake_keys

if TYPE_CHECKING:
    from costwise.models.estimate import CostBreakdown, Estimate
    from costwise.services.assembler import EstimateAssembler

logger = logging.getLogger(__name__)

# Standard alternatives offered alongside every estimate.
PRESET_SCENARIOS: dict[str, dict[str, Any]] = {
    "budget_option": {"material_quality": "budget"},
    "premium_option": {"material_quality": "premium"},
    "rush_timeline": {"timeline": "2-4 weeks"},
    "extended_timeline": {"timeline": "3-6 months"},
}


def compute_impact(new_total: float, baseline_total: float) -> ScenarioImpact:
    """Cost delta against a baseline; percentage is None for a zero baseline."""
    difference = new_total - baseline_total
    percentage: float | None = None
    if baseline_total != 0:
        percentage = round_half_up(difference / baseline_total * 100, 2)
    return ScenarioImpact(cost_difference=difference, percentage_change=percentage)


class ScenarioRecalculator:
    """Reprices estimates under hypothetical field overrides.

    Args:
        assembler: Used to normalize merged input exactly as new estimates
            are normalized, so overrides may be as loose as raw form input.
    """

    def __init__(self, assembler: EstimateAssembler) -> None:
        self._assembler = assembler

    def recalculate(
        self,
        original: Estimate,
        overrides: Mapping[str, Any],
    ) -> ScenarioResult:
        """Rerun the calculator on ``original`` with ``overrides`` applied.

        ``changes`` lists the overridden input fields whose normalized value
        differs from the original's.

        Raises:
            EstimateValidationError: If the merged input is invalid.
        """
        base = original.project_input()
        requested = {
            k: v for k, v in snake_keys(overrides).items()
            if k in ProjectInput.model_fields
        }

        merged: dict[str, Any] = base.model_dump()
        generated = default_description(base.project_type, base.area)
        if (
            base.description == generated
            and requested.get("description", generated) == generated
        ):
            # Regenerate for the scenario's type and area
            del merged["description"]
            requested.pop("description", None)
        merged.update(requested)

        project, breakdown = self._reprice(merged)
        impact = compute_impact(breakdown.total, original.estimated_cost)

        before = base.model_dump(mode="json")
        after = project.model_dump(mode="json")
        changes = {k: after[k] for k in requested if after[k] != before[k]}

        logger.info(
            "Scenario on estimate %s (%s): $%.0f -> $%.0f",
            original.id, ", ".join(sorted(changes)) or "no changes",
            original.estimated_cost, breakdown.total,
        )
        return ScenarioResult(
            changes=changes, breakdown=breakdown, impact=impact, project=project,
        )

    def compare(
        self,
        raw: Mapping[str, Any],
        baseline_cost: float | None = None,
    ) -> ScenarioResult:
        """Price a free-standing payload and compare it to ``baseline_cost``.

        Without a baseline the payload is compared against itself, so the
        difference is zero.
        """
        project, breakdown = self._reprice(raw)
        baseline = breakdown.total if baseline_cost is None else baseline_cost
        impact = compute_impact(breakdown.total, baseline)
        return ScenarioResult(breakdown=breakdown, impact=impact, project=project)

    def preset_scenarios(self, original: Estimate) -> dict[str, ScenarioResult]:
        """Price the standard budget/premium/rush/extended alternatives."""
        return {
            name: self.recalculate(original, overrides)
            for name, overrides in PRESET_SCENARIOS.items()
        }

    def _reprice(self, raw: Mapping[str, Any]) -> tuple[ProjectInput, CostBreakdown]:
        project = self._assembler.normalize(raw)
        return project, self._assembler.calculator.calculate(project)
