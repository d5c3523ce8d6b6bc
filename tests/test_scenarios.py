"""Tests for what-if scenario recalculation against stored estimates."""

from __future__ import annotations

import json
from typing import Any

import pytest

from costwise.data.repository import InMemoryEstimateRepository
from costwise.exceptions import EstimateValidationError
from costwise.factory import create_default_assembler
from costwise.models.enums import MaterialQuality
from costwise.models.estimate import Estimate
from costwise.services.assembler import EstimateAssembler
from costwise.services.scenarios import (
    PRESET_SCENARIOS,
    ScenarioRecalculator,
    compute_impact,
)

_KITCHEN: dict[str, Any] = {
    "projectType": "kitchen-remodel",
    "area": 350,
    "materialQuality": "standard",
    "laborTypes": [{"type": "general", "workers": 2, "hours": 24, "hourlyRate": 45}],
    "permitNeeded": True,
    "demolitionRequired": True,
}


@pytest.fixture()
def repository() -> InMemoryEstimateRepository:
    return InMemoryEstimateRepository()


@pytest.fixture()
def assembler(repository: InMemoryEstimateRepository) -> EstimateAssembler:
    return create_default_assembler(repository)


@pytest.fixture()
def recalculator(assembler: EstimateAssembler) -> ScenarioRecalculator:
    return ScenarioRecalculator(assembler)


@pytest.fixture()
def kitchen(assembler: EstimateAssembler) -> Estimate:
    """The stored 350 SF reference kitchen ($14,872)."""
    return assembler.assemble(_KITCHEN)


# ---------------------------------------------------------------------------
# compute_impact
# ---------------------------------------------------------------------------


class TestComputeImpact:
    def test_increase(self) -> None:
        impact = compute_impact(11000.0, 10000.0)
        assert impact.cost_difference == 1000.0
        assert impact.percentage_change == 10.0

    def test_decrease_rounded_to_two_places(self) -> None:
        impact = compute_impact(12859.0, 14872.0)
        assert impact.cost_difference == -2013.0
        assert impact.percentage_change == pytest.approx(-13.54)

    def test_zero_baseline_has_no_percentage(self) -> None:
        impact = compute_impact(5000.0, 0.0)
        assert impact.cost_difference == 5000.0
        assert impact.percentage_change is None

    def test_half_hundredth_rounds_away_from_zero(self) -> None:
        # 1 / 800 = 0.125%
        assert compute_impact(801.0, 800.0).percentage_change == 0.13
        assert compute_impact(799.0, 800.0).percentage_change == -0.13


# ---------------------------------------------------------------------------
# recalculate
# ---------------------------------------------------------------------------


class TestRecalculate:
    def test_no_overrides_reproduces_total(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        result = recalculator.recalculate(kitchen, {})
        assert result.estimated_cost == kitchen.estimated_cost
        assert result.impact.cost_difference == 0.0
        assert result.impact.percentage_change == 0.0
        assert result.changes == {}

    def test_budget_materials_reduce_cost(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        result = recalculator.recalculate(kitchen, {"materialQuality": "budget"})
        assert result.estimated_cost == 12859
        assert result.impact.cost_difference == -2013.0
        assert result.impact.percentage_change is not None
        assert result.impact.percentage_change < 0

    def test_premium_materials_increase_cost(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        result = recalculator.recalculate(kitchen, {"materialQuality": "premium"})
        assert result.estimated_cost == 18897
        assert result.impact.cost_difference > 0

    def test_adding_a_worker(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        labor = [{"type": "general", "workers": 3, "hours": 24, "hourlyRate": 45}]
        result = recalculator.recalculate(kitchen, {"laborTypes": labor})
        assert result.labor_cost == 3240.0
        assert result.estimated_cost > kitchen.estimated_cost

    def test_string_overrides_are_coerced(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        result = recalculator.recalculate(kitchen, {"area": "700", "permitNeeded": "false"})
        assert result.permit_cost == 0.0
        assert result.material_cost == pytest.approx(700 * 25.0)

    def test_changes_only_record_differences(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        result = recalculator.recalculate(
            kitchen,
            {
                "materialQuality": "premium",
                "area": 350,
                "projectType": "kitchen-remodel",
                "favoriteColor": "teal",
            },
        )
        assert result.changes == {"material_quality": "premium"}

    def test_original_not_mutated(
        self,
        recalculator: ScenarioRecalculator,
        kitchen: Estimate,
        repository: InMemoryEstimateRepository,
    ) -> None:
        before = kitchen.model_dump()
        recalculator.recalculate(kitchen, {"materialQuality": "luxury", "area": 900})
        assert kitchen.model_dump() == before
        assert repository.get(kitchen.id) == kitchen  # type: ignore[arg-type]
        assert kitchen.material_quality == MaterialQuality.STANDARD

    def test_result_not_persisted(
        self,
        recalculator: ScenarioRecalculator,
        kitchen: Estimate,
        repository: InMemoryEstimateRepository,
    ) -> None:
        recalculator.recalculate(kitchen, {"materialQuality": "budget"})
        assert len(repository) == 1

    def test_zero_baseline_guard(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        zero = kitchen.model_copy(update={"estimated_cost": 0.0})
        result = recalculator.recalculate(zero, {"materialQuality": "budget"})
        assert result.impact.percentage_change is None
        assert result.impact.cost_difference == 12859

    def test_invalid_override_rejected(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        with pytest.raises(EstimateValidationError):
            recalculator.recalculate(kitchen, {"area": 0})

    def test_estimate_shaped_body_reports_only_real_changes(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        body = kitchen.to_response_dict()
        body["materialQuality"] = "budget"
        result = recalculator.recalculate(kitchen, body)
        assert result.changes == {"material_quality": "budget"}

    def test_equivalent_values_are_not_changes(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        result = recalculator.recalculate(
            kitchen,
            {
                "area": "350",
                "permitNeeded": "on",
                "laborTypes": json.dumps(
                    [{"type": "general", "workers": "2", "hours": "24", "hourlyRate": "45"}]
                ),
            },
        )
        assert result.changes == {}
        assert result.estimated_cost == kitchen.estimated_cost

    def test_changes_hold_normalized_values(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        result = recalculator.recalculate(kitchen, {"area": "700", "siteAccess": "Very Difficult"})
        assert result.changes == {"area": 700.0, "site_access": "very-difficult"}


class TestScenarioDescription:
    def test_generated_description_follows_new_area(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        assert kitchen.description == "kitchen-remodel - 350 sq ft"
        result = recalculator.recalculate(kitchen, {"area": 700})
        assert result.project is not None
        assert result.project.description == "kitchen-remodel - 700 sq ft"
        assert "description" not in result.changes

    def test_generated_description_follows_new_type(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        result = recalculator.recalculate(kitchen, {"projectType": "bathroom-remodel"})
        assert result.project is not None
        assert result.project.description == "bathroom-remodel - 350 sq ft"

    def test_echoed_generated_description_is_regenerated(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        body = kitchen.to_response_dict()
        body["area"] = 500
        result = recalculator.recalculate(kitchen, body)
        assert result.project is not None
        assert result.project.description == "kitchen-remodel - 500 sq ft"
        assert result.changes == {"area": 500.0}

    def test_custom_description_kept(
        self, assembler: EstimateAssembler, recalculator: ScenarioRecalculator
    ) -> None:
        original = assembler.assemble({**_KITCHEN, "description": "Galley kitchen refresh"})
        result = recalculator.recalculate(original, {"area": 700})
        assert result.project is not None
        assert result.project.description == "Galley kitchen refresh"

    def test_description_override(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        result = recalculator.recalculate(kitchen, {"description": "Open-plan kitchen"})
        assert result.project is not None
        assert result.project.description == "Open-plan kitchen"
        assert result.changes == {"description": "Open-plan kitchen"}


# ---------------------------------------------------------------------------
# compare
# ---------------------------------------------------------------------------


class TestCompare:
    def test_without_baseline_compares_to_itself(
        self, recalculator: ScenarioRecalculator
    ) -> None:
        result = recalculator.compare(_KITCHEN)
        assert result.estimated_cost == 14872
        assert result.impact.cost_difference == 0.0
        assert result.changes == {}

    def test_against_baseline(self, recalculator: ScenarioRecalculator) -> None:
        result = recalculator.compare(_KITCHEN, baseline_cost=14000.0)
        assert result.impact.cost_difference == 872.0
        assert result.impact.percentage_change == pytest.approx(6.23)

    def test_not_persisted(
        self,
        recalculator: ScenarioRecalculator,
        repository: InMemoryEstimateRepository,
    ) -> None:
        recalculator.compare(_KITCHEN)
        assert len(repository) == 0


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


class TestPresetScenarios:
    def test_all_presets_priced(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        scenarios = recalculator.preset_scenarios(kitchen)
        assert set(scenarios) == set(PRESET_SCENARIOS)

    def test_preset_totals(
        self, recalculator: ScenarioRecalculator, kitchen: Estimate
    ) -> None:
        scenarios = recalculator.preset_scenarios(kitchen)
        assert scenarios["budget_option"].estimated_cost == 12859
        assert scenarios["premium_option"].estimated_cost == 18897
        # 14871.5 x 1.15 and x 0.9
        assert scenarios["rush_timeline"].estimated_cost == 17102
        assert scenarios["extended_timeline"].estimated_cost == 13384

    def test_presets_do_not_persist(
        self,
        recalculator: ScenarioRecalculator,
        kitchen: Estimate,
        repository: InMemoryEstimateRepository,
    ) -> None:
        recalculator.preset_scenarios(kitchen)
        assert len(repository) == 1
