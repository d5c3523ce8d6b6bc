"""Tests for the in-memory estimate repository."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from costwise.data.repository import EstimateRepository, InMemoryEstimateRepository
from costwise.engine import CostCalculator
from costwise.models.estimate import Estimate
from costwise.models.project import ProjectInput


def _make_draft(area: float = 350.0) -> Estimate:
    project = ProjectInput(area=area)
    breakdown = CostCalculator().calculate(project)
    return Estimate(
        **project.model_dump(),
        material_cost=breakdown.material_cost,
        labor_cost=breakdown.labor_cost,
        permit_cost=breakdown.permit_cost,
        soft_costs=breakdown.soft_costs,
        estimated_cost=breakdown.total,
        breakdown=breakdown,
        created_at=datetime(2024, 5, 1, 12, 0),
    )


class TestInMemoryEstimateRepository:
    def test_is_a_repository(self) -> None:
        assert isinstance(InMemoryEstimateRepository(), EstimateRepository)

    def test_add_assigns_id(self) -> None:
        repo = InMemoryEstimateRepository()
        draft = _make_draft()
        stored = repo.add(draft)
        assert stored.id == 1
        assert draft.id is None
        assert stored.estimated_cost == draft.estimated_cost

    def test_ids_strictly_increase(self) -> None:
        repo = InMemoryEstimateRepository()
        ids = [repo.add(_make_draft(area=100.0 + i)).id for i in range(5)]
        assert ids == [1, 2, 3, 4, 5]

    def test_get(self) -> None:
        repo = InMemoryEstimateRepository()
        stored = repo.add(_make_draft())
        assert repo.get(1) == stored

    def test_get_missing(self) -> None:
        assert InMemoryEstimateRepository().get(42) is None

    def test_list_newest_first(self) -> None:
        repo = InMemoryEstimateRepository()
        for area in (100.0, 200.0, 300.0):
            repo.add(_make_draft(area=area))
        listed = repo.list_estimates()
        assert [e.id for e in listed] == [3, 2, 1]
        assert [e.area for e in listed] == [300.0, 200.0, 100.0]

    def test_list_empty(self) -> None:
        assert InMemoryEstimateRepository().list_estimates() == []

    def test_len(self) -> None:
        repo = InMemoryEstimateRepository()
        assert len(repo) == 0
        repo.add(_make_draft())
        assert len(repo) == 1

    def test_seeded_estimates(self) -> None:
        repo = InMemoryEstimateRepository([_make_draft(100.0), _make_draft(200.0)])
        assert len(repo) == 2
        assert repo.get(2).area == 200.0  # type: ignore[union-attr]


class TestConcurrency:
    def test_concurrent_adds_get_unique_ids(self) -> None:
        repo = InMemoryEstimateRepository()
        draft = _make_draft()

        with ThreadPoolExecutor(max_workers=8) as pool:
            stored = list(pool.map(lambda _: repo.add(draft), range(200)))

        ids = [e.id for e in stored]
        assert len(set(ids)) == 200
        assert sorted(ids) == list(range(1, 201))
        assert len(repo) == 200
