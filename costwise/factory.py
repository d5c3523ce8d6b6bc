"""Factory functions for creating pre-configured Costwise components."""

from __future__ import annotations

from typing import TYPE_CHECKING

from costwise.data.pricing import DEFAULT_PRICING
from costwise.data.repository import InMemoryEstimateRepository
from costwise.engine import CostCalculator
from costwise.services.assembler import EstimateAssembler

if TYPE_CHECKING:
    from costwise.data.pricing import PricingTables
    from costwise.data.repository import EstimateRepository


def create_default_calculator(pricing: PricingTables | None = None) -> CostCalculator:
    """Create a CostCalculator wired up with the built-in pricing tables."""
    return CostCalculator(pricing or DEFAULT_PRICING)


def create_default_assembler(
    repository: EstimateRepository | None = None,
    pricing: PricingTables | None = None,
) -> EstimateAssembler:
    """Create an EstimateAssembler backed by an in-memory repository.

    This is the recommended way to get a working estimator for typical
    usage: it wires the default calculator to a fresh
    InMemoryEstimateRepository unless a repository is supplied.

    Example::

        from costwise import create_default_assembler

        assembler = create_default_assembler()
        estimate = assembler.assemble({"projectType": "kitchen-remodel", "area": "350"})
    """
    return EstimateAssembler(
        calculator=create_default_calculator(pricing),
        repository=(
            repository if repository is not None else InMemoryEstimateRepository()
        ),
    )
