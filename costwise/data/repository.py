"""Estimate storage.

The repository owns estimate identity: it assigns each stored estimate a
unique, increasing integer id. The in-memory implementation is safe across
threads of one process only; a multi-process deployment needs a repository
backed by a database sequence.
"""

from __future__ import annotations

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from costwise.models.estimate import Estimate

logger = logging.getLogger(__name__)


class EstimateRepository(ABC):
    """Storage interface for persisted estimates."""

    @abstractmethod
    def add(self, draft: Estimate) -> Estimate:
        """Store a draft estimate and return it with its assigned id."""

    @abstractmethod
    def get(self, estimate_id: int) -> Estimate | None:
        """Return the estimate with ``estimate_id``, or None."""

    @abstractmethod
    def list_estimates(self) -> list[Estimate]:
        """Return every stored estimate, newest first."""


class InMemoryEstimateRepository(EstimateRepository):
    """Process-local estimate store with a monotonically increasing id."""

    def __init__(self, estimates: list[Estimate] | None = None) -> None:
        self._lock = threading.Lock()
        self._estimates: dict[int, Estimate] = {}
        self._ids = itertools.count(1)
        for estimate in estimates or []:
            self.add(estimate)

    def add(self, draft: Estimate) -> Estimate:
        with self._lock:
            estimate_id = next(self._ids)
            stored = draft.model_copy(update={"id": estimate_id})
            self._estimates[estimate_id] = stored
        logger.info(
            "Stored estimate %d (%s, $%.0f)",
            estimate_id, stored.project_type, stored.estimated_cost,
        )
        return stored

    def get(self, estimate_id: int) -> Estimate | None:
        with self._lock:
            return self._estimates.get(estimate_id)

    def list_estimates(self) -> list[Estimate]:
        with self._lock:
            estimates = list(self._estimates.values())
        # Ids are assigned in creation order, so the highest id is newest
        return sorted(estimates, key=lambda e: e.id or 0, reverse=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._estimates)
