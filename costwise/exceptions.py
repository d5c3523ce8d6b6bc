"""Custom exception hierarchy for Costwise."""

from __future__ import annotations


class CostwiseError(Exception):
    """Base exception for all Costwise errors."""


class EstimateValidationError(CostwiseError):
    """Raised when project input fails validation.

    Carries a list of ``{"field": ..., "message": ...}`` dicts so the HTTP
    layer can report every offending field at once.
    """

    def __init__(self, errors: list[dict[str, str]]) -> None:
        self.errors = list(errors)
        fields = ", ".join(e["field"] for e in self.errors) or "input"
        super().__init__(f"Invalid project input: {fields}")


class CostEstimationError(CostwiseError):
    """Raised when cost estimation fails."""


class NarrativeError(CostwiseError):
    """Raised when the AI narrative collaborator fails."""
