"""Estimate assembler: normalizes raw project input and persists estimates.

Raw input arrives from HTML forms, JSON bodies and the conversational
assistant, so every value may be a string, missing, or malformed. The
assembler is the single boundary where that input is coerced, defaulted and
validated; the calculator only ever sees a fully-typed ProjectInput.
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError
from pydantic.alias_generators import to_snake

from costwise.exceptions import EstimateValidationError
from costwise.models.estimate import Estimate
from costwise.models.project import ProjectInput

if TYPE_CHECKING:
    from costwise.data.repository import EstimateRepository
    from costwise.engine import CostCalculator

logger = logging.getLogger(__name__)

# Canonical defaults for fields absent from partial input. Shared by the
# detailed form and the conversational assistant.
FIELD_DEFAULTS: dict[str, Any] = {
    "project_type": "kitchen-remodel",
    "material_quality": "standard",
    "timeline": "4-8 weeks",
    "labor_workers": 2.0,
    "labor_hours": 24.0,
    "labor_rate": 45.0,
    "site_access": "moderate",
    "timeline_sensitivity": "standard",
    "permit_needed": True,
    "demolition_required": True,
}

_KEY_ALIASES: dict[str, str] = {
    "square_footage": "area",
    "sqft": "area",
    "zip": "zip_code",
}

_STRING_FIELDS = (
    "project_type",
    "material_quality",
    "timeline",
    "site_access",
    "timeline_sensitivity",
)
_SCALAR_LABOR_FIELDS = ("labor_workers", "labor_hours", "labor_rate")
_BOOLEAN_FIELDS = ("permit_needed", "demolition_required")

_MATERIAL_NUMERIC_KEYS = ("quantity", "cost_per_unit")
_LABOR_NUMERIC_KEYS = ("workers", "hours", "hourly_rate")

_TRUE_STRINGS = {"true", "on", "yes", "y", "1"}
_FALSE_STRINGS = {"false", "off", "no", "n", "0", ""}

# Keys computed by the calculator or owned by the repository; never taken
# from raw input.
COMPUTED_FIELDS = frozenset({
    "id",
    "material_cost",
    "labor_cost",
    "permit_cost",
    "soft_costs",
    "estimated_cost",
    "breakdown",
    "created_at",
})


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_number(value: Any, default: float = 0.0) -> float:
    """Coerce a loose value to a finite float.

    Missing or blank values take ``default``; anything non-numeric (or NaN,
    or infinite) becomes 0.0.
    """
    if _is_blank(value):
        return default
    if isinstance(value, bool):
        return float(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def coerce_bool(value: Any, default: bool) -> bool:
    """Coerce form-style booleans ('on', 'true', '1', ...) to bool."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    text = str(value).strip().lower()
    if text in _TRUE_STRINGS:
        return True
    if text in _FALSE_STRINGS:
        return False
    logger.warning("Unrecognized boolean value %r; using %s", value, default)
    return default


def snake_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for key, value in raw.items():
        snake = to_snake(str(key))
        data[_KEY_ALIASES.get(snake, snake)] = value
    return data


def parse_line_items(
    value: Any,
    field_name: str,
    numeric_keys: tuple[str, ...],
) -> list[dict[str, Any]]:
    """Parse a materials/labor list that may arrive as a JSON string.

    Unparseable input is logged and treated as an empty list so the estimate
    falls back to per-SF or legacy pricing.
    """
    if _is_blank(value):
        return []
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Could not parse %s JSON; treating as empty", field_name)
            return []
    if not isinstance(value, list):
        logger.warning(
            "Expected a list for %s, got %s; treating as empty",
            field_name, type(value).__name__,
        )
        return []

    items: list[dict[str, Any]] = []
    for item in value:
        if not isinstance(item, Mapping):
            # Keep it so validation reports the bad entry by position
            items.append(item)
            continue
        normalized = snake_keys(item)
        for key in numeric_keys:
            normalized[key] = coerce_number(normalized.get(key), 0.0)
        items.append(normalized)
    return items


def default_description(project_type: str, area: float) -> str:
    """Description given to projects submitted without one."""
    return f"{project_type} - {area:g} sq ft"


def validation_errors(exc: ValidationError) -> list[dict[str, str]]:
    """Flatten a pydantic ValidationError into field/message pairs."""
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]) or "input",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


class EstimateAssembler:
    """Turns raw project input into a validated, priced, persisted Estimate.

    Args:
        calculator: The cost calculator used to price each project.
        repository: Storage collaborator; assigns ids to stored estimates.
    """

    def __init__(
        self,
        calculator: CostCalculator,
        repository: EstimateRepository,
    ) -> None:
        self._calculator = calculator
        self._repository = repository

    @property
    def calculator(self) -> CostCalculator:
        return self._calculator

    @property
    def repository(self) -> EstimateRepository:
        return self._repository

    def normalize(self, raw: Mapping[str, Any]) -> ProjectInput:
        """Coerce, default and validate raw input into a ProjectInput.

        Raises:
            EstimateValidationError: With one entry per offending field.
        """
        data = snake_keys(raw)
        for key in COMPUTED_FIELDS:
            data.pop(key, None)

        data["area"] = coerce_number(data.get("area"), 0.0)

        for key in _SCALAR_LABOR_FIELDS:
            data[key] = coerce_number(data.get(key), FIELD_DEFAULTS[key])

        for key in _BOOLEAN_FIELDS:
            data[key] = coerce_bool(data.get(key), FIELD_DEFAULTS[key])

        for key in _STRING_FIELDS:
            value = data.get(key)
            data[key] = FIELD_DEFAULTS[key] if _is_blank(value) else str(value).strip()

        zip_code = data.get("zip_code")
        data["zip_code"] = None if _is_blank(zip_code) else str(zip_code).strip()

        data["materials"] = parse_line_items(
            data.get("materials"), "materials", _MATERIAL_NUMERIC_KEYS,
        )
        data["labor_types"] = parse_line_items(
            data.get("labor_types"), "labor_types", _LABOR_NUMERIC_KEYS,
        )

        if _is_blank(data.get("description")):
            data["description"] = default_description(data["project_type"], data["area"])

        known = set(ProjectInput.model_fields)
        ignored = sorted(set(data) - known)
        if ignored:
            logger.debug("Ignoring unrecognized input fields: %s", ", ".join(ignored))

        try:
            return ProjectInput.model_validate({k: v for k, v in data.items() if k in known})
        except ValidationError as exc:
            raise EstimateValidationError(validation_errors(exc)) from exc

    def price(self, project: ProjectInput) -> Estimate:
        """Price a normalized project into an unsaved draft Estimate."""
        breakdown = self._calculator.calculate(project)
        return Estimate(
            **project.model_dump(),
            material_cost=breakdown.material_cost,
            labor_cost=breakdown.labor_cost,
            permit_cost=breakdown.permit_cost,
            soft_costs=breakdown.soft_costs,
            estimated_cost=breakdown.total,
            breakdown=breakdown,
        )

    def preview(self, raw: Mapping[str, Any]) -> Estimate:
        """Normalize and price raw input without persisting it."""
        return self.price(self.normalize(raw))

    def assemble(self, raw: Mapping[str, Any]) -> Estimate:
        """Normalize, price and persist raw input as a new Estimate.

        Nothing is stored if validation fails.

        Raises:
            EstimateValidationError: If the input is invalid.
        """
        draft = self.preview(raw)
        estimate = self._repository.add(draft)
        logger.info(
            "Assembled estimate %s: %s, %.0f SF, $%.0f",
            estimate.id, estimate.project_type, estimate.area, estimate.estimated_cost,
        )
        return estimate
