"""Project input models for the Costwise cost calculator."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from costwise.models.enums import MaterialQuality, SiteAccess, TimelineSensitivity

logger = logging.getLogger(__name__)


class CamelModel(BaseModel):
    """Base model whose JSON names are camelCase.

    Both ``material_quality`` and ``materialQuality`` are accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _coerce_choice(value: Any, enum_cls: type[StrEnum], default: StrEnum) -> Any:
    """Map a loose string onto an enum member, falling back to ``default``."""
    if isinstance(value, enum_cls):
        return value
    if value is None:
        return default
    key = str(value).strip().lower().replace("_", "-").replace(" ", "-")
    for member in enum_cls:
        if member.value == key:
            return member
    logger.warning(
        "Unknown %s value %r; using '%s'", enum_cls.__name__, value, default.value,
    )
    return default


class MaterialLineItem(CamelModel):
    """A single priced material on the bill of materials."""

    type: str
    quantity: float = Field(ge=0.1)
    unit: str = "unit"
    cost_per_unit: float = Field(ge=0.01)

    @property
    def total(self) -> float:
        return self.quantity * self.cost_per_unit


class LaborLineItem(CamelModel):
    """A crew of one trade working a fixed number of hours."""

    type: str
    workers: int = Field(ge=1)
    hours: float = Field(ge=1)
    hourly_rate: float = Field(ge=0.01)

    @property
    def total(self) -> float:
        return self.workers * self.hours * self.hourly_rate


class ProjectInput(CamelModel):
    """Normalized, fully-typed input to the cost calculator.

    Produced by the estimate assembler from raw form or chat input. Unknown
    categorical values (quality, site access, timeline sensitivity) fall back
    to their neutral defaults rather than failing validation.
    """

    project_type: str = "kitchen-remodel"
    area: float = Field(gt=0)
    material_quality: MaterialQuality = MaterialQuality.STANDARD
    timeline: str = "4-8 weeks"
    zip_code: str | None = None
    description: str | None = None

    materials: list[MaterialLineItem] = Field(default_factory=list)
    labor_types: list[LaborLineItem] = Field(default_factory=list)

    # Legacy scalar labor, only used when labor_types is empty
    labor_workers: float = Field(default=2, ge=0)
    labor_hours: float = Field(default=24, ge=0)
    labor_rate: float = Field(default=45, ge=0)

    permit_needed: bool = True
    demolition_required: bool = True
    site_access: SiteAccess = SiteAccess.MODERATE
    timeline_sensitivity: TimelineSensitivity = TimelineSensitivity.STANDARD

    @field_validator("material_quality", mode="before")
    @classmethod
    def _default_material_quality(cls, v: Any) -> Any:
        return _coerce_choice(v, MaterialQuality, MaterialQuality.STANDARD)

    @field_validator("site_access", mode="before")
    @classmethod
    def _default_site_access(cls, v: Any) -> Any:
        return _coerce_choice(v, SiteAccess, SiteAccess.MODERATE)

    @field_validator("timeline_sensitivity", mode="before")
    @classmethod
    def _default_timeline_sensitivity(cls, v: Any) -> Any:
        return _coerce_choice(v, TimelineSensitivity, TimelineSensitivity.STANDARD)

    @field_validator("area")
    @classmethod
    def area_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            msg = "area must be greater than 0"
            raise ValueError(msg)
        return v
