"""Scenario narrator: asks the Anthropic Messages API to explain a cost change.

The narrative is decoration on top of the numbers. Any failure (missing key,
API error, empty reply) degrades to a fixed explanation; it never prevents a
scenario from being returned.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import anthropic

from costwise.exceptions import NarrativeError
from costwise.formatting import (
    format_cost_difference,
    format_currency,
    format_percentage_change,
)

if TYPE_CHECKING:
    from costwise.models.estimate import Estimate, ScenarioResult

logger = logging.getLogger(__name__)

FALLBACK_EXPLANATION = "Cost adjusted based on project modifications."

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

SYSTEM_PROMPT = (
    "You are a senior construction estimator explaining project "
    "modifications to a client or project stakeholder.\n\n"
    "Provide a clear, professional explanation that:\n"
    "- Identifies the key cost drivers\n"
    "- Explains the percentage impact and why\n"
    "- Includes one practical insight about the change\n"
    "- Uses confident, consultative language\n\n"
    "Keep the response to 2-3 sentences."
)


class ScenarioNarrator:
    """Generates a short plain-English explanation of a what-if scenario."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = 30.0,
        max_tokens: int = 200,
        max_retries: int = 0,
    ) -> None:
        self._client = anthropic.Anthropic(
            api_key=api_key, timeout=timeout, max_retries=max_retries,
        )
        self._model = model
        self._max_tokens = max_tokens

    def explain(
        self,
        result: ScenarioResult,
        original: Estimate | None = None,
    ) -> str:
        """Return an explanation, or FALLBACK_EXPLANATION on any failure."""
        try:
            return self.generate(result, original)
        except NarrativeError:
            logger.warning("Scenario narrative unavailable; using fallback", exc_info=True)
            return FALLBACK_EXPLANATION

    def generate(
        self,
        result: ScenarioResult,
        original: Estimate | None = None,
    ) -> str:
        """Call the API and return its text.

        Raises:
            NarrativeError: If the API call fails or returns no text.
        """
        prompt = build_scenario_prompt(result, original)
        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=0.3,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            msg = f"Narrative request failed: {exc}"
            raise NarrativeError(msg) from exc

        text_blocks = [block.text for block in response.content if block.type == "text"]
        text = "\n".join(text_blocks).strip()
        if not text:
            msg = "Narrative response contained no text"
            raise NarrativeError(msg)
        return text


def build_scenario_prompt(
    result: ScenarioResult,
    original: Estimate | None = None,
) -> str:
    """Render the user prompt describing a scenario and its financial impact."""
    lines = ["SCENARIO ANALYSIS", ""]

    if original is not None:
        lines += [
            "Original project:",
            f"- Type: {original.project_type}",
            f"- Area: {original.area:,.0f} sq ft",
            f"- Material quality: {original.material_quality.value}",
            f"- Timeline: {original.timeline}",
            f"- Original total: {format_currency(original.estimated_cost)}",
            "",
        ]

    if result.changes:
        lines.append("Modified parameters:")
        lines += [f"- {key}: {value}" for key, value in sorted(result.changes.items())]
        lines.append("")

    lines += [
        "Financial impact:",
        f"- New total: {format_currency(result.estimated_cost)}",
        f"- Material costs: {format_currency(result.material_cost)}",
        f"- Labor costs: {format_currency(result.labor_cost)}",
        f"- Change: {format_cost_difference(result.impact.cost_difference)} "
        f"({format_percentage_change(result.impact.percentage_change)})",
        "",
        "Explain what drove this cost change and give one expert insight "
        "about the modification's impact on project success or value.",
    ]
    return "\n".join(lines)
