"""Dependency construction for FastAPI endpoints."""

from __future__ import annotations

import logging
import os

from costwise.services.narrator import DEFAULT_MODEL, ScenarioNarrator

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]


def create_narrator() -> ScenarioNarrator | None:
    """Create a ScenarioNarrator from the environment.

    Reads ANTHROPIC_API_KEY (and optionally COSTWISE_NARRATOR_MODEL). Returns
    None when no key is configured; scenario endpoints then use the fallback
    explanation.
    """
    api_key = os.environ.get("ANTHROPIC_API_KEY", "")
    if not api_key:
        logger.info("ANTHROPIC_API_KEY not set; scenario narratives disabled")
        return None
    model = os.environ.get("COSTWISE_NARRATOR_MODEL", DEFAULT_MODEL)
    return ScenarioNarrator(api_key=api_key, model=model)


def cors_origins() -> list[str]:
    """Allowed CORS origins from COSTWISE_CORS_ORIGINS (comma-separated)."""
    configured = os.environ.get("COSTWISE_CORS_ORIGINS", "")
    origins = [o.strip() for o in configured.split(",") if o.strip()]
    return origins or list(DEFAULT_CORS_ORIGINS)
