"""Shared fixtures for the Costwise test suite."""

from __future__ import annotations

import pytest


@pytest.fixture(autouse=True)
def _no_anthropic_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests offline: never build a real narrator from the environment."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
