"""Formatting helpers for estimate output.

Renders currency amounts and scenario deltas the way a contractor would
quote them to a homeowner (e.g. '$14,872' rather than '$14871.5').
"""

from __future__ import annotations


def format_currency(amount: float) -> str:
    """Format a currency amount as a human-readable string.

    - Amounts >= $10,000: no cents, with comma separators (e.g., '$14,872')
    - Amounts < $10,000: with cents (e.g., '$2,160.00')
    """
    if abs(amount) >= 10_000:
        formatted = f"${abs(amount):,.0f}"
    else:
        formatted = f"${abs(amount):,.2f}"
    return f"-{formatted}" if amount < 0 else formatted


def format_cost_difference(difference: float) -> str:
    """Format a signed cost delta, e.g. '+$1,250.00' or '-$3,400.00'."""
    if difference > 0:
        return f"+{format_currency(difference)}"
    return format_currency(difference)


def format_percentage_change(change: float | None) -> str:
    """Format a percentage change, e.g. '+12.5%'. None renders as 'n/a'."""
    if change is None:
        return "n/a"
    return f"{change:+.1f}%"
