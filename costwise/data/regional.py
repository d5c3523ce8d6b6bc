"""Regional cost multipliers keyed by ZIP code.

Multipliers are relative to the Montgomery County, MD baseline (1.00),
covering the Maryland suburbs of Washington, DC.
"""

from __future__ import annotations

# Maps 5-digit ZIP -> regional cost multiplier.
REGIONAL_MULTIPLIERS: dict[str, float] = {
    # Montgomery County (Bethesda, Rockville, Gaithersburg)
    "20814": 1.15,
    "20815": 1.20,
    "20816": 1.18,
    "20817": 1.22,
    "20852": 1.10,
    "20853": 1.12,
    "20854": 1.08,
    "20855": 1.14,
    "20878": 1.16,
    "20879": 1.11,
    "20886": 1.09,
    "20895": 1.13,
    # Prince George's County (Hyattsville, College Park, Bowie)
    "20737": 0.95,
    "20740": 0.92,
    "20742": 0.90,
    "20782": 0.94,
    "20783": 0.93,
    "20784": 0.91,
    "20785": 0.96,
    "20787": 0.97,
    "20794": 0.89,
    "20912": 0.88,
    # Anne Arundel County (Annapolis, Glen Burnie)
    "21401": 1.05,
    "21403": 1.07,
    "21409": 1.03,
    "21122": 1.02,
    "21144": 1.01,
    "21146": 1.04,
    # Howard County (Columbia, Ellicott City)
    "21042": 1.12,
    "21043": 1.14,
    "21044": 1.11,
    "21045": 1.13,
    "21075": 1.10,
}

# Used when the ZIP is missing or not in the table.
DEFAULT_REGIONAL_MULTIPLIER: float = 1.00


def normalize_zip(zip_code: str | None) -> str | None:
    """Reduce a ZIP (or ZIP+4) to its 5-digit form, or None if blank."""
    if zip_code is None:
        return None
    cleaned = str(zip_code).strip()
    if not cleaned:
        return None
    return cleaned.split("-")[0][:5]


def regional_insight(
    zip_code: str | None,
    multipliers: dict[str, float] | None = None,
) -> str:
    """Describe the local market for a ZIP code in one sentence."""
    table = REGIONAL_MULTIPLIERS if multipliers is None else multipliers
    key = normalize_zip(zip_code)
    multiplier = DEFAULT_REGIONAL_MULTIPLIER
    if key is not None:
        multiplier = table.get(key, DEFAULT_REGIONAL_MULTIPLIER)

    if multiplier >= 1.15:
        return (
            "Premium market area - higher material and labor costs driven by "
            "an affluent location and strict building standards."
        )
    if multiplier >= 1.05:
        return (
            "Above-average market - moderate premium for quality materials "
            "and skilled contractors."
        )
    if multiplier <= 0.92:
        return (
            "Value market area - lower baseline costs with good contractor "
            "availability."
        )
    return "Standard market rates - typical regional pricing for materials and labor."
