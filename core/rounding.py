# =============================================================================
# core/rounding.py  —  Numeric Normalizer
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns every monetary / percentile field the backend (or the user) gives
#   us into a whole number before it reaches the agent or the backend.
#
# THE RULES:
#   - Rounding is half-away-from-zero: 2.5 → 3, -2.5 → -3.
#   - A field that is absent or None stays absent.  It is never coerced to 0.
#   - A field that is present and 0 stays 0.
#   - Every function returns a NEW dict; inputs are never mutated.
#   - Normalizing an already-integer payload returns an equal payload.
# =============================================================================

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional


TERM_MONEY_FIELDS = ("discount", "listPrice", "finalPrice")
BASIC_PERCENTILES = ("percentile25", "percentile50", "percentile75")
ADVANCED_PERCENTILES = tuple(f"percentile{p}" for p in range(10, 95, 5))


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(Decimal(value).to_integral_value(rounding=ROUND_HALF_UP))


def round_optional(value: Optional[float]) -> Optional[int]:
    return None if value is None else round_half_away(value)


def round_fields(payload: dict[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    """Copy `payload`, rounding each named field that is present and not None.

    None-valued fields are dropped so "absent" has a single representation
    in our output.
    """
    rounded = dict(payload)
    for name in fields:
        if name not in rounded:
            continue
        if rounded[name] is None:
            del rounded[name]
        else:
            rounded[name] = round_half_away(rounded[name])
    return rounded


def round_terms(terms: Optional[list[dict[str, Any]]]) -> list[dict[str, Any]]:
    """Round discount / listPrice / finalPrice on a list of scope terms."""
    return [round_fields(term, TERM_MONEY_FIELDS) for term in terms or []]


def round_scope(scope: dict[str, Any]) -> dict[str, Any]:
    """Round both term lists of a scope as returned by the backend."""
    return {
        **scope,
        "productTerms": round_terms(scope.get("productTerms")),
        "scopeTerms": round_terms(scope.get("scopeTerms")),
    }


def round_basic_estimate(estimate: dict[str, Any]) -> dict[str, Any]:
    return round_fields(estimate, BASIC_PERCENTILES)


def round_advanced_estimate(estimate: dict[str, Any]) -> dict[str, Any]:
    return round_fields(estimate, ADVANCED_PERCENTILES)


def round_product_estimates(
    product_estimates: Optional[list[dict[str, Any]]],
) -> list[dict[str, Any]]:
    """Round each successful per-product estimate.

    Entries whose status is not "success", or that carry no estimate, lose
    their estimate key entirely.
    """
    rounded = []
    for entry in product_estimates or []:
        entry = dict(entry)
        estimate = entry.pop("estimate", None)
        if entry.get("status") == "success" and estimate:
            entry["estimate"] = round_advanced_estimate(estimate)
        rounded.append(entry)
    return rounded
