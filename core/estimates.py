# =============================================================================
# core/estimates.py  —  Estimate Orchestrators
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns a scope into a price estimate, degrading gracefully:
#
#     1. Ask the backend for the estimate (basic: 3 percentiles,
#        advanced: 17 percentiles + per-product breakdown).
#     2. If that works → round it and return it.  Done.
#     3. If it FAILS → ask core/fallback.py for the company's default
#        price range and dress it up as an estimate:
#          p25 = min,  p50 = midpoint,  p75 = max
#        (advanced: every other percentile is 0 = "not computed")
#     4. If the fallback fails too → return the fallback's message.
#
#   The custom estimate does both halves of the job in one call: create
#   the scope, then estimate it.
# =============================================================================

import logging
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from core.fallback import get_company_price_range
from core.models import (
    AdvancedPercentiles,
    BasicPercentiles,
    CreateScopeRequest,
    PriceRange,
)
from core.public_api import PricingApi
from core.result import Result
from core.rounding import (
    round_advanced_estimate,
    round_basic_estimate,
    round_half_away,
    round_product_estimates,
)
from core.scopes import scope_request_body

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current time as 2025-01-31T12:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def basic_from_range(price_range: PriceRange) -> BasicPercentiles:
    return BasicPercentiles(
        percentile25=round_half_away(price_range.min),
        percentile50=round_half_away((price_range.min + price_range.max) / 2),
        percentile75=round_half_away(price_range.max),
    )


def advanced_from_range(price_range: PriceRange) -> AdvancedPercentiles:
    basic = basic_from_range(price_range)
    return AdvancedPercentiles(
        percentile25=basic.percentile25,
        percentile50=basic.percentile50,
        percentile75=basic.percentile75,
    )


async def get_basic_price_estimate(api: PricingApi, scope_id: str) -> Result:
    result = await api.get_basic_price_estimate(scope_id)
    if result.is_success:
        data = result.value
        return Result.success(
            {**data, "estimate": round_basic_estimate(data.get("estimate") or {})}
        )

    logger.info("Basic estimate for scope %s failed (%s); trying fallback", scope_id, result.error)
    fallback = await get_company_price_range(api, scope_id)
    if fallback.is_failure:
        return fallback

    price_range = fallback.value
    return Result.success(
        {
            "currency": price_range.currency,
            "timestamp": utc_timestamp(),
            "estimate": asdict(basic_from_range(price_range)),
        }
    )


def _round_advanced_payload(data: dict[str, Any]) -> dict[str, Any]:
    estimate = data.get("estimate")
    return {
        **data,
        "estimate": round_advanced_estimate(estimate) if estimate else None,
        "productEstimates": round_product_estimates(data.get("productEstimates")),
    }


async def get_advanced_price_estimate(api: PricingApi, scope_id: str) -> Result:
    result = await api.get_advanced_price_estimate(scope_id)
    if result.is_success:
        return Result.success(_round_advanced_payload(result.value))

    logger.info("Advanced estimate for scope %s failed (%s); trying fallback", scope_id, result.error)
    fallback = await get_company_price_range(api, scope_id)
    if fallback.is_failure:
        return fallback

    price_range = fallback.value
    return Result.success(
        {
            "currency": price_range.currency,
            "timestamp": utc_timestamp(),
            "productEstimates": [],
            "estimate": asdict(advanced_from_range(price_range)),
        }
    )


async def get_custom_price_estimate(
    api: PricingApi, request: CreateScopeRequest
) -> Result:
    """Create a scope from `request`, then estimate it.

    The output always carries `companyDefaultPriceRange`.  It is null
    whenever the backend produced an estimate; it is only filled in when
    the estimate call failed and the company range had to be used instead.
    """
    scope_result = await api.create_scope(scope_request_body(request))
    if scope_result.is_failure:
        return scope_result

    scope_id = scope_result.value["id"]
    estimate_result = await api.get_advanced_price_estimate(scope_id)
    if estimate_result.is_success:
        return Result.success(
            {
                **_round_advanced_payload(estimate_result.value),
                "companyDefaultPriceRange": None,
            }
        )

    logger.info(
        "Custom estimate for new scope %s failed (%s); trying fallback",
        scope_id,
        estimate_result.error,
    )
    fallback = await get_company_price_range(api, scope_id)
    if fallback.is_failure:
        return fallback

    price_range = fallback.value
    return Result.success(
        {
            "scopeId": scope_id,
            "currency": price_range.currency,
            "timestamp": utc_timestamp(),
            "estimate": None,
            "productEstimates": None,
            "companyDefaultPriceRange": {
                "min": round_half_away(price_range.min),
                "max": round_half_away(price_range.max),
            },
        }
    )
