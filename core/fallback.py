# =============================================================================
# core/fallback.py  —  Company-Level Price Range (Fallback Resolver)
# =============================================================================
#
# WHEN THIS RUNS:
#   Only after a precise estimate call has FAILED.  A successful estimate,
#   even a sparse one, always wins; we never second-guess it with this.
#
# THE CHAIN (each step needs the previous step's output):
#
#   scope ──first productTerm──▶ product ──company.id──▶ company
#                                                         │
#                                              defaultPriceRange
#
#   Any backend failure stops the chain and surfaces the backend's detail.
#   Only the FIRST product term is used: a multi-product scope collapses to
#   the range of its first product's company.
# =============================================================================

import logging

from core.models import PriceRange
from core.public_api import PricingApi
from core.result import Result

logger = logging.getLogger(__name__)

NO_PRODUCTS_ON_SCOPE = "Unable to find products on the scope."
NO_DEFAULT_PRICE_RANGE = "Company does not have default price range."


async def get_company_price_range(api: PricingApi, scope_id: str) -> Result:
    """Resolve the default price range of the scope's first product's company.

    Returns:
        Result.success(PriceRange) or Result.failure(message).
    """
    scope_result = await api.get_scope(scope_id)
    if scope_result.is_failure:
        return scope_result

    product_terms = scope_result.value.get("productTerms") or []
    product_id = product_terms[0].get("productId") if product_terms else None
    if not product_id:
        return Result.failure(NO_PRODUCTS_ON_SCOPE)

    product_result = await api.get_product(product_id)
    if product_result.is_failure:
        return product_result

    company_id = product_result.value["company"]["id"]
    company_result = await api.get_company(company_id)
    if company_result.is_failure:
        return company_result

    price_range = company_result.value.get("defaultPriceRange")
    if not price_range:
        return Result.failure(NO_DEFAULT_PRICE_RANGE)

    logger.info("Scope %s falls back to company %s price range", scope_id, company_id)
    return Result.success(
        PriceRange(
            min=price_range["min"],
            max=price_range["max"],
            currency=price_range["currency"],
        )
    )
