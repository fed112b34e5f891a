# =============================================================================
# core/catalog.py  —  Catalog Reads, Company Search, Negotiation Insights
# =============================================================================
#
# Mostly one-shot forwarding to the backend, with one recurring rule:
#
#   DEFAULT PRICES ARE NOT SHOWN ON CATALOG READS.
#   Company/product-family default price ranges and product default prices
#   are coarse numbers.  We keep them for the estimate fallback
#   (core/fallback.py) and strip them here, so the agent quotes a real
#   estimate instead of a catalog default.
# =============================================================================

import re
from typing import Any, Iterable, Optional

from core.public_api import PricingApi
from core.result import Result

_HTML_TAG = re.compile(r"<[^>]*>?")


def without(item: dict[str, Any], *keys: str) -> dict[str, Any]:
    return {key: value for key, value in item.items() if key not in keys}


def _strip_each(items: Optional[Iterable[dict[str, Any]]], *keys: str):
    if items is None:
        return None
    return [without(item, *keys) for item in items]


def strip_company_prices(company: dict[str, Any]) -> dict[str, Any]:
    stripped = without(company, "defaultPriceRange")
    if "productFamilies" in company:
        stripped["productFamilies"] = _strip_each(
            company["productFamilies"], "defaultPriceRange"
        )
    if "products" in company:
        stripped["products"] = _strip_each(company["products"], "defaultPrice")
    return stripped


def strip_product_prices(product: dict[str, Any]) -> dict[str, Any]:
    stripped = without(product, "defaultPrice")
    if "competitors" in product:
        stripped["competitors"] = _strip_each(product["competitors"], "defaultPrice")
    return stripped


def strip_product_family_prices(family: dict[str, Any]) -> dict[str, Any]:
    stripped = without(family, "defaultPriceRange")
    if family.get("products") is not None:
        stripped["products"] = _strip_each(family["products"], "defaultPrice")
    else:
        stripped.pop("products", None)
    return stripped


def strip_html(text: str) -> str:
    return _HTML_TAG.sub("", text)


async def list_categories(api: PricingApi, query: dict[str, Any]) -> Result:
    return await api.list_categories(query)


async def list_companies(api: PricingApi, query: dict[str, Any]) -> Result:
    return await api.list_companies(query)


async def get_company(api: PricingApi, company_id: str) -> Result:
    result = await api.get_company(company_id)
    if result.is_failure:
        return result
    return Result.success(strip_company_prices(result.value))


async def get_product(api: PricingApi, product_id: str) -> Result:
    result = await api.get_product(product_id)
    if result.is_failure:
        return result
    return Result.success(strip_product_prices(result.value))


async def get_product_family(api: PricingApi, product_family_id: str) -> Result:
    result = await api.get_product_family(product_family_id)
    if result.is_failure:
        return result
    return Result.success(strip_product_family_prices(result.value))


async def list_product_families(
    api: PricingApi, company_id: str, query: dict[str, Any]
) -> Result:
    result = await api.list_product_families(company_id, query)
    if result.is_failure:
        return result
    page = result.value
    return Result.success(
        {**page, "data": [strip_product_family_prices(row) for row in page.get("data", [])]}
    )


async def list_products(api: PricingApi, company_id: str, query: dict[str, Any]) -> Result:
    result = await api.get_company_products(company_id, query)
    if result.is_failure:
        return result
    page = result.value
    rows = [
        {**row, "competitors": _strip_each(row.get("competitors") or [], "defaultPrice")}
        for row in page.get("data", [])
    ]
    return Result.success({**page, "data": rows})


async def get_negotiation_insights(api: PricingApi, company_id: str) -> Result:
    result = await api.get_faqs(company_id)
    if result.is_failure:
        return result
    data = result.value
    faqs = [
        {**faq, "answer": strip_html(faq.get("answer") or "")}
        for faq in data.get("faqs", [])
    ]
    return Result.success({**data, "faqs": faqs})


async def search_companies_and_products(
    api: PricingApi, company_name: str, product_limit: int = 10
) -> Result:
    """Find the best-matching company by name, then fetch it and its products.

    Three backend calls, in order; the first failure ends the search.
    """
    companies = await api.list_companies(
        {
            "name": company_name,
            "limit": 1,
            "offset": 0,
            "sortBy": "name",
            "sortOrder": "asc",
        }
    )
    if companies.is_failure:
        return companies

    page = companies.value
    if page.get("pagination", {}).get("total", 0) == 0 or not page.get("data"):
        return Result.failure(f'No companies found matching the name "{company_name}".')

    company_id = page["data"][0]["id"]

    details = await api.get_company(company_id)
    if details.is_failure:
        return details

    products = await api.get_company_products(
        company_id,
        {"limit": product_limit, "offset": 0, "sortBy": "sortOrder", "sortOrder": "asc"},
    )
    if products.is_failure:
        return products

    return Result.success({"matchedCompany": details.value, "products": products.value})
