"""Unit tests for catalog reads and the composite company search."""

import pytest

from core.catalog import (
    get_company,
    get_negotiation_insights,
    get_product,
    get_product_family,
    list_product_families,
    list_products,
    search_companies_and_products,
    strip_html,
)

from tests.conftest import fail, ok


class TestPriceStripping:
    @pytest.mark.asyncio
    async def test_company_drops_default_ranges(self, api):
        api.get_company.return_value = ok(
            {
                "id": "comp-1",
                "name": "Slack",
                "defaultPriceRange": {"min": 1, "max": 2, "currency": "USD"},
                "productFamilies": [{"id": "fam-1", "defaultPriceRange": {"min": 1}}],
                "products": [{"id": "prod-1", "defaultPrice": 10}],
            }
        )

        result = await get_company(api, "comp-1")

        assert result.value == {
            "id": "comp-1",
            "name": "Slack",
            "productFamilies": [{"id": "fam-1"}],
            "products": [{"id": "prod-1"}],
        }

    @pytest.mark.asyncio
    async def test_product_drops_default_price_and_competitor_prices(self, api):
        api.get_product.return_value = ok(
            {
                "id": "prod-1",
                "defaultPrice": 12,
                "competitors": [{"id": "prod-2", "defaultPrice": 9}],
            }
        )

        result = await get_product(api, "prod-1")

        assert result.value == {"id": "prod-1", "competitors": [{"id": "prod-2"}]}

    @pytest.mark.asyncio
    async def test_product_family_without_products(self, api):
        api.get_product_family.return_value = ok(
            {"id": "fam-1", "defaultPriceRange": {"min": 1}, "products": None}
        )

        result = await get_product_family(api, "fam-1")

        assert result.value == {"id": "fam-1"}

    @pytest.mark.asyncio
    async def test_listed_families_are_stripped(self, api):
        api.list_product_families.return_value = ok(
            {
                "data": [
                    {"id": "fam-1", "defaultPriceRange": {"min": 1}},
                    {"id": "fam-2", "products": [{"id": "p", "defaultPrice": 3}]},
                ],
                "pagination": {"total": 2},
            }
        )

        result = await list_product_families(api, "comp-1", {"limit": 10})

        assert result.value["data"] == [{"id": "fam-1"}, {"id": "fam-2", "products": [{"id": "p"}]}]
        assert result.value["pagination"] == {"total": 2}
        api.list_product_families.assert_awaited_once_with("comp-1", {"limit": 10})

    @pytest.mark.asyncio
    async def test_listed_products_keep_own_fields(self, api):
        api.get_company_products.return_value = ok(
            {"data": [{"id": "prod-1", "competitors": [{"id": "x", "defaultPrice": 5}]}]}
        )

        result = await list_products(api, "comp-1", {})

        assert result.value["data"] == [{"id": "prod-1", "competitors": [{"id": "x"}]}]

    @pytest.mark.asyncio
    async def test_failure_passes_through(self, api):
        api.get_company.return_value = fail("Company not found")

        result = await get_company(api, "missing")

        assert result.error == "Company not found"


class TestNegotiationInsights:
    def test_strip_html(self):
        assert strip_html("<p>Ask for <b>multi-year</b> terms</p>") == "Ask for multi-year terms"
        assert strip_html("plain") == "plain"

    @pytest.mark.asyncio
    async def test_answers_are_plain_text(self, api):
        api.get_faqs.return_value = ok(
            {
                "companyId": "comp-1",
                "faqs": [
                    {"question": "Discounts?", "answer": "<ul><li>Up to 20%</li></ul>"},
                    {"question": "Empty?", "answer": None},
                ],
            }
        )

        result = await get_negotiation_insights(api, "comp-1")

        assert result.value["companyId"] == "comp-1"
        assert [faq["answer"] for faq in result.value["faqs"]] == ["Up to 20%", ""]


class TestSearchCompaniesAndProducts:
    @pytest.mark.asyncio
    async def test_no_match(self, api):
        api.list_companies.return_value = ok({"data": [], "pagination": {"total": 0}})

        result = await search_companies_and_products(api, "Nonexistent")

        assert result.error == 'No companies found matching the name "Nonexistent".'
        api.get_company.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_match_fetches_company_and_products(self, api, company_payload):
        api.list_companies.return_value = ok(
            {"data": [{"id": "comp-1", "name": "Slack"}], "pagination": {"total": 3}}
        )
        api.get_company.return_value = ok(company_payload)
        api.get_company_products.return_value = ok({"data": [{"id": "prod-1"}]})

        result = await search_companies_and_products(api, "Slack", product_limit=5)

        api.list_companies.assert_awaited_once_with(
            {"name": "Slack", "limit": 1, "offset": 0, "sortBy": "name", "sortOrder": "asc"}
        )
        api.get_company_products.assert_awaited_once_with(
            "comp-1", {"limit": 5, "offset": 0, "sortBy": "sortOrder", "sortOrder": "asc"}
        )
        assert result.value == {
            "matchedCompany": company_payload,
            "products": {"data": [{"id": "prod-1"}]},
        }

    @pytest.mark.asyncio
    async def test_company_lookup_failure_stops(self, api):
        api.list_companies.return_value = ok({"data": [{"id": "comp-1"}], "pagination": {"total": 1}})
        api.get_company.return_value = fail("Upstream timeout")

        result = await search_companies_and_products(api, "Slack")

        assert result.error == "Upstream timeout"
        api.get_company_products.assert_not_awaited()
