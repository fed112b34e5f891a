"""Unit tests for the estimate orchestrators (core/estimates.py)."""

import pytest

from core.estimates import (
    advanced_from_range,
    basic_from_range,
    get_advanced_price_estimate,
    get_basic_price_estimate,
    get_custom_price_estimate,
    utc_timestamp,
)
from core.fallback import NO_DEFAULT_PRICE_RANGE, NO_PRODUCTS_ON_SCOPE
from core.models import CreateScopeRequest, PriceRange, ProductTerm, ScopeTerm
from core.rounding import ADVANCED_PERCENTILES

from tests.conftest import advanced_estimate, fail, ok


class TestRangeSynthesis:
    def test_basic_from_range(self):
        percentiles = basic_from_range(PriceRange(min=100, max=300, currency="USD"))
        assert (percentiles.percentile25, percentiles.percentile50, percentiles.percentile75) == (
            100,
            200,
            300,
        )

    def test_midpoint_rounds_half_away(self):
        percentiles = basic_from_range(PriceRange(min=100, max=301, currency="USD"))
        assert percentiles.percentile50 == 201

    def test_advanced_from_range_zeroes_other_slots(self):
        percentiles = advanced_from_range(PriceRange(min=100.4, max=299.6, currency="EUR"))
        assert percentiles.percentile25 == 100
        assert percentiles.percentile50 == 200
        assert percentiles.percentile75 == 300
        assert percentiles.percentile10 == 0
        assert percentiles.percentile90 == 0

    def test_timestamp_is_utc_json(self):
        stamp = utc_timestamp()
        assert stamp.endswith("Z")
        assert len(stamp) == len("2025-01-31T12:00:00.000Z")


class TestBasicEstimate:
    @pytest.mark.asyncio
    async def test_success_is_rounded(self, api):
        api.get_basic_price_estimate.return_value = ok(
            {
                "currency": "USD",
                "timestamp": "2025-01-01T00:00:00.000Z",
                "estimate": {"percentile25": 99.5, "percentile50": 150.49, "percentile75": 210.2},
            }
        )

        result = await get_basic_price_estimate(api, "scope-1")

        assert result.value == {
            "currency": "USD",
            "timestamp": "2025-01-01T00:00:00.000Z",
            "estimate": {"percentile25": 100, "percentile50": 150, "percentile75": 210},
        }
        api.get_scope.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_back_to_company_range(self, fallback_api):
        fallback_api.get_basic_price_estimate.return_value = fail("Not enough data")

        result = await get_basic_price_estimate(fallback_api, "scope-1")

        assert result.is_success
        assert result.value["currency"] == "USD"
        assert result.value["timestamp"].endswith("Z")
        assert result.value["estimate"] == {
            "percentile25": 100,
            "percentile50": 200,
            "percentile75": 300,
        }

    @pytest.mark.asyncio
    async def test_fallback_failure_message_surfaces(self, fallback_api, scope_payload):
        fallback_api.get_basic_price_estimate.return_value = fail("Not enough data")
        scope_payload["productTerms"] = []

        result = await get_basic_price_estimate(fallback_api, "scope-1")

        assert result.error == NO_PRODUCTS_ON_SCOPE


class TestAdvancedEstimate:
    @pytest.mark.asyncio
    async def test_success_rounds_scope_and_products(self, api):
        api.get_advanced_price_estimate.return_value = ok(
            {
                "currency": "USD",
                "timestamp": "2025-01-01T00:00:00.000Z",
                "estimate": advanced_estimate(),
                "productEstimates": [
                    {"productId": "a", "status": "success", "estimate": advanced_estimate()},
                    {"productId": "b", "status": "failure"},
                ],
            }
        )

        result = await get_advanced_price_estimate(api, "scope-1")

        data = result.value
        assert data["estimate"]["percentile50"] == 501
        assert all(isinstance(data["estimate"][name], int) for name in ADVANCED_PERCENTILES)
        assert data["productEstimates"][0]["estimate"]["percentile10"] == 101
        assert "estimate" not in data["productEstimates"][1]

    @pytest.mark.asyncio
    async def test_successful_but_sparse_estimate_wins_over_fallback(self, api):
        api.get_advanced_price_estimate.return_value = ok(
            {"currency": "USD", "estimate": None, "productEstimates": []}
        )

        result = await get_advanced_price_estimate(api, "scope-1")

        assert result.value["estimate"] is None
        api.get_scope.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_back_with_zeroed_slots(self, fallback_api):
        fallback_api.get_advanced_price_estimate.return_value = fail("Not enough data")

        result = await get_advanced_price_estimate(fallback_api, "scope-1")

        data = result.value
        assert data["productEstimates"] == []
        assert data["currency"] == "USD"
        assert data["estimate"]["percentile25"] == 100
        assert data["estimate"]["percentile50"] == 200
        assert data["estimate"]["percentile75"] == 300
        others = set(ADVANCED_PERCENTILES) - {"percentile25", "percentile50", "percentile75"}
        assert len(others) == 14
        assert all(data["estimate"][name] == 0 for name in others)

    @pytest.mark.asyncio
    async def test_fallback_failure_message_surfaces(self, fallback_api, company_payload):
        fallback_api.get_advanced_price_estimate.return_value = fail("Not enough data")
        del company_payload["defaultPriceRange"]

        result = await get_advanced_price_estimate(fallback_api, "scope-1")

        assert result.error == NO_DEFAULT_PRICE_RANGE


class TestCustomEstimate:
    @pytest.fixture
    def request_(self):
        return CreateScopeRequest(
            product_terms=[
                ProductTerm(product_id="prod-1", list_price=1200.5, discount=0, extra={"seats": 50})
            ],
            scope_terms=[ScopeTerm(auto_renew=True, final_price=999.4)],
        )

    @pytest.mark.asyncio
    async def test_creates_scope_then_estimates(self, api, request_):
        api.create_scope.return_value = ok({"id": "scope-9"})
        api.get_advanced_price_estimate.return_value = ok(
            {
                "currency": "USD",
                "estimate": advanced_estimate(),
                "productEstimates": [
                    {"productId": "prod-1", "status": "success", "estimate": advanced_estimate()}
                ],
            }
        )

        result = await get_custom_price_estimate(api, request_)

        body = api.create_scope.call_args.args[0]
        assert body == {
            "productTerms": [{"seats": 50, "productId": "prod-1", "discount": 0, "listPrice": 1201}],
            "scopeTerms": [{"autoRenew": True, "finalPrice": 999}],
        }
        api.get_advanced_price_estimate.assert_awaited_once_with("scope-9")

        data = result.value
        assert data["estimate"]["percentile15"] == 151
        assert data["productEstimates"][0]["estimate"]["percentile15"] == 151
        assert "companyDefaultPriceRange" in data
        assert data["companyDefaultPriceRange"] is None

    @pytest.mark.asyncio
    async def test_missing_estimate_becomes_null(self, api, request_):
        api.create_scope.return_value = ok({"id": "scope-9"})
        api.get_advanced_price_estimate.return_value = ok({"currency": "USD", "productEstimates": []})

        result = await get_custom_price_estimate(api, request_)

        assert result.value["estimate"] is None
        assert result.value["companyDefaultPriceRange"] is None

    @pytest.mark.asyncio
    async def test_scope_creation_failure_stops(self, api, request_):
        api.create_scope.return_value = fail("Unknown product prod-1")

        result = await get_custom_price_estimate(api, request_)

        assert result.error == "Unknown product prod-1"
        api.get_advanced_price_estimate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_estimate_failure_uses_company_range(self, fallback_api, request_):
        fallback_api.create_scope.return_value = ok({"id": "scope-1"})
        fallback_api.get_advanced_price_estimate.return_value = fail("Not enough data")

        result = await get_custom_price_estimate(fallback_api, request_)

        data = result.value
        assert data["scopeId"] == "scope-1"
        assert data["estimate"] is None
        assert data["productEstimates"] is None
        assert data["companyDefaultPriceRange"] == {"min": 100, "max": 300}
        assert data["currency"] == "USD"
        fallback_api.get_scope.assert_awaited_once_with("scope-1")

    @pytest.mark.asyncio
    async def test_both_failing_surfaces_fallback_message(self, fallback_api, request_, company_payload):
        fallback_api.create_scope.return_value = ok({"id": "scope-1"})
        fallback_api.get_advanced_price_estimate.return_value = fail("Not enough data")
        del company_payload["defaultPriceRange"]

        result = await get_custom_price_estimate(fallback_api, request_)

        assert result.error == NO_DEFAULT_PRICE_RANGE
