"""Pytest configuration and shared fixtures for the pricing tool tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.models import Context, UserIdentifyingHeaders
from core.public_api import PricingApi
from core.result import Result

API_METHODS = (
    "list_categories",
    "list_companies",
    "get_company",
    "get_company_products",
    "list_product_families",
    "get_product_family",
    "get_product",
    "create_scope",
    "create_scope_from_document",
    "get_scope",
    "get_basic_price_estimate",
    "get_advanced_price_estimate",
    "get_faqs",
)


def ok(value):
    return Result.success(value)


def fail(detail):
    return Result.failure(detail)


# ============================================================================
# Backend fakes
# ============================================================================

@pytest.fixture
def api():
    """PricingApi stand-in whose methods are AsyncMocks returning Results."""
    fake = MagicMock(spec=PricingApi)
    for name in API_METHODS:
        setattr(fake, name, AsyncMock(name=name))
    return fake


@pytest.fixture
def scope_payload():
    return {
        "id": "scope-1",
        "productTerms": [{"productId": "prod-1", "listPrice": 1200.4}],
        "scopeTerms": [],
    }


@pytest.fixture
def product_payload():
    return {"id": "prod-1", "name": "Slack Pro", "company": {"id": "comp-1"}}


@pytest.fixture
def company_payload():
    return {
        "id": "comp-1",
        "name": "Slack",
        "defaultPriceRange": {"min": 100, "max": 300, "currency": "USD"},
    }


@pytest.fixture
def fallback_api(api, scope_payload, product_payload, company_payload):
    """Backend whose fallback chain resolves to {min: 100, max: 300, USD}."""
    api.get_scope.return_value = ok(scope_payload)
    api.get_product.return_value = ok(product_payload)
    api.get_company.return_value = ok(company_payload)
    return api


@pytest.fixture
def context():
    return Context(
        api_key="test-key",
        base_url="https://api.example.test",
        user_identifying_headers=UserIdentifyingHeaders(
            email="buyer@example.com", organization_name="Acme"
        ),
    )


def advanced_estimate(**overrides):
    """A full 17-percentile estimate with fractional values."""
    estimate = {f"percentile{p}": p * 10 + 0.5 for p in range(10, 95, 5)}
    estimate.update(overrides)
    return estimate
