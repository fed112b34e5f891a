"""Tests for the backend client, driven through httpx.MockTransport."""

import json

import httpx
import pytest

from core.public_api import PricingApi, error_detail


def make_api(context, handler):
    return PricingApi(context, transport=httpx.MockTransport(handler))


class TestRequests:
    @pytest.mark.asyncio
    async def test_headers_and_path(self, context):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json={"id": "comp 1"})

        result = await make_api(context, handler).get_company("comp 1")

        request = seen["request"]
        assert result.value == {"id": "comp 1"}
        assert request.method == "GET"
        assert request.url.host == "api.example.test"
        assert request.url.raw_path == b"/v1/catalog/companies/comp%201"
        assert request.headers["authorization"] == "Bearer test-key"
        assert request.headers["x-vendr-end-user-email"] == "buyer@example.com"
        assert request.headers["x-vendr-end-user-organization-name"] == "Acme"
        assert "x-vendr-end-user-ip" not in request.headers

    @pytest.mark.asyncio
    async def test_none_query_params_are_dropped(self, context):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json={"data": [], "pagination": {"total": 0}})

        await make_api(context, handler).list_companies(
            {"name": "Slack", "categoryId": None, "limit": 10}
        )

        assert seen["params"] == {"name": "Slack", "limit": "10"}

    @pytest.mark.asyncio
    async def test_create_scope_posts_json(self, context):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(201, json={"id": "scope-1"})

        body = {"productTerms": [{"productId": "p"}], "scopeTerms": []}
        result = await make_api(context, handler).create_scope(body)

        assert result.value == {"id": "scope-1"}
        assert seen["request"].method == "POST"
        assert seen["request"].url.path == "/v1/scope"
        assert json.loads(seen["request"].content) == body

    @pytest.mark.asyncio
    async def test_document_upload_is_multipart(self, context):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["request"] = request
            return httpx.Response(200, json={"id": "scope-2"})

        await make_api(context, handler).create_scope_from_document(
            "quote.pdf", b"%PDF", "application/pdf"
        )

        request = seen["request"]
        assert request.url.path == "/v1/scope/from-document"
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b'filename="quote.pdf"' in request.read()

    @pytest.mark.asyncio
    async def test_non_2xx_becomes_failure(self, context):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"detail": "Scope not found"})

        result = await make_api(context, handler).get_scope("missing")

        assert result.is_failure
        assert result.error == "Scope not found"


class TestErrorDetail:
    def test_string_detail(self):
        assert error_detail(httpx.Response(400, json={"detail": "Bad limit"})) == "Bad limit"

    def test_structured_detail_is_serialized(self):
        response = httpx.Response(422, json={"detail": [{"loc": ["limit"], "msg": "too big"}]})
        assert error_detail(response) == '[{"loc":["limit"],"msg":"too big"}]'

    def test_plain_text_body(self):
        assert error_detail(httpx.Response(503, text="Service Unavailable\n")) == "Service Unavailable"

    def test_empty_body(self):
        assert error_detail(httpx.Response(502)) == "Request failed with status 502"
