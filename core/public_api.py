# =============================================================================
# core/public_api.py  —  Backend Client (Vendr public API)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   One async method per remote operation.  Each method returns a Result:
#     - Result.success(<decoded JSON body>)   on a 2xx response
#     - Result.failure(<backend detail>)      on any other status
#
#   Network-level problems (DNS, refused connection, timeout) are NOT turned
#   into Results; they raise httpx errors and are caught at the tool
#   boundary (core/runner.py) like any other unexpected exception.
#
# CONNECTION MODEL:
#   A fresh httpx.AsyncClient is opened per request, so concurrent tool calls
#   share nothing.  Tests inject an httpx.MockTransport through `transport`.
# =============================================================================

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from core.models import Context
from core.result import Result
from core.serialization import safe_json_dumps

logger = logging.getLogger(__name__)


def build_async_client(
    context: Context,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create an httpx.AsyncClient carrying auth and end-user headers."""
    headers = {
        "Authorization": f"Bearer {context.api_key}",
        "Accept": "application/json",
        **context.user_identifying_headers.as_headers(),
    }
    return httpx.AsyncClient(
        base_url=context.base_url,
        headers=headers,
        timeout=httpx.Timeout(context.http_timeout_seconds),
        transport=transport,
    )


def error_detail(response: httpx.Response) -> str:
    """Extract the backend's error detail from a non-2xx response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict) and "detail" in body:
        detail = body["detail"]
        return detail if isinstance(detail, str) else safe_json_dumps(detail)

    text = response.text.strip()
    return text or f"Request failed with status {response.status_code}"


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _drop_none(params: Optional[dict[str, Any]]) -> dict[str, Any]:
    return {key: value for key, value in (params or {}).items() if value is not None}


class PricingApi:
    """Thin async client for the catalog, scope and pricing endpoints."""

    def __init__(
        self,
        context: Context,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.context = context
        self.transport = transport

    async def _request(self, method: str, path: str, **kwargs: Any) -> Result:
        if "params" in kwargs:
            kwargs["params"] = _drop_none(kwargs["params"])

        async with build_async_client(self.context, transport=self.transport) as client:
            response = await client.request(method, path, **kwargs)

        if response.is_success:
            return Result.success(response.json())

        detail = error_detail(response)
        logger.warning("%s %s -> %s: %s", method, path, response.status_code, detail)
        return Result.failure(detail)

    # --- Catalog ------------------------------------------------------------

    async def list_categories(self, query: Optional[dict[str, Any]] = None) -> Result:
        return await self._request("GET", "/v1/catalog/categories", params=query)

    async def list_companies(self, query: Optional[dict[str, Any]] = None) -> Result:
        return await self._request("GET", "/v1/catalog/companies", params=query)

    async def get_company(self, company_id: str) -> Result:
        return await self._request("GET", f"/v1/catalog/companies/{_segment(company_id)}")

    async def get_company_products(
        self, company_id: str, query: Optional[dict[str, Any]] = None
    ) -> Result:
        return await self._request(
            "GET", f"/v1/catalog/companies/{_segment(company_id)}/products", params=query
        )

    async def list_product_families(
        self, company_id: str, query: Optional[dict[str, Any]] = None
    ) -> Result:
        return await self._request(
            "GET", f"/v1/catalog/companies/{_segment(company_id)}/product-families", params=query
        )

    async def get_product_family(self, product_family_id: str) -> Result:
        return await self._request(
            "GET", f"/v1/catalog/product-families/{_segment(product_family_id)}"
        )

    async def get_product(self, product_id: str) -> Result:
        return await self._request("GET", f"/v1/catalog/products/{_segment(product_id)}")

    # --- Scopes -------------------------------------------------------------

    async def create_scope(self, body: dict[str, Any]) -> Result:
        return await self._request("POST", "/v1/scope", json=body)

    async def create_scope_from_document(
        self, file_name: str, content: bytes, content_type: str
    ) -> Result:
        return await self._request(
            "POST",
            "/v1/scope/from-document",
            files={"file": (file_name, content, content_type)},
        )

    async def get_scope(self, scope_id: str) -> Result:
        return await self._request("GET", f"/v1/scope/{_segment(scope_id)}")

    # --- Pricing & negotiation ----------------------------------------------

    async def get_basic_price_estimate(self, scope_id: str) -> Result:
        return await self._request("GET", f"/v1/pricing/basic/{_segment(scope_id)}")

    async def get_advanced_price_estimate(self, scope_id: str) -> Result:
        return await self._request("GET", f"/v1/pricing/advanced/{_segment(scope_id)}")

    async def get_faqs(self, company_id: str) -> Result:
        return await self._request("GET", f"/v1/negotiation/faqs/{_segment(company_id)}")
