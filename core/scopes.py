# =============================================================================
# core/scopes.py  —  Scope Operations
# =============================================================================
#
# A scope is the user's pricing question written down: which products, at
# what terms.  These functions create and read scopes.  Money is rounded on
# the way IN (before the backend sees it) and again on the way OUT.
# =============================================================================

import base64
import binascii
import mimetypes
from typing import Any, Union

from core.errors import InputValidationError
from core.models import CreateScopeRequest, ProductTerm, ScopeTerm
from core.public_api import PricingApi
from core.result import Result
from core.rounding import round_optional, round_scope


def _term_body(term: Union[ProductTerm, ScopeTerm]) -> dict[str, Any]:
    body = dict(term.extra)
    if isinstance(term, ProductTerm):
        body["productId"] = term.product_id
    else:
        body["autoRenew"] = term.auto_renew
    body.update(
        {
            "discount": round_optional(term.discount),
            "listPrice": round_optional(term.list_price),
            "finalPrice": round_optional(term.final_price),
            "startDate": term.start_date,
            "endDate": term.end_date,
        }
    )
    return {key: value for key, value in body.items() if value is not None}


def scope_request_body(request: CreateScopeRequest) -> dict[str, Any]:
    """Backend body for POST /v1/scope; absent optionals are omitted."""
    body: dict[str, Any] = {
        "productTerms": [_term_body(term) for term in request.product_terms],
        "scopeTerms": [_term_body(term) for term in request.scope_terms],
    }
    if request.previous_scope_id:
        body["previousScopeId"] = request.previous_scope_id
    return body


async def create_scope(api: PricingApi, request: CreateScopeRequest) -> Result:
    result = await api.create_scope(scope_request_body(request))
    if result.is_failure:
        return result
    return Result.success(round_scope(result.value))


async def get_scope(api: PricingApi, scope_id: str) -> Result:
    result = await api.get_scope(scope_id)
    if result.is_failure:
        return result
    return Result.success(round_scope(result.value))


async def create_scope_with_document(
    api: PricingApi,
    file_name: str,
    content_base64: str,
    content_type: str | None = None,
) -> Result:
    """Upload a quote or contract and let the backend extract a scope from it."""
    try:
        content = base64.b64decode(content_base64, validate=True)
    except (binascii.Error, ValueError):
        raise InputValidationError("content_base64", "not valid base64") from None

    if not content_type:
        content_type = mimetypes.guess_type(file_name)[0] or "application/octet-stream"

    return await api.create_scope_from_document(file_name, content, content_type)
