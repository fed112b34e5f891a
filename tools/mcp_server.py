# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (ALL tools in one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Registers every Vendr pricing tool with FastMCP.  Each tool is a thin
#   wrapper around a core/ operation: it declares the input contract (typed
#   parameters), composes the description, and hands the core operation to
#   core/runner.execute_tool(), which always comes back with an envelope:
#
#       {"isError": ..., "errorMessage": ..., "data": ...}
#
# HOW IT WORKS (the flow):
#   1. The agent calls a tool by name (e.g., "getBasicPriceEstimate")
#   2. FastMCP validates the arguments against the function signature
#   3. The function builds a core/ operation and runs it via execute_tool()
#   4. The envelope goes back as structured content + a bounded JSON text,
#      with the MCP isError flag set from the envelope
#
# TOOL NAMES:
#   Tool names are camelCase (listCompanies, getScope, ...) because agents
#   and prompts already refer to them that way.  The Python functions behind
#   them are snake_case.
#
# RUNNING THIS SERVER:
#   python -m tools.mcp_server      (stdio transport)
#   vendr-pricing-mcp               (after pip install)
# =============================================================================

import logging
import sys
from functools import lru_cache
from typing import Annotated, Any, Awaitable, Callable, Literal, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools.tool import ToolResult
from mcp.types import CallToolResult, TextContent, ToolAnnotations
from pydantic import BaseModel, Field, ValidationError

from core import catalog, estimates, scopes
from core.config import load_context
from core.envelope import structure_content, structured_schema
from core.errors import ConfigurationError
from core.models import DEFAULT_MAX_RESPONSE_LENGTH, Context
from core.observer import LoggingObserver
from core.public_api import PricingApi
from core.result import Result
from core.runner import execute_tool
from core.serialization import serializers
from core.validation import (
    ProductTermInput,
    ScopeTermInput,
    parse_create_scope,
    validation_error,
)

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because the MCP server talks to the agent over STDOUT.
# Anything printed to stdout would corrupt the JSON-RPC stream.
#
#   CYAN   → incoming tool calls (name + parameters)
#   GREEN  → envelopes going back (bounded by the logging serializer)
#   YELLOW → intermediate status messages
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger("vendr_pricing.tools")


def _log_request(tool_name: str, **params) -> None:
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, structured: dict) -> None:
    logger.info(f"{_GREEN}  ← {tool_name} response: {serializers.logging(structured)}{_RESET}")


# =============================================================================
# Shared description
# =============================================================================
# Composed once and prefixed to every tool's own description, so the agent
# sees the catalog hierarchy no matter which tool it reads first.
# =============================================================================
CATALOG_DESCRIPTION = (
    "Vendr MCP Tools provide software pricing insights by adding Vendr's "
    "proprietary catalog data to publicly available pricing information. When "
    "asked about software pricing, use these tools together (sequentially or in "
    "parallel) to guide users through Vendr's hierarchical catalog (categories → "
    "sub-categories → companies → product families → products → pricing "
    "dimensions) and help them to generate customized software price estimates.\n\n"
)


def describe(text: str) -> str:
    return CATALOG_DESCRIPTION + text


ENVELOPE_SCHEMA = structured_schema()

_READ_ONLY = ToolAnnotations(
    readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True
)
_WRITES = ToolAnnotations(
    readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=True
)

# Pagination parameters shared by the list tools.
Limit = Annotated[int, Field(ge=1, le=100, description="Maximum number of items to return")]
Offset = Annotated[int, Field(ge=0, description="Number of items to skip")]
SortOrder = Literal["asc", "desc"]


# =============================================================================
# Wiring: context, backend client, observer
# =============================================================================
@lru_cache(maxsize=1)
def get_context() -> Context:
    """Load configuration once per process."""
    return load_context()


def get_api() -> PricingApi:
    return PricingApi(get_context())


_observer = LoggingObserver(logging.getLogger("vendr_pricing.observer"))


def _max_length() -> int:
    try:
        return get_context().max_response_length
    except ConfigurationError:
        # The operation itself will hit the same error and report it.
        return DEFAULT_MAX_RESPONSE_LENGTH


class EnvelopeResult(ToolResult):
    """ToolResult that carries the envelope's isError to the MCP client."""

    def __init__(self, envelope: dict):
        super().__init__(
            content=[TextContent(type="text", text=item["text"]) for item in envelope["content"]],
            structured_content=envelope["structuredContent"],
        )
        self.is_error = envelope["isError"]

    def to_mcp_result(self) -> CallToolResult:
        return CallToolResult(
            content=self.content,
            structuredContent=self.structured_content,
            isError=self.is_error,
        )


class ArgumentErrorMiddleware(Middleware):
    """Answers FastMCP's argument validation failures with an error envelope."""

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        try:
            return await call_next(context)
        except ValidationError as exc:
            tool_name = context.message.name
            error = validation_error(exc)
            _observer.on_error(
                tool_name,
                error,
                {"tool": tool_name},
                {"args": serializers.tracing(context.message.arguments or {})},
            )
            _log_status(f"{tool_name} rejected: {error}")
            envelope = structure_content(Result.failure(str(error)), max_length=_max_length())
            return EnvelopeResult(envelope)


# Arguments are checked by pydantic (not jsonschema) so that failures reach
# ArgumentErrorMiddleware.
mcp = FastMCP(
    "vendr-pricing",
    middleware=[ArgumentErrorMiddleware()],
    strict_input_validation=False,
)


def _plain(value: Any) -> Any:
    """Model instances → JSON-ready dicts, for logs."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


async def _run(
    tool_name: str,
    operation: Callable[[], Awaitable[Result]],
    *,
    tags: Optional[dict[str, Any]] = None,
    **params,
) -> ToolResult:
    params = {name: _plain(value) for name, value in params.items()}
    _log_request(tool_name, **params)

    envelope = await execute_tool(
        tool_name,
        operation,
        args=params,
        tags=tags,
        observer=_observer,
        max_length=_max_length(),
    )
    if envelope["isError"]:
        _log_status(f"{tool_name} failed: {envelope['structuredContent']['errorMessage']}")
    _log_response(tool_name, envelope["structuredContent"])
    return EnvelopeResult(envelope)


# =============================================================================
# CATALOG TOOLS
# =============================================================================
@mcp.tool(
    name="listCategories",
    description=describe(
        "Use this tool to retrieve a list of categories and sub-categories from "
        "Vendr's catalog along with their description. Use this to understand the "
        "sub-categories within a category and companies within a sub-category. If "
        "the user asks a category specific question, for example \"I'm looking for "
        "collaboration and communication software\", you can also get the "
        "sub-category and company details by filtering using category ID."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_READ_ONLY,
)
async def list_categories(limit: Limit = 50, offset: Offset = 0) -> ToolResult:
    query = {"limit": limit, "offset": offset}
    return await _run(
        "listCategories",
        lambda: catalog.list_categories(get_api(), query),
        **query,
    )


@mcp.tool(
    name="listCompanies",
    description=describe(
        "Use this tool to retrieve a paginated list of companies from Vendr's "
        "catalog along with their attributes. You can also filter the information "
        "you retrieve using a category or sub-category ID."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_READ_ONLY,
)
async def list_companies(
    name: Annotated[Optional[str], Field(description="Filter by company name")] = None,
    category_id: Annotated[
        Optional[str], Field(description="Filter by category or sub-category ID")
    ] = None,
    limit: Limit = 10,
    offset: Offset = 0,
    sort_by: Optional[str] = None,
    sort_order: SortOrder = "asc",
) -> ToolResult:
    query = {
        "name": name,
        "categoryId": category_id,
        "limit": limit,
        "offset": offset,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }
    return await _run(
        "listCompanies",
        lambda: catalog.list_companies(get_api(), query),
        **query,
    )


@mcp.tool(
    name="getCompany",
    description=describe(
        "Use this tool to retrieve detailed information about a single company, "
        "including its product offerings, when the user specifically asks for a "
        "company's details or asks to compare multiple companies, for example, "
        "\"Tell me more about Slack pricing\". Show the details to the user and ask "
        "them follow up questions to generate a customized price estimate."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_READ_ONLY,
)
async def get_company(company_id: str) -> ToolResult:
    return await _run(
        "getCompany",
        lambda: catalog.get_company(get_api(), company_id),
        tags={"company_id": company_id},
        company_id=company_id,
    )


@mcp.tool(
    name="getProduct",
    description=describe(
        "Use this tool to retrieve details about a product including all the "
        "attributes of its pricing dimensions and details of included features. "
        "When the user asks about the price of a software product, ask them to "
        "share pricing dimension values to get a customized price estimate. Using "
        "the dimension description and unitName, guide them about what the "
        "dimension means. With the quantity properties of pricing dimensions, help "
        "them provide the right answers."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_READ_ONLY,
)
async def get_product(product_id: str) -> ToolResult:
    return await _run(
        "getProduct",
        lambda: catalog.get_product(get_api(), product_id),
        product_id=product_id,
    )


@mcp.tool(
    name="GetProductFamily",
    description=describe(
        "Use this tool to retrieve details about a product family, including the "
        "products within the product family. To get more details about those "
        "products, use the getProduct tool. Show the details to the user and ask "
        "them follow up questions to generate a customized price estimate."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_READ_ONLY,
)
async def get_product_family(product_family_id: str) -> ToolResult:
    return await _run(
        "GetProductFamily",
        lambda: catalog.get_product_family(get_api(), product_family_id),
        product_family_id=product_family_id,
    )


@mcp.tool(
    name="listProductFamilies",
    description=describe(
        "Use this tool to retrieve a list of product families for a company, "
        "including products within the family. You would typically need to use it "
        "when the user specifically asks for a company's details. For example, if a "
        "user asks \"Tell me more about Slack pricing\", use this to show the "
        "different product families offered by Slack along with their description "
        "and number of products in the product family."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_READ_ONLY,
)
async def list_product_families(
    company_id: str,
    limit: Limit = 10,
    offset: Offset = 0,
    sort_by: Optional[str] = None,
    sort_order: SortOrder = "asc",
) -> ToolResult:
    query = {"limit": limit, "offset": offset, "sortBy": sort_by, "sortOrder": sort_order}
    return await _run(
        "listProductFamilies",
        lambda: catalog.list_product_families(get_api(), company_id, query),
        tags={"company_id": company_id},
        company_id=company_id,
        **query,
    )


@mcp.tool(
    name="listProducts",
    description=describe(
        "Use this tool to retrieve a list of products for a given company or "
        "product family, including all details of the product. You would typically "
        "need to use it when the user wants to learn about the various products "
        "offered by a company."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_READ_ONLY,
)
async def list_products(
    company_id: str,
    product_family_id: Annotated[
        Optional[str], Field(description="Only return products of this product family")
    ] = None,
    limit: Limit = 10,
    offset: Offset = 0,
    sort_by: Optional[str] = None,
    sort_order: SortOrder = "asc",
) -> ToolResult:
    query = {
        "productFamilyId": product_family_id,
        "limit": limit,
        "offset": offset,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }
    return await _run(
        "listProducts",
        lambda: catalog.list_products(get_api(), company_id, query),
        tags={"company_id": company_id},
        company_id=company_id,
        **query,
    )


# =============================================================================
# SCOPE TOOLS
# =============================================================================
# Scope terms are typed with the pydantic models in core/validation.py, so
# FastMCP publishes their fields and checks them before the handler runs
# (failures come back through ArgumentErrorMiddleware).  The handlers map
# them onto request records with parse_create_scope(), which also accepts
# plain dicts.
# =============================================================================
ProductTerms = Annotated[
    list[ProductTermInput],
    Field(
        description=(
            "Products in the scope, in order. Money is rounded to whole currency "
            "units; any other key is passed on as a pricing dimension value."
        )
    ),
]
ScopeTerms = Annotated[
    Optional[list[ScopeTermInput]],
    Field(description="Contract-level terms for the whole scope"),
]
PreviousScopeId = Annotated[
    Optional[str], Field(description="Scope this one supersedes, if any")
]


@mcp.tool(
    name="createScope",
    description=describe(
        "When the user shares dimension values after reviewing dimension questions, "
        "use this tool to register those values as a scope and get a scope ID in "
        "return. After getting scope ID, immediately call getBasicPriceEstimate or "
        "getAdvancedPriceEstimate tool with the scope ID to get a price estimate.\n\n"
        "When the user uploads a quote/contract for analysis, extract dimensions "
        "and their values from it. Use this tool to register those dimension values "
        "as a scope and get a scope ID in return. After getting scope ID, "
        "immediately call getBasicPriceEstimate or getAdvancedPriceEstimate tool "
        "with the scope ID to get a price estimate. Show the user Vendr's price "
        "estimate range for their quote/contract along with a comparison between "
        "the quote/contract and Vendr's estimate so that the user knows whether "
        "they have received a fair price or not."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_WRITES,
)
async def create_scope(
    product_terms: ProductTerms,
    scope_terms: ScopeTerms = None,
    previous_scope_id: PreviousScopeId = None,
) -> ToolResult:
    async def operation() -> Result:
        request = parse_create_scope(product_terms, scope_terms, previous_scope_id)
        return await scopes.create_scope(get_api(), request)

    return await _run(
        "createScope",
        operation,
        tags={"product_count": len(product_terms), "scope_count": len(scope_terms or [])},
        product_terms=product_terms,
        scope_terms=scope_terms,
        previous_scope_id=previous_scope_id,
    )


@mcp.tool(
    name="createScopeWithDocument",
    description=describe(
        "Don't ever use this tool unless the user explicitly asks to create a scope "
        "from an uploaded document. Prefer extracting dimension values yourself and "
        "calling createScope."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_WRITES,
)
async def create_scope_with_document(
    file_name: str,
    content_base64: Annotated[str, Field(description="Document bytes, base64-encoded")],
    content_type: Optional[str] = None,
) -> ToolResult:
    return await _run(
        "createScopeWithDocument",
        lambda: scopes.create_scope_with_document(
            get_api(), file_name, content_base64, content_type
        ),
        file_name=file_name,
        content_type=content_type,
    )


@mcp.tool(
    name="getScope",
    description=describe(
        "Use this tool to retrieve metadata and associations for a previously "
        "created scope by its scope ID. You may use it to show the scope to the "
        "user later in a conversation thread."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_READ_ONLY,
)
async def get_scope(scope_id: str) -> ToolResult:
    return await _run(
        "getScope",
        lambda: scopes.get_scope(get_api(), scope_id),
        scope_id=scope_id,
    )


# =============================================================================
# ESTIMATE TOOLS
# =============================================================================
# Both read-path estimates fall back to the company's default price range
# when the backend cannot estimate the scope (see core/estimates.py).
# =============================================================================
@mcp.tool(
    name="getBasicPriceEstimate",
    description=describe(
        "Use this tool by giving it a scope ID to generate 3 pre-tax price estimate "
        "values - 25th percentile, median price and 75th percentile. Show the price "
        "estimate to the user as follows - \"The estimate price for your requirement "
        "is <median value>. Buyers typically achieve a price between <25th "
        "percentile>-<75th percentile>.\""
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_READ_ONLY,
)
async def get_basic_price_estimate(scope_id: str) -> ToolResult:
    return await _run(
        "getBasicPriceEstimate",
        lambda: estimates.get_basic_price_estimate(get_api(), scope_id),
        tags={"scope_id": scope_id},
        scope_id=scope_id,
    )


@mcp.tool(
    name="getAdvancedPriceEstimate",
    description=describe(
        "Use this tool by giving it a scope ID to generate product level price "
        "estimate values breakup, in case the user asks for a multi-product price "
        "estimate. A percentile of 0 means it could not be computed."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=_READ_ONLY,
)
async def get_advanced_price_estimate(scope_id: str) -> ToolResult:
    return await _run(
        "getAdvancedPriceEstimate",
        lambda: estimates.get_advanced_price_estimate(get_api(), scope_id),
        tags={"scope_id": scope_id},
        scope_id=scope_id,
    )


# =============================================================================
# TASK TOOLS
# =============================================================================
# These compose several backend calls into one round-trip for the agent.
# =============================================================================
@mcp.tool(
    name="getNegotiationInsights",
    description=describe(
        "Use this tool to retrieve negotiation FAQs for a company: practical "
        "answers on how buyers negotiate with this vendor. Present them when the "
        "user asks how to get a better deal."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=ToolAnnotations(
        title="Get Negotiation Insights",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def get_negotiation_insights(company_id: str) -> ToolResult:
    return await _run(
        "getNegotiationInsights",
        lambda: catalog.get_negotiation_insights(get_api(), company_id),
        tags={"company_id": company_id},
        company_id=company_id,
    )


@mcp.tool(
    name="searchCompaniesAndProducts",
    description=describe(
        "In addition, you can use realPurchaseCount for a company to build user "
        "confidence in Vendr data for the company, use Competitors to present "
        "alternatives for a company and present IncludedFeatures along with the "
        "price benchmark to create awareness of no cost features. If "
        "isCustomEstimateAvailable is false for a product, get a price estimate for "
        "another product with the same productFamily as a fallback. If "
        "isCustomEstimateAvailable is false for all products of a company, ask the "
        "user if they would like to explore the company's competitors."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=ToolAnnotations(
        title="Get Companies and Products",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
        openWorldHint=True,
    ),
)
async def search_companies_and_products(
    company_name: Annotated[str, Field(description="Name of the company to search for")],
    product_limit: Annotated[
        int,
        Field(
            ge=1,
            le=100,
            description="Maximum number of products to retrieve for the matched company",
        ),
    ] = 10,
) -> ToolResult:
    return await _run(
        "searchCompaniesAndProducts",
        lambda: catalog.search_companies_and_products(get_api(), company_name, product_limit),
        company_name=company_name,
        product_limit=product_limit,
    )


@mcp.tool(
    name="getCustomPriceEstimate",
    description=describe(
        "Use this tool to create a scope from the user's products and terms and "
        "get its price estimate in one step. If estimate is null, use "
        "companyDefaultPriceRange as a fallback range and say it is a typical "
        "range for the company rather than a customized estimate. If available in "
        "this tool's response, present up to 3 realSimilarPurchases following the "
        "price benchmark with a statement \"Here are recent examples of real "
        "purchases on Vendr that are similar to your requirement. I measure "
        "similarity based on products purchased, quantity, term length and "
        "recency.\" Present in this order - productNames, primaryDimensionName, "
        "primaryDimensionValue, numberOfOtherDimensions, negotiatedPrice and "
        "startDate."
    ),
    output_schema=ENVELOPE_SCHEMA,
    annotations=ToolAnnotations(
        title="Get Custom Price Estimate",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=True,
    ),
)
async def get_custom_price_estimate(
    product_terms: ProductTerms,
    scope_terms: ScopeTerms = None,
    previous_scope_id: PreviousScopeId = None,
) -> ToolResult:
    async def operation() -> Result:
        request = parse_create_scope(product_terms, scope_terms, previous_scope_id)
        return await estimates.get_custom_price_estimate(get_api(), request)

    return await _run(
        "getCustomPriceEstimate",
        operation,
        tags={"product_count": len(product_terms), "scope_count": len(scope_terms or [])},
        product_terms=product_terms,
        scope_terms=scope_terms,
        previous_scope_id=previous_scope_id,
    )


# =============================================================================
# Server entry point
# =============================================================================
# Configuration is checked up front so a missing API key stops the server
# immediately instead of failing every tool call later.
# =============================================================================
def main() -> None:
    load_dotenv()
    try:
        context = get_context()
    except ConfigurationError as exc:
        logger.error(f"Error: {exc}")
        sys.exit(1)

    logger.info(f"{_YELLOW}Starting MCP server against {context.base_url}...{_RESET}")
    mcp.run()


if __name__ == "__main__":
    main()
