# =============================================================================
# core/validation.py  —  Tool Input Models → Request Records
# =============================================================================
#
# Scope terms are described by two pydantic models.  The MCP layer uses them
# as tool parameter types, so the published input schema names every field
# (productId, listPrice, startDate, ...).  parse_create_scope() validates
# whatever it is handed against the same models and maps the result onto the
# dataclass records in core/models.py.
#
# Keys are accepted in the backend's camelCase or in snake_case.  Unknown
# keys (pricing dimension values) are kept and passed through to the backend.
# =============================================================================

from datetime import date, datetime, timezone
from typing import Annotated, Any, Optional

from pydantic import (
    AllowInfNan,
    BaseModel,
    ConfigDict,
    Field,
    Strict,
    StrictBool,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

from core.errors import InputValidationError
from core.models import CreateScopeRequest, ProductTerm, ScopeTerm

# Strict: true/false and numeric strings are rejected, ints are accepted.
Money = Optional[Annotated[float, Strict(), AllowInfNan(False)]]


class _TermInput(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    discount: Money = Field(default=None, description="Discount, in currency units")
    list_price: Money = Field(default=None, description="List price, in currency units")
    final_price: Money = Field(default=None, description="Final price, in currency units")
    start_date: Optional[datetime] = Field(
        default=None, description="ISO-8601 date or datetime; naive values are UTC"
    )
    end_date: Optional[datetime] = Field(
        default=None, description="ISO-8601 date or datetime; naive values are UTC"
    )

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _plain_dates(cls, value: Any) -> Any:
        if value == "":
            return None
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime(value.year, value.month, value.day)
        return value


class ProductTermInput(_TermInput):
    """Commercial terms for one product; extra keys are dimension values."""

    product_id: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)] = Field(
        description="Catalog product ID"
    )


class ScopeTermInput(_TermInput):
    """Contract-level terms for the whole scope."""

    auto_renew: Optional[StrictBool] = Field(
        default=None, description="Whether the contract renews automatically"
    )


_PRODUCT_TERMS = TypeAdapter(list[ProductTermInput])
_SCOPE_TERMS = TypeAdapter(list[ScopeTermInput])


def error_path(loc: tuple, root: str = "") -> str:
    """('productTerms', 1, 'productId') → productTerms[1].productId"""
    path = root
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    return path


def validation_error(exc: ValidationError, root: str = "") -> InputValidationError:
    """Collapse a pydantic ValidationError into one InputValidationError."""
    errors = exc.errors()
    first = errors[0]
    message = first["msg"]
    if len(errors) > 1:
        message += f" (and {len(errors) - 1} more)"
    return InputValidationError(error_path(first["loc"], root) or root, message)


def json_datetime(moment: Optional[datetime]) -> Optional[str]:
    """UTC JSON form, e.g. 2025-01-31T00:00:00.000Z."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _common(term: _TermInput) -> dict[str, Any]:
    return {
        "discount": term.discount,
        "list_price": term.list_price,
        "final_price": term.final_price,
        "start_date": json_datetime(term.start_date),
        "end_date": json_datetime(term.end_date),
        "extra": dict(term.model_extra or {}),
    }


def to_product_term(term: ProductTermInput) -> ProductTerm:
    return ProductTerm(product_id=term.product_id, **_common(term))


def to_scope_term(term: ScopeTermInput) -> ScopeTerm:
    return ScopeTerm(auto_renew=term.auto_renew, **_common(term))


def _validate(adapter: TypeAdapter, raw: Any, root: str) -> list:
    try:
        return adapter.validate_python(raw)
    except ValidationError as exc:
        raise validation_error(exc, root) from None


def parse_create_scope(
    product_terms: Any,
    scope_terms: Any = None,
    previous_scope_id: Optional[str] = None,
) -> CreateScopeRequest:
    """Validate create-scope arguments into a CreateScopeRequest.

    Accepts model instances or raw dicts; raises InputValidationError.
    """
    products = _validate(_PRODUCT_TERMS, product_terms, "productTerms")
    scopes = _validate(_SCOPE_TERMS, [] if scope_terms is None else scope_terms, "scopeTerms")

    return CreateScopeRequest(
        product_terms=[to_product_term(term) for term in products],
        scope_terms=[to_scope_term(term) for term in scopes],
        previous_scope_id=previous_scope_id or None,
    )
