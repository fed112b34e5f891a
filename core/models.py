# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses are the explicit record types that flow through the
# core.  Backend payloads themselves stay plain JSON dicts (the backend owns
# their shape); only the values this code creates or validates get a record:
#
#   - Context / UserIdentifyingHeaders  →  who we are talking to, and as whom
#   - ProductTerm / ScopeTerm / CreateScopeRequest  →  validated tool input
#   - PriceRange  →  the company-level fallback artifact
#   - BasicPercentiles / AdvancedPercentiles  →  synthesized estimates
#
# Like the rest of core/, nothing here imports FastMCP or an agent framework.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Optional


DEFAULT_BASE_URL = "https://api.vendr.com"
DEFAULT_MAX_RESPONSE_LENGTH = 15000


# -----------------------------------------------------------------------------
# UserIdentifyingHeaders — optional end-user headers forwarded to the backend
# -----------------------------------------------------------------------------
# These are passed through unchanged.  We never check that the email looks
# like an email or that the IP parses; the backend decides what to do with
# them.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class UserIdentifyingHeaders:
    """End-user identity forwarded on every backend request."""

    end_user_identifier: Optional[str] = None
    ip: Optional[str] = None
    email: Optional[str] = None
    organization_name: Optional[str] = None

    def as_headers(self) -> dict[str, str]:
        pairs = {
            "x-vendr-end-user-identifier": self.end_user_identifier,
            "x-vendr-end-user-ip": self.ip,
            "x-vendr-end-user-email": self.email,
            "x-vendr-end-user-organization-name": self.organization_name,
        }
        return {name: value for name, value in pairs.items() if value is not None}


@dataclass(frozen=True)
class Context:
    """Everything a tool call needs to reach the backend."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    user_identifying_headers: UserIdentifyingHeaders = field(
        default_factory=UserIdentifyingHeaders
    )
    http_timeout_seconds: float = 30.0
    max_response_length: int = DEFAULT_MAX_RESPONSE_LENGTH


# -----------------------------------------------------------------------------
# PriceRange — the coarse, company-level estimate source
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class PriceRange:
    """A company's default price range (Scope → Product → Company)."""

    min: float
    max: float
    currency: str


# -----------------------------------------------------------------------------
# Scope creation input
# -----------------------------------------------------------------------------
# Monetary fields are Optional: None means "the user did not say", which is
# different from 0.  Keys the backend accepts but we don't interpret (e.g.
# pricing dimension values) ride along in `extra` and are sent unchanged.
# -----------------------------------------------------------------------------
@dataclass
class ProductTerm:
    """Commercial terms for one product in a scope."""

    product_id: str
    discount: Optional[float] = None
    list_price: Optional[float] = None
    final_price: Optional[float] = None
    start_date: Optional[str] = None       # ISO-8601, normalized by validation
    end_date: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class ScopeTerm:
    """Contract-level terms that apply to the whole scope."""

    auto_renew: Optional[bool] = None
    discount: Optional[float] = None
    list_price: Optional[float] = None
    final_price: Optional[float] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass
class CreateScopeRequest:
    """A validated create-scope call."""

    product_terms: list[ProductTerm] = field(default_factory=list)
    scope_terms: list[ScopeTerm] = field(default_factory=list)
    previous_scope_id: Optional[str] = None


# -----------------------------------------------------------------------------
# Synthesized estimates
# -----------------------------------------------------------------------------
# When the backend cannot estimate a scope we build an estimate from the
# company's PriceRange.  For the advanced shape only p25/p50/p75 can be
# derived; every other slot stays 0, meaning "not computed", not "free".
# -----------------------------------------------------------------------------
@dataclass
class BasicPercentiles:
    percentile25: int
    percentile50: int
    percentile75: int


@dataclass
class AdvancedPercentiles:
    percentile10: int = 0
    percentile15: int = 0
    percentile20: int = 0
    percentile25: int = 0
    percentile30: int = 0
    percentile35: int = 0
    percentile40: int = 0
    percentile45: int = 0
    percentile50: int = 0
    percentile55: int = 0
    percentile60: int = 0
    percentile65: int = 0
    percentile70: int = 0
    percentile75: int = 0
    percentile80: int = 0
    percentile85: int = 0
    percentile90: int = 0
