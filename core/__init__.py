# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains ALL the pricing logic: the backend client, rounding,
# the company-range fallback, the estimate orchestrators and the envelope
# every tool answers with.
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK, FastMCP, or any orchestration
#   framework.  The third-party imports are httpx (core/public_api.py, which
#   tests replace with a MockTransport or a fake PricingApi) and pydantic
#   (the tool input models in core/validation.py).
#
# Every operation takes a PricingApi and returns a core.result.Result.
# core/runner.py turns that Result (or any exception) into an envelope.
# =============================================================================
