# =============================================================================
# core/config.py  —  Environment → Context
# =============================================================================
#
# The server reads its settings from environment variables (a .env file is
# loaded by the entry points via python-dotenv before this runs):
#
#   VENDR_API_KEY              (required)  Bearer token for the public API
#   VENDR_USER_EMAIL           (required)  end-user email header
#   VENDR_BASE_URL                         default https://api.vendr.com
#   VENDR_USER_IP                          end-user IP header
#   VENDR_ORGANIZATION_NAME                end-user organization header
#   VENDR_END_USER_IDENTIFIER              end-user identifier header
#   VENDR_HTTP_TIMEOUT_SECONDS             default 30
#   VENDR_MAX_RESPONSE_CHARS               default 15000
# =============================================================================

import os
from typing import Mapping, Optional

from core.errors import ConfigurationError
from core.models import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_RESPONSE_LENGTH,
    Context,
    UserIdentifyingHeaders,
)


def _number(env: Mapping[str, str], name: str, default: float, cast=float):
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value


def load_context(env: Optional[Mapping[str, str]] = None) -> Context:
    """Build a Context from `env` (defaults to os.environ)."""
    env = os.environ if env is None else env

    api_key = env.get("VENDR_API_KEY", "")
    if not api_key:
        raise ConfigurationError("VENDR_API_KEY environment variable is required")

    email = env.get("VENDR_USER_EMAIL", "")
    if not email:
        raise ConfigurationError("VENDR_USER_EMAIL environment variable is required")

    headers = UserIdentifyingHeaders(
        end_user_identifier=env.get("VENDR_END_USER_IDENTIFIER") or None,
        ip=env.get("VENDR_USER_IP") or None,
        email=email,
        organization_name=env.get("VENDR_ORGANIZATION_NAME") or None,
    )

    return Context(
        api_key=api_key,
        base_url=env.get("VENDR_BASE_URL") or DEFAULT_BASE_URL,
        user_identifying_headers=headers,
        http_timeout_seconds=_number(env, "VENDR_HTTP_TIMEOUT_SECONDS", 30.0),
        max_response_length=_number(
            env, "VENDR_MAX_RESPONSE_CHARS", DEFAULT_MAX_RESPONSE_LENGTH, cast=int
        ),
    )
