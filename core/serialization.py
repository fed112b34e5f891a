# =============================================================================
# core/serialization.py  —  Bounded, Transport-Safe JSON
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Two jobs, both about making backend data safe to hand to an MCP client:
#
#   1. SANITIZE: catalog text sometimes contains Unicode line/paragraph
#      separators or other characters that break downstream byte-string
#      conversions.  We rewrite or drop them in every string leaf AND every
#      dict key:
#        U+2028 (line separator)       → "\n"
#        U+2029 (paragraph separator)  → "\n\n"
#        U+0080–U+009F (C1 controls)   → removed
#        anything above U+00FF         → removed
#      Plain ASCII passes through untouched.
#
#   2. SERIALIZE WITHIN A LIMIT: a response is never longer than its
#      configured maximum.  Oversized output is cut so that the result,
#      including the "... [truncated]" marker, is exactly max_length long.
#      A value that cannot be serialized produces a diagnostic string
#      instead of an exception.
# =============================================================================

import json
import re
from types import SimpleNamespace
from typing import Any, Callable

DEFAULT_MAX_LENGTH = 10000
TRUNCATION_SUFFIX = "... [truncated]"

_C1_CONTROLS = re.compile("[\u0080-\u009f]")
_ABOVE_LATIN1 = re.compile("[^\x00-\xff]")


def sanitize_unicode_string(text: str) -> str:
    text = text.replace("\u2028", "\n").replace("\u2029", "\n\n")
    text = _C1_CONTROLS.sub("", text)
    return _ABOVE_LATIN1.sub("", text)


def sanitize_object_strings(value: Any) -> Any:
    """Recursively sanitize every string (values and keys) in `value`."""
    if isinstance(value, str):
        return sanitize_unicode_string(value)
    if isinstance(value, (list, tuple)):
        return [sanitize_object_strings(item) for item in value]
    if isinstance(value, dict):
        return {
            sanitize_unicode_string(str(key)): sanitize_object_strings(item)
            for key, item in value.items()
        }
    return value


def safe_json_dumps(
    value: Any,
    *,
    max_length: int = DEFAULT_MAX_LENGTH,
    pretty: bool = False,
    truncation_suffix: str = TRUNCATION_SUFFIX,
) -> str:
    """Serialize `value` to JSON, never longer than `max_length`."""
    try:
        if pretty:
            serialized = json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)
        else:
            serialized = json.dumps(
                value, separators=(",", ":"), ensure_ascii=False, allow_nan=False
            )
    except (TypeError, ValueError, RecursionError) as exc:
        return f"[Serialization Error: {exc}]"

    if len(serialized) <= max_length:
        return serialized

    if max_length <= len(truncation_suffix):
        return truncation_suffix[:max(max_length, 0)]
    return serialized[: max_length - len(truncation_suffix)] + truncation_suffix


def create_json_serializer(**options: Any) -> Callable[[Any], str]:
    """Return a one-argument serializer with preset safe_json_dumps options."""

    def serialize(value: Any) -> str:
        return safe_json_dumps(value, **options)

    return serialize


# Preset serializers, shortest limit first.
serializers = SimpleNamespace(
    tracing=create_json_serializer(max_length=2000),
    logging=create_json_serializer(max_length=3000),
    error=create_json_serializer(max_length=5000, pretty=True),
    response=create_json_serializer(max_length=15000),
)
