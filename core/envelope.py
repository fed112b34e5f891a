# =============================================================================
# core/envelope.py  —  Envelope Builder
# =============================================================================
#
# Every tool, whatever it did, answers with the same shape:
#
#   {
#     "isError": bool,
#     "structuredContent": {"isError": ..., "errorMessage": ..., "data": ...},
#     "content": [{"type": "text", "text": <structuredContent as JSON>}],
#   }
#
# The agent can read either the structured form or the text form; both say
# the same thing.  Strings are sanitized before either form is produced, and
# the text form is bounded (see core/serialization.py).
# =============================================================================

from typing import Any

from core.models import DEFAULT_MAX_RESPONSE_LENGTH
from core.result import Result
from core.serialization import safe_json_dumps, sanitize_object_strings


def structure_content(
    result: Result,
    max_length: int = DEFAULT_MAX_RESPONSE_LENGTH,
) -> dict[str, Any]:
    """Wrap a Result in the uniform tool envelope."""
    is_error = result.is_failure

    structured = {
        "isError": is_error,
        "errorMessage": sanitize_object_strings(result.error) if is_error else None,
        "data": None if is_error else sanitize_object_strings(result.value),
    }

    return {
        "isError": is_error,
        "structuredContent": structured,
        "content": [
            {
                "type": "text",
                "text": safe_json_dumps(structured, max_length=max_length),
            }
        ],
    }


def structured_schema(data_schema: dict[str, Any] | None = None) -> dict[str, Any]:
    """JSON Schema for the structuredContent of a tool's envelope."""
    data = dict(data_schema or {"type": "object"})
    return {
        "type": "object",
        "properties": {
            "isError": {"type": "boolean"},
            "errorMessage": {"type": ["string", "null"]},
            "data": {"anyOf": [data, {"type": "null"}]},
        },
        "required": ["isError"],
    }
