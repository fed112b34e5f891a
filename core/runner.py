# =============================================================================
# core/runner.py  —  Tool Boundary
# =============================================================================
#
# execute_tool() is the one place where exceptions stop.  Whatever happens
# inside an operation (bad input, a network error, a bug) the caller gets an
# envelope back, never a traceback:
#
#   operation returns Result  →  envelope (success or backend/derivation error)
#   operation raises          →  observer.on_error(...) + error envelope
# =============================================================================

from typing import Any, Awaitable, Callable, Mapping, Optional

from core.envelope import structure_content
from core.models import DEFAULT_MAX_RESPONSE_LENGTH
from core.observer import NullObserver, ToolObserver
from core.result import Result
from core.serialization import serializers


async def execute_tool(
    tool_name: str,
    operation: Callable[[], Awaitable[Result]],
    *,
    args: Optional[Mapping[str, Any]] = None,
    tags: Optional[Mapping[str, Any]] = None,
    observer: Optional[ToolObserver] = None,
    max_length: int = DEFAULT_MAX_RESPONSE_LENGTH,
) -> dict[str, Any]:
    """Run one tool operation and always return its envelope."""
    observer = observer or NullObserver()
    tags = {"tool": tool_name, **(tags or {})}

    try:
        result = await operation()
    except Exception as exc:
        observer.on_error(
            tool_name, exc, tags, {"args": serializers.tracing(dict(args or {}))}
        )
        result = Result.failure(str(exc))
    else:
        if result.is_success:
            observer.on_success(tool_name, tags)

    return structure_content(result, max_length=max_length)
