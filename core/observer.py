# =============================================================================
# core/observer.py  —  Tool Observer
# =============================================================================
#
# The runner (core/runner.py) reports every finished tool call to an
# observer.  The default observer does nothing; the MCP server plugs in a
# logging one, and a telemetry backend could be plugged in the same way.
# =============================================================================

import logging
from typing import Any, Mapping, Protocol

from core.serialization import serializers

logger = logging.getLogger(__name__)


class ToolObserver(Protocol):
    def on_success(self, tool_name: str, tags: Mapping[str, Any]) -> None: ...

    def on_error(
        self,
        tool_name: str,
        error: BaseException,
        tags: Mapping[str, Any],
        extra: Mapping[str, Any],
    ) -> None: ...


class NullObserver:
    """Observer that ignores everything."""

    def on_success(self, tool_name, tags):
        pass

    def on_error(self, tool_name, error, tags, extra):
        pass


class LoggingObserver:
    """Observer that writes tool outcomes to the standard logging system."""

    def __init__(self, log: logging.Logger = logger):
        self.log = log

    def on_success(self, tool_name, tags):
        self.log.debug("%s succeeded %s", tool_name, serializers.tracing(dict(tags)))

    def on_error(self, tool_name, error, tags, extra):
        self.log.error(
            "%s raised %s: %s\n%s",
            tool_name,
            type(error).__name__,
            error,
            serializers.error({"tags": dict(tags), "extra": dict(extra)}),
        )
