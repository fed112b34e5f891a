# =============================================================================
# core/result.py  —  Success / Failure Result
# =============================================================================
#
# Every backend call and every core operation returns a Result instead of
# raising.  A Result is either a success carrying a value, or a failure
# carrying a human-readable message (for backend failures: the backend's own
# error detail, verbatim).
# =============================================================================

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Result:
    """Either a success value or a failure message, never both."""

    value: Any = None
    error: Optional[str] = None
    is_failure: bool = False

    @classmethod
    def success(cls, value: Any) -> "Result":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "Result":
        return cls(error=error, is_failure=True)

    @property
    def is_success(self) -> bool:
        return not self.is_failure
