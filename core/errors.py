# =============================================================================
# core/errors.py  —  Exception Types
# =============================================================================
#
# Only two kinds of failure are raised as exceptions.  Backend errors and
# fallback derivation errors are NOT exceptions: they travel as a failed
# Result (see core/result.py) and end up in the envelope's errorMessage.
# =============================================================================


class ConfigurationError(Exception):
    """A required environment setting is missing or malformed."""


class InputValidationError(ValueError):
    """Raw tool arguments could not be mapped onto a request record.

    Raised by core/validation.py and caught at the tool boundary
    (core/runner.py), where it becomes an error envelope like any other
    failure.
    """

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid '{field}': {message}")
