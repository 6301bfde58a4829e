"""
Errors raised by pattern evaluation.

NoSuchPatternError means a coverage gap in the rule set.
NullResultError means a handler returned None where a value was required.
"""

from typing import Any


OPTIONAL_HINT = (
    "To allow this pattern to return nullable value, "
    "consider using Patterns.get_optionally or so."
)
DEFAULT_CONSUMER_HINT = (
    "To allow this pattern to accept value that match no defined pattern, "
    "consider setting default consumer."
)


class PatternError(Exception):
    """Base class for errors raised by pattern evaluation."""


class NoSuchPatternError(PatternError, LookupError):
    """Raised when no rule guard accepts the key."""

    def __init__(self, key: Any, hint: str = OPTIONAL_HINT):
        self.key = key
        self.hint = hint
        message = f"for key: {key}. {hint}"
        super().__init__(message)


class NullResultError(PatternError, ValueError):
    """Raised when the matched handler returns None under required resolution."""

    def __init__(self, key: Any, hint: str = OPTIONAL_HINT):
        self.key = key
        self.hint = hint
        message = f"Pattern computed null result. {hint}"
        super().__init__(message)
